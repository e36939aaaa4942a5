"""
Backend package for the profile service.

This package provides a FastAPI application that uploads profile photos to
object storage and keeps profile records in a document store, with storage
and database abstractions that can be swapped for in-memory fakes.
"""
