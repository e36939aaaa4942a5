"""
Dependency wiring for the FastAPI app.

Adapters are built from the settings the app was created with and cached on
the app, so every request of one app shares the same clients.
"""

from __future__ import annotations

import logging
import threading

from fastapi import Depends, Request

from profile_backend.config import Settings, get_settings
from profile_backend.db import DbClient, InMemoryDbClient, SqlDbClient
from profile_backend.storage import InMemoryStorageClient, S3StorageClient, StorageClient

logger = logging.getLogger(__name__)

# Sync dependencies run in the threadpool; first requests may race to build.
_build_lock = threading.Lock()


def build_db_client(settings: Settings) -> DbClient:
    if settings.use_in_memory_backends or not settings.database_url:
        if not settings.use_in_memory_backends:
            logger.warning("DATABASE_URL not set; using in-memory profile store")
        return InMemoryDbClient()
    return SqlDbClient(
        settings.database_url,
        table_name=settings.profiles_collection or "profiles",
        schema=settings.profiles_schema or None,
    )


def build_storage_client(settings: Settings) -> StorageClient:
    if settings.use_in_memory_backends or not settings.storage_bucket:
        if not settings.use_in_memory_backends:
            logger.warning("STORAGE_BUCKET not set; using in-memory object storage")
        return InMemoryStorageClient()
    return S3StorageClient(
        bucket=settings.storage_bucket,
        region=settings.storage_region,
        endpoint=settings.storage_endpoint,
        access_key_id=settings.aws_access_key_id or "",
        secret_access_key=settings.aws_secret_access_key or "",
        public_base_url=settings.storage_public_base_url,
        addressing_style=settings.storage_addressing_style,
    )


def get_db_client(
    request: Request, settings: Settings = Depends(get_settings)
) -> DbClient:
    """
    Return the app's profile store so the engine and its pool are shared
    across requests.
    """
    state = request.app.state
    with _build_lock:
        if getattr(state, "db_client", None) is None:
            state.db_client = build_db_client(settings)
        return state.db_client


def get_storage_client(
    request: Request, settings: Settings = Depends(get_settings)
) -> StorageClient:
    state = request.app.state
    with _build_lock:
        if getattr(state, "storage_client", None) is None:
            state.storage_client = build_storage_client(settings)
        return state.storage_client
