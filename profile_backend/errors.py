"""
Errors raised by the storage and database adapters.
"""


class StoreError(Exception):
    """A call to an external store failed."""


class ObjectStoreError(StoreError):
    pass


class ProfileStoreError(StoreError):
    pass
