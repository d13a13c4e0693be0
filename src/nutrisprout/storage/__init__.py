"""Per-user persistence backends."""

from nutrisprout.storage.base import Store, StoreError
from nutrisprout.storage.local import GUEST_USER_ID, LocalKeyValueStore, LocalStore
from nutrisprout.storage.resilient import ResilientStore
from nutrisprout.storage.sqlite import SqliteStore

__all__ = [
    "GUEST_USER_ID",
    "LocalKeyValueStore",
    "LocalStore",
    "ResilientStore",
    "SqliteStore",
    "Store",
    "StoreError",
]
