from .app import create_app
from .contracts import KeyValueStorePort, Value
from .errors import (
    AlreadyExistsError,
    InvalidKeyError,
    InvalidValueError,
    KVStoreError,
    NotFoundError,
    UnsupportedMethodError,
)
from .locks import ReadWriteLock
from .store import InMemoryKeyValueStore

__all__ = [
    "create_app",
    "KeyValueStorePort",
    "Value",
    "KVStoreError",
    "AlreadyExistsError",
    "NotFoundError",
    "InvalidValueError",
    "InvalidKeyError",
    "UnsupportedMethodError",
    "ReadWriteLock",
    "InMemoryKeyValueStore",
]
