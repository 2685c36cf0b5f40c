from __future__ import annotations

from .aio import AsyncStore
from .core import Store
from .disk_store import DiskJsonDocumentStore, MemoryDocumentStore
from .document import Entry
from .errors import (
    DotKVError,
    InvalidArgument,
    InvalidKey,
    PersistenceFailure,
    SchemaNotFound,
    ValidationError,
)
from .expiry import ExpiryEntry
from .interfaces import DocumentBackend
from .namespace import Namespace
from .schema import Schema, SchemaProperty
from .settings import Settings, get_settings

__all__ = [
    "Store",
    "AsyncStore",
    "Namespace",
    "Entry",
    "ExpiryEntry",
    "Schema",
    "SchemaProperty",
    "Settings",
    "get_settings",
    "DocumentBackend",
    "DiskJsonDocumentStore",
    "MemoryDocumentStore",
    "DotKVError",
    "InvalidKey",
    "InvalidArgument",
    "SchemaNotFound",
    "ValidationError",
    "PersistenceFailure",
]
