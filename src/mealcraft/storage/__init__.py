"""
Storage -- one save/load contract over device and cloud backends.

Every value is wrapped in an envelope (payload, timestamp, schema
version, origin) before it reaches a substrate. The BackendSelector
decides which backend is active; callers always go through it.
"""

from .backends import LocalBackend, RemoteBackend, StorageBackend, create_backend
from .errors import (
    MalformedEnvelope,
    MalformedStore,
    MalformedToken,
    PersistenceError,
    TransportError,
)
from .models import Envelope, Origin, StorageMode
from .selector import BackendSelector
from .stores import JsonFileStore, KeyValueStore, MemoryStore
from .transport import HttpxTransport, RemoteTransport, TransportResponse

__all__ = [
    "BackendSelector",
    "Envelope",
    "HttpxTransport",
    "JsonFileStore",
    "KeyValueStore",
    "LocalBackend",
    "MalformedEnvelope",
    "MalformedStore",
    "MalformedToken",
    "MemoryStore",
    "Origin",
    "PersistenceError",
    "RemoteBackend",
    "RemoteTransport",
    "StorageBackend",
    "StorageMode",
    "TransportError",
    "TransportResponse",
    "create_backend",
]
