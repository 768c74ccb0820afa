"""
Storage backends -- where the kitchen data lives.

Both backends share one async save/load contract and wrap every value
in an envelope before it reaches the substrate.

Local: envelope JSON in a synchronous key/value store on this device.
Remote: envelope JSON posted to the account's data endpoint.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from . import codec
from .errors import MalformedEnvelope, TransportError
from .models import (
    LOCAL_SCHEMA_VERSION,
    REMOTE_SCHEMA_VERSION,
    BackendConfig,
    Origin,
    StorageMode,
)
from .stores import KeyValueStore
from .transport import RemoteTransport

logger = logging.getLogger("mealcraft.storage.backends")

DEFAULT_PREFIX = "mealcraft"


class StorageBackend(ABC):
    """Abstract persistence backend."""

    origin: Origin
    schema_version: str

    @abstractmethod
    async def save(self, key: str, value: Any) -> bool:
        """Persist ``value`` under logical ``key``.

        Returns:
            True once the write is stored or acknowledged.
        """

    @abstractmethod
    async def load(self, key: str) -> Optional[Any]:
        """Load the value stored under logical ``key``.

        Returns:
            The unwrapped value, or None if nothing is stored.

        Raises:
            MalformedEnvelope: If the stored record is not a valid envelope.
        """

    async def sync(self) -> bool:
        """Reconcile with the other side, if there is one."""
        return True

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name."""


class LocalBackend(StorageBackend):
    """Backend over a synchronous on-device key/value store.

    Operations are coroutines for parity with RemoteBackend but never
    suspend.

    Args:
        store: Substrate holding the envelope JSON.
        prefix: Namespace for record keys (``<prefix>_<key>``).
    """

    origin = Origin.LOCAL
    schema_version = LOCAL_SCHEMA_VERSION

    def __init__(self, store: KeyValueStore, prefix: str = DEFAULT_PREFIX):
        self.store = store
        self.prefix = prefix

    @property
    def name(self) -> str:
        return "local"

    def record_key(self, key: str) -> str:
        return f"{self.prefix}_{key}"

    async def save(self, key: str, value: Any) -> bool:
        envelope = codec.wrap(value, self.origin, self.schema_version)
        self.store.set(self.record_key(key), codec.encode(envelope))
        logger.debug("Saved %s locally", key)
        return True

    async def load(self, key: str) -> Optional[Any]:
        stored = self.store.get(self.record_key(key))
        if stored is None:
            return None
        return codec.unwrap(stored)


class RemoteBackend(StorageBackend):
    """Backend over the remote data API of one account.

    Failures are raised as TransportError and never fall back to
    local storage.

    Args:
        user_id: Remote account identity.
        transport: Request transport to the data server.
    """

    origin = Origin.CLOUD
    schema_version = REMOTE_SCHEMA_VERSION

    def __init__(self, user_id: str, transport: RemoteTransport):
        self.user_id = user_id
        self.transport = transport

    @property
    def name(self) -> str:
        return "cloud"

    def data_path(self, key: str) -> str:
        return f"/api/users/{self.user_id}/data/{key}"

    async def save(self, key: str, value: Any) -> bool:
        envelope = codec.wrap(value, self.origin, self.schema_version)
        path = self.data_path(key)
        resp = await self.transport.request("POST", path, envelope.to_wire())
        if not resp.ok:
            logger.error("Remote save of %s rejected: HTTP %d", key, resp.status_code)
            raise TransportError(
                f"POST {path} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                url=resp.url or path,
            )
        logger.debug("Saved %s to cloud account %s", key, self.user_id)
        return True

    async def load(self, key: str) -> Optional[Any]:
        path = self.data_path(key)
        resp = await self.transport.request("GET", path)
        if resp.status_code == 404:
            return None
        if not resp.ok:
            logger.error("Remote load of %s failed: HTTP %d", key, resp.status_code)
            raise TransportError(
                f"GET {path} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                url=resp.url or path,
            )
        if not resp.content:
            return None
        try:
            body = resp.json()
        except ValueError as exc:
            raise MalformedEnvelope(f"Invalid JSON from {path}: {exc}") from exc
        return codec.unwrap(body)

    async def sync(self) -> bool:
        """Placeholder for two-way reconciliation.

        Writes already go straight to the server, so there is nothing
        pending to push; completes without touching the transport.
        """
        logger.info("Cloud sync for %s: nothing pending", self.user_id)
        return True


def create_backend(
    config: BackendConfig,
    store: KeyValueStore,
    transport: Optional[RemoteTransport] = None,
) -> StorageBackend:
    """Factory function to create the backend a config asks for.

    Args:
        config: Backend configuration.
        store: Device store, used by the local backend.
        transport: Request transport, required for the cloud backend.

    Returns:
        Instantiated StorageBackend.

    Raises:
        ValueError: If a cloud backend is requested without a user id
            or transport.
    """
    if config.mode == StorageMode.LOCAL:
        return LocalBackend(store, prefix=config.prefix)
    if not config.user_id or transport is None:
        raise ValueError("Cloud backend needs a user_id and a transport")
    return RemoteBackend(config.user_id, transport)
