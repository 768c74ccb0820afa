"""
Backend selector -- decides whether data goes to this device or the cloud.

Starts on the local backend. At initialization it moves to the cloud
backend if a remote identity was stored earlier and the device is
online at that moment; a caller can also connect an account
explicitly. Nothing ever moves it back to local.
"""

from __future__ import annotations

import logging
import socket
from typing import Any, Callable, Optional

from .backends import DEFAULT_PREFIX, LocalBackend, RemoteBackend, StorageBackend
from .models import StorageMode
from .stores import KeyValueStore
from .transport import RemoteTransport

logger = logging.getLogger("mealcraft.storage.selector")

Connectivity = Callable[[], bool]


def tcp_probe(host: str = "1.1.1.1", port: int = 53, timeout: float = 1.0) -> bool:
    """Report whether a TCP connection to ``host:port`` can be opened."""
    try:
        s = socket.create_connection((host, port), timeout=timeout)
        s.close()
        return True
    except OSError:
        return False


def cloud_user_key(prefix: str = DEFAULT_PREFIX) -> str:
    """Name of the small-state entry holding the remote identity."""
    return f"{prefix}_cloud_user_id"


class BackendSelector:
    """Owns the active storage backend.

    Callers always reach storage through ``selector.backend`` (or the
    ``save``/``load`` shortcuts) and never keep a backend reference
    across a switch.

    Args:
        local_store: Device store for the local backend.
        state_store: Small-state store remembering the remote identity.
        transport: Request transport handed to the cloud backend.
        connectivity: Returns True when the device is online.
        prefix: Namespace for record and state keys.
    """

    def __init__(
        self,
        local_store: KeyValueStore,
        state_store: KeyValueStore,
        transport: RemoteTransport,
        connectivity: Optional[Connectivity] = None,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self.state_store = state_store
        self.transport = transport
        self.connectivity = connectivity or tcp_probe
        self.prefix = prefix
        self._backend: StorageBackend = LocalBackend(local_store, prefix=prefix)
        self._mode = StorageMode.LOCAL
        self._initialized = False

    @property
    def backend(self) -> StorageBackend:
        """The backend currently receiving reads and writes."""
        return self._backend

    @property
    def mode(self) -> StorageMode:
        return self._mode

    @property
    def is_cloud_mode(self) -> bool:
        return self._mode == StorageMode.CLOUD

    @property
    def user_id(self) -> Optional[str]:
        """The stored remote identity, if any."""
        return self.state_store.get(cloud_user_key(self.prefix)) or None

    def initialize(self) -> StorageMode:
        """Pick the startup backend. Runs once; later calls are no-ops.

        Returns:
            The mode in effect after initialization.
        """
        if self._initialized:
            return self._mode
        self._initialized = True

        user_id = self.user_id
        if not user_id:
            logger.debug("No cloud identity stored, staying local")
            return self._mode

        if not self.connectivity():
            logger.info("Cloud identity found but device is offline, staying local")
            return self._mode

        self._activate_cloud(user_id)
        return self._mode

    def switch_to_cloud(self, user_id: str) -> StorageBackend:
        """Remember ``user_id`` and route all storage to its account now.

        Raises:
            ValueError: If ``user_id`` is blank.
        """
        user_id = (user_id or "").strip()
        if not user_id:
            raise ValueError("A cloud user id is required")
        self.state_store.set(cloud_user_key(self.prefix), user_id)
        self._initialized = True
        self._activate_cloud(user_id)
        return self._backend

    def _activate_cloud(self, user_id: str) -> None:
        self._backend = RemoteBackend(user_id, self.transport)
        self._mode = StorageMode.CLOUD
        logger.info("Cloud storage active for account %s", user_id)

    async def save(self, key: str, value: Any) -> bool:
        return await self._backend.save(key, value)

    async def load(self, key: str) -> Optional[Any]:
        return await self._backend.load(key)

    async def sync(self) -> bool:
        return await self._backend.sync()
