"""
Kitchen runtime -- wires configuration, stores, selector and transfer.

One runtime per process: it opens the on-disk stores under the data
home, builds the HTTP transport from config, and runs the selector's
one-time startup check.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Optional

from .config import MealcraftConfig, load_config, resolve_home
from .storage.selector import BackendSelector, Connectivity, tcp_probe
from .storage.stores import JsonFileStore, KeyValueStore
from .storage.transport import HttpxTransport, RemoteTransport
from .telemetry import CategoryLogger
from .transfer import TransferService

logger = logging.getLogger("mealcraft.runtime")

STORE_FILENAME = "store.json"
STATE_FILENAME = "state.json"


class KitchenRuntime:
    """Everything a caller needs to read, write and move kitchen data.

    Args:
        home: Data home. Defaults to MEALCRAFT_HOME.
        config: Settings. Defaults to ``<home>/config.yaml``.
        local_store: Device store. Defaults to ``<home>/store.json``.
        state_store: Small-state store. Defaults to ``<home>/state.json``.
        transport: Remote transport. Defaults to HttpxTransport.
        connectivity: Online check. Defaults to a TCP probe from config.
    """

    def __init__(
        self,
        home: Optional[Path] = None,
        config: Optional[MealcraftConfig] = None,
        local_store: Optional[KeyValueStore] = None,
        state_store: Optional[KeyValueStore] = None,
        transport: Optional[RemoteTransport] = None,
        connectivity: Optional[Connectivity] = None,
    ) -> None:
        self.home = resolve_home(home)
        self.config = config or load_config(self.home)
        self.telemetry = CategoryLogger(
            level=self.config.log_level,
            categories=self.config.log_categories,
        )
        self.transport = transport or HttpxTransport(
            self.config.api_base_url, timeout=self.config.request_timeout
        )
        self.selector = BackendSelector(
            local_store=local_store or JsonFileStore(self.home / STORE_FILENAME),
            state_store=state_store or JsonFileStore(self.home / STATE_FILENAME),
            transport=self.transport,
            connectivity=connectivity or functools.partial(
                tcp_probe,
                self.config.probe_host,
                self.config.probe_port,
                self.config.probe_timeout,
            ),
            prefix=self.config.prefix,
        )
        self.transfer = TransferService(self.selector)

    def start(self) -> "KitchenRuntime":
        """Run the selector's startup check and return self."""
        mode = self.selector.initialize()
        logger.info("Kitchen runtime ready in %s mode (%s)", mode.value, self.home)
        return self

    async def close(self) -> None:
        await self.transport.aclose()


def get_runtime(
    home: Optional[Path] = None, **kwargs
) -> KitchenRuntime:
    """Create and start a runtime.

    Args:
        home: Override data home.
        **kwargs: Passed through to KitchenRuntime.

    Returns:
        A started KitchenRuntime.
    """
    return KitchenRuntime(home=home, **kwargs).start()
