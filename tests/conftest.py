"""Shared test fixtures for mealcraft."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from mealcraft.storage.errors import TransportError
from mealcraft.storage.selector import BackendSelector
from mealcraft.storage.stores import MemoryStore
from mealcraft.storage.transport import RemoteTransport, TransportResponse


class RecordingTransport(RemoteTransport):
    """In-memory stand-in for the data server.

    Stores POSTed bodies by path, answers GETs from them (404 when
    unknown) and records every request made.
    """

    def __init__(self, fail_with: Optional[int] = None, offline: bool = False):
        self.requests: list[tuple[str, str, Optional[dict[str, Any]]]] = []
        self.records: dict[str, dict[str, Any]] = {}
        self.fail_with = fail_with
        self.offline = offline
        self.closed = False

    async def request(self, method, path, payload=None):
        self.requests.append((method, path, payload))
        if self.offline:
            raise TransportError(f"{method} {path} failed: network unreachable", url=path)
        if self.fail_with is not None:
            return TransportResponse(self.fail_with, b'{"error": "boom"}', path)
        if method == "POST":
            self.records[path] = payload
            return TransportResponse(201, b'{"ok": true}', path)
        if path not in self.records:
            return TransportResponse(404, b"", path)
        body = json.dumps(self.records[path]).encode("utf-8")
        return TransportResponse(200, body, path)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def local_store() -> MemoryStore:
    """Empty device store."""
    return MemoryStore()


@pytest.fixture
def state_store() -> MemoryStore:
    """Empty small-state store."""
    return MemoryStore()


@pytest.fixture
def transport() -> RecordingTransport:
    """Recording fake of the remote data server."""
    return RecordingTransport()


@pytest.fixture
def make_selector(local_store, state_store, transport):
    """Build an initialized BackendSelector with a fixed connectivity answer."""

    def _make(online: bool = True, user_id: Optional[str] = None) -> BackendSelector:
        if user_id is not None:
            state_store.set("mealcraft_cloud_user_id", user_id)
        selector = BackendSelector(
            local_store=local_store,
            state_store=state_store,
            transport=transport,
            connectivity=lambda: online,
        )
        selector.initialize()
        return selector

    return _make


@pytest.fixture
def tmp_home(tmp_path: Path) -> Path:
    """Temporary data home with a config that never probes the network."""
    home = tmp_path / ".mealcraft"
    home.mkdir()
    (home / "config.yaml").write_text(
        "probe_host: 127.0.0.1\nprobe_port: 9\nprobe_timeout: 0.1\n"
        "api_base_url: http://127.0.0.1:9\n",
        encoding="utf-8",
    )
    return home


@pytest.fixture
def transport_factory():
    """The RecordingTransport class, for tests that need a configured one."""
    return RecordingTransport
