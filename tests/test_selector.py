"""Tests for the backend selector."""

from __future__ import annotations

import socket

import pytest

from mealcraft.storage.backends import LocalBackend, RemoteBackend
from mealcraft.storage.errors import TransportError
from mealcraft.storage.models import StorageMode
from mealcraft.storage.selector import BackendSelector, cloud_user_key, tcp_probe


class TestInitialize:
    """Tests for the one-time startup decision."""

    def test_no_identity_stays_local(self, make_selector, transport):
        selector = make_selector(online=True)
        assert selector.mode == StorageMode.LOCAL
        assert not selector.is_cloud_mode
        assert isinstance(selector.backend, LocalBackend)
        assert transport.requests == []

    def test_identity_and_online_switches_to_cloud(self, make_selector):
        selector = make_selector(online=True, user_id="user123")
        assert selector.is_cloud_mode
        assert isinstance(selector.backend, RemoteBackend)
        assert selector.backend.user_id == "user123"

    def test_identity_but_offline_stays_local(self, make_selector):
        selector = make_selector(online=False, user_id="user123")
        assert selector.mode == StorageMode.LOCAL
        assert selector.user_id == "user123"

    def test_runs_once(self, local_store, state_store, transport):
        calls = []

        def online():
            calls.append(1)
            return True

        state_store.set("mealcraft_cloud_user_id", "user123")
        selector = BackendSelector(local_store, state_store, transport, connectivity=online)
        selector.initialize()
        selector.initialize()
        assert calls == [1]

    def test_connectivity_not_probed_without_identity(
        self, local_store, state_store, transport
    ):
        def online():
            raise AssertionError("probe should not run")

        selector = BackendSelector(local_store, state_store, transport, connectivity=online)
        assert selector.initialize() == StorageMode.LOCAL

    def test_state_key_follows_prefix(self, local_store, state_store, transport):
        state_store.set("pantry_cloud_user_id", "user9")
        selector = BackendSelector(
            local_store, state_store, transport,
            connectivity=lambda: True, prefix="pantry",
        )
        assert selector.initialize() == StorageMode.CLOUD
        assert cloud_user_key("pantry") == "pantry_cloud_user_id"


class TestSwitchToCloud:
    """Tests for the explicit Local to Cloud transition."""

    @pytest.mark.asyncio
    async def test_switch_persists_identity(self, make_selector, state_store, transport):
        selector = make_selector(online=False)
        backend = selector.switch_to_cloud("user123")

        assert backend is selector.backend
        assert selector.is_cloud_mode
        assert state_store.get("mealcraft_cloud_user_id") == "user123"

        await selector.save("stock", [])
        assert transport.requests[0][:2] == ("POST", "/api/users/user123/data/stock")

    @pytest.mark.parametrize("user_id", ["", "   ", None])
    def test_blank_identity_rejected(self, make_selector, state_store, user_id):
        selector = make_selector()
        with pytest.raises(ValueError):
            selector.switch_to_cloud(user_id)
        assert not selector.is_cloud_mode
        assert state_store.get("mealcraft_cloud_user_id") is None

    def test_initialize_after_switch_is_noop(self, make_selector):
        selector = make_selector(online=False)
        selector.switch_to_cloud("user123")
        assert selector.initialize() == StorageMode.CLOUD

    def test_later_instance_picks_up_identity(self, make_selector, local_store, state_store, transport):
        make_selector(online=True).switch_to_cloud("user123")
        fresh = BackendSelector(local_store, state_store, transport, connectivity=lambda: True)
        assert fresh.initialize() == StorageMode.CLOUD


class TestNoFallback:
    """Cloud failures surface to the caller."""

    @pytest.mark.asyncio
    async def test_failed_cloud_write_does_not_touch_local(self, make_selector, local_store, transport):
        selector = make_selector(online=True, user_id="user123")
        transport.offline = True

        with pytest.raises(TransportError):
            await selector.save("stock", [{"nom": "Riz"}])

        assert selector.is_cloud_mode
        assert local_store.get("mealcraft_stock") is None

    @pytest.mark.asyncio
    async def test_failed_cloud_read_raises(self, make_selector, transport):
        selector = make_selector(online=True, user_id="user123")
        transport.fail_with = 500
        with pytest.raises(TransportError):
            await selector.load("stock")


class TestDelegation:
    """save/load/sync go to the active backend."""

    @pytest.mark.asyncio
    async def test_local_round_trip(self, make_selector, local_store):
        selector = make_selector()
        await selector.save("planning", {"lundi": ["Soupe"]})
        assert await selector.load("planning") == {"lundi": ["Soupe"]}
        assert local_store.get("mealcraft_planning") is not None

    @pytest.mark.asyncio
    async def test_sync(self, make_selector):
        assert await make_selector().sync() is True


class TestTcpProbe:
    """Tests for the default connectivity check."""

    def test_reachable(self):
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.bind(("127.0.0.1", 0))
        server.listen(1)
        try:
            assert tcp_probe("127.0.0.1", server.getsockname()[1], timeout=1.0)
        finally:
            server.close()

    def test_unreachable(self):
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.bind(("127.0.0.1", 0))
        port = server.getsockname()[1]
        server.close()
        assert not tcp_probe("127.0.0.1", port, timeout=0.5)
