"""Tests for the kitchen runtime wiring."""

from __future__ import annotations

import json

import pytest

from mealcraft.config import MealcraftConfig
from mealcraft.runtime import KitchenRuntime, get_runtime
from mealcraft.storage.errors import MalformedStore
from mealcraft.storage.models import StorageMode
from mealcraft.storage.stores import JsonFileStore
from mealcraft.storage.transport import HttpxTransport


class TestKitchenRuntime:
    """Tests for KitchenRuntime."""

    def test_defaults_from_home(self, tmp_home):
        runtime = KitchenRuntime(home=tmp_home)
        assert runtime.config.probe_host == "127.0.0.1"
        assert isinstance(runtime.transport, HttpxTransport)
        assert runtime.transport.base_url == "http://127.0.0.1:9"
        assert runtime.transfer.selector is runtime.selector
        assert runtime.selector.mode == StorageMode.LOCAL

    def test_start_without_identity(self, tmp_home):
        runtime = get_runtime(tmp_home, connectivity=lambda: True)
        assert not runtime.selector.is_cloud_mode

    def test_start_with_identity_online(self, tmp_home, transport):
        (tmp_home / "state.json").write_text(
            json.dumps({"mealcraft_cloud_user_id": "user123"})
        )
        runtime = get_runtime(tmp_home, transport=transport, connectivity=lambda: True)
        assert runtime.selector.is_cloud_mode
        assert runtime.selector.user_id == "user123"

    def test_prefix_from_config(self, tmp_path, local_store):
        config = MealcraftConfig(prefix="pantry")
        runtime = KitchenRuntime(home=tmp_path, config=config, local_store=local_store)
        assert runtime.selector.prefix == "pantry"

    @pytest.mark.asyncio
    async def test_data_survives_restart(self, tmp_home):
        first = get_runtime(tmp_home)
        await first.selector.save("stock", [{"nom": "Farine"}])
        await first.close()

        second = get_runtime(tmp_home)
        assert isinstance(second.selector.backend.store, JsonFileStore)
        assert await second.selector.load("stock") == [{"nom": "Farine"}]
        await second.close()

    def test_corrupt_store_raises(self, tmp_home):
        (tmp_home / "store.json").write_text("{not json")
        with pytest.raises(MalformedStore):
            get_runtime(tmp_home)

    @pytest.mark.asyncio
    async def test_close_releases_transport(self, tmp_home, transport):
        runtime = get_runtime(tmp_home, transport=transport)
        await runtime.close()
        assert transport.closed
