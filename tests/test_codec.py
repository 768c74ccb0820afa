"""Tests for the envelope codec."""

from __future__ import annotations

import json

import pytest

from mealcraft.storage import codec
from mealcraft.storage.errors import MalformedEnvelope
from mealcraft.storage.models import Envelope, Origin


class TestWrap:
    """Tests for wrapping values."""

    def test_wrap_sets_metadata(self):
        before = codec.now_ms()
        env = codec.wrap({"qty": 2}, Origin.LOCAL, "1.0")
        after = codec.now_ms()

        assert env.data == {"qty": 2}
        assert env.origin == Origin.LOCAL
        assert env.schema_version == "1.0"
        assert before <= env.timestamp <= after

    def test_wire_names(self):
        env = codec.wrap([1, 2], Origin.CLOUD, "2.0")
        wire = env.to_wire()
        assert set(wire) == {"data", "timestamp", "version", "source"}
        assert wire["version"] == "2.0"
        assert wire["source"] == "cloud"

    def test_envelopes_are_frozen(self):
        env = codec.wrap("x", Origin.LOCAL, "1.0")
        with pytest.raises(Exception):
            env.data = "y"


class TestUnwrap:
    """Tests for unwrapping stored records."""

    def test_unwrap_envelope(self):
        assert codec.unwrap(codec.wrap({"a": 1}, Origin.LOCAL, "1.0")) == {"a": 1}

    def test_unwrap_text(self):
        text = json.dumps({"data": ["oeufs"], "timestamp": 1, "version": "1.0", "source": "local"})
        assert codec.unwrap(text) == ["oeufs"]

    def test_unwrap_only_needs_data(self):
        assert codec.unwrap({"data": None}) is None
        assert codec.unwrap(b'{"data": 3}') == 3

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", '"text"', "{}", '{"value": 1}'])
    def test_malformed(self, raw):
        with pytest.raises(MalformedEnvelope):
            codec.unwrap(raw)

    def test_non_mapping_object(self):
        with pytest.raises(MalformedEnvelope):
            codec.unwrap([{"data": 1}])


class TestEncodeDecode:
    """Tests for the JSON wire form."""

    def test_decode_encoded(self):
        env = codec.wrap({"nom": "Crème"}, Origin.LOCAL, "1.0")
        text = codec.encode(env)
        assert "Crème" in text
        assert codec.decode(text) == env

    def test_decode_requires_all_fields(self):
        with pytest.raises(MalformedEnvelope):
            codec.decode('{"data": 1, "timestamp": 5}')

    def test_decode_rejects_unknown_origin(self):
        with pytest.raises(MalformedEnvelope):
            codec.decode('{"data": 1, "timestamp": 5, "version": "1.0", "source": "usb"}')

    def test_decode_accepts_wire_record(self):
        env = codec.decode('{"data": 1, "timestamp": 5, "version": "2.0", "source": "cloud"}')
        assert isinstance(env, Envelope)
        assert env.origin == Origin.CLOUD
        assert env.schema_version == "2.0"
