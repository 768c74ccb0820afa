"""
Envelope codec -- wrap values for storage and unwrap them on load.
"""

from __future__ import annotations

import json
import time
from typing import Any, Mapping, Union

from pydantic import ValidationError

from .errors import MalformedEnvelope
from .models import Envelope, Origin

RawEnvelope = Union[Envelope, Mapping[str, Any], str, bytes]


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def wrap(value: Any, origin: Origin, schema_version: str) -> Envelope:
    """Wrap ``value`` in a fresh envelope stamped with the current time."""
    return Envelope(
        data=value,
        timestamp=now_ms(),
        schema_version=schema_version,
        origin=origin,
    )


def unwrap(envelope: RawEnvelope) -> Any:
    """Return the payload of an envelope.

    Accepts an Envelope, an already-parsed mapping, or JSON text. Only
    the ``data`` field is required.

    Raises:
        MalformedEnvelope: If the input is not a JSON object or has no
            ``data`` field.
    """
    if isinstance(envelope, Envelope):
        return envelope.data

    record = _parse(envelope) if isinstance(envelope, (str, bytes)) else envelope
    if not isinstance(record, Mapping):
        raise MalformedEnvelope(
            f"Envelope must be an object, got {type(record).__name__}"
        )
    if "data" not in record:
        raise MalformedEnvelope("Envelope has no 'data' field")
    return record["data"]


def encode(envelope: Envelope) -> str:
    """Serialize an envelope to its JSON wire form."""
    return json.dumps(envelope.to_wire(), ensure_ascii=False)


def decode(text: Union[str, bytes]) -> Envelope:
    """Parse JSON text into a fully validated Envelope.

    Raises:
        MalformedEnvelope: On invalid JSON or a record missing any
            envelope field.
    """
    record = _parse(text)
    if not isinstance(record, Mapping):
        raise MalformedEnvelope(
            f"Envelope must be an object, got {type(record).__name__}"
        )
    try:
        return Envelope.model_validate(record)
    except ValidationError as exc:
        raise MalformedEnvelope(f"Invalid envelope: {exc}") from exc


def _parse(text: Union[str, bytes]) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedEnvelope(f"Invalid JSON: {exc}") from exc
