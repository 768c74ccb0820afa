"""Export and import of the full kitchen state as one portable token.

The token is the base64 text of a JSON object holding every logical
key plus two metadata entries::

    {
      "recettes": [...], "stock": [...], "settings": {...}, "planning": {...},
      "exportDate": "2026-10-19T08:30:00.000000+00:00",
      "version": "1.0"
    }

Base64 only makes the token safe to copy and paste. It is not
encrypted or signed.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from .storage.errors import MalformedToken
from .storage.selector import BackendSelector

logger = logging.getLogger("mealcraft.transfer")

LOGICAL_KEYS = ("recettes", "stock", "settings", "planning")

EXPORT_DATE_KEY = "exportDate"
VERSION_KEY = "version"
RESERVED_KEYS = frozenset({EXPORT_DATE_KEY, VERSION_KEY})

SNAPSHOT_VERSION = "1.0"

# Logical keys plus exportDate and version, as carried in a token.
Snapshot = dict[str, Any]


def build_snapshot(
    values: dict[str, Any], exported_at: Optional[datetime] = None
) -> Snapshot:
    """Assemble a snapshot from loaded values.

    Every logical key is present; keys missing from ``values`` are None.
    """
    stamp = exported_at or datetime.now(timezone.utc)
    snapshot = {key: values.get(key) for key in LOGICAL_KEYS}
    snapshot[EXPORT_DATE_KEY] = stamp.isoformat()
    snapshot[VERSION_KEY] = SNAPSHOT_VERSION
    return snapshot


def encode_snapshot(snapshot: Snapshot) -> str:
    """Serialize a snapshot to its base64 token."""
    text = json.dumps(snapshot, ensure_ascii=False, separators=(",", ":"))
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_snapshot(token: str) -> Snapshot:
    """Parse a token back into a snapshot mapping.

    Raises:
        MalformedToken: If the token is not base64, not UTF-8 JSON, or
            not a JSON object.
    """
    try:
        raw = base64.b64decode("".join(token.split()), validate=True)
        snapshot = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError, AttributeError) as exc:
        raise MalformedToken(f"Invalid export token: {exc}") from exc
    if not isinstance(snapshot, dict):
        raise MalformedToken(
            f"Export token must hold an object, got {type(snapshot).__name__}"
        )
    return snapshot


def data_keys(snapshot: Snapshot) -> list[str]:
    """Keys of ``snapshot`` that hold data, in token order."""
    return [key for key in snapshot if key not in RESERVED_KEYS]


class TransferService:
    """Moves the whole kitchen state in and out of export tokens.

    Always reads and writes through the selector's active backend, so
    an import after a switch to the cloud lands on the cloud.

    Args:
        selector: Backend selector owning the active backend.
    """

    def __init__(self, selector: BackendSelector):
        self.selector = selector

    async def export_snapshot(self) -> str:
        """Load every logical key and encode them into a token."""
        values = {}
        for key in LOGICAL_KEYS:
            values[key] = await self.selector.backend.load(key)
        snapshot = build_snapshot(values)
        logger.info(
            "Exported %d keys from %s storage",
            len(LOGICAL_KEYS), self.selector.backend.name,
        )
        return encode_snapshot(snapshot)

    async def import_snapshot(self, token: str) -> list[str]:
        """Decode ``token`` and save each data key through the active backend.

        ``exportDate`` and ``version`` are never written back.

        Returns:
            The keys that were saved, in token order.

        Raises:
            MalformedToken: If the token cannot be decoded.
            TransportError: If a cloud write fails. Keys saved before
                the failure stay saved.
        """
        snapshot = decode_snapshot(token)
        written: list[str] = []
        for key in data_keys(snapshot):
            await self.selector.backend.save(key, snapshot[key])
            written.append(key)
        logger.info(
            "Imported %d keys into %s storage (token version %s)",
            len(written), self.selector.backend.name,
            snapshot.get(VERSION_KEY, "unknown"),
        )
        return written

    async def export_to_file(self, path: Path) -> Path:
        """Write a fresh export token to ``path``."""
        target = Path(path).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(await self.export_snapshot(), encoding="ascii")
        return target

    async def import_from_file(self, path: Path) -> list[str]:
        """Import the token stored in ``path``."""
        source = Path(path).expanduser()
        if not source.exists():
            raise FileNotFoundError(f"Export file not found: {source}")
        return await self.import_snapshot(source.read_text(encoding="utf-8"))
