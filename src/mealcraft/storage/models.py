"""
Storage data models -- the envelope every persisted value travels in.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Origin(str, Enum):
    """Which backend produced a record."""

    LOCAL = "local"
    CLOUD = "cloud"


class StorageMode(str, Enum):
    """Which backend the selector currently routes to."""

    LOCAL = "local"
    CLOUD = "cloud"


LOCAL_SCHEMA_VERSION = "1.0"
REMOTE_SCHEMA_VERSION = "2.0"


class Envelope(BaseModel):
    """A persisted value plus its metadata.

    Serialized with the wire names ``version`` and ``source``::

        {"data": ..., "timestamp": 1718000000000, "version": "1.0", "source": "local"}

    Envelopes are frozen: saving a value always produces a new one.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    data: Any = Field(...)
    timestamp: int
    schema_version: str = Field(alias="version")
    origin: Origin = Field(alias="source")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready mapping using wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class BackendConfig(BaseModel):
    """Configuration needed to build a storage backend."""

    mode: StorageMode = StorageMode.LOCAL
    prefix: str = "mealcraft"
    user_id: Optional[str] = None
