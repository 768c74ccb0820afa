"""
Category logger -- the advisory side-channel for validation telemetry.

Wraps stdlib logging with a level threshold and a set of enabled
categories. Each instance is constructed explicitly and handed to the
code that reports through it; there is no shared global instance.

    log = CategoryLogger.for_environment("development")
    log.warn(LogCategory.UNITS, "Validation unité échoué", unit="oz")
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Optional


class LogCategory(str, Enum):
    """Domain areas a telemetry message can be filed under."""

    GENERAL = "general"
    BARCODE = "barcode"
    STOCK = "stock"
    PLANNING = "planning"
    API = "api"
    USER = "user"
    UNITS = "units"


_ENVIRONMENT_LEVELS = {
    "production": logging.ERROR,
    "development": logging.DEBUG,
}


class CategoryLogger:
    """Level- and category-filtered logger.

    Messages go to ``<name>.<category>`` child loggers, so handlers and
    formatting stay under normal logging configuration.

    Args:
        level: Minimum level emitted (a ``logging`` constant or its name).
        categories: Enabled categories. Defaults to all of them.
        name: Parent logger name.
    """

    def __init__(
        self,
        level: int | str = logging.WARNING,
        categories: Optional[Iterable[LogCategory]] = None,
        name: str = "mealcraft",
    ) -> None:
        self.name = name
        self.level = _coerce_level(level)
        self.categories: set[LogCategory] = set(
            categories if categories is not None else LogCategory
        )

    @classmethod
    def for_environment(cls, environment: str) -> "CategoryLogger":
        """Build a logger tuned for a deployment environment.

        ``production`` keeps errors only, ``development`` keeps
        everything, anything else keeps warnings and up.
        """
        level = _ENVIRONMENT_LEVELS.get(environment.lower(), logging.WARNING)
        return cls(level=level)

    def set_level(self, level: int | str) -> None:
        self.level = _coerce_level(level)

    def enable_category(self, category: LogCategory) -> None:
        self.categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.categories.discard(category)

    def is_enabled(self, level: int, category: LogCategory) -> bool:
        """Check whether a message at ``level`` in ``category`` is emitted."""
        return level >= self.level and category in self.categories

    def log(
        self, level: int, category: LogCategory, message: str, **context: Any
    ) -> None:
        if not self.is_enabled(level, category):
            return
        logger = logging.getLogger(f"{self.name}.{category.value}")
        if context:
            details = " ".join(f"{k}={v!r}" for k, v in context.items())
            logger.log(level, "%s %s", message, details)
        else:
            logger.log(level, "%s", message)

    def error(self, category: LogCategory, message: str, **context: Any) -> None:
        self.log(logging.ERROR, category, message, **context)

    def warn(self, category: LogCategory, message: str, **context: Any) -> None:
        self.log(logging.WARNING, category, message, **context)

    def info(self, category: LogCategory, message: str, **context: Any) -> None:
        self.log(logging.INFO, category, message, **context)

    def debug(self, category: LogCategory, message: str, **context: Any) -> None:
        self.log(logging.DEBUG, category, message, **context)


def _coerce_level(level: int | str) -> int:
    """Turn a level name such as ``"debug"`` into its numeric value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value
