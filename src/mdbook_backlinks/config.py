"""Runtime configuration for the backlinks preprocessor."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import os
from typing import Any, Mapping


DEFAULT_HEADING = "Backlinks"
DEFAULT_LOG_LEVEL = "WARNING"
PREPROCESSOR_NAME = "backlinks"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True, slots=True)
class BacklinksSettings:
    """Validated preprocessor settings."""

    heading: str = DEFAULT_HEADING
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BacklinksSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        heading = source.get("MDBOOK_BACKLINKS_HEADING", DEFAULT_HEADING).strip()
        if not heading:
            raise ValueError("MDBOOK_BACKLINKS_HEADING cannot be empty")

        log_level = source.get("MDBOOK_BACKLINKS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in _LOG_LEVELS:
            allowed = ", ".join(_LOG_LEVELS)
            raise ValueError(f"MDBOOK_BACKLINKS_LOG_LEVEL must be one of: {allowed}")

        return cls(heading=heading, log_level=log_level)

    def with_book_config(self, config: Mapping[str, Any]) -> "BacklinksSettings":
        """Apply the `[preprocessor.backlinks]` table of the book configuration."""

        preprocessors = config.get("preprocessor") or {}
        table = preprocessors.get(PREPROCESSOR_NAME) if isinstance(preprocessors, Mapping) else None
        if not isinstance(table, Mapping) or "heading" not in table:
            return self

        heading = table["heading"]
        if not isinstance(heading, str) or not heading.strip():
            raise ValueError("preprocessor.backlinks.heading must be a non-empty string")
        return replace(self, heading=heading.strip())
