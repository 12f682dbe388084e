"""JSON request/response codec for the mdbook preprocessor protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import re
from typing import Any, TextIO

from mdbook_backlinks.book.models import Book

LOGGER = logging.getLogger(__name__)

SUPPORTED_MDBOOK_SERIES = ((0, 4), (0, 5))
_VERSION_RE = re.compile(r"^v?(?P<major>\d+)\.(?P<minor>\d+)(?:\.\d+)?(?:[-+].*)?$")
_CONTEXT_FIELDS = ("root", "config", "renderer", "mdbook_version")


@dataclass(slots=True)
class ProtocolError(Exception):
    """Malformed request received from the host."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class PreprocessorContext:
    """Host-supplied information about the current build."""

    root: str = ""
    config: dict[str, Any] = field(default_factory=dict)
    renderer: str = ""
    mdbook_version: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Any) -> "PreprocessorContext":
        if not isinstance(payload, dict):
            raise ProtocolError("Preprocessor context must be an object")

        config = payload.get("config") or {}
        if not isinstance(config, dict):
            raise ProtocolError("Preprocessor context 'config' must be an object")

        values: dict[str, str] = {}
        for key in ("root", "renderer", "mdbook_version"):
            value = payload.get(key, "")
            if not isinstance(value, str):
                raise ProtocolError(f"Preprocessor context '{key}' must be a string")
            values[key] = value

        return cls(
            config=config,
            extra={key: value for key, value in payload.items() if key not in _CONTEXT_FIELDS},
            **values,
        )


def parse_version_series(version: str) -> tuple[int, int] | None:
    match = _VERSION_RE.match(version.strip())
    if match is None:
        return None
    return (int(match.group("major")), int(match.group("minor")))


def check_mdbook_version(version: str) -> bool:
    """Warn when the host runs an mdbook release this book format was not built for."""

    series = parse_version_series(version)
    if series in SUPPORTED_MDBOOK_SERIES:
        return True

    supported = ", ".join(f"{major}.{minor}.x" for major, minor in SUPPORTED_MDBOOK_SERIES)
    LOGGER.warning(
        "The backlinks preprocessor supports mdbook %s, but is being called from version %s",
        supported,
        version or "unknown",
    )
    return False


def parse_input(stream: TextIO) -> tuple[PreprocessorContext, Book]:
    """Read the `[context, book]` request the host writes to stdin."""

    try:
        payload = json.load(stream)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"Invalid preprocessor input: {exc}") from exc

    if not isinstance(payload, list) or len(payload) != 2:
        raise ProtocolError("Preprocessor input must be a JSON array of [context, book]")

    context = PreprocessorContext.from_dict(payload[0])
    try:
        book = Book.from_dict(payload[1])
    except ValueError as exc:
        raise ProtocolError(f"Invalid book payload: {exc}") from exc
    return context, book


def write_output(book: Book, stream: TextIO) -> None:
    """Write the processed book back for the host to render."""

    json.dump(book.to_dict(), stream, ensure_ascii=False)
    stream.flush()
