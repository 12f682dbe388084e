"""Domain errors raised while building and rendering backlinks."""

from __future__ import annotations

from dataclasses import dataclass


class BacklinksError(Exception):
    """Base class for backlink graph and rendering failures."""


@dataclass(slots=True)
class PathEscapesRootError(BacklinksError):
    """A path climbs above the book root with too many `..` segments."""

    path: str

    def __str__(self) -> str:
        return f"Path escapes the book root (path={self.path})"


@dataclass(slots=True)
class MalformedLinkError(BacklinksError):
    """A link destination cannot be read as a chapter path."""

    destination: str
    reason: str

    def __str__(self) -> str:
        return f"{self.reason} (destination={self.destination})"


@dataclass(slots=True)
class RelativePathError(BacklinksError):
    """No relative path can be computed between two chapter locations."""

    target: str
    base: str

    def __str__(self) -> str:
        return f"Cannot compute relative path (target={self.target}, base={self.base})"
