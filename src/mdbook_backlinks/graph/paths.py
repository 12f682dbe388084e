"""Lexical path identity for chapters and link destinations.

Chapter paths and link destinations are never resolved against a filesystem.
Every path is anchored to the book root and `.` / `..` segments are folded
away, so that two spellings of the same location compare and hash equal.
"""

from __future__ import annotations

from dataclasses import dataclass
import posixpath
from pathlib import PurePosixPath
from urllib.parse import unquote, urlsplit

from mdbook_backlinks.errors import MalformedLinkError, PathEscapesRootError, RelativePathError

_SEPARATOR = "/"
_CURRENT = "."
_PARENT = ".."


@dataclass(frozen=True, slots=True, order=True)
class NormalizedPath:
    """Root-anchored path with no `.`, `..` or empty segments."""

    parts: tuple[str, ...] = ()

    def __str__(self) -> str:
        return _SEPARATOR.join(self.parts)

    @property
    def name(self) -> str:
        return self.parts[-1] if self.parts else ""

    @property
    def parent(self) -> NormalizedPath:
        """Directory holding this path; the root is its own parent."""

        return NormalizedPath(self.parts[:-1])

    def joinpath(self, other: str) -> NormalizedPath:
        """Join a relative path onto this directory and normalize the result."""

        if other.startswith(_SEPARATOR):
            return normalize_path(other)
        return normalize_path(_SEPARATOR.join((*self.parts, other)))


def normalize_path(path: str | PurePosixPath | NormalizedPath) -> NormalizedPath:
    """Resolve `.` and `..` lexically, raising when the path leaves the root."""

    if isinstance(path, NormalizedPath):
        return path

    raw = str(path)
    parts: list[str] = []
    for segment in raw.split(_SEPARATOR):
        if not segment or segment == _CURRENT:
            continue
        if segment == _PARENT:
            if not parts:
                raise PathEscapesRootError(raw)
            parts.pop()
            continue
        parts.append(segment)
    return NormalizedPath(tuple(parts))


def parse_destination(destination: str) -> str | None:
    """Return the path component of a link destination.

    External destinations (with a scheme or a network location) and pure
    fragment links yield None. Destinations that cannot be split at all raise
    MalformedLinkError.
    """

    try:
        split = urlsplit(destination)
    except ValueError as exc:
        raise MalformedLinkError(destination, f"Unparseable link destination: {exc}") from exc

    if split.scheme or split.netloc:
        return None

    path = unquote(split.path)
    if not path:
        return None
    if "\x00" in path:
        raise MalformedLinkError(destination, "Link destination contains a NUL byte")
    return path


def resolve_destination(source: NormalizedPath, destination: str) -> NormalizedPath | None:
    """Resolve a link found in `source` to the chapter path it points at.

    Relative destinations are joined onto the source chapter's directory; a
    leading `/` is taken relative to the book root.
    """

    path = parse_destination(destination)
    if path is None:
        return None
    return source.parent.joinpath(path)


def relative_path(target: NormalizedPath, base_dir: NormalizedPath) -> str:
    """Spell `target` relative to the directory `base_dir` with forward slashes."""

    for part in (*target.parts, *base_dir.parts):
        if part in ("", _CURRENT, _PARENT) or _SEPARATOR in part:
            raise RelativePathError(str(target), str(base_dir))

    # Anchoring both at "/" keeps relpath lexical; it never consults the cwd.
    return posixpath.relpath(_SEPARATOR + str(target), _SEPARATOR + str(base_dir))
