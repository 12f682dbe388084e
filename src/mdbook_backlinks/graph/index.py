"""Reverse link index from target chapter to the chapters linking to it."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging

from mdbook_backlinks.book.models import Book, Chapter
from mdbook_backlinks.book.walker import iter_chapters
from mdbook_backlinks.errors import MalformedLinkError, PathEscapesRootError
from mdbook_backlinks.graph.paths import NormalizedPath, normalize_path, resolve_destination
from mdbook_backlinks.markdown.links import iter_link_destinations

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BacklinkRecord:
    """One source chapter that links to a target at least once."""

    number: tuple[int, ...] | None
    name: str
    path: NormalizedPath

    @property
    def identity(self) -> tuple[str, NormalizedPath]:
        return (self.name, self.path)

    def sort_key(self) -> tuple[int, tuple[int, ...], str, NormalizedPath]:
        """Unnumbered chapters first, then by section number, name and path."""

        if self.number is None:
            return (0, (), self.name, self.path)
        return (1, self.number, self.name, self.path)


def order_records(records: list[BacklinkRecord]) -> list[BacklinkRecord]:
    """Sort records deterministically and keep one record per (name, path)."""

    ordered: list[BacklinkRecord] = []
    seen: set[tuple[str, NormalizedPath]] = set()
    for record in sorted(records, key=BacklinkRecord.sort_key):
        if record.identity in seen:
            continue
        seen.add(record.identity)
        ordered.append(record)
    return ordered


class BacklinkIndex:
    """Map of known chapter paths to the records of chapters linking to them."""

    def __init__(self) -> None:
        self._entries: dict[NormalizedPath, list[BacklinkRecord]] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def seed(self, path: NormalizedPath) -> None:
        """Register a chapter path as a valid link target."""

        self._entries.setdefault(path, [])

    def add(self, target: NormalizedPath, record: BacklinkRecord) -> bool:
        """Record a link to `target`; links to unknown paths are dropped."""

        entries = self._entries.get(target)
        if entries is None:
            return False
        entries.append(record)
        return True

    def targets(self) -> list[NormalizedPath]:
        return sorted(self._entries)

    def backlinks_for(self, target: NormalizedPath) -> list[BacklinkRecord]:
        """Ordered, deduplicated records for `target` (empty when unknown)."""

        return order_records(self._entries.get(target, []))


def chapter_key(chapter: Chapter) -> NormalizedPath | None:
    """Identity of a chapter, or None for draft chapters without a source file."""

    if chapter.source_path is None:
        return None
    return normalize_path(chapter.source_path.replace("\\", "/"))


def _indexed_chapters(book: Book) -> Iterator[tuple[Chapter, NormalizedPath]]:
    for chapter in iter_chapters(book):
        key = chapter_key(chapter)
        if key is not None:
            yield chapter, key


def _chapter_targets(chapter: Chapter, source: NormalizedPath) -> Iterator[NormalizedPath]:
    for destination in iter_link_destinations(chapter.content):
        try:
            target = resolve_destination(source, destination)
        except (MalformedLinkError, PathEscapesRootError) as exc:
            LOGGER.debug("Skipping link in %s that names no chapter: %s", source, exc)
            continue
        if target is None:
            LOGGER.debug("Skipping external link in %s: %s", source, destination)
            continue
        yield target


def build_backlink_index(book: Book) -> BacklinkIndex:
    """Build the reverse link index for every chapter with a source path.

    All chapter paths are seeded before any link is read, so links to files
    outside the book never create entries, including links that climb above
    the book root. Raises PathEscapesRootError when a chapter source path does.
    """

    index = BacklinkIndex()
    chapters = list(_indexed_chapters(book))
    for _, key in chapters:
        index.seed(key)

    link_count = 0
    for chapter, source in chapters:
        number = tuple(chapter.number) if chapter.number is not None else None
        record = BacklinkRecord(number=number, name=chapter.name, path=source)
        for target in _chapter_targets(chapter, source):
            if index.add(target, record):
                link_count += 1

    LOGGER.info("Indexed %d internal links across %d chapters", link_count, len(chapters))
    return index
