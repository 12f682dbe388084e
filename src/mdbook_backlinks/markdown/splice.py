"""Append rendered backlink blocks to chapter content."""

from __future__ import annotations

from collections.abc import Sequence
import logging

from mdbook_backlinks.book.models import Book, Chapter
from mdbook_backlinks.book.walker import for_each_chapter_mut
from mdbook_backlinks.config import DEFAULT_HEADING
from mdbook_backlinks.errors import RelativePathError
from mdbook_backlinks.graph.index import BacklinkIndex, BacklinkRecord, chapter_key
from mdbook_backlinks.graph.paths import NormalizedPath, relative_path
from mdbook_backlinks.markdown.builder import MarkdownBuilder

LOGGER = logging.getLogger(__name__)

HEADING_LEVEL = 4
# Keeps the rule from being read as a setext underline of trailing prose.
BLOCK_SEPARATOR = "\n\n"


def _relative_links(records: Sequence[BacklinkRecord], target: NormalizedPath) -> list[tuple[str, str]]:
    links: list[tuple[str, str]] = []
    for record in records:
        try:
            destination = relative_path(record.path, target.parent)
        except RelativePathError as exc:
            LOGGER.warning("Skipping backlink from %s to %s: %s", record.path, target, exc)
            continue
        links.append((record.name, destination))
    return links


def render_backlinks(
    records: Sequence[BacklinkRecord],
    target: NormalizedPath,
    *,
    heading: str = DEFAULT_HEADING,
) -> str | None:
    """Render the backlinks block for `target`, or None when nothing is renderable."""

    links = _relative_links(records, target)
    if not links:
        return None

    builder = MarkdownBuilder()
    builder.rule()
    with builder.blockquote():
        with builder.heading(HEADING_LEVEL):
            builder.text(heading)
        with builder.bullet_list():
            for name, destination in links:
                with builder.list_item(), builder.link(destination):
                    builder.text(name)
    return builder.render()


def splice_backlinks(
    chapter: Chapter,
    records: Sequence[BacklinkRecord],
    *,
    heading: str = DEFAULT_HEADING,
) -> bool:
    """Append the backlinks block to `chapter`; returns whether it changed."""

    target = chapter_key(chapter)
    if target is None or not records:
        return False

    fragment = render_backlinks(records, target, heading=heading)
    if fragment is None:
        return False

    chapter.content += BLOCK_SEPARATOR + fragment
    return True


def apply_backlinks(book: Book, index: BacklinkIndex, *, heading: str = DEFAULT_HEADING) -> int:
    """Splice backlinks into every linked chapter and return how many changed."""

    changed = 0

    def _visit(chapter: Chapter) -> None:
        nonlocal changed
        target = chapter_key(chapter)
        if target is None:
            return
        records = index.backlinks_for(target)
        if splice_backlinks(chapter, records, heading=heading):
            LOGGER.debug("Added %d backlinks to %s", len(records), target)
            changed += 1

    visited = for_each_chapter_mut(book, _visit)
    LOGGER.info("Added backlinks to %d of %d chapters", changed, visited)
    return changed
