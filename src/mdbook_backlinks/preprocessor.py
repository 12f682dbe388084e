"""Backlinks preprocessor: index every chapter's links, then splice."""

from __future__ import annotations

import logging

from mdbook_backlinks.book.models import Book
from mdbook_backlinks.book.protocol import PreprocessorContext
from mdbook_backlinks.config import PREPROCESSOR_NAME, BacklinksSettings
from mdbook_backlinks.graph.index import build_backlink_index
from mdbook_backlinks.markdown.splice import apply_backlinks

LOGGER = logging.getLogger(__name__)


class BacklinksPreprocessor:
    """Append a backlinks block to every chapter that other chapters link to."""

    def __init__(self, settings: BacklinksSettings | None = None) -> None:
        self._settings = settings or BacklinksSettings()

    @property
    def name(self) -> str:
        return PREPROCESSOR_NAME

    @property
    def settings(self) -> BacklinksSettings:
        return self._settings

    def supports_renderer(self, renderer: str) -> bool:
        return True

    def run(self, context: PreprocessorContext, book: Book) -> Book:
        settings = self._settings.with_book_config(context.config)
        return process_book(book, heading=settings.heading)


def process_book(book: Book, *, heading: str | None = None) -> Book:
    """Build the full index before mutating any chapter, then splice in place.

    PathEscapesRootError propagates before any chapter has been changed.
    """

    index = build_backlink_index(book)
    apply_backlinks(book, index, heading=heading or BacklinksSettings().heading)
    return book
