"""Depth-first traversal of the book tree in document order."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from mdbook_backlinks.book.models import Book, BookItem, Chapter


def iter_chapters(items: Book | Iterable[BookItem]) -> Iterator[Chapter]:
    """Yield every chapter, parents before their nested sub-chapters."""

    if isinstance(items, Book):
        items = items.items
    for item in items:
        if isinstance(item, Chapter):
            yield item
            yield from iter_chapters(item.sub_items)


def for_each_chapter_mut(book: Book, func: Callable[[Chapter], None]) -> int:
    """Apply `func` to each chapter in turn and return how many were visited.

    The chapter list is collected up front so `func` never observes a
    partially walked tree.
    """

    chapters = list(iter_chapters(book))
    for chapter in chapters:
        func(chapter)
    return len(chapters)
