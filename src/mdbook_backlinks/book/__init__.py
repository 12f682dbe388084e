"""Book model, traversal and host protocol."""

from .models import Book, BookItem, Chapter, PartTitle, Separator
from .walker import for_each_chapter_mut, iter_chapters

__all__ = [
    "Book",
    "BookItem",
    "Chapter",
    "PartTitle",
    "Separator",
    "for_each_chapter_mut",
    "iter_chapters",
]
