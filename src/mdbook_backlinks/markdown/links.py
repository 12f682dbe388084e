"""Link destination extraction from chapter markdown."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.token import Token


@lru_cache(maxsize=1)
def _get_parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


def _walk_inline(tokens: Iterable[Token]) -> Iterator[Token]:
    for token in tokens:
        if token.children:
            yield from _walk_inline(token.children)
        else:
            yield token


def iter_link_destinations(content: str) -> Iterator[str]:
    """Yield the destination of every inline or reference link in `content`.

    Links inside code spans, code blocks and raw HTML never reach this point
    because the parser does not emit link tokens for them.
    """

    for token in _walk_inline(_get_parser().parse(content)):
        if token.type != "link_open":
            continue
        href = token.attrGet("href")
        if isinstance(href, str):
            yield href
