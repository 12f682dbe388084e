"""Build markdown fragments as token streams and serialize them back to text.

The builder emits the same `Token` objects the parser produces, so a fragment
is structurally valid before it is ever turned into a string. Serialization
walks the nested syntax tree and only knows the node types the builder can
produce.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode

_TEXT_ESCAPES = frozenset("\\`*_[]<~&")
_BARE_DESTINATION_FORBIDDEN = frozenset(" <>()")
_BULLET_MARKER = "*"
_RULE = "---"


class MarkdownBuilder:
    """Accumulate block and inline tokens for one markdown fragment."""

    def __init__(self) -> None:
        self._tokens: list[Token] = []
        self._inline: list[Token] | None = None

    def rule(self) -> None:
        self._push_block(Token("hr", "hr", 0, markup=_RULE))

    @contextmanager
    def blockquote(self) -> Iterator[None]:
        with self._block("blockquote", "blockquote", markup=">"):
            yield

    @contextmanager
    def heading(self, level: int) -> Iterator[None]:
        if not 1 <= level <= 6:
            raise ValueError(f"Heading level must be between 1 and 6, got {level}")
        with self._block("heading", f"h{level}", markup="#" * level):
            with self._inline_container():
                yield

    @contextmanager
    def bullet_list(self, marker: str = _BULLET_MARKER) -> Iterator[None]:
        with self._block("bullet_list", "ul", markup=marker):
            yield

    @contextmanager
    def list_item(self, marker: str = _BULLET_MARKER) -> Iterator[None]:
        """Open a tight list item whose inline content follows the marker."""

        with self._block("list_item", "li", markup=marker):
            with self._block("paragraph", "p", hidden=True):
                with self._inline_container():
                    yield

    @contextmanager
    def link(self, href: str) -> Iterator[None]:
        self._push_inline(Token("link_open", "a", 1, attrs={"href": href}))
        yield
        self._push_inline(Token("link_close", "a", -1))

    def text(self, content: str) -> None:
        self._push_inline(Token("text", "", 0, content=content))

    def render(self) -> str:
        return render_markdown(self._tokens)

    @contextmanager
    def _block(self, name: str, tag: str, *, markup: str = "", hidden: bool = False) -> Iterator[None]:
        self._push_block(Token(f"{name}_open", tag, 1, markup=markup, hidden=hidden, block=True))
        yield
        self._push_block(Token(f"{name}_close", tag, -1, markup=markup, hidden=hidden, block=True))

    @contextmanager
    def _inline_container(self) -> Iterator[None]:
        inline = Token("inline", "", 0, children=[], block=True)
        self._push_block(inline)
        self._inline = inline.children
        try:
            yield
        finally:
            self._inline = None

    def _push_block(self, token: Token) -> None:
        if self._inline is not None:
            raise ValueError(f"Cannot open block token '{token.type}' inside inline content")
        self._tokens.append(token)

    def _push_inline(self, token: Token) -> None:
        if self._inline is None:
            raise ValueError(f"Inline token '{token.type}' requires a heading or list item")
        self._inline.append(token)


def escape_text(text: str) -> str:
    """Backslash-escape characters that would otherwise start inline syntax."""

    return "".join(f"\\{char}" if char in _TEXT_ESCAPES else char for char in text)


def format_destination(destination: str) -> str:
    if destination and not any(
        char in _BARE_DESTINATION_FORBIDDEN or ord(char) < 0x20 for char in destination
    ):
        return destination
    escaped = destination.replace("<", "\\<").replace(">", "\\>")
    return f"<{escaped}>"


class MarkdownRenderer:
    """Serialize a nested token tree to CommonMark text."""

    def render(self, tokens: Sequence[Token]) -> str:
        root = SyntaxTreeNode(tokens)
        return "\n".join(self._render_blocks(root.children))

    def _render_blocks(self, nodes: Sequence[SyntaxTreeNode], *, tight: bool = False) -> list[str]:
        lines: list[str] = []
        for index, node in enumerate(nodes):
            if index and not tight:
                lines.append("")
            lines.extend(self._render_block(node))
        return lines

    def _render_block(self, node: SyntaxTreeNode) -> list[str]:
        renderer = getattr(self, f"_block_{node.type}", None)
        if renderer is None:
            raise ValueError(f"Unsupported block node: {node.type}")
        return renderer(node)

    def _block_hr(self, node: SyntaxTreeNode) -> list[str]:
        return [node.markup or _RULE]

    def _block_heading(self, node: SyntaxTreeNode) -> list[str]:
        level = int(node.tag[1:])
        return [f"{'#' * level} {self._render_inline(node.children)}"]

    def _block_paragraph(self, node: SyntaxTreeNode) -> list[str]:
        return [self._render_inline(node.children)]

    def _block_blockquote(self, node: SyntaxTreeNode) -> list[str]:
        inner = ["", *self._render_blocks(node.children)]
        return [f" > {line}" if line else " >" for line in inner]

    def _block_bullet_list(self, node: SyntaxTreeNode) -> list[str]:
        # Items are always tight: one line per item, no blank separators.
        marker = node.markup or _BULLET_MARKER
        indent = " " * (len(marker) + 1)
        lines: list[str] = []
        for item in node.children:
            item_lines = self._render_blocks(item.children, tight=True) or [""]
            lines.append(f"{marker} {item_lines[0]}".rstrip())
            lines.extend(f"{indent}{line}" if line else "" for line in item_lines[1:])
        return lines

    def _render_inline(self, nodes: Sequence[SyntaxTreeNode]) -> str:
        parts: list[str] = []
        for node in nodes:
            if node.type == "inline":
                parts.append(self._render_inline(node.children))
            elif node.type == "text":
                parts.append(escape_text(node.content))
            elif node.type == "link":
                label = self._render_inline(node.children)
                destination = format_destination(str(node.attrGet("href") or ""))
                parts.append(f"[{label}]({destination})")
            else:
                raise ValueError(f"Unsupported inline node: {node.type}")
        return "".join(parts)


def render_markdown(tokens: Sequence[Token]) -> str:
    """Serialize builder tokens to markdown text without a trailing newline."""

    return MarkdownRenderer().render(tokens)
