from __future__ import annotations

import pytest
from markdown_it import MarkdownIt

from mdbook_backlinks.markdown.builder import MarkdownBuilder, escape_text, format_destination
from mdbook_backlinks.markdown.links import iter_link_destinations


def _backlinks_fragment(links: list[tuple[str, str]]) -> str:
    builder = MarkdownBuilder()
    builder.rule()
    with builder.blockquote():
        with builder.heading(4):
            builder.text("Backlinks")
        with builder.bullet_list():
            for name, destination in links:
                with builder.list_item(), builder.link(destination):
                    builder.text(name)
    return builder.render()


def test_fragment_renders_quoted_heading_and_tight_list() -> None:
    rendered = _backlinks_fragment([("Name", "relative/path.md"), ("Name2", "../other/path.md")])

    assert rendered == (
        "---\n"
        "\n"
        " >\n"
        " > #### Backlinks\n"
        " >\n"
        " > * [Name](relative/path.md)\n"
        " > * [Name2](../other/path.md)"
    )


def test_rendered_fragment_parses_back_to_the_same_links() -> None:
    rendered = _backlinks_fragment([("A [draft]_*", "a b.md"), ("Plain", "x/y.md")])

    assert "[A \\[draft\\]\\_\\*](<a b.md>)" in rendered
    assert list(iter_link_destinations(rendered)) == ["a%20b.md", "x/y.md"]


def test_names_with_strikethrough_and_entities_keep_their_text() -> None:
    rendered = _backlinks_fragment([("~~Old~~ notes", "s.md"), ("AT&amp;T", "t.md")])

    assert "[\\~\\~Old\\~\\~ notes](s.md)" in rendered
    assert "[AT\\&amp;T](t.md)" in rendered

    html = MarkdownIt("commonmark").enable("strikethrough").render(rendered)
    assert '<a href="s.md">~~Old~~ notes</a>' in html
    assert '<a href="t.md">AT&amp;amp;T</a>' in html
    assert "<s>" not in html


def test_escape_text_and_destination_formatting() -> None:
    assert escape_text("a_b*[c]`d`\\<e>") == "a\\_b\\*\\[c\\]\\`d\\`\\\\\\<e>"
    assert escape_text("~x~ & y") == "\\~x\\~ \\& y"
    assert format_destination("plain/path.md") == "plain/path.md"
    assert format_destination("with space.md") == "<with space.md>"
    assert format_destination("paren(1).md") == "<paren(1).md>"
    assert format_destination("") == "<>"


def test_builder_rejects_misplaced_tokens() -> None:
    builder = MarkdownBuilder()

    with pytest.raises(ValueError, match="requires a heading or list item"):
        builder.text("loose")

    with pytest.raises(ValueError, match="between 1 and 6"):
        with builder.heading(7):
            pass

    with pytest.raises(ValueError, match="inside inline content"):
        with builder.list_item():
            builder.rule()
