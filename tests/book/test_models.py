from __future__ import annotations

import pytest

from mdbook_backlinks.book.models import Book, Chapter, PartTitle, Separator, item_from_dict


def _raw_chapter(name: str, path: str | None, **overrides: object) -> dict:
    payload = {
        "name": name,
        "content": f"# {name}\n",
        "number": None,
        "sub_items": [],
        "path": path,
        "source_path": path,
        "parent_names": [],
    }
    payload.update(overrides)
    return payload


def test_book_round_trip_preserves_shape_and_unknown_keys() -> None:
    raw = {
        "sections": [
            {"Chapter": _raw_chapter("Intro", "intro.md", __extra_field="kept")},
            "Separator",
            {"PartTitle": "Part One"},
            {
                "Chapter": _raw_chapter(
                    "One",
                    "one/README.md",
                    number=[1],
                    sub_items=[{"Chapter": _raw_chapter("Sub", "one/sub.md", number=[1, 1], parent_names=["One"])}],
                )
            },
        ],
        "__non_exhaustive": None,
    }

    book = Book.from_dict(raw)

    assert book.items_key == "sections"
    assert isinstance(book.items[1], Separator)
    assert book.items[2] == PartTitle("Part One")
    assert book.items[0].extra == {"__extra_field": "kept"}
    assert book.to_dict() == raw


def test_book_accepts_items_key() -> None:
    book = Book.from_dict({"items": [{"Chapter": _raw_chapter("Only", "only.md")}]})

    assert book.items_key == "items"
    assert list(book.to_dict()) == ["items"]


def test_chapter_source_path_falls_back_to_path() -> None:
    raw = _raw_chapter("Legacy", "legacy.md")
    del raw["source_path"]

    chapter = Chapter.from_dict(raw)

    assert chapter.source_path == "legacy.md"
    assert chapter.path == "legacy.md"


def test_draft_chapter_has_no_source_path() -> None:
    chapter = Chapter.from_dict(_raw_chapter("Draft", None))

    assert chapter.source_path is None
    assert chapter.to_dict()["source_path"] is None


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        (_raw_chapter("Bad", "bad.md", number=["1"]), "number"),
        (_raw_chapter("Bad", "bad.md", content=None), "content"),
        (_raw_chapter("Bad", 3), "path"),
        (_raw_chapter("Bad", "bad.md", sub_items={}), "sub_items"),
    ],
)
def test_chapter_rejects_malformed_fields(payload: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        Chapter.from_dict(payload)


def test_unknown_items_and_missing_sections_are_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown book item"):
        item_from_dict({"Appendix": {}})

    with pytest.raises(ValueError, match="sections"):
        Book.from_dict({"chapters": []})
