"""Book tree structures exchanged with the mdbook host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

SECTIONS_KEY = "sections"
ITEMS_KEY = "items"

_CHAPTER_FIELDS = ("name", "content", "number", "sub_items", "path", "source_path", "parent_names")


@dataclass(slots=True)
class Chapter:
    """A single content unit of the book; only `content` is ever mutated."""

    name: str
    content: str = ""
    number: list[int] | None = None
    sub_items: list[BookItem] = field(default_factory=list)
    path: str | None = None
    source_path: str | None = None
    parent_names: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Chapter":
        if not isinstance(payload, dict):
            raise ValueError("Chapter payload must be an object")

        name = payload.get("name")
        if not isinstance(name, str):
            raise ValueError("Chapter name must be a string")

        content = payload.get("content", "")
        if not isinstance(content, str):
            raise ValueError(f"Chapter content must be a string (chapter={name})")

        number = payload.get("number")
        if number is not None:
            if not isinstance(number, list) or not all(
                isinstance(part, int) and not isinstance(part, bool) for part in number
            ):
                raise ValueError(f"Chapter number must be a list of integers (chapter={name})")
            number = list(number)

        path = payload.get("path")
        source_path = payload.get("source_path", path)
        for label, value in (("path", path), ("source_path", source_path)):
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Chapter {label} must be a string or null (chapter={name})")

        sub_items = payload.get("sub_items", [])
        if not isinstance(sub_items, list):
            raise ValueError(f"Chapter sub_items must be a list (chapter={name})")

        parent_names = payload.get("parent_names", [])
        if not isinstance(parent_names, list):
            raise ValueError(f"Chapter parent_names must be a list (chapter={name})")

        return cls(
            name=name,
            content=content,
            number=number,
            sub_items=[item_from_dict(item) for item in sub_items],
            path=path,
            source_path=source_path,
            parent_names=list(parent_names),
            extra={key: value for key, value in payload.items() if key not in _CHAPTER_FIELDS},
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "content": self.content,
            "number": self.number,
            "sub_items": [item_to_dict(item) for item in self.sub_items],
            "path": self.path,
            "source_path": self.source_path,
            "parent_names": list(self.parent_names),
        }
        payload.update(self.extra)
        return payload


@dataclass(slots=True)
class Separator:
    """Visual separator between groups of chapters."""


@dataclass(slots=True)
class PartTitle:
    """Unnumbered heading that groups the chapters following it."""

    title: str


BookItem = Union[Chapter, Separator, PartTitle]


@dataclass(slots=True)
class Book:
    """Ordered forest of book items, serialized under `items_key`."""

    items: list[BookItem] = field(default_factory=list)
    items_key: str = SECTIONS_KEY
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Book":
        if not isinstance(payload, dict):
            raise ValueError("Book payload must be an object")

        if SECTIONS_KEY in payload:
            items_key = SECTIONS_KEY
        elif ITEMS_KEY in payload:
            items_key = ITEMS_KEY
        else:
            raise ValueError(f"Book payload must contain '{SECTIONS_KEY}' or '{ITEMS_KEY}'")

        raw_items = payload[items_key]
        if not isinstance(raw_items, list):
            raise ValueError(f"Book '{items_key}' must be a list")

        return cls(
            items=[item_from_dict(item) for item in raw_items],
            items_key=items_key,
            extra={key: value for key, value in payload.items() if key != items_key},
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {self.items_key: [item_to_dict(item) for item in self.items]}
        payload.update(self.extra)
        return payload


def item_from_dict(payload: Any) -> BookItem:
    """Decode one externally tagged book item."""

    if payload == "Separator":
        return Separator()
    if isinstance(payload, dict) and len(payload) == 1:
        if "Chapter" in payload:
            return Chapter.from_dict(payload["Chapter"])
        if "PartTitle" in payload:
            title = payload["PartTitle"]
            if not isinstance(title, str):
                raise ValueError("PartTitle must be a string")
            return PartTitle(title)
    raise ValueError(f"Unknown book item: {payload!r}")


def item_to_dict(item: BookItem) -> Any:
    if isinstance(item, Chapter):
        return {"Chapter": item.to_dict()}
    if isinstance(item, PartTitle):
        return {"PartTitle": item.title}
    return "Separator"
