from __future__ import annotations

import io
import json

import pytest

from mdbook_backlinks.cli.main import main


def _chapter(name: str, path: str, content: str, number: list[int] | None = None) -> dict:
    return {
        "Chapter": {
            "name": name,
            "content": content,
            "number": number,
            "sub_items": [],
            "path": path,
            "source_path": path,
            "parent_names": [],
        }
    }


def _request(*chapters: dict, mdbook_version: str = "0.4.40") -> str:
    context = {"root": "/book", "config": {}, "renderer": "html", "mdbook_version": mdbook_version}
    return json.dumps([context, {"sections": list(chapters), "__non_exhaustive": None}])


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MDBOOK_BACKLINKS_HEADING", raising=False)
    monkeypatch.delenv("MDBOOK_BACKLINKS_LOG_LEVEL", raising=False)


def test_supports_accepts_every_renderer() -> None:
    assert main(["supports", "html"]) == 0
    assert main(["supports", "some-custom-renderer"]) == 0


def test_preprocess_writes_book_with_backlinks() -> None:
    stdout = io.StringIO()
    request = _request(
        _chapter("One", "one.md", "See [two](two.md).", [1]),
        _chapter("Two", "two.md", "Body", [2]),
    )

    exit_code = main([], stdin=io.StringIO(request), stdout=stdout)
    payload = json.loads(stdout.getvalue())

    assert exit_code == 0
    sections = payload["sections"]
    assert sections[0]["Chapter"]["content"] == "See [two](two.md)."
    assert sections[1]["Chapter"]["content"] == "Body\n\n---\n\n >\n > #### Backlinks\n >\n > * [One](one.md)"
    assert payload["__non_exhaustive"] is None


def test_version_mismatch_still_processes(caplog: pytest.LogCaptureFixture) -> None:
    stdout = io.StringIO()
    request = _request(_chapter("One", "one.md", "[self](one.md)"), mdbook_version="9.0.0")

    assert main([], stdin=io.StringIO(request), stdout=stdout) == 0
    assert "9.0.0" in caplog.text
    assert "[One](one.md)" in json.loads(stdout.getvalue())["sections"][0]["Chapter"]["content"]


def test_link_above_the_root_is_not_an_error() -> None:
    stdout = io.StringIO()
    request = _request(
        _chapter("index", "index.md", "See the [repo readme](../README.md) and [two](two.md)."),
        _chapter("Two", "two.md", ""),
    )

    assert main([], stdin=io.StringIO(request), stdout=stdout) == 0
    sections = json.loads(stdout.getvalue())["sections"]
    assert sections[0]["Chapter"]["content"] == "See the [repo readme](../README.md) and [two](two.md)."
    assert sections[1]["Chapter"]["content"].endswith(" > * [index](index.md)")


def test_source_path_above_the_root_fails_without_output(caplog: pytest.LogCaptureFixture) -> None:
    stdout = io.StringIO()
    request = _request(_chapter("Root", "../root.md", "text"))

    assert main([], stdin=io.StringIO(request), stdout=stdout) == 1
    assert stdout.getvalue() == ""
    assert "escapes the book root" in caplog.text


def test_malformed_input_fails_without_output() -> None:
    stdout = io.StringIO()

    assert main([], stdin=io.StringIO("[1, 2, 3]"), stdout=stdout) == 1
    assert stdout.getvalue() == ""


def test_invalid_env_configuration_exits_with_usage_code(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MDBOOK_BACKLINKS_LOG_LEVEL", "chatty")

    assert main(["supports", "html"]) == 2


def test_env_heading_is_used(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MDBOOK_BACKLINKS_HEADING", "Mentioned in")
    stdout = io.StringIO()
    request = _request(_chapter("One", "one.md", "[two](two.md)"), _chapter("Two", "two.md", ""))

    assert main([], stdin=io.StringIO(request), stdout=stdout) == 0
    assert " > #### Mentioned in\n" in json.loads(stdout.getvalue())["sections"][1]["Chapter"]["content"]
