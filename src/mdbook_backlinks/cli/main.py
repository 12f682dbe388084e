"""CLI entrypoint invoked by mdbook as the backlinks preprocessor."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from dotenv import load_dotenv

from mdbook_backlinks.book.protocol import ProtocolError, check_mdbook_version, parse_input, write_output
from mdbook_backlinks.config import BacklinksSettings
from mdbook_backlinks.errors import BacklinksError
from mdbook_backlinks.preprocessor import BacklinksPreprocessor


load_dotenv()

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mdbook-backlinks",
        description="A mdbook preprocessor which inserts backlinks",
    )
    subparsers = parser.add_subparsers(dest="command")
    supports = subparsers.add_parser(
        "supports",
        help="Check whether a renderer is supported by this preprocessor",
    )
    supports.add_argument("renderer", help="Renderer name passed by mdbook")
    return parser.parse_args(argv)


def _run_preprocessor(
    preprocessor: BacklinksPreprocessor,
    *,
    stdin: TextIO,
    stdout: TextIO,
) -> int:
    try:
        context, book = parse_input(stdin)
        check_mdbook_version(context.mdbook_version)
        processed = preprocessor.run(context, book)
    except ProtocolError as exc:
        LOGGER.error("Invalid input from mdbook: %s", exc)
        return 1
    except (BacklinksError, ValueError) as exc:
        LOGGER.error("Backlinks preprocessing failed: %s", exc)
        return 1

    write_output(processed, stdout)
    return 0


def main(
    argv: list[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    args = _parse_args(argv)
    try:
        settings = BacklinksSettings.from_env()
    except ValueError as exc:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
        LOGGER.error("Configuration error: %s", exc)
        return 2

    logging.basicConfig(level=settings.log_level_value, format="%(levelname)s %(name)s: %(message)s")
    preprocessor = BacklinksPreprocessor(settings)

    if args.command == "supports":
        supported = preprocessor.supports_renderer(args.renderer)
        LOGGER.debug("Renderer %s supported: %s", args.renderer, supported)
        return 0 if supported else 1

    return _run_preprocessor(
        preprocessor,
        stdin=stdin if stdin is not None else sys.stdin,
        stdout=stdout if stdout is not None else sys.stdout,
    )


if __name__ == "__main__":
    raise SystemExit(main())
