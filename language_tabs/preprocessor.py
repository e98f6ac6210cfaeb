"""mdBook preprocessor that turns `<Tabs>`/`<TabItem>` groups into language tabs.

Add to ``book.toml``::

    [preprocessor.language-tabs]
    command = "mdbook-language-tabs"
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, BinaryIO, Iterable, TextIO

from packaging.version import InvalidVersion, Version

from language_tabs.rewriter import transform_tabs_blocks

PREPROCESSOR_NAME = "language-tabs"
SUPPORTED_RENDERER = "html"
BUILT_FOR_MDBOOK_VERSION = "0.5.0"


class PreprocessorError(Exception):
    """Raised when mdBook hands over a payload this preprocessor cannot read."""


def supports_renderer(renderer: str) -> bool:
    return renderer == SUPPORTED_RENDERER


def _book_items(book: dict[str, Any]) -> list[Any]:
    # mdBook 0.5 serializes chapters under "items", 0.4 under "sections".
    for key in ("items", "sections"):
        items = book.get(key)
        if isinstance(items, list):
            return items
    raise PreprocessorError("book has neither 'items' nor 'sections'")


def transform_book_items(items: Iterable[Any]) -> None:
    for item in items:
        if not isinstance(item, dict) or "Chapter" not in item:
            continue
        chapter = item["Chapter"]
        content = chapter.get("content")
        if isinstance(content, str):
            chapter["content"] = transform_tabs_blocks(content)
        transform_book_items(chapter.get("sub_items") or [])


def version_warning(mdbook_version: str) -> str | None:
    """Return an advisory message when mdBook is older than the one we target.

    Raises ``InvalidVersion`` for an unparsable version string.
    """
    if Version(mdbook_version) >= Version(BUILT_FOR_MDBOOK_VERSION):
        return None
    return (
        "Warning: The language tabs preprocessor was built against mdBook "
        f"{BUILT_FOR_MDBOOK_VERSION}, but is running with {mdbook_version}"
    )


def process_payload(payload: Any, stderr: TextIO) -> dict[str, Any]:
    if not isinstance(payload, list) or len(payload) != 2:
        raise PreprocessorError("expected a [context, book] pair on stdin")
    context, book = payload
    if not isinstance(context, dict) or not isinstance(book, dict):
        raise PreprocessorError("context and book must both be JSON objects")

    warning = version_warning(str(context.get("mdbook_version", "")))
    if warning:
        print(warning, file=stderr)

    transform_book_items(_book_items(book))
    return book


def run_preprocessor(stdin: BinaryIO, stdout: TextIO, stderr: TextIO) -> None:
    payload = json.loads(stdin.read())
    book = process_payload(payload, stderr)
    json.dump(book, stdout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdbook-language-tabs",
        description="Render <Tabs>/<TabItem> code groups as language tabs for mdBook.",
    )
    subparsers = parser.add_subparsers(dest="command")
    supports = subparsers.add_parser(
        "supports",
        help="Exit 0 if the given renderer is supported, 1 otherwise.",
    )
    supports.add_argument("renderer", nargs="?", default="")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "supports":
        return 0 if supports_renderer(args.renderer) else 1

    try:
        run_preprocessor(sys.stdin.buffer, sys.stdout, sys.stderr)
    except (PreprocessorError, InvalidVersion, json.JSONDecodeError) as exc:
        print(f"mdbook-{PREPROCESSOR_NAME}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
