from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from language_tabs.rewriter import (
    TAB_ITEM_PATTERN,
    TabsBlock,
    extract_first_fenced_code_block,
    parse_attribute_value,
    parse_group_id,
    sanitize_identifier,
    scan_tabs_blocks,
)

SOURCE_DIR = Path("src")


@dataclass(frozen=True)
class ValidationIssue:
    path: Path
    line: int
    level: str
    message: str

    def format(self) -> str:
        return f"[{self.level}] {self.path.as_posix()}:{self.line}: {self.message}"


@dataclass
class ValidationSummary:
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]

    def has_errors(self) -> bool:
        return bool(self.errors)


def _line_number(content: str, index: int) -> int:
    return content.count("\n", 0, index) + 1


def _check_block(path: Path, content: str, block: TabsBlock) -> ValidationSummary:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    line = _line_number(content, block.start)

    if not block.terminated:
        errors.append(
            ValidationIssue(
                path=path,
                line=line,
                level="ERROR",
                message="`<Tabs>` block is never closed; the rest of the file is left as written.",
            )
        )
        return ValidationSummary(errors=errors, warnings=warnings)

    group_id = sanitize_identifier(parse_group_id(block.open_tag))
    item_matches = list(TAB_ITEM_PATTERN.finditer(block.inner_content))
    if not item_matches:
        errors.append(
            ValidationIssue(
                path=path,
                line=line,
                level="ERROR",
                message=f"`<Tabs>` group `{group_id}` has no `<TabItem>` entries; it is left as written.",
            )
        )
        return ValidationSummary(errors=errors, warnings=warnings)

    inner_offset = block.start + len(block.open_tag)
    seen_values: dict[str, int] = {}
    default_count = 0
    for position, match in enumerate(item_matches, start=1):
        attributes = match.group("attributes")
        item_line = _line_number(content, inner_offset + match.start())

        label = parse_attribute_value(attributes, "label")
        value = parse_attribute_value(attributes, "value")
        if label is None and value is None:
            warnings.append(
                ValidationIssue(
                    path=path,
                    line=item_line,
                    level="WARN",
                    message=f"`<TabItem>` #{position} has no label or value; a generated label is used.",
                )
            )

        if extract_first_fenced_code_block(match.group("content")) is None:
            errors.append(
                ValidationIssue(
                    path=path,
                    line=item_line,
                    level="ERROR",
                    message=(
                        f"`<TabItem>` #{position} has no fenced code block;"
                        f" group `{group_id}` is left as written."
                    ),
                )
            )

        if "default" in attributes:
            default_count += 1

        tab_value = sanitize_identifier(value or label or f"Tab {position}")
        if tab_value in seen_values:
            warnings.append(
                ValidationIssue(
                    path=path,
                    line=item_line,
                    level="WARN",
                    message=(
                        f"tab value `{tab_value}` repeats `<TabItem>` #{seen_values[tab_value]}"
                        f" in group `{group_id}`; their element ids collide."
                    ),
                )
            )
        else:
            seen_values[tab_value] = position

    if default_count > 1:
        warnings.append(
            ValidationIssue(
                path=path,
                line=line,
                level="WARN",
                message=f"group `{group_id}` marks {default_count} tabs as default; only the first is active.",
            )
        )

    return ValidationSummary(errors=errors, warnings=warnings)


def check_content(path: Path, content: str) -> ValidationSummary:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    for block in scan_tabs_blocks(content):
        result = _check_block(path, content, block)
        errors.extend(result.errors)
        warnings.extend(result.warnings)
    return ValidationSummary(errors=errors, warnings=warnings)


def check_file(path: Path) -> ValidationSummary:
    return check_content(path, path.read_text(encoding="utf-8"))


def gather_paths(paths: list[str], root: Path = SOURCE_DIR) -> list[Path]:
    if paths:
        return [Path(p) for p in paths]
    return sorted(root.rglob("*.md"))


def run_check(paths: Iterable[Path]) -> ValidationSummary:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    for path in paths:
        result = check_file(path)
        errors.extend(result.errors)
        warnings.extend(result.warnings)
    return ValidationSummary(errors=errors, warnings=warnings)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="language-tabs-check",
        description="Report <Tabs> groups that would not be rendered as language tabs.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Specific Markdown files to check. Defaults to every .md file under --root.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=SOURCE_DIR,
        help="Book source directory to scan when no paths are given (default: src).",
    )
    args = parser.parse_args(argv)

    summary = run_check(gather_paths(args.paths, args.root))
    for issue in summary.errors:
        print(issue.format())
    for issue in summary.warnings:
        print(issue.format())

    if summary.has_errors():
        print(f"\nCheck failed: {len(summary.errors)} error(s), {len(summary.warnings)} warning(s).")
        return 1

    print(f"Check passed: 0 error(s), {len(summary.warnings)} warning(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
