from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Iterator

TABS_OPEN_MARKER = "<Tabs"
TABS_CLOSE_MARKER = "</Tabs>"

DEFAULT_GROUP_ID = "language-tabs-group"
FALLBACK_IDENTIFIER = "language-tab"
FALLBACK_CODE_LANGUAGE = "text"

GROUP_ID_PATTERN = re.compile(r'groupId\s*=\s*"([^"]+)"')
TAB_ITEM_PATTERN = re.compile(
    r"<TabItem(?P<attributes>[^>]*)>(?P<content>.*?)</TabItem>", re.DOTALL
)
FENCED_CODE_PATTERN = re.compile(
    r"```(?P<language>[^\r\n`]*)\r?\n(?P<code>.*?)\r?\n```", re.DOTALL
)
NON_IDENTIFIER_RUN = re.compile(r"[^A-Za-z0-9]+")


@dataclass(frozen=True)
class TabItem:
    label: str
    value: str
    is_default: bool
    code_language: str
    code_content: str


@dataclass(frozen=True)
class TabsBlock:
    """One `<Tabs>` region found by the scanner.

    ``end`` is exclusive. For an unterminated block it is the end of the text and
    ``open_tag``/``inner_content`` are empty.
    """

    start: int
    end: int
    open_tag: str
    inner_content: str
    terminated: bool = True


def sanitize_identifier(raw_identifier: str) -> str:
    sanitized = NON_IDENTIFIER_RUN.sub("-", raw_identifier).lower().strip("-")
    return sanitized or FALLBACK_IDENTIFIER


def escape_text(text: str) -> str:
    return html.escape(text, quote=False)


def escape_attribute(value: str) -> str:
    return html.escape(value, quote=True)


def parse_attribute_value(attribute_source: str, attribute_name: str) -> str | None:
    pattern = rf'{re.escape(attribute_name)}\s*=\s*"([^"]+)"'
    match = re.search(pattern, attribute_source)
    if not match:
        return None
    return match.group(1)


def parse_group_id(open_tag: str) -> str:
    match = GROUP_ID_PATTERN.search(open_tag)
    if not match:
        return DEFAULT_GROUP_ID
    return match.group(1)


def extract_first_fenced_code_block(content: str) -> tuple[str, str] | None:
    match = FENCED_CODE_PATTERN.search(content)
    if not match:
        return None
    language = match.group("language").strip() or FALLBACK_CODE_LANGUAGE
    return language, match.group("code")


def parse_tab_items(inner_content: str) -> list[TabItem] | None:
    """Parse every ``<TabItem>`` in a block.

    Returns ``None`` when the block has no items or when any item lacks a fenced
    code sample; callers then keep the block as written.
    """
    items: list[TabItem] = []
    for match in TAB_ITEM_PATTERN.finditer(inner_content):
        attributes = match.group("attributes")

        label = (
            parse_attribute_value(attributes, "label")
            or parse_attribute_value(attributes, "value")
            or f"Tab {len(items) + 1}"
        )
        value = parse_attribute_value(attributes, "value") or sanitize_identifier(label)

        code_block = extract_first_fenced_code_block(match.group("content"))
        if code_block is None:
            return None
        code_language, code_content = code_block

        items.append(
            TabItem(
                label=label,
                value=value,
                is_default="default" in attributes,
                code_language=code_language,
                code_content=code_content,
            )
        )
    return items or None


def active_tab_index(items: list[TabItem]) -> int:
    for index, item in enumerate(items):
        if item.is_default:
            return index
    return 0


def _button_id(group_id: str, item: TabItem) -> str:
    return f"language-tabs-{group_id}-button-{sanitize_identifier(item.value)}"


def _panel_id(group_id: str, item: TabItem) -> str:
    return f"language-tabs-{group_id}-panel-{sanitize_identifier(item.value)}"


def _build_button_html(group_id: str, item: TabItem, is_active: bool) -> str:
    return (
        f'<button class="language-tabs-trigger{" is-active" if is_active else ""}" '
        'type="button" role="tab" '
        f'id="{escape_attribute(_button_id(group_id, item))}" '
        f'aria-controls="{escape_attribute(_panel_id(group_id, item))}" '
        f'aria-selected="{"true" if is_active else "false"}" '
        f'data-language-tabs-value="{escape_attribute(item.value)}">'
        f"{escape_text(item.label)}</button>"
    )


def _build_panel_html(group_id: str, item: TabItem, is_active: bool) -> str:
    encoded_code = escape_text(item.code_content).replace("\n", "&#10;")
    return (
        f'<section class="language-tabs-panel{" is-active" if is_active else ""}" '
        'role="tabpanel" '
        f'id="{escape_attribute(_panel_id(group_id, item))}" '
        f'aria-labelledby="{escape_attribute(_button_id(group_id, item))}" '
        f'data-language-tabs-value="{escape_attribute(item.value)}">\n'
        f'<pre><code class="language-{escape_attribute(item.code_language)}">'
        f"{encoded_code}</code></pre>\n"
        "</section>"
    )


def render_tabs_group_html(open_tag: str, inner_content: str) -> str | None:
    items = parse_tab_items(inner_content)
    if items is None:
        return None

    group_id = sanitize_identifier(parse_group_id(open_tag))
    active_index = active_tab_index(items)

    lines: list[str] = [
        f'<div class="language-tabs" data-language-tabs-group="{escape_attribute(group_id)}">',
        '<div class="language-tabs-list" role="tablist" aria-label="Programming language tabs">',
    ]
    lines.extend(
        _build_button_html(group_id, item, index == active_index)
        for index, item in enumerate(items)
    )
    lines.append("</div>")
    lines.append('<div class="language-tabs-panels">')
    lines.extend(
        _build_panel_html(group_id, item, index == active_index)
        for index, item in enumerate(items)
    )
    lines.append("</div>")
    lines.append("</div>")
    return "\n".join(lines) + "\n"


def scan_tabs_blocks(content: str) -> Iterator[TabsBlock]:
    """Yield every top-level ``<Tabs>`` block in source order.

    Blocks are marker pairs: the first ``</Tabs>`` after an open tag closes it.
    An open marker without a closing ``>`` or ``</Tabs>`` yields one unterminated
    block covering the rest of the text and ends the scan.
    """
    position = 0
    while True:
        start = content.find(TABS_OPEN_MARKER, position)
        if start == -1:
            return

        open_tag_end = content.find(">", start)
        close_start = -1
        if open_tag_end != -1:
            close_start = content.find(TABS_CLOSE_MARKER, open_tag_end + 1)
        if close_start == -1:
            yield TabsBlock(
                start=start,
                end=len(content),
                open_tag="",
                inner_content="",
                terminated=False,
            )
            return

        end = close_start + len(TABS_CLOSE_MARKER)
        yield TabsBlock(
            start=start,
            end=end,
            open_tag=content[start : open_tag_end + 1],
            inner_content=content[open_tag_end + 1 : close_start],
        )
        position = end


def transform_tabs_blocks(content: str) -> str:
    output: list[str] = []
    position = 0
    for block in scan_tabs_blocks(content):
        output.append(content[position : block.start])
        rendered = None
        if block.terminated:
            rendered = render_tabs_group_html(block.open_tag, block.inner_content)
        if rendered is None:
            output.append(content[block.start : block.end])
        else:
            output.append(f"\n{rendered.strip()}\n\n")
        position = block.end
    output.append(content[position:])
    return "".join(output)
