"""mkdocs-macros module: renders `<Tabs>` code groups as language tabs.

Set ``extra: language_tabs: false`` in ``mkdocs.yml`` to turn the page hook off.
"""
from __future__ import annotations

from language_tabs.rewriter import transform_tabs_blocks

ENABLE_VARIABLE = "language_tabs"


def _is_enabled(env) -> bool:
    variables = getattr(env, "variables", None) or {}
    return variables.get(ENABLE_VARIABLE, True) is not False


def define_env(env) -> None:
    @env.filter
    def language_tabs(markdown_source: str) -> str:
        if not isinstance(markdown_source, str) or not markdown_source:
            return ""
        return transform_tabs_blocks(markdown_source)


def on_post_page_macros(env) -> None:
    if not _is_enabled(env):
        return
    markdown_source = getattr(env, "markdown", None)
    if isinstance(markdown_source, str) and markdown_source:
        env.markdown = transform_tabs_blocks(markdown_source)
