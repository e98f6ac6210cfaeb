"""Tests for the mkdocs-macros hooks in main.py."""
from __future__ import annotations

import unittest

TABS_SOURCE = (
    "Before\n"
    '<Tabs groupId="lang">\n'
    '<TabItem label="Go">\n```go\nx := 1\n```\n</TabItem>\n'
    "</Tabs>\n"
)


class _Env:
    def __init__(self, markdown: str = "", variables: dict | None = None):
        self.filters: dict = {}
        self.markdown = markdown
        self.variables = variables if variables is not None else {}

    def filter(self, fn):
        self.filters[fn.__name__] = fn
        return fn


def _load_main():
    import importlib

    import main as main_module

    return importlib.reload(main_module)


class LanguageTabsFilterTests(unittest.TestCase):
    def setUp(self):
        self.main = _load_main()
        self.env = _Env()
        self.main.define_env(self.env)

    def test_filter_is_registered(self):
        self.assertIn("language_tabs", self.env.filters)

    def test_filter_renders_tabs(self):
        result = self.env.filters["language_tabs"](TABS_SOURCE)
        self.assertIn('<div class="language-tabs" data-language-tabs-group="lang">', result)
        self.assertTrue(result.startswith("Before\n\n<div"))

    def test_filter_empty_input(self):
        self.assertEqual(self.env.filters["language_tabs"](""), "")
        self.assertEqual(self.env.filters["language_tabs"](None), "")


class PostPageHookTests(unittest.TestCase):
    def setUp(self):
        self.main = _load_main()

    def test_rewrites_page_markdown(self):
        env = _Env(markdown=TABS_SOURCE)
        self.main.on_post_page_macros(env)
        self.assertIn("language-tabs-lang-button-go", env.markdown)
        self.assertNotIn("<Tabs", env.markdown)

    def test_disabled_by_extra_variable(self):
        env = _Env(markdown=TABS_SOURCE, variables={"language_tabs": False})
        self.main.on_post_page_macros(env)
        self.assertEqual(env.markdown, TABS_SOURCE)

    def test_leaves_pages_without_tabs_untouched(self):
        env = _Env(markdown="# Title\n\ntext\n")
        self.main.on_post_page_macros(env)
        self.assertEqual(env.markdown, "# Title\n\ntext\n")


if __name__ == "__main__":
    unittest.main()
