from __future__ import annotations

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from language_tabs.rewriter import transform_tabs_blocks

# After normalize_whitespace (30), before fenced_code_block (25) and html_block (20).
PREPROCESSOR_PRIORITY = 27


class LanguageTabsPreprocessor(Preprocessor):
    def run(self, lines: list[str]) -> list[str]:
        source = "\n".join(lines)
        if "<Tabs" not in source:
            return lines
        return transform_tabs_blocks(source).split("\n")


class LanguageTabsExtension(Extension):
    def __init__(self, **kwargs) -> None:
        self.config = {
            "enabled": [True, "Rewrite <Tabs> groups - Default: True"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        if not self.getConfig("enabled"):
            return
        md.preprocessors.register(
            LanguageTabsPreprocessor(md), "language_tabs", PREPROCESSOR_PRIORITY
        )


def makeExtension(**kwargs) -> LanguageTabsExtension:
    return LanguageTabsExtension(**kwargs)
