"""Content-format classification: markdown scoring and source-language sniffing."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

MARKDOWN_THRESHOLD = 3

_HEADING = re.compile(r"^#{1,3} ")
_ORDERED_ITEM = re.compile(r"^\d+\. ")
_BOLD = re.compile(r"\*\*.+?\*\*|__.+?__")
_LINK = re.compile(r"\[[^\]]*\]\([^)]*\)")

# (score, predicate) per trimmed line; every rule that matches adds its score.
_LINE_RULES = (
    (2, lambda ln: _HEADING.match(ln) is not None),
    (1, lambda ln: ln.startswith("- ")),
    (1, lambda ln: _ORDERED_ITEM.match(ln) is not None),
    (1, lambda ln: _BOLD.search(ln) is not None),
    (2, lambda ln: _LINK.search(ln) is not None),
    (1, lambda ln: ln.startswith("> ")),
    (2, lambda ln: ln.startswith("```")),
)

_SQL_KEYWORDS = (
    "SELECT ", "INSERT ", "UPDATE ", "DELETE ", "CREATE TABLE", "ALTER TABLE",
    "DROP TABLE", "CREATE INDEX",
)
_PYTHON_KEYWORDS = ("def ", "import ", "from ", "class ")
_SWIFT_IMPORTS = ("import Foundation", "import UIKit", "import SwiftUI", "import Cocoa")
_JS_MARKERS = ("function ", "const ", "=> ", "require(", "module.exports", "async ")


class FormatKind(str, Enum):
    OTHER = "other"
    MARKDOWN = "markdown"
    CODE = "code"


@dataclass(frozen=True)
class FormatCategory:
    kind: FormatKind
    language: str | None = None

    OTHER: ClassVar["FormatCategory"]
    MARKDOWN: ClassVar["FormatCategory"]

    @classmethod
    def code(cls, language: str) -> "FormatCategory":
        return cls(FormatKind.CODE, language)

    def __str__(self) -> str:
        if self.kind == FormatKind.CODE:
            return f"code({self.language})"
        return self.kind.value


FormatCategory.OTHER = FormatCategory(FormatKind.OTHER)
FormatCategory.MARKDOWN = FormatCategory(FormatKind.MARKDOWN)


def markdown_score(text: str) -> int:
    score = 0
    for line in text.splitlines():
        ln = line.strip()
        for points, matches in _LINE_RULES:
            if matches(ln):
                score += points
    return score


def is_markdown_content(text: str) -> bool:
    return markdown_score(text) >= MARKDOWN_THRESHOLD


def detect_language(text: str) -> str | None:
    """Guess the source language of text from keywords and shape.

    Returns a language tag such as ``"python"`` or ``"json"``, or None when
    nothing looks like code. Markdown is not considered here.
    """
    trimmed = text.strip()
    if not trimmed:
        return None

    if trimmed[0] in "{[":
        return "json"
    if trimmed.startswith("<"):
        return "xml"

    upper = trimmed.upper()
    for keyword in _SQL_KEYWORDS:
        if upper.startswith(keyword) or f"\n{keyword}" in upper:
            return "sql"

    if trimmed.startswith(("#!/bin/", "#!/usr/bin/env")):
        return "shell"
    if trimmed.startswith(("export ", "alias ")) or "| grep" in trimmed or "$(" in trimmed:
        return "shell"

    if any(marker in trimmed for marker in _SWIFT_IMPORTS):
        return "swift"

    lines = [line.lstrip() for line in trimmed.splitlines()]
    if any(line.startswith(_PYTHON_KEYWORDS) for line in lines):
        return "python"
    if "if __name__" in trimmed or "print(" in trimmed:
        return "python"

    if "func " in trimmed and ("-> " in trimmed or "let " in trimmed or "var " in trimmed):
        return "swift"

    if any(marker in trimmed for marker in _JS_MARKERS):
        return "javascript"
    if "interface " in trimmed and ": " in trimmed:
        return "typescript"

    return None


def classify_text(text: str) -> FormatCategory:
    """Classify text content. Markdown wins over code."""
    if is_markdown_content(text):
        return FormatCategory.MARKDOWN
    language = detect_language(text)
    if language is not None:
        return FormatCategory.code(language)
    return FormatCategory.OTHER
