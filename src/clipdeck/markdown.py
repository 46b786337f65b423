"""Line-oriented markdown to HTML conversion for "paste as rich text"."""

import re

_HEADING = re.compile(r"^(#{1,3}) (.*)$")
_ORDERED_ITEM = re.compile(r"^\d+\. (.*)$")
_HORIZONTAL_RULES = ("---", "***")

# Code spans and links are tokenised first so their contents escape emphasis.
_INLINE_TOKEN = re.compile(r"`([^`]+)`|\[([^\]]+)\]\(([^)\s]+)\)")
# Delimiters must hug their text, and "__" must not sit inside a word.
_BOLD_ITALIC = re.compile(r"\*\*\*(?!\s)(.+?)(?<!\s)\*\*\*")
_BOLD = re.compile(r"\*\*(?!\s)(.+?)(?<!\s)\*\*|(?<!\w)__(?!\s)(.+?)(?<!\s)__(?!\w)")
_ITALIC = re.compile(r"\*(?!\s)(.+?)(?<!\s)\*")


def escape_html(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _emphasis(text: str) -> str:
    text = _BOLD_ITALIC.sub(r"<strong><em>\1</em></strong>", text)
    text = _BOLD.sub(lambda m: f"<strong>{m.group(1) or m.group(2)}</strong>", text)
    return _ITALIC.sub(r"<em>\1</em>", text)


def render_inline(text: str) -> str:
    """Escape text and convert inline code, links, bold and italic."""
    parts = []
    last = 0
    for match in _INLINE_TOKEN.finditer(text):
        parts.append(_emphasis(escape_html(text[last:match.start()])))
        code, label, url = match.groups()
        if code is not None:
            parts.append(f"<code>{escape_html(code)}</code>")
        else:
            parts.append(f'<a href="{escape_html(url)}">{_emphasis(escape_html(label))}</a>')
        last = match.end()
    parts.append(_emphasis(escape_html(text[last:])))
    return "".join(parts)


class _Renderer:
    def __init__(self):
        self.blocks: list[str] = []
        self.list_tag: str | None = None
        self.list_items: list[str] = []
        self.code_lines: list[str] | None = None

    def close_list(self) -> None:
        if self.list_tag is None:
            return
        items = "".join(f"<li>{item}</li>" for item in self.list_items)
        self.blocks.append(f"<{self.list_tag}>{items}</{self.list_tag}>")
        self.list_tag = None
        self.list_items = []

    def add_list_item(self, tag: str, text: str) -> None:
        if self.list_tag != tag:
            self.close_list()
            self.list_tag = tag
        self.list_items.append(render_inline(text))

    def close_code(self) -> None:
        code = "\n".join(escape_html(line) for line in self.code_lines)
        self.blocks.append(f"<pre><code>{code}</code></pre>")
        self.code_lines = None

    def feed(self, line: str) -> None:
        stripped = line.strip()

        if self.code_lines is not None:
            if stripped.startswith("```"):
                self.close_code()
            else:
                self.code_lines.append(line)
            return

        if stripped.startswith("```"):
            self.close_list()
            self.code_lines = []
            return

        if not stripped:
            self.close_list()
            return

        if stripped.startswith("- "):
            self.add_list_item("ul", stripped[2:])
            return

        ordered = _ORDERED_ITEM.match(stripped)
        if ordered:
            self.add_list_item("ol", ordered.group(1))
            return

        self.close_list()

        if stripped in _HORIZONTAL_RULES:
            self.blocks.append("<hr>")
            return

        heading = _HEADING.match(stripped)
        if heading:
            level = len(heading.group(1))
            self.blocks.append(f"<h{level}>{render_inline(heading.group(2))}</h{level}>")
            return

        if stripped.startswith("> "):
            self.blocks.append(f"<blockquote>{render_inline(stripped[2:])}</blockquote>")
            return

        self.blocks.append(f"<p>{render_inline(stripped)}</p>")

    def finish(self) -> str:
        if self.code_lines is not None:
            self.close_code()
        self.close_list()
        return "\n".join(self.blocks)


def markdown_to_html(markdown: str) -> str:
    """Convert markdown to an HTML fragment.

    Supports ATX headings up to level 3, bold, italic, inline code, fenced
    code blocks, links, flat ordered and unordered lists, blockquotes and
    horizontal rules. Anything else becomes a paragraph. A code fence left
    open at the end of the input is closed.
    """
    renderer = _Renderer()
    for line in markdown.split("\n"):
        renderer.feed(line)
    return renderer.finish()
