"""Markdown to HTML for model output.

Handles the subset Gemini actually produces: ATX headings, paragraphs,
fenced code blocks, bullet and numbered lists (nested by indentation) and
inline bold, italic and code. Text is parsed line by line into a block list
which is then rendered; all text is HTML-escaped before inline markup is
applied, so model output can never inject tags.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Union

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
_LIST_ITEM = re.compile(r"^(\s*)([-*+]|\d+[.)])\s+(.*)$")
_FENCE = re.compile(r"^\s*```\s*([\w+-]*)")

_CODE_SPAN = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"\*\*(?!\s)(.+?)(?<!\s)\*\*|__(?!\s)(.+?)(?<!\s)__")
_ITALIC = re.compile(
    r"(?<![*\w])\*(?![\s*])(.+?)(?<![\s*])\*(?!\*)|(?<![_\w])_(?![\s_])(.+?)(?<![\s_])_(?![_\w])"
)


@dataclass
class Heading:
    level: int
    text: str


@dataclass
class Paragraph:
    lines: list[str] = field(default_factory=list)


@dataclass
class CodeBlock:
    language: str
    lines: list[str] = field(default_factory=list)


@dataclass
class ListItem:
    text: str
    children: list["ListBlock"] = field(default_factory=list)


@dataclass
class ListBlock:
    ordered: bool
    items: list[ListItem] = field(default_factory=list)


Block = Union[Heading, Paragraph, CodeBlock, ListBlock]


def _indent_width(prefix: str) -> int:
    return len(prefix.expandtabs(4))


class _Parser:
    def __init__(self) -> None:
        self.blocks: list[Block] = []
        self.paragraph: Paragraph | None = None
        self.code: CodeBlock | None = None
        # open lists, innermost last: (indent, block)
        self.lists: list[tuple[int, ListBlock]] = []

    def close_paragraph(self) -> None:
        self.paragraph = None

    def close_lists(self) -> None:
        self.lists = []

    def feed(self, line: str) -> None:
        if self.code is not None:
            if _FENCE.match(line):
                self.code = None
            else:
                self.code.lines.append(line)
            return

        fence = _FENCE.match(line)
        if fence:
            self.close_paragraph()
            self.close_lists()
            self.code = CodeBlock(language=fence.group(1))
            self.blocks.append(self.code)
            return

        if not line.strip():
            self.close_paragraph()
            self.close_lists()
            return

        heading = _HEADING.match(line)
        if heading:
            self.close_paragraph()
            self.close_lists()
            self.blocks.append(Heading(level=len(heading.group(1)), text=heading.group(2)))
            return

        item = _LIST_ITEM.match(line)
        if item:
            self.close_paragraph()
            indent = _indent_width(item.group(1))
            ordered = item.group(2)[0].isdigit()
            self.add_item(indent, ordered, item.group(3))
            return

        if self.lists and line[:1].isspace():
            # indented continuation of the current item
            current = self.lists[-1][1].items[-1]
            current.text = f"{current.text} {line.strip()}"
            return

        self.close_lists()
        if self.paragraph is None:
            self.paragraph = Paragraph()
            self.blocks.append(self.paragraph)
        self.paragraph.lines.append(line.strip())

    def add_item(self, indent: int, ordered: bool, text: str) -> None:
        while self.lists and indent < self.lists[-1][0]:
            self.lists.pop()

        if self.lists and indent == self.lists[-1][0] and self.lists[-1][1].ordered != ordered:
            # a different list kind at the same depth starts a new list
            self.lists.pop()

        if self.lists and indent <= self.lists[-1][0]:
            target = self.lists[-1][1]
        else:
            target = ListBlock(ordered=ordered)
            if self.lists:
                self.lists[-1][1].items[-1].children.append(target)
            else:
                self.blocks.append(target)
            self.lists.append((indent, target))

        target.items.append(ListItem(text=text))


def parse_markdown(text: str) -> list[Block]:
    """Parse markdown text into a list of blocks."""
    parser = _Parser()
    for line in text.splitlines():
        parser.feed(line)
    return parser.blocks


def render_inline(text: str) -> str:
    """Escape ``text`` and apply inline code, bold and italic markup."""
    out = []
    for index, part in enumerate(_CODE_SPAN.split(text)):
        if index % 2:
            out.append(f"<code>{html.escape(part)}</code>")
            continue
        escaped = html.escape(part, quote=False)
        escaped = _BOLD.sub(lambda m: f"<strong>{m.group(1) or m.group(2)}</strong>", escaped)
        escaped = _ITALIC.sub(lambda m: f"<em>{m.group(1) or m.group(2)}</em>", escaped)
        out.append(escaped)
    return "".join(out)


def _render_list(block: ListBlock) -> str:
    tag = "ol" if block.ordered else "ul"
    items = []
    for item in block.items:
        nested = "".join(_render_list(child) for child in item.children)
        items.append(f"<li>{render_inline(item.text)}{nested}</li>")
    return f"<{tag}>{''.join(items)}</{tag}>"


def render_blocks(blocks: list[Block]) -> str:
    """Render parsed blocks to an HTML fragment."""
    out = []
    for block in blocks:
        if isinstance(block, Heading):
            out.append(f"<h{block.level}>{render_inline(block.text)}</h{block.level}>")
        elif isinstance(block, Paragraph):
            out.append(f"<p>{render_inline(' '.join(block.lines))}</p>")
        elif isinstance(block, CodeBlock):
            cls = f' class="language-{block.language}"' if block.language else ""
            code = html.escape("\n".join(block.lines))
            out.append(f"<pre><code{cls}>{code}</code></pre>")
        else:
            out.append(_render_list(block))
    return "\n".join(out)


def render_markdown(text: str) -> str:
    """Convert markdown text to an HTML fragment."""
    return render_blocks(parse_markdown(text))
