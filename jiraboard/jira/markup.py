"""Rendering Jira descriptions: wiki markup to HTML and ADF to text."""

from __future__ import annotations

import re
from typing import Any

_WIKI_BOLD = re.compile(r"\*([^*\n]+)\*")
_WIKI_ITALIC = re.compile(r"_([^_\n]+)_")
_WIKI_MONO = re.compile(r"\{\{([^}]+)\}\}")
_WIKI_LINK = re.compile(r"\[([^|\]]+)\|([^\]]+)\]")
_HEADING = re.compile(r"h([1-6])\. ")

_ESCAPES = str.maketrans(
    {"&": "&amp;", "'": "&#39;", "<": "&lt;", ">": "&gt;", '"': "&#34;"}
)

_UL_OPEN = '<ul style="list-style-type:disc;padding-left:1.5em;margin:0.3em 0">'
_UL2_OPEN = '<ul style="list-style-type:circle;padding-left:1.25em;margin:0.1em 0">'
_OL_OPEN = '<ol style="list-style-type:decimal;padding-left:1.5em;margin:0.3em 0">'
_LI_NESTED = '<li style="margin:0.1em 0">'
_LI = '<li style="margin:0.15em 0">'
_HEADING_SIZES = ("1.4em", "1.25em", "1.1em", "1em", "0.95em", "0.9em")

_ADF_BLOCKS = frozenset(
    {"paragraph", "heading", "bulletList", "orderedList", "listItem", "codeBlock", "hardBreak"}
)


def inline_wiki(text: str) -> str:
    """HTML-escape ``text`` and apply links, bold, italic and monospace."""
    text = text.translate(_ESCAPES)
    text = _WIKI_LINK.sub(r'<a href="\2" target="_blank" rel="noopener">\1</a>', text)
    text = _WIKI_BOLD.sub(r'<strong style="font-weight:bold">\1</strong>', text)
    text = _WIKI_ITALIC.sub(r"<em>\1</em>", text)
    text = _WIKI_MONO.sub(r"<code>\1</code>", text)
    return text


class _Lists:
    """Tracks which list elements are open while rendering."""

    def __init__(self, out: list[str]) -> None:
        self._out = out
        self.ul = False
        self.ol = False
        self.nested = False

    def close_nested(self) -> None:
        if self.nested:
            self._out.append("</ul>")
            self.nested = False

    def close_ul(self) -> None:
        if self.ul:
            self._out.append("</ul>")
            self.ul = False

    def close_ol(self) -> None:
        if self.ol:
            self._out.append("</ol>")
            self.ol = False

    def close_all(self) -> None:
        self.close_nested()
        self.close_ul()
        self.close_ol()

    def open_ul(self) -> None:
        if not self.ul:
            self._out.append(_UL_OPEN)
            self.ul = True

    def open_nested(self) -> None:
        if not self.nested:
            self._out.append(_UL2_OPEN)
            self.nested = True

    def open_ol(self) -> None:
        if not self.ol:
            self._out.append(_OL_OPEN)
            self.ol = True


def wiki_markup_to_html(text: str) -> str:
    """Convert Jira wiki markup to HTML."""
    if not text:
        return ""
    out: list[str] = []
    lists = _Lists(out)
    lines = iter(text.replace("\r\n", "\n").replace("\r", "\n").split("\n"))

    for line in lines:
        if line.startswith("** "):
            lists.close_ol()
            lists.open_ul()
            lists.open_nested()
            out.append(_LI_NESTED + inline_wiki(line[3:]) + "</li>")
            continue
        if line.startswith("* "):
            lists.close_nested()
            lists.close_ol()
            lists.open_ul()
            out.append(_LI + inline_wiki(line[2:]) + "</li>")
            continue
        if line.startswith("# "):
            lists.close_nested()
            lists.close_ul()
            lists.open_ol()
            out.append(_LI + inline_wiki(line[2:]) + "</li>")
            continue
        lists.close_all()

        heading = _HEADING.match(line)
        if heading:
            level = int(heading.group(1))
            raw = line[heading.end():].strip()
            if not raw:
                following = next(lines, None)
                if following is not None:
                    raw = following.strip()
            size = _HEADING_SIZES[level - 1]
            out.append(
                f'<h{level} style="font-weight:bold;font-size:{size};'
                f'margin-top:0.75em;margin-bottom:0.25em">{inline_wiki(raw)}</h{level}>'
            )
            continue

        if line == "----":
            out.append("<hr>")
        elif not line.strip():
            out.append("<br>")
        else:
            out.append("<p>" + inline_wiki(line) + "</p>")

    lists.close_all()
    return "".join(out)


def adf_text(node: dict[str, Any]) -> str:
    """Collect the plain text of an Atlassian Document Format node."""
    node_type = node.get("type")
    if not isinstance(node_type, str):
        node_type = ""
    parts: list[str] = []
    if node_type == "text":
        text = node.get("text")
        if isinstance(text, str):
            parts.append(text)
    content = node.get("content")
    if isinstance(content, list):
        parts.extend(adf_text(child) for child in content if isinstance(child, dict))
    if node_type in _ADF_BLOCKS:
        parts.append("\n")
    return "".join(parts)


def raw_string(value: Any) -> str:
    """Return a decoded JSON value if it is a string, otherwise ``""``."""
    return value if isinstance(value, str) else ""


def raw_description(value: Any) -> str:
    """Render a decoded description field: wiki markup or an ADF document."""
    if value is None:
        return ""
    if isinstance(value, str):
        return wiki_markup_to_html(value)
    if isinstance(value, dict):
        return adf_text(value).strip()
    return ""