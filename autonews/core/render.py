"""Render post source text into its display form."""
import html
import re
from typing import List

_LIST_ITEM = re.compile(r"^\s*[-*]\s+(.*)$")


def _render_block(block: str) -> str:
    lines = block.split("\n")
    items = [_LIST_ITEM.match(line) for line in lines]
    if all(items):
        return "<ul>" + "".join(f"<li>{html.escape(m.group(1))}</li>" for m in items) + "</ul>"

    # a lead-in line followed by a list, e.g. "Key drivers:\n- a\n- b"
    first_item = next((i for i, m in enumerate(items) if m), None)
    if first_item and all(items[first_item:]):
        head = _render_block("\n".join(lines[:first_item]))
        return head + _render_block("\n".join(lines[first_item:]))

    return "<p>" + "<br>".join(html.escape(line) for line in lines) + "</p>"


def render_content(content: str) -> str:
    """Paragraphs split on blank lines, single newlines become <br>, dash lines become lists"""
    text = (content or "").replace("\r\n", "\n").strip()
    if not text:
        return ""
    blocks: List[str] = [b.strip("\n") for b in re.split(r"\n\s*\n", text)]
    return "".join(_render_block(b) for b in blocks if b.strip())


def excerpt(content: str, length: int = 180) -> str:
    """First line of the content, cut to length"""
    first_line = (content or "").strip().split("\n")[0]
    if len(first_line) <= length:
        return first_line
    return first_line[:length].rstrip() + "..."
