"""Render the Markdown subset used by celebrity articles to HTML.

Supported: fenced ``json`` blocks (removed), ``#``/``##``/``###`` headings,
``***bold italic***``, ``**bold**``, ``*italic*``, ``[links](url)``,
blockquotes, pipe tables, ``- `` bullet lists, ``---`` rules and
blank-line separated paragraphs. Anything else is paragraph text.

The body is first split into a flat list of blocks and each block is rendered
on its own, so block elements are never wrapped in ``<p>``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

JSON_BLOCK_RE = re.compile(r"```json.*?```", re.DOTALL)
HEADING_RE = re.compile(r"^(#{1,3}) (.+)$")
RULE_RE = re.compile(r"^---$")
BLOCKQUOTE_RE = re.compile(r"^>\s?")
LIST_ITEM_RE = re.compile(r"^- (.+)$")
TABLE_SEPARATOR_RE = re.compile(r"^\|[\s\-:|]+\|$")

BOLD_ITALIC_RE = re.compile(r"\*\*\*(.+?)\*\*\*")
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
ITALIC_RE = re.compile(r"\*(.+?)\*")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

RUN_KINDS = frozenset({"blockquote", "table", "list"})


@dataclass
class Block:
    kind: str
    lines: list[str] = field(default_factory=list)
    level: int = 0


def strip_json_blocks(markdown: str) -> str:
    return JSON_BLOCK_RE.sub("", markdown)


def render_inline(text: str) -> str:
    text = BOLD_ITALIC_RE.sub(r"<strong><em>\1</em></strong>", text)
    text = BOLD_RE.sub(r"<strong>\1</strong>", text)
    text = ITALIC_RE.sub(r"<em>\1</em>", text)
    return LINK_RE.sub(r'<a href="\2">\1</a>', text)


def is_table_row(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) > 1 and stripped.startswith("|") and stripped.endswith("|")


def split_blocks(markdown: str) -> list[Block]:
    blocks: list[Block] = []
    paragraph: list[str] = []
    # Kind of block the previous line went into; a blank line ends every run.
    run_kind: str | None = None

    def flush_paragraph() -> None:
        if paragraph:
            blocks.append(Block("paragraph", list(paragraph)))
            paragraph.clear()

    for line in markdown.split("\n"):
        if not line.strip():
            flush_paragraph()
            run_kind = None
            continue

        heading = HEADING_RE.match(line)
        list_item = LIST_ITEM_RE.match(line)
        level = 0
        if heading:
            kind, text, level = "heading", heading.group(2), len(heading.group(1))
        elif RULE_RE.match(line):
            kind, text = "rule", ""
        elif BLOCKQUOTE_RE.match(line):
            kind, text = "blockquote", BLOCKQUOTE_RE.sub("", line, count=1)
        elif is_table_row(line):
            kind, text = "table", line.strip()
        elif list_item:
            kind, text = "list", list_item.group(1)
        else:
            paragraph.append(line)
            run_kind = "paragraph"
            continue

        flush_paragraph()
        if kind in RUN_KINDS and run_kind == kind:
            blocks[-1].lines.append(text)
        else:
            blocks.append(Block(kind, [text], level=level))
        run_kind = kind

    flush_paragraph()
    return blocks


def split_cells(row: str) -> list[str]:
    return [cell.strip() for cell in row.split("|")[1:-1]]


def render_table(rows: list[str]) -> str:
    content_rows = [row for row in rows if not TABLE_SEPARATOR_RE.match(row)]
    if not content_rows:
        return "<table></table>"

    header, *body = content_rows
    parts = ["<table><thead><tr>"]
    parts.extend(f"<th>{render_inline(cell)}</th>" for cell in split_cells(header))
    parts.append("</tr></thead>")
    if body:
        parts.append("<tbody>")
        for row in body:
            parts.append("<tr>")
            parts.extend(f"<td>{render_inline(cell)}</td>" for cell in split_cells(row))
            parts.append("</tr>")
        parts.append("</tbody>")
    parts.append("</table>")
    return "".join(parts)


def render_block(block: Block) -> str:
    if block.kind == "heading":
        return f"<h{block.level}>{render_inline(block.lines[0])}</h{block.level}>"
    if block.kind == "rule":
        return "<hr>"
    if block.kind == "blockquote":
        return "<blockquote>" + "<br>".join(render_inline(line) for line in block.lines) + "</blockquote>"
    if block.kind == "table":
        return render_table(block.lines)
    if block.kind == "list":
        return "<ul>" + "".join(f"<li>{render_inline(item)}</li>" for item in block.lines) + "</ul>"
    return "<p>" + render_inline("\n".join(block.lines)) + "</p>"


def markdown_to_html(markdown: str) -> str:
    blocks = split_blocks(strip_json_blocks(markdown.replace("\r\n", "\n")))
    return "\n".join(render_block(block) for block in blocks)
