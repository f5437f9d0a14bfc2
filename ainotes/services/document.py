"""
Conversion between the editor's JSON document format and plain text.

Documents are ProseMirror/Tiptap-style trees:
    {"type": "doc", "content": [{"type": "paragraph", "content": [
        {"type": "text", "text": "..."}]}]}

extract_text() flattens a document for the LLM; markdown_to_document()
turns generated markdown back into a document. The converter is
deliberately line-oriented: headings, flat bullet lists, flat numbered
lists, everything else a paragraph.
"""

import re
from typing import Any, Dict, List

# Nodes followed by a line break when flattened
BLOCK_TYPES = {"paragraph", "heading", "codeBlock"}

_ORDERED_ITEM = re.compile(r"^\d+\.\s")
_HEADING_PREFIXES = (("### ", 3), ("## ", 2), ("# ", 1))


def extract_text(document: Any) -> str:
    """Concatenate the text leaves of a document.

    Args:
        document: Document tree (dict) or None.

    Returns:
        Plain text with a newline after every block-level node, stripped.
    """
    parts: List[str] = []

    def traverse(node: Any) -> None:
        if not isinstance(node, dict):
            return
        text = node.get("text")
        if isinstance(text, str):
            parts.append(text)
        if node.get("type") == "hardBreak":
            parts.append("\n")
        for child in node.get("content") or []:
            traverse(child)
            if isinstance(child, dict) and child.get("type") in BLOCK_TYPES:
                parts.append("\n")

    traverse(document)
    return "".join(parts).strip()


def _text_content(text: str) -> List[Dict[str, Any]]:
    # Empty text nodes are invalid in the editor schema
    return [{"type": "text", "text": text}] if text else []


def _paragraph(text: str) -> Dict[str, Any]:
    return {"type": "paragraph", "content": _text_content(text)}


def _list_item(text: str) -> Dict[str, Any]:
    return {"type": "listItem", "content": [_paragraph(text)]}


def _is_bullet(line: str) -> bool:
    return line.startswith("- ") or line.startswith("* ")


def markdown_to_document(markdown: str) -> Dict[str, Any]:
    """Convert markdown-like text to a document tree.

    Blank lines are skipped. Contiguous bullet lines form one bulletList,
    contiguous ``N.`` lines one orderedList. A bare marker such as ``# `` or
    ``- `` still opens its block, with no text node inside.
    """
    lines = markdown.replace("\r\n", "\n").split("\n")
    content: List[Dict[str, Any]] = []
    i = 0

    while i < len(lines):
        line = lines[i]

        if not line.strip():
            i += 1
            continue

        heading_level = None
        for prefix, level in _HEADING_PREFIXES:
            if line.startswith(prefix):
                heading_level = level
                break

        if heading_level is not None:
            content.append({
                "type": "heading",
                "attrs": {"level": heading_level},
                "content": _text_content(line[heading_level + 1:].strip()),
            })
            i += 1
        elif _is_bullet(line):
            items = []
            while i < len(lines) and _is_bullet(lines[i]):
                items.append(_list_item(lines[i][2:].strip()))
                i += 1
            content.append({"type": "bulletList", "content": items})
        elif _ORDERED_ITEM.match(line):
            items = []
            while i < len(lines) and _ORDERED_ITEM.match(lines[i]):
                items.append(_list_item(_ORDERED_ITEM.sub("", lines[i], count=1).strip()))
                i += 1
            content.append({"type": "orderedList", "content": items})
        else:
            content.append(_paragraph(line.rstrip()))
            i += 1

    return {"type": "doc", "content": content}
