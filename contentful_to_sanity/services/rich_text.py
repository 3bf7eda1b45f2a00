"""Conversion of Contentful rich text and markdown into Portable Text blocks."""

import hashlib
import logging
import re
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

HEADING_STYLES = {f"heading-{level}": f"h{level}" for level in range(1, 7)}

MARK_TYPES = {
    "bold": "strong",
    "italic": "em",
    "underline": "underline",
    "code": "code",
    "superscript": "sup",
    "subscript": "sub",
}

LIST_TYPES = {
    "unordered-list": "bullet",
    "ordered-list": "number",
}

MARKDOWN_HEADING = re.compile(r"^(#{1,6})\s+(.*)$")
MARKDOWN_BULLET = re.compile(r"^\s*[-*+]\s+(.*)$")
MARKDOWN_NUMBER = re.compile(r"^\s*\d+[.)]\s+(.*)$")


def make_key(*parts: Any) -> str:
    """Deterministic `_key` for an array member."""
    digest = hashlib.md5(".".join(str(p) for p in parts).encode("utf-8"))
    return digest.hexdigest()[:12]


def _span(text: str, marks: List[str], key: str) -> Dict[str, Any]:
    return {"_type": "span", "_key": key, "text": text, "marks": marks}


def _block(style: str, children: List[Dict[str, Any]], key: str, **extra: Any) -> Dict[str, Any]:
    block = {
        "_type": "block",
        "_key": key,
        "style": style,
        "markDefs": [],
        "children": children or [_span("", [], f"{key}-0")],
    }
    block.update(extra)
    return block


class RichTextConverter:
    """
    Converts Contentful rich text documents into Portable Text.

    Embedded entries and assets are resolved through the callables given
    at construction, so the converter itself has no knowledge of the
    export bundle.
    """

    def __init__(
        self,
        link_entry: Callable[[Dict[str, Any]], Optional[Dict[str, Any]]],
        link_asset: Callable[[Dict[str, Any]], Optional[Dict[str, Any]]],
    ):
        self._link_entry = link_entry
        self._link_asset = link_asset

    def convert(self, document: Dict[str, Any], key_prefix: str = "") -> List[Dict[str, Any]]:
        """Convert a rich text `document` node into a list of blocks."""
        if not isinstance(document, dict) or document.get("nodeType") != "document":
            logger.warning("Skipping rich text value that is not a document node")
            return []

        blocks: List[Dict[str, Any]] = []
        for index, node in enumerate(document.get("content", [])):
            blocks.extend(self._convert_node(node, make_key(key_prefix, index)))
        return blocks

    def _convert_node(
        self,
        node: Dict[str, Any],
        key: str,
        list_item: Optional[str] = None,
        level: int = 1,
    ) -> List[Dict[str, Any]]:
        node_type = node.get("nodeType", "")

        if node_type == "paragraph" or node_type in HEADING_STYLES or node_type == "blockquote":
            if node_type == "blockquote":
                # Quotes wrap paragraphs; flatten their inline content
                inline = [child for p in node.get("content", []) for child in p.get("content", [])]
                style = "blockquote"
            else:
                inline = node.get("content", [])
                style = HEADING_STYLES.get(node_type, "normal")
            extra = {"listItem": list_item, "level": level} if list_item else {}
            return [self._text_block(inline, style, key, **extra)]

        if node_type in LIST_TYPES:
            blocks = []
            for index, item in enumerate(node.get("content", [])):
                for child_index, child in enumerate(item.get("content", [])):
                    child_key = make_key(key, index, child_index)
                    if child.get("nodeType") in LIST_TYPES:
                        blocks.extend(self._convert_node(child, child_key, level=level + 1))
                    else:
                        blocks.extend(self._convert_node(
                            child, child_key, list_item=LIST_TYPES[node_type], level=level,
                        ))
            return blocks

        if node_type == "hr":
            return [_block("normal", [_span("---", [], f"{key}-0")], key)]

        if node_type == "embedded-asset-block":
            member = self._link_asset(node.get("data", {}).get("target", {}))
            return [dict(member, _key=key)] if member else []

        if node_type == "embedded-entry-block":
            member = self._link_entry(node.get("data", {}).get("target", {}))
            return [dict(member, _key=key)] if member else []

        logger.debug(f"Unsupported rich text node type: {node_type}")
        return []

    def _text_block(self, inline: List[Dict[str, Any]], style: str, key: str, **extra: Any) -> Dict[str, Any]:
        children: List[Dict[str, Any]] = []
        mark_defs: List[Dict[str, Any]] = []

        def walk(nodes: List[Dict[str, Any]], link_marks: List[str]) -> None:
            for node in nodes:
                node_type = node.get("nodeType")
                if node_type == "text":
                    marks = [MARK_TYPES[m["type"]] for m in node.get("marks", []) if m.get("type") in MARK_TYPES]
                    children.append(_span(node.get("value", ""), marks + link_marks, f"{key}-{len(children)}"))
                elif node_type == "hyperlink":
                    mark_key = f"{key}-link{len(mark_defs)}"
                    mark_defs.append({
                        "_type": "link",
                        "_key": mark_key,
                        "href": node.get("data", {}).get("uri", ""),
                    })
                    walk(node.get("content", []), link_marks + [mark_key])
                elif node_type in ("entry-hyperlink", "asset-hyperlink"):
                    walk(node.get("content", []), link_marks)
                elif node_type == "embedded-entry-inline":
                    member = self._link_entry(node.get("data", {}).get("target", {}))
                    if member:
                        children.append(dict(member, _key=f"{key}-{len(children)}"))

        walk(inline, [])
        block = _block(style, children, key, **extra)
        block["markDefs"] = mark_defs
        return block


def markdown_to_blocks(text: str, key_prefix: str = "") -> List[Dict[str, Any]]:
    """
    Convert markdown text into Portable Text blocks.

    Headings and list items keep their structure; paragraphs are kept as
    plain text without inline marks.
    """
    blocks: List[Dict[str, Any]] = []
    paragraph: List[str] = []

    def flush() -> None:
        if paragraph:
            key = make_key(key_prefix, len(blocks))
            blocks.append(_block("normal", [_span(" ".join(paragraph), [], f"{key}-0")], key))
            paragraph.clear()

    for line in (text or "").splitlines():
        stripped = line.strip()
        if not stripped:
            flush()
            continue

        heading = MARKDOWN_HEADING.match(stripped)
        bullet = MARKDOWN_BULLET.match(line)
        number = MARKDOWN_NUMBER.match(line)

        if heading or bullet or number:
            flush()
            key = make_key(key_prefix, len(blocks))
            if heading:
                style = f"h{len(heading.group(1))}"
                blocks.append(_block(style, [_span(heading.group(2), [], f"{key}-0")], key))
            else:
                match = bullet or number
                blocks.append(_block(
                    "normal",
                    [_span(match.group(1), [], f"{key}-0")],
                    key,
                    listItem="bullet" if bullet else "number",
                    level=1,
                ))
            continue

        paragraph.append(stripped)

    flush()
    return blocks
