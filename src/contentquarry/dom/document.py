"""
Document loading, node indexing and serialization on top of BeautifulSoup.

The tree itself is owned by the ``BeautifulSoup`` object. ``NodeIndex`` hands
out stable integer handles for its elements so that scoring maps never hold
on to tree structure directly.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Script,
    Stylesheet,
    Tag,
)

from ..exceptions import InvalidInputError

PARSER = "lxml"

# Elements that start a new line when a subtree is rendered as plain text.
BLOCK_TEXT_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "caption",
        "dd",
        "details",
        "dialog",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction, Script, Stylesheet)
_WHITESPACE = re.compile(r"\s+")
_BLOCK_END = object()


def load_document(html: Union[str, bytes]) -> BeautifulSoup:
    """Parse an HTML string or byte string into a mutable tree.

    Raises:
        InvalidInputError: if the input is empty or cannot be parsed.
    """
    if html is None:
        raise InvalidInputError("Document is empty")
    if isinstance(html, bytes):
        if not html.strip():
            raise InvalidInputError("Document is empty")
    elif not isinstance(html, str):
        raise InvalidInputError(f"Unsupported document type: {type(html).__name__}")
    elif not html.strip():
        raise InvalidInputError("Document is empty")

    try:
        soup = BeautifulSoup(html, PARSER)
    except Exception as e:
        raise InvalidInputError(f"Document could not be parsed: {e}") from e

    if soup.find(True) is None:
        raise InvalidInputError("Document contains no elements")
    return soup


class NodeIndex:
    """Arena of the elements below ``root``, addressed by document-order handles.

    Handles double as document positions. Depth is measured from ``<body>``
    (0 for body and its siblings, -1 for ``<html>``).
    """

    def __init__(self, root: Tag) -> None:
        self._nodes: List[Tag] = []
        self._handles: Dict[int, int] = {}
        self._depths: List[int] = []

        raw_depth: Dict[int, int] = {id(root): 0}
        body_depth = 0
        for tag in root.find_all(True):
            depth = raw_depth.get(id(tag.parent), 0) + 1
            raw_depth[id(tag)] = depth
            if tag.name == "body" and not body_depth:
                body_depth = depth
            self._handles[id(tag)] = len(self._nodes)
            self._nodes.append(tag)
            self._depths.append(depth)

        if body_depth:
            self._depths = [depth - body_depth for depth in self._depths]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return id(node) in self._handles and self._nodes[self._handles[id(node)]] is node

    def handle(self, node: Tag) -> int:
        """Return the handle for ``node``; raises ``KeyError`` for unindexed nodes."""
        handle = self._handles[id(node)]
        if self._nodes[handle] is not node:
            raise KeyError(node.name)
        return handle

    def get_handle(self, node: Tag) -> Optional[int]:
        if node not in self:
            return None
        return self._handles[id(node)]

    def node(self, handle: int) -> Tag:
        return self._nodes[handle]

    def depth(self, handle: int) -> int:
        return self._depths[handle]


def to_html(node: Tag, inner: bool = False) -> str:
    """Serialize ``node`` (or only its children when ``inner``) back to HTML."""
    if inner:
        return node.decode_contents()
    return node.decode()


def to_text(node: Tag) -> str:
    """Render ``node`` as plain text.

    Text nodes are concatenated; block-level elements and ``<br>`` become line
    breaks. Each line is whitespace-normalized and blank lines are dropped.
    """
    parts: List[str] = []
    stack: List[object] = list(reversed(list(node.children)))
    while stack:
        item = stack.pop()
        if item is _BLOCK_END:
            parts.append("\n")
        elif isinstance(item, Tag):
            if item.name == "br":
                parts.append("\n")
                continue
            if item.name in BLOCK_TEXT_TAGS:
                parts.append("\n")
                stack.append(_BLOCK_END)
            stack.extend(reversed(list(item.children)))
        elif isinstance(item, (NavigableString, CData)) and not isinstance(item, _SKIPPED_STRINGS):
            parts.append(str(item))

    lines = (_WHITESPACE.sub(" ", line).strip() for line in "".join(parts).split("\n"))
    return "\n".join(line for line in lines if line)
