"""
DOM traversal and measurement helpers shared by the preprocessor, scorer,
selector and cleaner.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional

from bs4.element import Comment, NavigableString, PageElement, Tag

# Phrasing (inline) content.
PHRASING_ELEMS = frozenset(
    {
        "abbr",
        "audio",
        "b",
        "bdo",
        "br",
        "button",
        "cite",
        "code",
        "data",
        "datalist",
        "dfn",
        "em",
        "embed",
        "i",
        "img",
        "input",
        "kbd",
        "label",
        "mark",
        "math",
        "meter",
        "noscript",
        "object",
        "output",
        "progress",
        "q",
        "ruby",
        "samp",
        "script",
        "select",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "textarea",
        "time",
        "var",
        "wbr",
    }
)

MEDIA_TAGS = frozenset({"img", "picture", "video", "audio", "iframe", "svg", "object", "embed", "source"})

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

VIDEO_URL = re.compile(
    r"//(www\.)?((dailymotion|youtube|youtube-nocookie|player\.vimeo|v\.qq|bilibili|live\.bilibili)\.com"
    r"|(archive|upload\.wikimedia)\.org|player\.twitch\.tv)",
    re.IGNORECASE,
)

_HASH_URL = re.compile(r"^#.+")
_MULTI_SPACE = re.compile(r"\s{2,}")
_DISPLAY_NONE = re.compile(r"display\s*:\s*none", re.IGNORECASE)
_VISIBILITY_HIDDEN = re.compile(r"visibility\s*:\s*hidden", re.IGNORECASE)


def attr(tag: Tag, name: str) -> str:
    """Return an attribute as a string, joining multi-valued attributes (class, rel)."""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def class_and_id(tag: Tag) -> str:
    """The ``"<class> <id>"`` string matched against the class/id patterns."""
    return f"{attr(tag, 'class')} {attr(tag, 'id')}"


def inner_text(node: PageElement, normalize_spaces: bool = True) -> str:
    """Trimmed text content of ``node``, optionally with runs of whitespace collapsed."""
    if isinstance(node, Tag):
        text = node.get_text().strip()
    else:
        text = str(node).strip()
    if normalize_spaces:
        return _MULTI_SPACE.sub(" ", text)
    return text


def link_density(tag: Tag) -> float:
    """Share of the text of ``tag`` that sits inside anchors.

    Same-page hash links only count for 30% of their length.
    """
    text_length = len(inner_text(tag))
    if not text_length:
        return 0.0

    link_length = 0.0
    for link in tag.find_all("a"):
        coefficient = 0.3 if _HASH_URL.match(attr(link, "href")) else 1.0
        link_length += len(inner_text(link)) * coefficient
    return link_length / text_length


def is_whitespace(node: PageElement) -> bool:
    """True for whitespace-only text nodes, comments and ``<br>`` elements."""
    if isinstance(node, Tag):
        return node.name == "br"
    if isinstance(node, Comment):
        return True
    return isinstance(node, NavigableString) and not node.strip()


def is_phrasing_content(node: PageElement) -> bool:
    if not isinstance(node, Tag):
        return isinstance(node, NavigableString)
    if node.name in PHRASING_ELEMS:
        return True
    if node.name in ("a", "del", "ins"):
        return all(is_phrasing_content(child) for child in node.children)
    return False


def has_child_block_element(tag: Tag) -> bool:
    """True if any element child of ``tag`` is block-level content."""
    return any(not is_phrasing_content(child) for child in element_children(tag))


def element_children(tag: Tag) -> List[Tag]:
    return [child for child in tag.children if isinstance(child, Tag)]


def next_node(node: Optional[PageElement]) -> Optional[PageElement]:
    """First sibling at or after ``node`` that is not whitespace text."""
    current = node
    while current is not None and not isinstance(current, Tag) and is_whitespace(current):
        current = current.next_sibling
    return current


def ancestors(tag: Tag, max_depth: int = 0) -> Iterator[Tag]:
    """Yield element ancestors of ``tag`` nearest first, stopping before ``<html>``.

    ``max_depth`` of 0 means unlimited.
    """
    depth = 0
    parent = tag.parent
    while isinstance(parent, Tag) and parent.name not in ("html", "[document]"):
        yield parent
        depth += 1
        if max_depth and depth >= max_depth:
            return
        parent = parent.parent


def has_ancestor_tag(tag: Tag, name: str, max_depth: int = 0) -> bool:
    return any(ancestor.name == name for ancestor in ancestors(tag, max_depth))


def is_hidden(tag: Tag) -> bool:
    """True if the element itself is hidden via style, ``hidden`` or ``aria-hidden``."""
    style = attr(tag, "style")
    if style and (_DISPLAY_NONE.search(style) or _VISIBILITY_HIDDEN.search(style)):
        return True
    if tag.has_attr("hidden"):
        return True
    if attr(tag, "aria-hidden").strip().lower() == "true" and "fallback-image" not in attr(tag, "class"):
        return True
    return False


def is_probably_visible(tag: Tag) -> bool:
    """True unless the element or one of its ancestors is hidden."""
    if is_hidden(tag):
        return False
    return not any(is_hidden(ancestor) for ancestor in ancestors(tag))


def has_media(tag: Tag) -> bool:
    return tag.name in MEDIA_TAGS or tag.find(list(MEDIA_TAGS)) is not None


def is_allowed_video(tag: Tag) -> bool:
    """True for embeds whose attributes (or ``<object>`` text) point at a known video host."""
    for value in tag.attrs.values():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        if VIDEO_URL.search(str(value)):
            return True
    return tag.name == "object" and bool(VIDEO_URL.search(tag.get_text()))


def count_tags(tag: Tag, names: Iterable[str]) -> int:
    return len(tag.find_all(list(names)))


def text_density(tag: Tag, names: Iterable[str]) -> float:
    """Share of the text of ``tag`` that sits inside descendants named ``names``."""
    total = len(inner_text(tag))
    if not total:
        return 0.0
    child_text = sum(len(inner_text(child)) for child in tag.find_all(list(names)))
    return child_text / total
