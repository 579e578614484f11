"""
Patterns and tag tables used by the content scoring heuristics.
"""

from __future__ import annotations

import re
from typing import Dict, FrozenSet

# --- Class / id patterns ---

UNLIKELY_CANDIDATES = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|footer|gdpr|header|"
    r"legends|menu|related|remark|replies|rss|shoutbox|sidebar|skyscraper|social|sponsor|supplemental|"
    r"ad-break|agegate|pagination|pager|popup|yom-remote",
    re.IGNORECASE,
)
OK_MAYBE_CANDIDATE = re.compile(r"and|article|body|column|content|main|mathjax|shadow", re.IGNORECASE)
POSITIVE = re.compile(
    r"article|body|content|entry|hentry|h-entry|main|page|pagination|post|text|blog|story",
    re.IGNORECASE,
)
NEGATIVE = re.compile(
    r"-ad-|hidden|^hid$| hid$| hid |^hid |banner|combx|comment|com-|contact|footer|gdpr|masthead|media|meta|"
    r"outbrain|promo|related|scroll|share|shoutbox|sidebar|skyscraper|sponsor|shopping|tags|widget",
    re.IGNORECASE,
)
SHARE_ELEMENTS = re.compile(r"(\b|_)(share|sharedaddy|social)(\b|_)", re.IGNORECASE)
NAVIGATION_HINTS = re.compile(r"nav|navbar|menu|breadcrumbs?|sidebar|widget", re.IGNORECASE)
# Generic page-layout wrappers that often sit around the real article body.
LAYOUT_CONTAINER_HINTS = re.compile(r"content|container|main|column|outer|inner|wrapper", re.IGNORECASE)
ARTICLE_BODY_HINTS = re.compile(r"article|post|entry|body|story|text|blog", re.IGNORECASE)

# --- Text patterns ---

COMMAS = re.compile("[\u002C\u060C\uFE50\uFE10\uFE11\u2E41\u2E34\u2E32\uFF0C]")
SENTENCE_END = re.compile(r"\.( |$)")
AD_WORDS = re.compile(
    r"^(ad(vertising|vertisement)?|pub(licité)?|werb(ung)?|广告|Реклама|Anuncio)$",
    re.IGNORECASE,
)
LOADING_WORDS = re.compile(r"^((loading|正在加载|Загрузка|chargement|cargando)(…|\.\.\.)?)$", re.IGNORECASE)

# --- Roles ---

UNLIKELY_ROLES: FrozenSet[str] = frozenset(
    {"menu", "menubar", "complementary", "navigation", "alert", "alertdialog", "dialog"}
)

# --- Tag tables ---

SEED_TAGS: FrozenSet[str] = frozenset({"p", "td", "pre"})
PARAGRAPH_LIKE_TAGS: FrozenSet[str] = frozenset({"div", "section"})

DIV_TO_P_ELEMS: FrozenSet[str] = frozenset({"blockquote", "dl", "div", "img", "ol", "p", "pre", "table", "ul"})

TAG_BASE_WEIGHTS: Dict[str, float] = {
    "article": 8.0,
    "section": 8.0,
    "p": 5.0,
    "pre": 3.0,
    "td": 3.0,
    "blockquote": 3.0,
    "address": -3.0,
    "form": -3.0,
    "table": -3.0,
    "ul": -3.0,
    "ol": -3.0,
    "dl": -3.0,
    "dd": -3.0,
    "dt": -3.0,
    "li": -3.0,
    "h1": -5.0,
    "h2": -5.0,
    "h3": -5.0,
    "h4": -5.0,
    "h5": -5.0,
    "h6": -5.0,
    "th": -5.0,
}
DIV_WEIGHT_PARAGRAPH = 5.0
DIV_WEIGHT_BLOCK = 2.0

CONDITIONALLY_CLEANED_TAGS = ("form", "fieldset", "table", "ul", "ol", "div", "section")
FORM_CONTROL_TAGS = ("fieldset", "input", "textarea", "select", "button", "link")
# Media kept when a container around it is removed.
PRESERVED_MEDIA_TAGS = ("img", "picture", "video", "iframe")
PRESENTATIONAL_ATTRIBUTES = (
    "align",
    "background",
    "bgcolor",
    "border",
    "cellpadding",
    "cellspacing",
    "frame",
    "hspace",
    "rules",
    "style",
    "valign",
    "vspace",
)
SIZE_ATTRIBUTE_TAGS = frozenset({"table", "th", "td", "hr", "pre"})
URL_ATTRIBUTES = ("href", "src", "poster")
SIBLING_BLOCK_TAGS = frozenset({"div", "section", "article", "ul", "ol", "table"})
SEMANTIC_CONTAINER_TAGS = frozenset({"article", "section", "main"})
