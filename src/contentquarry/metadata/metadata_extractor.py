"""
Metadata Extractor - priority chain over structured data and the DOM

Sources are consulted from most to least trustworthy: JSON-LD, OpenGraph,
Twitter Cards, Dublin Core, plain meta tags and finally the document itself
(``<title>``, ``<html lang>``, ``<html dir>``, favicon links). A lower tier
only fills fields that are still empty. The DOM byline scan is the one
source allowed to replace an existing value.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..dom.urls import resolve_url
from ..dom.utils import ancestors, attr, class_and_id, inner_text
from ..exceptions import InvalidURLError
from .author_extractor import AuthorExtractor
from .date_extractor import DateExtractor
from .structured_data_parser import SchemaOrgParser, StructuredDataParser

logger = logging.getLogger(__name__)

MIN_EXCERPT_LENGTH = 25
TITLE_SEPARATORS = (" | ", " - ", " – ", " — ", " » ", ": ")

_NON_EXCERPT = re.compile(r"hatnote|navbox|nav|breadcrumb|menu|caption|byline|share|related", re.IGNORECASE)
_NON_EXCERPT_ROLES = frozenset({"navigation", "note", "doc-subtitle"})
_DIRECTIONS = frozenset({"ltr", "rtl", "auto"})
_ICON_RELS = ("icon", "shortcut icon", "apple-touch-icon")


@dataclass
class MetadataRecord:
    """Article metadata, filled at most once per field by the priority chain."""

    title: Optional[str] = None
    byline: Optional[str] = None
    excerpt: Optional[str] = None
    site_name: Optional[str] = None
    published_time: Optional[str] = None
    language: Optional[str] = None
    direction: Optional[str] = None
    image: Optional[str] = None
    favicon: Optional[str] = None

    sources: Dict[str, str] = field(default_factory=dict)

    def fill(self, name: str, value: Optional[str], source: str) -> bool:
        """Set ``name`` to ``value`` unless it is already set. Returns whether it was set."""
        if name == "sources" or not hasattr(self, name):
            raise AttributeError(f"Unknown metadata field: {name}")
        if not value or getattr(self, name) is not None:
            return False
        setattr(self, name, value)
        self.sources[name] = source
        return True

    def override_byline(self, value: str, source: str) -> None:
        self.byline = value
        self.sources["byline"] = source

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "sources"}


def collect_json_ld(soup: BeautifulSoup) -> List[Dict[str, Any]]:
    """Collect JSON-LD objects; must be called before scripts are removed."""
    return SchemaOrgParser.parse_json_ld(soup)


def clean_title(title: str, site_name: Optional[str] = None) -> str:
    """Drop the site name segment from a ``<title>`` such as ``"Story | Site"``."""
    title = re.sub(r"\s+", " ", title).strip()
    position = -1
    separator = ""
    for candidate in TITLE_SEPARATORS:
        index = title.rfind(candidate)
        if index > position:
            position = index
            separator = candidate
    if position <= 0:
        return title

    head = title[:position].strip()
    tail = title[position + len(separator) :].strip()
    if not head or not tail:
        return title

    if site_name:
        site = site_name.strip().lower()
        if tail.lower() == site:
            return head
        if head.lower() == site:
            return tail

    longer = head if len(head) >= len(tail) else tail
    if len(longer.split()) < 2:
        return title
    return longer


class MetadataExtractor:
    """
    Builds a ``MetadataRecord`` for a document without mutating its tree.
    """

    def __init__(self) -> None:
        self.structured_parser = StructuredDataParser()
        self.date_extractor = DateExtractor()
        self.author_extractor = AuthorExtractor()

    def extract(
        self,
        soup: BeautifulSoup,
        json_ld: Optional[List[Dict[str, Any]]] = None,
        url: Optional[str] = None,
    ) -> MetadataRecord:
        record = MetadataRecord()
        descriptions: List[str] = []

        for source, tier in self.structured_parser.parse_tiers(soup, json_ld):
            for name, value in tier.items():
                if name == "excerpt":
                    descriptions.append(value)
                elif name == "published_time":
                    record.fill(name, self.date_extractor.normalize(value), source)
                else:
                    record.fill(name, value, source)

        self._fill_from_document(record, soup)

        byline = self.author_extractor.extract_byline(soup)
        if byline:
            record.override_byline(byline, "dom")

        excerpt = self.extract_excerpt(soup)
        if excerpt:
            record.fill("excerpt", excerpt, "paragraph")
        elif descriptions:
            record.fill("excerpt", descriptions[0], "description")

        if url:
            record.image = self._resolve(url, record.image)
            record.favicon = self._resolve(url, record.favicon)

        logger.debug(f"Metadata sources: {record.sources}")
        return record

    def _fill_from_document(self, record: MetadataRecord, soup: BeautifulSoup) -> None:
        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            raw_title = title_tag.get_text().strip()
            if raw_title:
                record.fill("title", clean_title(raw_title, record.site_name), "title_tag")

        html = soup.find("html")
        if isinstance(html, Tag):
            record.fill("language", attr(html, "lang").strip() or None, "html")
            direction = attr(html, "dir").strip().lower()
            if direction in _DIRECTIONS:
                record.fill("direction", direction, "html")

        record.fill("favicon", self.extract_favicon(soup), "link")

    @staticmethod
    def extract_favicon(soup: BeautifulSoup) -> Optional[str]:
        for link in soup.find_all("link", href=True):
            rel = attr(link, "rel").strip().lower()
            if rel in _ICON_RELS or "icon" in rel.split():
                return attr(link, "href").strip() or None
        return None

    def extract_excerpt(self, soup: BeautifulSoup) -> Optional[str]:
        """Return the text of the first substantial, non-navigational paragraph."""
        body = soup.body or soup
        for paragraph in body.find_all("p"):
            text = inner_text(paragraph)
            if len(text) < MIN_EXCERPT_LENGTH:
                continue
            if any(self._is_navigational(node) for node in (paragraph, *ancestors(paragraph))):
                continue
            return text
        return None

    @staticmethod
    def _is_navigational(tag: Tag) -> bool:
        if tag.name == "body":
            return False
        if tag.name == "nav":
            return True
        if attr(tag, "role").strip().lower() in _NON_EXCERPT_ROLES:
            return True
        return bool(_NON_EXCERPT.search(class_and_id(tag)))

    @staticmethod
    def _resolve(url: str, value: Optional[str]) -> Optional[str]:
        if not value:
            return value
        try:
            return resolve_url(url, value)
        except InvalidURLError as e:
            logger.warning(f"Could not resolve metadata URL {value!r}: {e}")
            return value
