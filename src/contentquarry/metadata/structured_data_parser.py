"""
Structured Data Parser - JSON-LD, OpenGraph, Twitter Cards, Dublin Core

Each parser maps one metadata source onto the article fields (title, byline,
excerpt, site_name, published_time, language, image). The metadata extractor
asks them in priority order and only keeps the first value per field.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

JSON_LD_ARTICLE_TYPES = frozenset(
    {
        "Article",
        "AdvertiserContentArticle",
        "NewsArticle",
        "AnalysisNewsArticle",
        "AskPublicNewsArticle",
        "BackgroundNewsArticle",
        "OpinionNewsArticle",
        "ReportageNewsArticle",
        "ReviewNewsArticle",
        "Report",
        "SatiricalArticle",
        "ScholarlyArticle",
        "MedicalScholarlyArticle",
        "SocialMediaPosting",
        "BlogPosting",
        "LiveBlogPosting",
        "DiscussionForumPosting",
        "TechArticle",
        "APIReference",
    }
)

_URL_LIKE = re.compile(r"^(https?:)?//", re.IGNORECASE)
_CDATA = re.compile(r"^\s*<!\[CDATA\[|\]\]>\s*$")

Fields = Dict[str, str]


def collect_meta(soup: BeautifulSoup) -> Dict[str, str]:
    """Map every ``<meta>`` key (property, name or http-equiv, lowercased) to its first content.

    A ``property`` attribute may hold several space-separated keys.
    """
    meta: Dict[str, str] = {}
    for tag in soup.find_all("meta"):
        content = tag.get("content")
        if not isinstance(content, str) or not content.strip():
            continue
        keys: List[str] = []
        for attribute in ("property", "name", "http-equiv", "itemprop"):
            value = tag.get(attribute)
            if isinstance(value, list):
                value = " ".join(value)
            if value:
                keys.extend(value.lower().split())
        for key in keys:
            meta.setdefault(key, content.strip())
    return meta


def _first(meta: Dict[str, str], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = meta.get(key)
        if value:
            return value
    return None


def _pick(meta: Dict[str, str], mapping: Dict[str, Iterable[str]]) -> Fields:
    fields: Fields = {}
    for field_name, keys in mapping.items():
        value = _first(meta, keys)
        if value:
            fields[field_name] = value
    return fields


class SchemaOrgParser:
    """Parser for Schema.org JSON-LD blocks."""

    @staticmethod
    def parse_json_ld(soup: BeautifulSoup) -> List[Dict[str, Any]]:
        """Return every JSON-LD object of the document, with ``@graph`` containers flattened.

        Must run before scripts are stripped from the tree.
        """
        json_ld_data: List[Dict[str, Any]] = []

        for script in soup.find_all("script", type="application/ld+json"):
            json_text = _CDATA.sub("", script.string or script.get_text() or "").strip()
            if not json_text:
                continue
            try:
                data = json.loads(json_text)
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON-LD: {e}")
                continue

            stack = data if isinstance(data, list) else [data]
            for item in stack:
                if not isinstance(item, dict):
                    continue
                graph = item.get("@graph")
                if isinstance(graph, list):
                    json_ld_data.extend(node for node in graph if isinstance(node, dict))
                else:
                    json_ld_data.append(item)

        return json_ld_data

    @staticmethod
    def is_article(item: Dict[str, Any]) -> bool:
        schema_type = item.get("@type")
        if isinstance(schema_type, str):
            return schema_type in JSON_LD_ARTICLE_TYPES
        if isinstance(schema_type, list):
            return any(isinstance(value, str) and value in JSON_LD_ARTICLE_TYPES for value in schema_type)
        return False

    def extract_fields(self, json_ld_data: List[Dict[str, Any]]) -> Fields:
        """Extract article fields from the first JSON-LD object of an article type."""
        item = next((entry for entry in json_ld_data if self.is_article(entry)), None)
        if item is None:
            return {}

        fields: Fields = {}
        title = self._text(item.get("headline")) or self._text(item.get("name"))
        if title:
            fields["title"] = title

        authors = self.extract_author_names(item.get("author"))
        if authors:
            fields["byline"] = ", ".join(authors)

        description = self._text(item.get("description"))
        if description:
            fields["excerpt"] = description

        publisher = item.get("publisher")
        if isinstance(publisher, dict):
            site_name = self._text(publisher.get("name"))
            if site_name:
                fields["site_name"] = site_name

        published = self._text(item.get("datePublished"))
        if published:
            fields["published_time"] = published

        language = self._text(item.get("inLanguage"))
        if language:
            fields["language"] = language

        image = self._image_url(item.get("image"))
        if image:
            fields["image"] = image

        return fields

    @staticmethod
    def extract_author_names(author_data: Any) -> List[str]:
        """Extract author names from Schema.org author data."""
        names: List[str] = []
        entries = author_data if isinstance(author_data, list) else [author_data]
        for author in entries:
            if isinstance(author, str) and author.strip():
                names.append(author.strip())
            elif isinstance(author, dict) and isinstance(author.get("name"), str) and author["name"].strip():
                names.append(author["name"].strip())
        return names

    @staticmethod
    def _text(value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    def _image_url(self, image: Any) -> Optional[str]:
        if isinstance(image, list):
            image = image[0] if image else None
        if isinstance(image, dict):
            image = image.get("url") or image.get("contentUrl")
        return self._text(image)


class OpenGraphParser:
    """Parser for OpenGraph (``og:*``) and ``article:*`` metadata."""

    @staticmethod
    def parse(meta: Dict[str, str]) -> Fields:
        fields = _pick(
            meta,
            {
                "title": ["og:title"],
                "excerpt": ["og:description"],
                "site_name": ["og:site_name"],
                "published_time": ["article:published_time"],
                "language": ["og:locale"],
                "image": ["og:image", "og:image:url", "og:image:secure_url"],
            },
        )
        author = meta.get("article:author")
        if author and not _URL_LIKE.match(author):
            fields["byline"] = author
        return fields


class TwitterCardParser:
    """Parser for Twitter Card metadata."""

    @staticmethod
    def parse(meta: Dict[str, str]) -> Fields:
        return _pick(
            meta,
            {
                "title": ["twitter:title"],
                "byline": ["twitter:creator"],
                "excerpt": ["twitter:description"],
                "image": ["twitter:image", "twitter:image:src"],
            },
        )


class DublinCoreParser:
    """Parser for Dublin Core (``dc.*``, ``dcterms.*``, ``dcterm:*``) metadata."""

    PREFIXES = ("dc.", "dcterms.", "dcterm:")

    @classmethod
    def parse(cls, meta: Dict[str, str]) -> Fields:
        def keys(*names: str) -> List[str]:
            return [prefix + name for name in names for prefix in cls.PREFIXES]

        return _pick(
            meta,
            {
                "title": keys("title"),
                "byline": keys("creator"),
                "excerpt": keys("description"),
                "published_time": keys("date", "created", "date.created", "issued"),
                "language": keys("language"),
            },
        )


class StandardMetaParser:
    """Parser for plain HTML meta tags."""

    @staticmethod
    def parse(meta: Dict[str, str]) -> Fields:
        return _pick(
            meta,
            {
                "title": ["title"],
                "byline": ["author"],
                "excerpt": ["description"],
                "site_name": ["application-name"],
                "published_time": ["date", "publish_date", "publication_date", "pubdate"],
                "language": ["content-language", "language"],
            },
        )


class StructuredDataParser:
    """
    Runs every structured metadata parser over a document.

    ``parse_tiers`` returns one field mapping per source, highest priority first.
    """

    def __init__(self) -> None:
        self.schema_parser = SchemaOrgParser()
        self.og_parser = OpenGraphParser()
        self.twitter_parser = TwitterCardParser()
        self.dublin_core_parser = DublinCoreParser()
        self.meta_parser = StandardMetaParser()

    def parse_tiers(
        self, soup: BeautifulSoup, json_ld: Optional[List[Dict[str, Any]]] = None
    ) -> List[tuple[str, Fields]]:
        meta = collect_meta(soup)
        tiers: List[tuple[str, Fields]] = []
        if json_ld:
            try:
                tiers.append(("json_ld", self.schema_parser.extract_fields(json_ld)))
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"Schema field extraction error: {e}")
        tiers.append(("open_graph", self.og_parser.parse(meta)))
        tiers.append(("twitter", self.twitter_parser.parse(meta)))
        tiers.append(("dublin_core", self.dublin_core_parser.parse(meta)))
        tiers.append(("meta", self.meta_parser.parse(meta)))
        return tiers
