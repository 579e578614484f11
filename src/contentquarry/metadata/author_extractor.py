"""
Author Extractor - DOM byline detection

Looks for bylines marked up in the page body (``rel="author"`` links,
``itemprop="author"`` elements and byline-like class names) and validates
that the text plausibly names a person.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..dom.utils import ancestors, attr, class_and_id, inner_text

logger = logging.getLogger(__name__)

MAX_BYLINE_LENGTH = 100

BYLINE = re.compile(r"byline|author|dateline|writtenby|p-author", re.IGNORECASE)

_BYLINE_PREFIX = re.compile(r"^(?:by|written by|author|posted by)\s*[:\-]?\s+", re.IGNORECASE)
_NON_AUTHOR_CONTAINER = re.compile(r"sidebar|related|comment|widget|footer|recommend", re.IGNORECASE)
_NUMERIC_OR_DATE = [
    re.compile(r"^[\d\s/.,:\-]+$"),
    re.compile(r"^\d{4}-\d{2}-\d{2}"),
    re.compile(
        r"^(?:(?:mon|tues|wednes|thurs|fri|satur|sun)day,?\s+)?"
        r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}",
        re.IGNORECASE,
    ),
    re.compile(r"^\d{1,2}\s+(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{4}", re.IGNORECASE),
]


class AuthorExtractor:
    """Finds the article byline in the document body."""

    def extract_byline(self, soup: BeautifulSoup) -> Optional[str]:
        """Return the first plausible byline in document order, or ``None``."""
        body = soup.body
        if body is None:
            return None

        for tag in body.find_all(True):
            if not self._is_byline_node(tag):
                continue
            text = self._byline_text(tag)
            if self.is_valid_byline(text) and not self._in_non_author_container(tag):
                logger.debug(f"Byline found in <{tag.name}>: {text!r}")
                return text
        return None

    def _is_byline_node(self, tag: Tag) -> bool:
        if "author" in attr(tag, "rel").lower().split():
            return True
        if "author" in attr(tag, "itemprop").lower():
            return True
        return bool(BYLINE.search(class_and_id(tag)))

    def _byline_text(self, tag: Tag) -> str:
        if "author" in attr(tag, "itemprop").lower():
            name = tag.find(attrs={"itemprop": "name"})
            if isinstance(name, Tag) and inner_text(name):
                return self.clean_byline(inner_text(name))
        return self.clean_byline(inner_text(tag))

    @staticmethod
    def clean_byline(text: str) -> str:
        """Strip "By " / "Author:" style prefixes and surrounding punctuation."""
        cleaned = _BYLINE_PREFIX.sub("", text.strip())
        return cleaned.strip(" \t\n|,;:-")

    @staticmethod
    def is_valid_byline(text: str) -> bool:
        """Validate if a string looks like a byline rather than a date, number or paragraph."""
        if not text or len(text) >= MAX_BYLINE_LENGTH:
            return False
        if not re.search(r"[^\W\d_]", text):
            return False
        return not any(pattern.match(text) for pattern in _NUMERIC_OR_DATE)

    @staticmethod
    def _in_non_author_container(tag: Tag) -> bool:
        return any(_NON_AUTHOR_CONTAINER.search(class_and_id(ancestor)) for ancestor in ancestors(tag))
