"""
Data models for scoring candidates and parsed articles.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from bs4.element import Tag


@dataclass(slots=True)
class Candidate:
    """A scored content container.

    ``handle`` addresses ``node`` in the ``NodeIndex`` the candidate was
    scored against; ``initial_score`` is the tag and class weight it started
    with before paragraph scores were added.
    """

    handle: int
    node: Tag
    score: float
    initial_score: float


_CAMEL_CASE_KEYS = {
    "text_content": "textContent",
    "site_name": "siteName",
    "published_time": "publishedTime",
}


@dataclass(slots=True, frozen=True)
class Article:
    """Main content and metadata extracted from one document."""

    title: str | None
    byline: str | None
    content: str
    text_content: str
    length: int
    excerpt: str | None
    site_name: str | None
    published_time: str | None
    language: str | None
    direction: str | None
    image: str | None = None
    favicon: str | None = None

    def __post_init__(self) -> None:
        if self.length != len(self.text_content):
            raise ValueError("length must equal the character count of text_content")

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys of the public result shape."""
        return {_CAMEL_CASE_KEYS.get(key, key): value for key, value in asdict(self).items()}
