"""
Data models for extraction results.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class ExtractResult:
    """Result of HTML content extraction."""

    url: str | None
    text: str
    title: str | None
    images: list[str]
    language: str | None
    score: float  # 1.0 when an article was accepted, 0.0 otherwise
    html: str = ""
    byline: str | None = None
    excerpt: str | None = None
    metadata: dict[str, str | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the result."""
        if not (0.0 <= self.score <= 1.0):
            raise ValueError("Score must be between 0.0 and 1.0")

    @property
    def found(self) -> bool:
        return bool(self.text)
