"""
Protocol shared by the async article extractors.

An extractor never returns ``None``: a page without an article yields an
``ExtractResult`` whose ``found`` is false and whose ``score`` is 0.0.
Malformed documents and base URLs are errors, not empty results.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from .models import ExtractResult


@runtime_checkable
class Extractor(Protocol):
    """Async HTML-to-article strategy."""

    name: str

    async def extract(self, html: str, *, url: str | None = None) -> ExtractResult:
        """Extract the main article of ``html``.

        Args:
            html: HTML document to extract from
            url: Optional base URL used to resolve relative links

        Returns:
            ExtractResult; ``found`` is false when no article met the length threshold

        Raises:
            InvalidInputError: if the document is empty or has no body
            InvalidURLError: if ``url`` is malformed
        """
        ...

    async def extract_many(self, documents: Iterable[Tuple[str, Optional[str]]]) -> List[ExtractResult]:
        """Extract ``(html, url)`` pairs, returning results in input order.

        The first error raised by a document propagates.
        """
        ...
