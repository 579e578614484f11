"""
Async adapter running the readability engine behind the ``Extractor`` protocol.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup

from ..config.config import ParserConfig
from ..dom.document import PARSER
from ..readability.engine import Readability
from ..readability.models import Article
from .models import ExtractResult
from .protocols import Extractor

logger = structlog.get_logger(__name__)


class ReadabilityExtractor(Extractor):
    """Extractor using the built-in readability engine for content extraction."""

    name = "readability"

    def __init__(self, config: Optional[ParserConfig] = None, max_concurrency: int = 4) -> None:
        self.config = config or ParserConfig()
        self.engine = Readability(self.config)
        self.max_concurrency = max_concurrency
        self.logger = logger.bind(component="ReadabilityExtractor")

    async def extract(self, html: str, *, url: str | None = None) -> ExtractResult:
        """Extract content using the readability engine.

        Parsing is CPU-bound and runs in the default thread pool. A document
        without an article yields an empty result; malformed input or URLs
        raise ``InvalidInputError`` / ``InvalidURLError``.

        Args:
            html: HTML content to extract from
            url: Optional base URL used to resolve relative links

        Returns:
            ExtractResult with extracted content
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._extract_sync, html, url)

    async def extract_many(self, documents: Iterable[Tuple[str, Optional[str]]]) -> List[ExtractResult]:
        """Extract ``(html, url)`` pairs concurrently, at most ``max_concurrency`` at a time."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _bounded(html: str, url: Optional[str]) -> ExtractResult:
            async with semaphore:
                return await self.extract(html, url=url)

        return list(await asyncio.gather(*(_bounded(html, url) for html, url in documents)))

    def _extract_sync(self, html: str, url: str | None) -> ExtractResult:
        article = self.engine.parse(html, url)
        if article is None:
            self.logger.info("No article found", url=url)
            return ExtractResult(
                url=url,
                text="",
                title=None,
                images=[],
                language=None,
                score=0.0,
            )
        return self._to_result(article, url)

    def _to_result(self, article: Article, url: str | None) -> ExtractResult:
        content = BeautifulSoup(article.content, PARSER)
        images = [str(img["src"]) for img in content.find_all("img", src=True)]

        return ExtractResult(
            url=url,
            text=article.text_content,
            title=article.title,
            images=images,
            language=article.language,
            score=1.0,
            html=article.content,
            byline=article.byline,
            excerpt=article.excerpt,
            metadata={
                "siteName": article.site_name,
                "publishedTime": article.published_time,
                "direction": article.direction,
                "image": article.image,
                "favicon": article.favicon,
            },
        )
