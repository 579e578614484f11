"""
The ``Readability`` facade: one call turns an HTML document into an
``Article`` or reports that it has no extractable article.
"""

from __future__ import annotations

import time
from typing import Any, Optional, Union

import structlog
from bs4.element import Tag

from ..config.config import ParserConfig
from ..dom.document import NodeIndex, load_document, to_html, to_text
from ..dom.urls import validate_base_url
from ..dom.utils import ancestors, attr
from ..exceptions import ContentQuarryError, InvalidURLError, NoContentFoundError
from ..metadata.metadata_extractor import MetadataExtractor, MetadataRecord, collect_json_ld
from ..observability.metrics import record_parse
from .cleaner import ContentCleaner
from .flags import RetryState, next_state
from .models import Article
from .preprocessor import Preprocessor
from .scoring import CandidateScorer
from .selector import ArticleSelector

logger = structlog.get_logger(__name__)

_DIRECTIONS = ("ltr", "rtl", "auto")


class Readability:
    """Extracts the main article of HTML documents.

    A ``Readability`` instance only holds read-only configuration and can be
    shared between threads; every ``parse`` call builds its own tree.
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self.preprocessor = Preprocessor()
        self.metadata_extractor = MetadataExtractor()
        self.scorer = CandidateScorer(self.config.thresholds, self.config.link_density_modifier)
        self.selector = ArticleSelector(self.config.thresholds, self.config.nb_top_candidates)

    def parse(self, html: Union[str, bytes], url: Optional[str] = None) -> Optional[Article]:
        """Extract the article of ``html``.

        Returns ``None`` when every retry attempt stayed below the character
        threshold.

        Raises:
            InvalidInputError: if the document is empty or has no body.
            InvalidURLError: if ``url`` is malformed.
        """
        article, _, _ = self._parse(html, url)
        return article

    def parse_or_raise(self, html: Union[str, bytes], url: Optional[str] = None) -> Article:
        """Like ``parse`` but raises ``NoContentFoundError`` instead of returning ``None``."""
        article, attempts, best_length = self._parse(html, url)
        if article is None:
            raise NoContentFoundError(attempts, best_length)
        return article

    def _parse(self, html: Union[str, bytes], url: Optional[str]) -> tuple[Optional[Article], int, int]:
        started = time.perf_counter()
        try:
            article, attempts, best_length = self._run(html, url)
        except InvalidURLError:
            record_parse("invalid_url", 0, time.perf_counter() - started)
            raise
        except ContentQuarryError:
            record_parse("invalid_input", 0, time.perf_counter() - started)
            raise

        duration = time.perf_counter() - started
        if article is None:
            record_parse("no_content", attempts, duration)
        else:
            record_parse("success", attempts, duration, article.length)
        return article, attempts, best_length

    def _run(self, html: Union[str, bytes], url: Optional[str]) -> tuple[Optional[Article], int, int]:
        log = logger.bind(component="readability", document_url=url) if self.config.debug else None
        if url is not None:
            url = validate_base_url(url)
        soup = load_document(html)

        json_ld = [] if self.config.disable_json_ld else collect_json_ld(soup)
        changed = self.preprocessor.process(soup)
        metadata = self.metadata_extractor.extract(soup, json_ld=json_ld, url=url)
        index = NodeIndex(soup)
        cleaner = ContentCleaner(
            thresholds=self.config.thresholds,
            keep_classes=self.config.keep_classes,
            classes_to_preserve=self.config.classes_to_preserve,
            base_url=url,
            link_density_modifier=self.config.link_density_modifier,
        )
        if log:
            log.debug("Document prepared", preprocessed_nodes=changed, indexed_nodes=len(index))

        attempts = 0
        best_length = 0
        state: Optional[RetryState] = RetryState.STRICT
        while state is not None:
            attempts += 1
            flags = state.flags
            candidates = self.scorer.score(soup, index, flags)
            selection = self.selector.select(soup, index, candidates, log=log)

            length = 0
            if selection is not None:
                cleaner.clean(selection.root, flags)
                if self.config.remove_title_heading:
                    cleaner.remove_title_heading(selection.root, metadata.title)
                text = to_text(selection.root)
                length = len(text)

                if log:
                    log.debug(
                        "Attempt finished",
                        state=state.value,
                        candidates=len(candidates),
                        top_score=round(selection.top.score, 3),
                        length=length,
                    )
                if length >= self.config.char_threshold:
                    article = self._build_article(selection.root, selection.top.node, text, metadata)
                    return article, attempts, length
            elif log:
                log.debug("Attempt found no candidates", state=state.value)

            best_length = max(best_length, length)
            state = next_state(state)

        if log:
            log.debug("No article found", attempts=attempts, longest=best_length)
        return None, attempts, best_length

    def _build_article(self, root: Tag, top: Tag, text: str, metadata: MetadataRecord) -> Article:
        return Article(
            title=metadata.title,
            byline=metadata.byline,
            content=to_html(root),
            text_content=text,
            length=len(text),
            excerpt=metadata.excerpt,
            site_name=metadata.site_name,
            published_time=metadata.published_time,
            language=metadata.language,
            direction=self._direction(top) or metadata.direction,
            image=metadata.image,
            favicon=metadata.favicon,
        )

    @staticmethod
    def _direction(node: Tag) -> Optional[str]:
        """The ``dir`` of ``node`` or its nearest ancestor that sets one."""
        for tag in (node, *ancestors(node)):
            direction = attr(tag, "dir").strip().lower()
            if direction in _DIRECTIONS:
                return direction
        return None


def parse(html: Union[str, bytes], url: Optional[str] = None, **options: Any) -> Optional[Article]:
    """Parse ``html`` with a one-off parser built from ``options`` (``ParserConfig`` fields or aliases)."""
    return Readability(ParserConfig(**options)).parse(html, url)
