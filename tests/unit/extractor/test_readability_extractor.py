"""
Unit tests for ReadabilityExtractor.
"""

from unittest.mock import patch

import pytest
from contentquarry.config import ParserConfig
from contentquarry.exceptions import InvalidInputError, InvalidURLError
from contentquarry.extractor import Extractor, ReadabilityExtractor

from tests.helpers import prose


class TestReadabilityExtractor:
    """Test cases for ReadabilityExtractor."""

    def test_init(self):
        """Test extractor initialization."""
        extractor = ReadabilityExtractor()
        assert extractor.name == "readability"
        assert isinstance(extractor.config, ParserConfig)
        assert extractor.config.char_threshold == 500
        assert isinstance(extractor, Extractor)

    def test_protocol_requires_batch_extraction(self):
        class SingleOnly:
            name = "single"

            async def extract(self, html, *, url=None):
                raise NotImplementedError

        assert not isinstance(SingleOnly(), Extractor)

    @pytest.mark.asyncio
    async def test_extract_article(self, article_html):
        """Test successful extraction."""
        extractor = ReadabilityExtractor()
        result = await extractor.extract(article_html, url="https://example.com/story")

        assert result.found
        assert result.score == 1.0
        assert result.url == "https://example.com/story"
        assert result.title == "Committee Findings"
        assert result.language == "en"
        assert len(result.text) >= 600
        assert "Link 1" not in result.text
        assert 'id="readability-page-1"' in result.html

    @pytest.mark.asyncio
    async def test_extract_with_images(self, image_article_html):
        """Test that image URLs are resolved against the document URL."""
        extractor = ReadabilityExtractor()
        result = await extractor.extract(image_article_html, url="https://example.com/posts/1")

        assert result.images == ["https://example.com/a.png"]

    @pytest.mark.asyncio
    async def test_extract_short_content(self, short_html):
        """Test extraction of a document without an article."""
        extractor = ReadabilityExtractor()
        result = await extractor.extract(short_html, url="https://example.com")

        assert result.url == "https://example.com"
        assert result.text == ""
        assert result.title is None
        assert result.images == []
        assert result.language is None
        assert result.score == 0.0
        assert not result.found

    @pytest.mark.asyncio
    async def test_extract_empty_html(self):
        """Test extraction with empty HTML."""
        extractor = ReadabilityExtractor()
        with pytest.raises(InvalidInputError):
            await extractor.extract("")

    @pytest.mark.asyncio
    async def test_extract_invalid_url(self, article_html):
        extractor = ReadabilityExtractor()
        with pytest.raises(InvalidURLError):
            await extractor.extract(article_html, url="not a url")

    @pytest.mark.asyncio
    async def test_extract_uses_configuration(self):
        """A zero character threshold accepts any selected container."""
        html = f"<html><body><div><p>{prose(60)}</p></div></body></html>"
        strict = await ReadabilityExtractor().extract(html)
        lenient = await ReadabilityExtractor(ParserConfig(char_threshold=0)).extract(html)

        assert strict.score == 0.0
        assert lenient.score == 1.0

    @pytest.mark.asyncio
    async def test_engine_returning_nothing(self, article_html):
        extractor = ReadabilityExtractor()
        with patch.object(extractor.engine, "parse", return_value=None) as mock_parse:
            result = await extractor.extract(article_html)

        mock_parse.assert_called_once_with(article_html, None)
        assert result.score == 0.0

    @pytest.mark.asyncio
    async def test_extract_many(self, article_html, short_html):
        extractor = ReadabilityExtractor(max_concurrency=2)
        results = await extractor.extract_many(
            [(article_html, "https://example.com/a"), (short_html, None), (article_html, None)]
        )

        assert [result.found for result in results] == [True, False, True]
        assert results[0].url == "https://example.com/a"

    @pytest.mark.asyncio
    async def test_metadata_keys(self, article_html):
        result = await ReadabilityExtractor().extract(article_html)
        assert set(result.metadata) == {"siteName", "publishedTime", "direction", "image", "favicon"}
