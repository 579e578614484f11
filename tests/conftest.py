"""
Shared fixtures for ContentQuarry tests.

Provides small HTML documents covering the main extraction scenarios:
a plain article next to a navigation block, an article with relative
media, a document too short to hold an article, and one whose only
content sits in an unlikely-looking container.
"""

from __future__ import annotations

import pytest
from contentquarry.config import ParserConfig
from contentquarry.readability import Readability

from tests.helpers import prose


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Document Fixtures
# ============================================================================


@pytest.fixture
def article_html() -> str:
    """An article with a 600+ character paragraph and a link-only navigation block."""
    links = "".join(f'<a href="/section/{i}">Link {i}</a>' for i in range(1, 6))
    return f"""
    <html lang="en">
      <head><title>Committee Findings</title></head>
      <body>
        <nav id="site-nav">{links}</nav>
        <article>
          <h1>Committee Findings</h1>
          <p>{prose(600)}</p>
        </article>
      </body>
    </html>
    """


@pytest.fixture
def image_article_html() -> str:
    """An article referencing a root-relative image and a relative link."""
    return f"""
    <html>
      <head><title>Pictures</title></head>
      <body>
        <article>
          <p>{prose(600)}</p>
          <p><img src="/a.png" alt="Figure"></p>
          <p>Read the <a href="../archive">archive</a> for {prose(120)}</p>
        </article>
      </body>
    </html>
    """


@pytest.fixture
def short_html() -> str:
    return "<html><head><title>Short</title></head><body><p>Too short.</p></body></html>"


@pytest.fixture
def sidebar_only_html() -> str:
    """All content sits in a container whose class looks like page furniture."""
    return f"""
    <html>
      <body>
        <div class="sidebar">
          <p>{prose(400)}</p>
          <p>{prose(400)}</p>
        </div>
      </body>
    </html>
    """


@pytest.fixture
def metadata_html() -> str:
    """A document carrying JSON-LD, OpenGraph, Twitter and plain meta tags."""
    return """
    <html lang="en-GB" dir="rtl">
      <head>
        <title>Title Tag | Example Site</title>
        <script type="application/ld+json">
          {"@context": "https://schema.org", "@type": "NewsArticle",
           "headline": "JSON-LD Headline",
           "author": [{"@type": "Person", "name": "Ada Lovelace"}],
           "datePublished": "2024-03-05T10:00:00Z",
           "publisher": {"@type": "Organization", "name": "Example News"}}
        </script>
        <meta property="og:title" content="OpenGraph Title">
        <meta property="og:site_name" content="Example OG">
        <meta property="og:image" content="/images/cover.jpg">
        <meta name="twitter:title" content="Twitter Title">
        <meta name="description" content="A plain meta description of the page.">
        <link rel="icon" href="/favicon.ico">
      </head>
      <body>
        <p>Short intro.</p>
        <p>The first substantial paragraph of the article body.</p>
      </body>
    </html>
    """


@pytest.fixture
def parser_config() -> ParserConfig:
    return ParserConfig()


@pytest.fixture
def readability(parser_config: ParserConfig) -> Readability:
    return Readability(parser_config)
