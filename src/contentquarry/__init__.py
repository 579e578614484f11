"""
ContentQuarry - main content extraction for HTML documents.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config, ParserConfig
from .exceptions import ContentQuarryError, InvalidInputError, InvalidURLError, NoContentFoundError
from .extractor import ExtractResult, ReadabilityExtractor
from .readability import Article, Readability, parse

__all__ = [
    "__version__",
    "Article",
    "Config",
    "ContentQuarryError",
    "ExtractResult",
    "InvalidInputError",
    "InvalidURLError",
    "NoContentFoundError",
    "ParserConfig",
    "Readability",
    "ReadabilityExtractor",
    "parse",
]
