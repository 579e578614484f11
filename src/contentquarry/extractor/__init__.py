"""
ContentQuarry async extraction adapter.

``ReadabilityExtractor`` implements the ``Extractor`` protocol on top of the
synchronous readability engine so that pipelines can extract many documents
concurrently.
"""

from .models import ExtractResult
from .protocols import Extractor
from .readability_extractor import ReadabilityExtractor

__all__ = [
    "ExtractResult",
    "Extractor",
    "ReadabilityExtractor",
]
