"""
ContentQuarry Metadata Extraction Module

Components:
- MetadataExtractor: priority chain coordinator producing a MetadataRecord
- StructuredDataParser: JSON-LD, OpenGraph, Twitter Card, Dublin Core and meta tag parsing
- AuthorExtractor: DOM byline detection with plausibility checks
- DateExtractor: ISO-8601 publication date normalization
"""

from .author_extractor import AuthorExtractor
from .date_extractor import DateExtractor
from .metadata_extractor import MetadataExtractor, MetadataRecord, clean_title, collect_json_ld
from .structured_data_parser import (
    DublinCoreParser,
    OpenGraphParser,
    SchemaOrgParser,
    StandardMetaParser,
    StructuredDataParser,
    TwitterCardParser,
    collect_meta,
)

__all__ = [
    "AuthorExtractor",
    "DateExtractor",
    "DublinCoreParser",
    "MetadataExtractor",
    "MetadataRecord",
    "OpenGraphParser",
    "SchemaOrgParser",
    "StandardMetaParser",
    "StructuredDataParser",
    "TwitterCardParser",
    "clean_title",
    "collect_json_ld",
    "collect_meta",
]
