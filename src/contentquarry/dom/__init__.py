"""
DOM access layer: document loading, node handles, measurement helpers,
serialization and URL resolution.
"""

from .document import NodeIndex, load_document, to_html, to_text
from .urls import resolve_srcset, resolve_url, validate_base_url

__all__ = [
    "NodeIndex",
    "load_document",
    "resolve_srcset",
    "resolve_url",
    "to_html",
    "to_text",
    "validate_base_url",
]
