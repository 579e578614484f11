"""
Date Extractor - ISO-8601 publication date normalization
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateExtractor:
    """Parses publication dates coming from structured metadata.

    Only ISO-8601 values are accepted. Anything else is logged and dropped so
    that a lower-priority source may provide the date instead.
    """

    def parse(self, value: Optional[str]) -> Optional[datetime]:
        if not value or not value.strip():
            return None
        try:
            return dateutil_parser.isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            logger.debug(f"Unparsable publication date {value!r}: {e}")
            return None

    def normalize(self, value: Optional[str]) -> Optional[str]:
        """Return ``value`` as a normalized ISO-8601 string, or ``None`` if it does not parse."""
        parsed = self.parse(value)
        if parsed is None:
            return None
        return parsed.isoformat()
