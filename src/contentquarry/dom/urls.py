"""
Base URL validation and relative URL resolution.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlsplit

from ..exceptions import InvalidURLError

# Values that are left exactly as written.
_UNRESOLVED_SCHEMES = ("data:", "mailto:", "tel:", "javascript:")
_SRCSET_SPLIT = re.compile(r"(\S+)(\s+[\d.]+[xw])?(\s*(?:,|$))")


def validate_base_url(url: str) -> str:
    """Check that ``url`` is an absolute http(s) URL and return it unchanged.

    Raises:
        InvalidURLError: if the URL is malformed or not absolute.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError(str(url), "empty URL")
    if any(ch.isspace() for ch in url.strip()):
        raise InvalidURLError(url, "contains whitespace")
    try:
        parts = urlsplit(url.strip())
        # Accessing the port validates it.
        parts.port
    except ValueError as e:
        raise InvalidURLError(url, str(e)) from e
    if parts.scheme not in ("http", "https"):
        raise InvalidURLError(url, "scheme must be http or https")
    if not parts.netloc or not parts.hostname:
        raise InvalidURLError(url, "missing host")
    return url.strip()


def resolve_url(base: Optional[str], value: str) -> str:
    """Resolve ``value`` against ``base``.

    Fragment-only references and data/mailto/tel/javascript URLs are returned
    untouched, as is everything when no base is given.
    """
    value = value.strip()
    if not base or not value:
        return value
    if value.startswith("#") or value.lower().startswith(_UNRESOLVED_SCHEMES):
        return value
    try:
        resolved = urljoin(base, value)
        urlsplit(resolved).port
    except ValueError as e:
        raise InvalidURLError(value, str(e)) from e
    return resolved


def resolve_srcset(base: Optional[str], srcset: str) -> str:
    """Resolve every URL of a ``srcset`` attribute, keeping its descriptors.

    Candidates that cannot be resolved are kept as written.
    """
    if not base:
        return srcset

    def _replace(match: "re.Match[str]") -> str:
        try:
            url = resolve_url(base, match.group(1))
        except InvalidURLError:
            url = match.group(1)
        return url + (match.group(2) or "") + match.group(3)

    return _SRCSET_SPLIT.sub(_replace, srcset.strip())
