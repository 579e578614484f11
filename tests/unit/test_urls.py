"""
Unit tests for base URL validation and relative URL resolution.
"""

import pytest
from contentquarry.dom.urls import resolve_srcset, resolve_url, validate_base_url
from contentquarry.exceptions import ContentQuarryError, InvalidURLError

BASE = "https://example.com/posts/1"


class TestValidateBaseUrl:
    """Test cases for validate_base_url."""

    @pytest.mark.parametrize(
        "url",
        ["https://example.com/posts/1", "http://example.com", "https://example.com:8443/a?b=c#d"],
    )
    def test_accepts_absolute_http_urls(self, url):
        assert validate_base_url(url) == url

    def test_strips_surrounding_whitespace(self):
        assert validate_base_url("  https://example.com/  ") == "https://example.com/"

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not a url",
            "example.com/path",
            "ftp://example.com/file",
            "http://",
            "http://exa mple.com",
            "http://example.com:99999/",
        ],
    )
    def test_rejects_malformed_urls(self, url):
        with pytest.raises(InvalidURLError) as exc_info:
            validate_base_url(url)
        assert exc_info.value.url.strip() == url.strip()

    def test_error_hierarchy(self):
        with pytest.raises(ContentQuarryError):
            validate_base_url("mailto:someone@example.com")
        with pytest.raises(ValueError):
            validate_base_url("mailto:someone@example.com")


class TestResolveUrl:
    """Test cases for resolve_url."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("/a.png", "https://example.com/a.png"),
            ("b.png", "https://example.com/posts/b.png"),
            ("../about", "https://example.com/about"),
            ("//cdn.example.org/x.js", "https://cdn.example.org/x.js"),
            ("https://other.org/page", "https://other.org/page"),
        ],
    )
    def test_resolves_against_base(self, value, expected):
        assert resolve_url(BASE, value) == expected

    @pytest.mark.parametrize(
        "value",
        ["#section-2", "data:image/png;base64,AAAA", "mailto:a@example.com", "tel:+123", "javascript:void(0)"],
    )
    def test_leaves_special_values_untouched(self, value):
        assert resolve_url(BASE, value) == value

    def test_without_base(self):
        assert resolve_url(None, "/a.png") == "/a.png"

    def test_malformed_reference(self):
        with pytest.raises(InvalidURLError):
            resolve_url(BASE, "http://example.com:99999/x")


class TestResolveSrcset:
    """Test cases for resolve_srcset."""

    def test_keeps_descriptors(self):
        resolved = resolve_srcset(BASE, "small.png 1x, /large.png 2x")
        assert resolved == "https://example.com/posts/small.png 1x, https://example.com/large.png 2x"

    def test_without_base(self):
        assert resolve_srcset(None, "a.png 1x") == "a.png 1x"

    def test_keeps_unresolvable_candidates(self):
        resolved = resolve_srcset(BASE, "http://example.com:99999/a.png 1x, /b.png 2x")
        assert resolved == "http://example.com:99999/a.png 1x, https://example.com/b.png 2x"
