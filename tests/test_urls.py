"""Tests for URL resolution and user input normalization."""

from tbrowser.models import MediaType
from tbrowser.urls import (
    is_ad_or_tracker,
    is_http_url,
    is_image_url,
    looks_like_url,
    media_type_for,
    normalize_user_input,
    resolve,
    unwrap_generic_redirect,
)


class TestResolve:
    """Tests for resolve()."""

    def test_relative_path(self):
        assert resolve("https://site.example/a/page", "other") == "https://site.example/a/other"

    def test_absolute_path(self):
        assert resolve("https://site.example/a/page", "/x") == "https://site.example/x"

    def test_protocol_relative(self):
        assert resolve("https://site.example/", "//cdn.example/i.png") == "https://cdn.example/i.png"

    def test_no_scheme_filtering(self):
        assert resolve("https://site.example/", "mailto:a@b.c") == "mailto:a@b.c"

    def test_unparsable_base_returns_href(self):
        assert resolve("http://[::1", "/x") == "/x"

    def test_unparsable_href_returns_href(self):
        assert resolve("https://site.example/", "http://[bad") == "http://[bad"


class TestNormalizeUserInput:
    """Tests for normalize_user_input()."""

    def test_bare_domain(self):
        assert normalize_user_input("example.com", "https://old.example/") == "https://example.com"

    def test_absolute_path_against_current(self):
        assert normalize_user_input("/about", "https://site.example/page") == "https://site.example/about"

    def test_empty_and_whitespace(self):
        assert normalize_user_input("", "https://site.example/") == ""
        assert normalize_user_input("   ", "https://site.example/") == ""

    def test_full_url_kept(self):
        assert normalize_user_input("  https://a.example/x?y=1 ", "") == "https://a.example/x?y=1"

    def test_broken_full_url(self):
        assert normalize_user_input("http://", "") == ""

    def test_protocol_relative(self):
        assert normalize_user_input("//cdn.example/lib", "") == "https://cdn.example/lib"

    def test_non_http_scheme_rejected(self):
        assert normalize_user_input("ftp://files.example/x", "") == ""

    def test_relative_path_against_current(self):
        assert normalize_user_input("next", "https://site.example/dir/page") == "https://site.example/dir/next"

    def test_relative_path_without_current_page(self):
        assert normalize_user_input("next", "") == ""


class TestClassification:
    """Tests for the small URL predicates."""

    def test_is_http_url(self):
        assert is_http_url("https://a.example/")
        assert is_http_url("http://a.example")
        assert not is_http_url("javascript:void(0)")
        assert not is_http_url("/relative")

    def test_looks_like_url(self):
        assert looks_like_url("example.com")
        assert looks_like_url("/about")
        assert not looks_like_url("python tutorials")
        assert not looks_like_url("weather")

    def test_media_type_prefers_longest_extension(self):
        assert media_type_for("https://a.example/photo.jpeg") == MediaType.JPEG
        assert media_type_for("https://a.example/scan.tiff") == MediaType.TIFF
        assert media_type_for("https://a.example/pic.webp") == MediaType.WEBP

    def test_media_type_default(self):
        assert media_type_for("https://a.example/render?id=3") == MediaType.IMAGE

    def test_is_image_url(self):
        assert is_image_url("https://a.example/cat.PNG")
        assert is_image_url("https://a.example/cat.jpg?w=300")
        assert not is_image_url("https://a.example/article")


class TestRedirects:
    """Tests for search-engine redirect handling."""

    def test_unwraps_duckduckgo_redirect(self):
        href = "//duckduckgo.com/l/?uddg=https%3A%2F%2Freal.example%2Fpage&rut=abc"
        assert unwrap_generic_redirect(href) == "https://real.example/page"

    def test_plain_url_untouched(self):
        assert unwrap_generic_redirect("https://real.example/page") == "https://real.example/page"

    def test_tracker_hosts(self):
        assert is_ad_or_tracker("https://ad.doubleclick.net/x")
        assert not is_ad_or_tracker("https://news.example/x")
