"""Tests for URL handling, page fetching and product endpoint probing."""

import pytest
import requests  # type: ignore[import-untyped]

from godseye.config import HEADERS, PROBE_TIMEOUT, REQUEST_TIMEOUT
from godseye.fetcher import FetchError, create_session, fetch_raw_html, try_product_json_endpoints
from godseye.url_validation import (
    URLValidationError,
    is_safe_url,
    product_json_candidates,
    sanitize_url,
    validate_url,
)


class TestValidateUrl:
    def test_valid_https(self):
        assert validate_url("  https://shop.example.com/products/widget  ") == (
            "https://shop.example.com/products/widget"
        )

    @pytest.mark.parametrize("url", [
        "",
        "not a url",
        "ftp://example.com/file",
        "javascript:alert(1)",
        "file:///etc/passwd",
        "https://",
    ])
    def test_rejected(self, url):
        with pytest.raises(URLValidationError):
            validate_url(url)

    def test_is_safe_url(self):
        assert is_safe_url("http://example.com")
        assert not is_safe_url("data:text/html,hi")

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_url("")

    def test_sanitize_strips_control_characters(self):
        assert sanitize_url(" https://example.com/\x00a\n ") == "https://example.com/a"


class TestProductJsonCandidates:
    def test_shopify_product_path(self):
        assert product_json_candidates("https://shop.example.com/products/acme-widget?variant=1") == [
            "https://shop.example.com/products/acme-widget.js",
            "https://shop.example.com/products/acme-widget.json",
        ]

    def test_collection_product_path(self):
        assert product_json_candidates("https://shop.example.com/collections/all/products/acme") == [
            "https://shop.example.com/collections/all/products/acme.js",
            "https://shop.example.com/collections/all/products/acme.json",
            "https://shop.example.com/products/acme.js",
            "https://shop.example.com/products/acme.json",
        ]

    def test_plain_path(self):
        assert product_json_candidates("https://example.com/widget") == [
            "https://example.com/widget.js",
            "https://example.com/widget.json",
        ]

    def test_already_json(self):
        url = "https://shop.example.com/products/acme.json"
        assert product_json_candidates(url) == [url]

    def test_relative_url(self):
        assert product_json_candidates("/products/acme") == []


class TestFetchRawHtml:
    def test_success(self, fake_session):
        session = fake_session({"https://example.com/p": "<html>ok</html>"})
        assert fetch_raw_html("https://example.com/p", session=session) == "<html>ok</html>"
        assert session.calls == [("https://example.com/p", REQUEST_TIMEOUT)]

    def test_http_error(self, fake_session):
        session = fake_session({"https://example.com/p": (503, "down")})
        with pytest.raises(FetchError, match="503"):
            fetch_raw_html("https://example.com/p", session=session)

    def test_timeout(self, fake_session):
        session = fake_session({"https://example.com/p": requests.exceptions.Timeout("slow")})
        with pytest.raises(FetchError, match="Timeout"):
            fetch_raw_html("https://example.com/p", session=session)

    def test_connection_error(self, fake_session):
        session = fake_session({"https://example.com/p": requests.exceptions.ConnectionError("refused")})
        with pytest.raises(FetchError):
            fetch_raw_html("https://example.com/p", session=session)


class TestProductJsonEndpoints:
    URL = "https://shop.example.com/products/acme-widget"

    def test_first_json_candidate_wins(self, fake_session):
        session = fake_session({
            self.URL + ".js": '{"title": "From JS"}',
            self.URL + ".json": '{"product": {"title": "From JSON"}}',
        })
        assert try_product_json_endpoints(self.URL, session=session) == {"title": "From JS"}
        assert session.calls == [(self.URL + ".js", PROBE_TIMEOUT)]

    def test_failures_skipped(self, fake_session):
        session = fake_session({
            self.URL + ".js": requests.exceptions.ConnectionError("boom"),
            self.URL + ".json": '{"product": {"title": "From JSON"}}',
        })
        assert try_product_json_endpoints(self.URL, session=session) == {"product": {"title": "From JSON"}}

    def test_html_body_ignored(self, fake_session):
        session = fake_session({
            self.URL + ".js": "<html>not json</html>",
            self.URL + ".json": (500, '{"error": "server"}'),
        })
        assert try_product_json_endpoints(self.URL, session=session) is None

    def test_json_wrapped_in_text(self, fake_session):
        session = fake_session({self.URL + ".js": 'callback({"title": "Wrapped"});'})
        assert try_product_json_endpoints(self.URL, session=session) == {"title": "Wrapped"}

    def test_nothing_found(self, fake_session):
        assert try_product_json_endpoints(self.URL, session=fake_session()) is None


class TestCreateSession:
    def test_browser_headers(self):
        session = create_session()
        assert isinstance(session, requests.Session)
        assert session.headers["User-Agent"] == HEADERS["User-Agent"]
