"""Shared test fixtures: canned HTML pages, a fake HTTP session and a fake Gemini client."""

import json
from types import SimpleNamespace
from typing import Any, Dict, Optional, Tuple, Union
from unittest.mock import MagicMock

import pytest
import requests  # type: ignore[import-untyped]


def make_response(url: str, status_code: int = 200, text: str = "") -> requests.Response:
    """Build a real requests.Response without network access."""
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = text.encode("utf-8")
    resp.encoding = "utf-8"
    resp.url = url
    return resp


class FakeSession:
    """Stands in for requests.Session; serves canned pages by URL.

    Unknown URLs return 404. A route mapped to an exception instance raises it.
    """

    def __init__(self, routes: Optional[Dict[str, Union[Tuple[int, str], str, Exception]]] = None):
        self.routes = routes or {}
        self.headers: Dict[str, str] = {}
        self.calls = []

    def get(self, url: str, headers: Any = None, timeout: Any = None) -> requests.Response:
        self.calls.append((url, timeout))
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if route is None:
            return make_response(url, 404, "Not Found")
        if isinstance(route, str):
            return make_response(url, 200, route)
        status_code, text = route
        return make_response(url, status_code, text)


def make_gemini_client(
    reply: Union[str, Dict[str, Any]],
    usage: Optional[Dict[str, int]] = None,
) -> MagicMock:
    """Fake google.genai Client whose generate_content returns reply."""
    text = reply if isinstance(reply, str) else json.dumps(reply)
    usage_metadata = SimpleNamespace(**usage) if usage else None
    response = SimpleNamespace(text=text, usage_metadata=usage_metadata)
    client = MagicMock()
    client.models.generate_content.return_value = response
    return client


class RecordingTraceSink:
    """Keeps artifacts in memory."""

    def __init__(self):
        self.artifacts: Dict[str, str] = {}

    def write(self, name: str, content: str) -> None:
        self.artifacts[name] = content


@pytest.fixture
def fake_session():
    """Factory for FakeSession instances."""
    return FakeSession


@pytest.fixture
def gemini_client():
    """Factory for fake Gemini clients."""
    return make_gemini_client


@pytest.fixture
def trace_sink():
    return RecordingTraceSink()


@pytest.fixture(autouse=True)
def gemini_api_key(monkeypatch):
    """Provide a dummy API key so no test depends on the real environment."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")


@pytest.fixture
def meta_only_html():
    """Page whose only product hints are Open Graph tags."""
    return """<!DOCTYPE html>
<html>
<head>
  <meta property="og:title" content="Acme Widget">
  <meta property="og:description" content="A great widget for everyone">
</head>
<body>
  <div class="hero">Welcome</div>
</body>
</html>
"""


@pytest.fixture
def json_ld_html():
    """Page with a JSON-LD Product node and matching DOM markup."""
    return """<!DOCTYPE html>
<html>
<head>
  <title>LD Widget | Official Store</title>
  <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "Organization", "name": "Acme Inc"}
  </script>
  <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "Product", "name": "LD Widget",
     "description": "Structured description from JSON-LD."}
  </script>
</head>
<body>
  <h1 class="product-title">DOM Widget Title</h1>
  <div class="product-description">A description that lives in the DOM.</div>
</body>
</html>
"""


@pytest.fixture
def densest_html():
    """Page with no metadata at all; only a content block."""
    return """<html>
<body>
<nav>
<a href="/">Home</a>
<a href="/shop">Shop</a>
</nav>
<div class="content">
<p>Acme Widget</p>
<p>Hand-built from recycled aluminium.</p>
<p>Fits every standard mount.</p>
</div>
<footer>Copyright Acme with a very long footer line that is not content at all</footer>
</body>
</html>
"""
