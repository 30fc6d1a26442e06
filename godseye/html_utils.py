"""HTML parsing heuristics for recovering a product name and description.

Every function here is pure: it takes an HTML string (or an already parsed
JSON object) and never touches the network. The extractor chains them.
"""

import copy
import json
import re
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from godseye.config import MAX_LINKS_PER_BLOCK
from godseye.json_utils import find_balanced_object, parse_json_lenient, safe_json_parse
from godseye.text_utils import normalize_text, strip_tags

__all__ = [
    "extract_json_ld",
    "extract_embedded_json",
    "selectors_fallback",
    "meta_fallback",
    "densest_element_text",
    "product_fields_from_endpoint",
    "product_fields_from_json_ld",
    "product_fields_from_embedded",
]

NameDescription = Tuple[Optional[str], Optional[str]]

# Scripts worth scanning for an embedded product object
PRODUCT_TYPE_RE = re.compile(r"""['"]@type['"]\s*:\s*['"]Product['"]""", re.IGNORECASE)
PRODUCT_HINT_RE = re.compile(r"(variants|product|price|sku)", re.IGNORECASE)
# Anchor for locating the product object inside a larger script
PRODUCT_MARKER_RE = re.compile(r"""@type['"]?\s*[:=]\s*['"]?Product['"]?""", re.IGNORECASE)
MIN_SCRIPT_CHARS = 50

NAME_SELECTORS = [
    "h1.product-title",
    "h1.product_name",
    "h1#product_title",
    "h1.title",
    'h1[itemprop="name"]',
    "h1",
]

DESCRIPTION_SELECTORS = [
    "#description",
    ".product-description",
    ".description",
    ".product-summary",
    "div#description",
    '[itemprop="description"]',
    ".product-details",
]

MIN_NAME_CHARS = 3
MIN_DESCRIPTION_CHARS = 10

DENSE_BLOCK_TAGS = ["div", "section", "article", "main", "p"]
CHROME_TAGS = {"nav", "header", "footer", "aside"}
STRIPPED_TAGS = ["script", "style", "header", "footer", "nav", "aside", "form", "button"]


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _script_text(script: Tag) -> str:
    return script.string or script.get_text() or ""


def _mentions_product(value: Any) -> bool:
    if isinstance(value, list):
        value = " ".join(str(v) for v in value)
    return "product" in str(value or "").lower()


def _is_product_node(item: Any) -> bool:
    """@type mentions product, or the @graph mentions it anywhere."""
    if not isinstance(item, dict):
        return False
    if _mentions_product(item.get("@type")):
        return True
    graph = item.get("@graph")
    if graph:
        return "product" in json.dumps(graph, default=str).lower()
    return False


# =============================================================================
# Structured data
# =============================================================================

def extract_json_ld(html: str) -> Optional[Dict[str, Any]]:
    """Return the first JSON-LD object describing a product, if any."""
    soup = _soup(html)
    scripts = soup.find_all(
        "script",
        attrs={"type": lambda t: bool(t) and t.strip().lower() == "application/ld+json"},
    )
    for script in scripts:
        parsed = safe_json_parse(_script_text(script).strip())
        if not parsed:
            continue

        if isinstance(parsed, list):
            for item in parsed:
                if _is_product_node(item):
                    return item
        elif _is_product_node(parsed):
            return parsed
    return None


def _embedded_candidate(script_content: str) -> Optional[str]:
    candidate: Optional[str] = None
    marker = PRODUCT_MARKER_RE.search(script_content)
    if marker:
        start = script_content.rfind("{", 0, marker.start() + 1)
        candidate = find_balanced_object(script_content, max(0, start))
    if not candidate:
        candidate = find_balanced_object(script_content, 0)
    return candidate


def extract_embedded_json(html: str) -> Optional[Dict[str, Any]]:
    """Find a product-like object inside any inline <script>.

    Looks for scripts that declare "@type": "Product" or mention variants,
    price or sku, then parses the object around the Product marker (or the
    first object in the script) with the lenient JSON chain (bare-key
    quoting, then json5 for single-quoted JavaScript literals).
    """
    soup = _soup(html)
    for script in soup.find_all("script"):
        content = _script_text(script)
        if len(content) < MIN_SCRIPT_CHARS:
            continue
        if not (PRODUCT_TYPE_RE.search(content) or PRODUCT_HINT_RE.search(content)):
            continue

        candidate = _embedded_candidate(content)
        if not candidate:
            continue

        parsed = parse_json_lenient(candidate)
        if isinstance(parsed, dict):
            return parsed
    return None


# =============================================================================
# DOM fallbacks
# =============================================================================

def selectors_fallback(html: str) -> NameDescription:
    """Try common product title/description selectors in order."""
    soup = _soup(html)

    name: Optional[str] = None
    for selector in NAME_SELECTORS:
        el = soup.select_one(selector)
        text = normalize_text(el.get_text()) if el else ""
        if len(text) > MIN_NAME_CHARS:
            name = text
            break

    description: Optional[str] = None
    for selector in DESCRIPTION_SELECTORS:
        el = soup.select_one(selector)
        if el is None:
            continue
        value = normalize_text(el.get_text()) or el.get("content")
        if isinstance(value, str) and len(value) > MIN_DESCRIPTION_CHARS:
            description = value
            break

    return name, description


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    el = soup.find("meta", attrs=attrs)
    if el is None:
        return ""
    content = el.get("content")
    return content if isinstance(content, str) else ""


def _first_text(soup: BeautifulSoup, tag_name: str) -> str:
    el = soup.find(tag_name)
    return el.get_text() if el else ""


def meta_fallback(html: str) -> NameDescription:
    """Page title and description from meta tags, <title>, <h1> and <h2>."""
    soup = _soup(html)
    title = (
        _meta_content(soup, property="og:title")
        or _meta_content(soup, name="twitter:title")
        or _meta_content(soup, name="title")
        or _first_text(soup, "title")
        or _first_text(soup, "h1")
    )
    description = (
        _meta_content(soup, property="og:description")
        or _meta_content(soup, name="description")
        or _meta_content(soup, name="twitter:description")
        or _meta_content(soup, itemprop="description")
        or _first_text(soup, "h2")
    )
    return normalize_text(title) or None, normalize_text(description) or None


def _inside_page_chrome(el: Tag) -> bool:
    """True if el or an ancestor is nav/header/footer/aside or role=navigation."""
    node: Optional[Tag] = el
    while node is not None and node.name != "[document]":
        if node.name in CHROME_TAGS or node.get("role") == "navigation":
            return True
        node = node.parent
    return False


def densest_element_text(html: str) -> str:
    """Normalized text of the content block with the most text.

    Navigation-like blocks (page chrome, or more than MAX_LINKS_PER_BLOCK
    links) are skipped. Falls back to the whole body text.
    """
    soup = _soup(html)
    root = soup.body or soup

    best_text = ""
    for el in root.find_all(DENSE_BLOCK_TAGS):
        if _inside_page_chrome(el):
            continue
        if len(el.find_all("a")) > MAX_LINKS_PER_BLOCK:
            continue
        clone = copy.copy(el)
        for noise in clone.find_all(STRIPPED_TAGS):
            noise.decompose()
        text = normalize_text(clone.get_text())
        if len(text) > len(best_text):
            best_text = text

    if best_text:
        return best_text
    return normalize_text(root.get_text())


# =============================================================================
# Field pickers for the JSON sources
# =============================================================================

def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        return str(value) or None
    return None


def _first(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def _nested(data: Dict[str, Any], key: str, field: str) -> Any:
    nested = data.get(key)
    return nested.get(field) if isinstance(nested, dict) else None


def _graph_items(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    graph = data.get("@graph")
    if not isinstance(graph, list):
        return []
    return [item for item in graph if isinstance(item, dict)]


def _clean_name(value: Any) -> Optional[str]:
    text = _as_text(value)
    if not text:
        return None
    return normalize_text(text) or None


def _clean_description(value: Any, html_fragment: bool) -> Optional[str]:
    text = _as_text(value)
    if not text:
        return None
    if html_fragment:
        text = strip_tags(text)
    return normalize_text(text) or None


def product_fields_from_endpoint(data: Dict[str, Any]) -> NameDescription:
    """Name/description from a Shopify-style product .js/.json payload."""
    name = _first(
        data.get("title"),
        data.get("name"),
        _nested(data, "product", "title"),
        data.get("product_title"),
    )
    description = _first(
        data.get("body_html"),
        data.get("description"),
        _nested(data, "product", "description"),
    )
    return _clean_name(name), _clean_description(description, html_fragment=True)


def product_fields_from_json_ld(data: Dict[str, Any]) -> NameDescription:
    """Name/description from a JSON-LD Product node (or its @graph)."""
    graph = _graph_items(data)
    name = _first(
        data.get("name"),
        data.get("title"),
        next((item["name"] for item in graph if item.get("name")), None),
    )
    description = _first(
        data.get("description"),
        next((item["description"] for item in graph if item.get("description")), None),
    )
    return _clean_name(name), _clean_description(description, html_fragment=False)


def product_fields_from_embedded(data: Dict[str, Any]) -> NameDescription:
    """Name/description from a product object found in an inline script."""
    name = _first(
        data.get("name"),
        data.get("title"),
        _nested(data, "product", "title"),
        data.get("product_name"),
    )
    description = _first(
        data.get("description"),
        data.get("body_html"),
        _nested(data, "product", "description"),
    )
    return _clean_name(name), _clean_description(description, html_fragment=True)
