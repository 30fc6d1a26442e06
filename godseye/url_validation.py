"""URL validation, sanitization and product-endpoint URL derivation.

Target sites are arbitrary, so there is no domain allowlist; validation only
rejects URLs that are not plain http(s) pages.
"""

import re
from typing import List
from urllib.parse import urlparse

__all__ = [
    "URLValidationError",
    "sanitize_url",
    "validate_url",
    "is_safe_url",
    "product_json_candidates",
]


class URLValidationError(ValueError):
    """Raised when URL validation fails."""
    pass


# Dangerous URL schemes to reject
DANGEROUS_SCHEMES = {"javascript", "data", "vbscript", "file"}

# Shopify-style product path: /products/<handle>
PRODUCT_HANDLE_RE = re.compile(r"/products/([a-zA-Z0-9\-_]+)")


def sanitize_url(url: str) -> str:
    """Strip surrounding whitespace and control characters."""
    if not url:
        return ""
    url = url.strip()
    return re.sub(r"[\x00-\x1f\x7f-\x9f]", "", url)


def validate_url(url: str) -> str:
    """Validate an absolute http(s) URL.

    Args:
        url: URL to validate

    Returns:
        Sanitized URL

    Raises:
        URLValidationError: If URL is empty, not http(s), or has no host
    """
    if not url:
        raise URLValidationError("URL is empty")

    url = sanitize_url(url)

    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise URLValidationError(f"Failed to parse URL: {e}") from e

    scheme = parsed.scheme.lower()
    if scheme in DANGEROUS_SCHEMES:
        raise URLValidationError(f"Dangerous URL scheme: {scheme}")
    if scheme not in ("http", "https"):
        raise URLValidationError(f"Invalid URL scheme: {scheme or '(none)'}")

    if not parsed.netloc or not parsed.hostname:
        raise URLValidationError("URL has no domain")

    return url


def is_safe_url(url: str) -> bool:
    """Check a URL without raising."""
    try:
        validate_url(url)
        return True
    except URLValidationError:
        return False


def product_json_candidates(url: str) -> List[str]:
    """Guess JSON endpoints that may describe the product at url.

    Pages already ending in .js/.json are probed as-is. Otherwise the path is
    suffixed with .js and .json, plus the /products/<handle>.js|.json form
    used by Shopify stores.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return []
    if not parsed.scheme or not parsed.netloc:
        return []

    origin = f"{parsed.scheme}://{parsed.netloc}"
    path = parsed.path

    if path.endswith(".js") or path.endswith(".json"):
        return [url]

    candidates = [origin + path + ".js", origin + path + ".json"]
    match = PRODUCT_HANDLE_RE.search(path)
    if match:
        handle = match.group(1)
        candidates.append(f"{origin}/products/{handle}.js")
        candidates.append(f"{origin}/products/{handle}.json")

    # de-duplicate while preserving order
    seen = set()
    unique: List[str] = []
    for candidate in candidates:
        if candidate not in seen:
            seen.add(candidate)
            unique.append(candidate)
    return unique
