"""HTTP fetching for product pages and guessed product JSON endpoints."""

from typing import Any, Dict, Optional

import requests  # type: ignore[import-untyped]

from godseye.config import HEADERS, PROBE_HEADERS, PROBE_TIMEOUT, REQUEST_TIMEOUT
from godseye.json_utils import extract_json_substring, safe_json_parse
from godseye.logging_config import get_logger, log_event
from godseye.url_validation import product_json_candidates

__all__ = [
    "FetchError",
    "create_session",
    "fetch_raw_html",
    "try_product_json_endpoints",
]

logger = get_logger("fetcher")


class FetchError(ValueError):
    """Raised when the product page cannot be fetched."""
    pass


def create_session() -> requests.Session:
    """Create a requests Session with browser-like headers."""
    session = requests.Session()
    session.headers.update(HEADERS)
    session.headers.setdefault("Accept-Encoding", "gzip, deflate")
    return session


def fetch_raw_html(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> str:
    """GET the page HTML. Single attempt, no retry.

    Raises:
        FetchError: On any transport error or non-2xx status
    """
    sess = session or create_session()
    try:
        resp = sess.get(url, headers=HEADERS, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else "unknown"
        raise FetchError(f"HTTP Error {status_code} fetching {url}") from e
    except requests.exceptions.Timeout as e:
        raise FetchError(f"Timeout after {timeout}s fetching {url}") from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    html = str(resp.text)
    log_event("page_fetch", {
        "message": f"Fetched {url} ({len(html)} chars)",
        "url": url,
        "status_code": resp.status_code,
        "length": len(html),
    }, logger_name="fetcher")
    return html


def _parse_probe_body(text: str) -> Optional[Dict[str, Any]]:
    parsed = safe_json_parse(text)
    if isinstance(parsed, dict):
        return parsed
    parsed = extract_json_substring(text)
    if isinstance(parsed, dict):
        return parsed
    return None


def try_product_json_endpoints(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = PROBE_TIMEOUT,
) -> Optional[Dict[str, Any]]:
    """Probe guessed .js/.json product endpoints; return the first JSON object.

    Individual probe failures are expected (most sites have no such endpoint)
    and only logged at debug level.
    """
    candidates = product_json_candidates(url)
    if not candidates:
        return None

    sess = session or create_session()
    for candidate in candidates:
        try:
            resp = sess.get(candidate, headers=PROBE_HEADERS, timeout=timeout)
        except requests.exceptions.RequestException as e:
            logger.debug(f"Probe failed for {candidate}: {e}")
            continue

        if resp.status_code != 200 or not resp.text:
            logger.debug(f"Probe {candidate} returned {resp.status_code}")
            continue

        data = _parse_probe_body(resp.text)
        if data:
            logger.info(f"Product JSON endpoint found: {candidate}")
            return data
        logger.debug(f"Probe {candidate} returned no JSON object")

    return None
