"""Product extraction pipeline.

Fetches a product page, recovers a name and description through an ordered
chain of heuristics, then asks Gemini to fill the full ProductInfo shape.

Heuristic order (first hit per slot wins, chain stops once both are filled):

1. product-json-endpoint  guessed .js/.json product endpoints
2. json-ld                <script type="application/ld+json"> Product nodes
3. embedded-json          product objects inside inline scripts
4. selectors-fallback     common product title/description selectors
5. meta-fallback          og/twitter meta tags, <title>, <h1>, <h2>
6. densest-fallback       the content block with the most text
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

import requests  # type: ignore[import-untyped]

from godseye.config import (
    DENSEST_DESCRIPTION_LINES,
    HTML_PREVIEW_CHARS,
    MAX_NAME_CANDIDATE_CHARS,
    MIN_LLM_INPUT_CHARS,
    get_api_key,
)
from godseye.fetcher import FetchError, create_session, fetch_raw_html, try_product_json_endpoints
from godseye.html_utils import (
    densest_element_text,
    extract_embedded_json,
    extract_json_ld,
    meta_fallback,
    product_fields_from_embedded,
    product_fields_from_endpoint,
    product_fields_from_json_ld,
    selectors_fallback,
)
from godseye.llm import call_gemini, token_usage_from_metadata
from godseye.logging_config import get_logger, log_event
from godseye.models import ExtractionResult, ExtractionState
from godseye.shaping import compute_missing_fields, shape_strict
from godseye.text_utils import clean_title, normalize_text
from godseye.trace import FINAL_OUTPUT_ARTIFACT, NullTraceSink, TraceSink

__all__ = [
    "METHOD_PRODUCT_JSON",
    "METHOD_JSON_LD",
    "METHOD_EMBEDDED_JSON",
    "METHOD_SELECTORS",
    "METHOD_META",
    "METHOD_DENSEST",
    "EXTRACTION_STEPS",
    "StepOutcome",
    "run_extraction_chain",
    "build_llm_input",
    "scrape_and_extract_product_info",
]

logger = get_logger("extractor")

METHOD_PRODUCT_JSON = "product-json-endpoint"
METHOD_JSON_LD = "json-ld"
METHOD_EMBEDDED_JSON = "embedded-json"
METHOD_SELECTORS = "selectors-fallback"
METHOD_META = "meta-fallback"
METHOD_DENSEST = "densest-fallback"


@dataclass
class StepOutcome:
    """What one heuristic found.

    claims_method is True when the step should be credited as the extraction
    method (if no earlier step was). JSON sources claim as soon as a product
    object is found; DOM fallbacks only when they produced text.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    claims_method: bool = False


@dataclass
class PageContext:
    html: str
    url: str
    session: Optional[requests.Session]
    state: ExtractionState


StepFn = Callable[[PageContext], Optional[StepOutcome]]


# =============================================================================
# Steps
# =============================================================================

def _product_endpoint_step(ctx: PageContext) -> Optional[StepOutcome]:
    data = try_product_json_endpoints(ctx.url, session=ctx.session)
    if not data:
        return None
    name, description = product_fields_from_endpoint(data)
    return StepOutcome(name, description, claims_method=True)


def _json_ld_step(ctx: PageContext) -> Optional[StepOutcome]:
    data = extract_json_ld(ctx.html)
    if not data:
        return None
    name, description = product_fields_from_json_ld(data)
    return StepOutcome(name, description, claims_method=True)


def _embedded_json_step(ctx: PageContext) -> Optional[StepOutcome]:
    data = extract_embedded_json(ctx.html)
    if not data:
        return None
    name, description = product_fields_from_embedded(data)
    return StepOutcome(name, description, claims_method=True)


def _selectors_step(ctx: PageContext) -> Optional[StepOutcome]:
    name, description = selectors_fallback(ctx.html)
    return StepOutcome(
        normalize_text(name) or None,
        normalize_text(description) or None,
        claims_method=bool(name or description),
    )


def _meta_step(ctx: PageContext) -> Optional[StepOutcome]:
    title, description = meta_fallback(ctx.html)
    return StepOutcome(
        clean_title(title),
        normalize_text(description) or None,
        claims_method=bool(title or description),
    )


def _densest_step(ctx: PageContext) -> Optional[StepOutcome]:
    densest = densest_element_text(ctx.html)
    outcome = StepOutcome(claims_method=bool(densest))
    if ctx.state.product_name or not densest:
        return outcome

    lines = [line.strip() for line in densest.split("\n") if line.strip()]
    if not lines:
        return outcome

    if len(lines[0]) < MAX_NAME_CANDIDATE_CHARS:
        outcome.name = normalize_text(lines[0])
    if not ctx.state.description and len(lines) > 1:
        outcome.description = normalize_text(" ".join(lines[1:1 + DENSEST_DESCRIPTION_LINES])) or None
    return outcome


EXTRACTION_STEPS: List[Tuple[str, StepFn]] = [
    (METHOD_PRODUCT_JSON, _product_endpoint_step),
    (METHOD_JSON_LD, _json_ld_step),
    (METHOD_EMBEDDED_JSON, _embedded_json_step),
    (METHOD_SELECTORS, _selectors_step),
    (METHOD_META, _meta_step),
    (METHOD_DENSEST, _densest_step),
]


# =============================================================================
# Chain
# =============================================================================

def _apply_outcome(state: ExtractionState, method: str, outcome: StepOutcome) -> None:
    if outcome.name and not state.product_name:
        state.product_name = outcome.name
    if outcome.description and not state.description:
        state.description = outcome.description
    if outcome.claims_method and not state.method:
        state.method = method


def run_extraction_chain(
    html: Optional[str],
    url: str,
    session: Optional[requests.Session] = None,
    steps: Optional[List[Tuple[str, StepFn]]] = None,
) -> ExtractionState:
    """Run the heuristics in order until both name and description are known.

    Nothing runs when html is empty (the page fetch failed).
    """
    state = ExtractionState(html_preview=html[:HTML_PREVIEW_CHARS] if html else None)
    if not html:
        return state

    ctx = PageContext(html=html, url=url, session=session, state=state)
    for method, step in steps or EXTRACTION_STEPS:
        if state.is_complete:
            break
        try:
            outcome = step(ctx)
        except Exception as e:
            logger.warning(f"Extraction step {method} failed: {e}")
            continue
        if outcome is not None:
            _apply_outcome(state, method, outcome)

    state.product_name = state.product_name.strip() if state.product_name else None
    state.description = state.description.strip() if state.description else None
    return state


def build_llm_input(state: ExtractionState, html: Optional[str]) -> str:
    """Text handed to the LLM: name and description, else the densest block."""
    if state.product_name and state.description:
        return f"{state.product_name}\n\n{state.description}"
    if state.product_name:
        return state.product_name
    if state.description:
        return state.description
    if html:
        return densest_element_text(html)
    return ""


# =============================================================================
# Entry point
# =============================================================================

def scrape_and_extract_product_info(
    url: str,
    search_query: Optional[str] = None,
    *,
    session: Optional[requests.Session] = None,
    llm_client: Any = None,
    trace_sink: Optional[TraceSink] = None,
) -> Optional[ExtractionResult]:
    """Scrape a product page and extract structured ProductInfo via Gemini.

    Page fetch failures are logged and the pipeline continues with no HTML.
    Any failure of the LLM call is fatal for the request and yields None.

    Args:
        url: Absolute product page URL
        search_query: Optional query that surfaced the product (prompt context only)
        session: requests Session used for the page fetch and endpoint probes
        llm_client: google.genai Client (default: built from GEMINI_API_KEY)
        trace_sink: Receives debug artifacts (default: discard)

    Returns:
        ExtractionResult, or None if the LLM step failed
    """
    sink = trace_sink or NullTraceSink()

    if llm_client is None and not get_api_key():
        logger.error("GEMINI_API_KEY environment variable is not set.")
        return None

    sess = session or create_session()
    logger.info(f"Fetching URL: {url}")

    html: Optional[str] = None
    try:
        html = fetch_raw_html(url, session=sess)
    except FetchError as e:
        logger.warning(f"Failed to fetch page HTML: {e}")

    state = run_extraction_chain(html, url, session=sess)
    log_event("extraction_method", {
        "message": f"Extraction method chosen: {state.method}",
        "url": url,
        "method": state.method,
        "has_name": bool(state.product_name),
        "has_description": bool(state.description),
    }, logger_name="extractor")

    llm_input = build_llm_input(state, html)
    if len(llm_input) < MIN_LLM_INPUT_CHARS:
        logger.warning("LLM input is small; Gemini may return nulls for some fields.")

    try:
        result = call_gemini(llm_input, search_query, client=llm_client, trace_sink=sink)
    except Exception as e:
        logger.error(f"Fatal error extracting product info for {url}: {e}")
        log_event("extraction_failed", {
            "url": url,
            "method": state.method,
            "error": str(e),
        }, logger_name="extractor")
        return None

    product = shape_strict(result.parsed)
    missing_fields = compute_missing_fields(product)
    token_usage = token_usage_from_metadata(result.usage)

    final_output = {
        "product": product.to_dict(),
        "extraction_method": state.method,
        "missing_fields": missing_fields,
    }
    sink.write(FINAL_OUTPUT_ARTIFACT, json.dumps(final_output, indent=2, ensure_ascii=False))

    log_event("extraction_complete", {
        "message": f"Extracted product info for {url}",
        "url": url,
        "method": state.method,
        "missing_fields": missing_fields,
        "token_usage": token_usage.to_dict() if token_usage else None,
        "context": "with-search-query" if search_query else "no-search-query",
    }, logger_name="extractor")

    return ExtractionResult(
        json_data=product,
        extraction_method=state.method,
        raw_response=result.raw,
        missing_fields=missing_fields,
        token_usage=token_usage,
    )
