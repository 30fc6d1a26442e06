"""API endpoints for product scraping.

POST /api/scrape runs the extractor for one URL and records its token
usage against the caller's analysis id. GET /api/token-usage/<id> returns the
per-analysis breakdown.
"""

from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Response, jsonify, request

from godseye.extractor import scrape_and_extract_product_info
from godseye.logging_config import get_logger
from godseye.token_usage import EXTRACT_PRODUCT_INFO, PIPELINES, add_tokens, get_breakdown
from godseye.trace import default_trace_sink
from godseye.url_validation import URLValidationError, validate_url

from .config import LOG_REQUESTS

__all__ = ["api"]

logger = get_logger("web.api")

# Create blueprint for API
api = Blueprint("api", __name__, url_prefix="/api")

ApiResponse = Tuple[Response, int]


def _error(message: str, status: int) -> ApiResponse:
    return jsonify({"error": message}), status


def _record_token_usage(
    result_usage: Optional[Dict[str, Any]],
    analysis_id: Optional[str],
    pipeline: Optional[str],
    search_query: Optional[str],
) -> None:
    if not result_usage:
        return
    input_tokens = result_usage.get("inputTokens") or 0
    output_tokens = result_usage.get("outputTokens") or 0
    total_tokens = result_usage.get("totalTokens")
    if total_tokens is None:
        total_tokens = input_tokens + output_tokens

    tags = (f" [analysisId={analysis_id}]" if analysis_id else "") + (
        f" [pipeline={pipeline}]" if pipeline else ""
    )
    logger.info(
        f"[Gemini][{EXTRACT_PRODUCT_INFO}]{tags} input={input_tokens} output={output_tokens} "
        f"total={total_tokens} context={'with-search-query' if search_query else 'no-search-query'}"
    )
    add_tokens(analysis_id, pipeline, EXTRACT_PRODUCT_INFO, input_tokens, output_tokens, total_tokens)


@api.route("/scrape", methods=["GET"])
def scrape_usage() -> Response:
    """Describe how to call the scrape endpoint."""
    return jsonify({
        "message": "Scraping API endpoint. Send a POST request with a URL to scrape product information.",
        "usage": {
            "method": "POST",
            "body": {
                "url": "https://example.com/product-page",
            },
        },
    })


@api.route("/scrape", methods=["POST"])
def scrape() -> ApiResponse:
    """Scrape a product page and return the extracted ProductInfo.

    Body: {"url": str, "searchQuery"?: str, "analysisId"?: str, "pipeline"?: str}
    """
    try:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        url = payload.get("url")
        search_query = payload.get("searchQuery") or None
        analysis_id = payload.get("analysisId") if isinstance(payload.get("analysisId"), str) else None
        pipeline = payload.get("pipeline") if payload.get("pipeline") in PIPELINES else None

        if not url:
            return _error("URL is required", 400)

        try:
            url = validate_url(str(url))
        except URLValidationError:
            return _error("Invalid URL format", 400)

        if LOG_REQUESTS:
            logger.info(f"[Scrape] Starting process for URL: {url}")
            if search_query:
                logger.info(f"[Scrape] Using search query context: {search_query}")

        result = scrape_and_extract_product_info(
            url,
            search_query,
            trace_sink=default_trace_sink(),
        )
        if result is None:
            return _error(
                "Failed to scrape and extract product information. "
                "Please check if GEMINI_API_KEY is set in your environment variables.",
                500,
            )

        token_usage = result.token_usage.to_dict() if result.token_usage else None
        _record_token_usage(token_usage, analysis_id, pipeline, search_query)

        return jsonify({
            "success": True,
            "data": result.json_data.to_dict(),
            "tokenUsage": token_usage,
            "missingFields": result.missing_fields,
            "extractionMethod": result.extraction_method,
        }), 200

    except Exception:
        logger.exception("Error in scrape API route")
        return _error("Internal server error", 500)


@api.route("/token-usage/<analysis_id>", methods=["GET"])
def token_usage(analysis_id: str) -> Response:
    """Token usage breakdown for one analysis run."""
    return jsonify(get_breakdown(analysis_id))
