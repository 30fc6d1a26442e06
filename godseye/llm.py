"""Gemini call that turns recovered page text into ProductInfo JSON.

One request per extraction, fixed model, no retry. The reply goes through the
lenient JSON chain; a reply that is the JSON literal null is still a valid
answer and shapes to an empty product.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from godseye.config import GEMINI_MODEL, get_api_key
from godseye.json_utils import parse_json_lenient
from godseye.logging_config import get_logger, log_event
from godseye.models import TokenUsage
from godseye.trace import PROMPT_ARTIFACT, RAW_RESPONSE_ARTIFACT, NullTraceSink, TraceSink

__all__ = [
    "LLMResponseError",
    "GeminiCallResult",
    "build_prompt",
    "call_gemini",
    "token_usage_from_metadata",
]

logger = get_logger("llm")

_NO_JSON = object()


class LLMResponseError(ValueError):
    """Raised when the model reply cannot be parsed as JSON."""
    pass


@dataclass
class GeminiCallResult:
    parsed: Any
    usage: Any
    raw: str


PROMPT_TEMPLATE = """
Based on the following text content from a product webpage, please extract the required information.
Provide the output ONLY in a valid JSON format. Do not include any markdown formatting like ```json.
The JSON should include the following keys:
- "product_name": The full name of the product.
- "description": A concise paragraph describing the product.
- "general_product_type": General type/category of the product.
- "specific_product_type": Specific type/category of the product.
- "specifications": An object containing key-value pairs of technical specifications.
- "features": A list of objects, where each object has a "name" and "description" for a key feature.
- "targeted_market": An inferred analysis of the ideal customer for this product.
- "problem_product_is_solving": An inferred analysis of the key problems or pain points this product addresses for its target market.{search_context}

Here is the text content:
---
{text}
---
"""

SEARCH_CONTEXT_TEMPLATE = (
    '\n\nAdditional Context: This product was discovered using the search query "{query}". '
    "Use this context to better understand the product's positioning and target market."
)


def _get_gemini_client():
    """Get a Gemini client (lazy import keeps module import cheap)."""
    from google import genai
    return genai.Client(api_key=get_api_key())


def build_prompt(text: str, search_query: Optional[str] = None) -> str:
    """Fixed extraction instruction around the page text."""
    search_context = SEARCH_CONTEXT_TEMPLATE.format(query=search_query) if search_query else ""
    return PROMPT_TEMPLATE.format(search_context=search_context, text=text)


def _response_text(response: Any) -> str:
    try:
        text = response.text
    except (AttributeError, ValueError):
        text = None
    if isinstance(text, str):
        return text

    # No text part (blocked or empty candidates): keep the whole payload for debugging
    if hasattr(response, "model_dump_json"):
        return response.model_dump_json()
    return json.dumps(response, default=str)


def call_gemini(
    text: str,
    search_query: Optional[str] = None,
    client: Any = None,
    trace_sink: Optional[TraceSink] = None,
) -> GeminiCallResult:
    """Send the extraction prompt and parse the JSON reply.

    Args:
        text: Cleaned page text (name + description, or densest block)
        search_query: Optional search query that surfaced the product
        client: google.genai Client (default: built from GEMINI_API_KEY)
        trace_sink: Receives prompt_content.txt and, on failure, gemini_raw.txt

    Returns:
        GeminiCallResult with the parsed object, usage metadata and raw text

    Raises:
        LLMResponseError: If the reply is not JSON even after lenient recovery
        Exception: Any transport/auth error from the client propagates
    """
    sink = trace_sink or NullTraceSink()
    prompt = build_prompt(text, search_query)
    sink.write(PROMPT_ARTIFACT, prompt)

    gemini = client or _get_gemini_client()
    log_event("llm_call", {
        "message": f"Sending {len(text)} chars to {GEMINI_MODEL}",
        "model": GEMINI_MODEL,
        "input_chars": len(text),
        "has_search_query": bool(search_query),
    }, logger_name="llm")

    response = gemini.models.generate_content(model=GEMINI_MODEL, contents=prompt)
    raw = _response_text(response)

    parsed = parse_json_lenient(raw, default=_NO_JSON)
    if parsed is _NO_JSON:
        sink.write(RAW_RESPONSE_ARTIFACT, raw)
        raise LLMResponseError(
            f"Gemini response was not valid JSON ({len(raw)} chars). "
            f"Raw response written to {RAW_RESPONSE_ARTIFACT}"
        )

    usage = getattr(response, "usage_metadata", None)
    return GeminiCallResult(parsed=parsed, usage=usage, raw=raw)


def token_usage_from_metadata(usage: Any) -> Optional[TokenUsage]:
    """Map Gemini usage metadata onto TokenUsage (None when absent)."""
    if usage is None:
        return None
    prompt_tokens = getattr(usage, "prompt_token_count", None)
    total_tokens = getattr(usage, "total_token_count", None)
    token_usage = TokenUsage(
        input_tokens=prompt_tokens if prompt_tokens is not None else total_tokens,
        output_tokens=getattr(usage, "candidates_token_count", None),
        total_tokens=total_tokens,
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Token usage: {token_usage.to_dict()}")
    return token_usage
