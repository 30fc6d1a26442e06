"""Best-effort JSON recovery from untrusted text.

Scraped script tags and LLM responses often wrap a JSON object in other text
or use JavaScript object syntax. Each step here is a small pure function;
parse_json_lenient chains them:

1. strict json.loads
2. first balanced {...} substring that parses
3. naive bare-key quoting of the first balanced object
4. json5 on the first balanced object
"""

import json
import re
from typing import Any, Callable, Optional

import json5

__all__ = [
    "safe_json_parse",
    "find_balanced_object",
    "extract_json_substring",
    "quote_bare_keys",
    "parse_json_lenient",
]

BARE_KEY_RE = re.compile(r"([{,]\s*)([a-zA-Z0-9_]+)\s*:")

_UNPARSED = object()


def safe_json_parse(text: Optional[str]) -> Any:
    """Parse JSON, returning None instead of raising."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError, ValueError):
        return None


def find_balanced_object(text: str, start_index: int = 0) -> Optional[str]:
    """Return the {...} block starting at the first '{' at/after start_index.

    Depth counting only; braces inside string literals are not special-cased.
    Returns None when there is no '{' or the block never closes.
    """
    i = text.find("{", start_index)
    if i == -1:
        return None
    depth = 0
    for j in range(i, len(text)):
        ch = text[j]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        if depth == 0:
            return text[i:j + 1]
    return None


def extract_json_substring(text: str) -> Any:
    """Parse the first balanced object in text that is valid JSON."""
    for i, ch in enumerate(text):
        if ch != "{":
            continue
        block = find_balanced_object(text, i)
        if block:
            parsed = safe_json_parse(block)
            if parsed is not None:
                return parsed
    return None


def quote_bare_keys(text: str) -> str:
    """Turn JavaScript-style `key:` into JSON `"key":`."""
    return BARE_KEY_RE.sub(r'\1"\2":', text)


def _loads(text: str, loader: Callable[[str], Any] = json.loads) -> Any:
    try:
        return loader(text)
    except (ValueError, TypeError):
        return _UNPARSED


def parse_json_lenient(text: Optional[str], default: Any = None) -> Any:
    """Run the recovery layers in order and return the first success.

    A strict parse of the JSON literal `null` succeeds and returns None; pass
    a sentinel as default to tell that apart from "nothing parsed".

    Args:
        text: Raw text (LLM reply, script body, endpoint response)
        default: Returned when every layer fails

    Returns:
        Parsed value, or default
    """
    if not text:
        return default

    parsed = _loads(text)
    if parsed is not _UNPARSED:
        return parsed

    parsed = extract_json_substring(text)
    if parsed is not None:
        return parsed

    block = find_balanced_object(text, 0)
    if not block:
        return default

    parsed = _loads(quote_bare_keys(block))
    if parsed is not _UNPARSED:
        return parsed

    # Single quotes, trailing commas, comments
    parsed = _loads(block, json5.loads)
    if parsed is not _UNPARSED:
        return parsed
    return default
