"""In-memory token accounting per analysis run.

Each LLM step of an analysis (query generation, product extraction, ...)
reports its token counts here so a breakdown can be shown for the run.
"""

import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

__all__ = [
    "PIPELINES",
    "PURPOSES",
    "EXTRACT_PRODUCT_INFO",
    "TokenEntry",
    "add_tokens",
    "get_breakdown",
    "clear_analysis",
]

PIPELINES = ("perplexity", "google_overview", "chatgpt", "gemini")

EXTRACT_PRODUCT_INFO = "Extract Product Info"
PURPOSES = (
    "Generate Search Queries",
    EXTRACT_PRODUCT_INFO,
    "Strategic Analysis",
    "Process Sources",
)


@dataclass
class TokenEntry:
    purpose: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    timestamp: float
    pipeline: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "pipeline": data["pipeline"],
            "purpose": data["purpose"],
            "inputTokens": data["input_tokens"],
            "outputTokens": data["output_tokens"],
            "totalTokens": data["total_tokens"],
            "timestamp": data["timestamp"],
        }


_store: Dict[str, List[TokenEntry]] = {}
_lock = threading.Lock()


def add_tokens(
    analysis_id: Optional[str],
    pipeline: Optional[str],
    purpose: str,
    input_tokens: int,
    output_tokens: int,
    total_tokens: int,
) -> None:
    """Record token usage for an analysis. No-op without an analysis id."""
    if not analysis_id:
        return
    entry = TokenEntry(
        purpose=purpose,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=total_tokens,
        timestamp=time.time(),
        pipeline=pipeline,
    )
    with _lock:
        _store.setdefault(analysis_id, []).append(entry)


def get_breakdown(analysis_id: Optional[str]) -> Dict[str, Any]:
    """Totals for an analysis, by purpose and by pipeline.

    Returns:
        {"total": int, "byPurpose": {...}, "byPipeline": {...}, "entries": [...]}
        where byPurpose always lists every purpose.
    """
    by_purpose: Dict[str, int] = {purpose: 0 for purpose in PURPOSES}
    by_pipeline: Dict[str, int] = {}
    if not analysis_id:
        return {"total": 0, "byPurpose": by_purpose, "byPipeline": by_pipeline, "entries": []}

    with _lock:
        entries = list(_store.get(analysis_id, []))

    total = 0
    for entry in entries:
        total += entry.total_tokens
        by_purpose[entry.purpose] = by_purpose.get(entry.purpose, 0) + entry.total_tokens
        key = entry.pipeline or "unknown"
        by_pipeline[key] = by_pipeline.get(key, 0) + entry.total_tokens

    return {
        "total": total,
        "byPurpose": by_purpose,
        "byPipeline": by_pipeline,
        "entries": [entry.to_dict() for entry in entries],
    }


def clear_analysis(analysis_id: Optional[str]) -> None:
    """Forget all entries for an analysis."""
    if not analysis_id:
        return
    with _lock:
        _store.pop(analysis_id, None)
