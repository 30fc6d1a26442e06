"""Configuration and constants for the product extractor."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

__all__ = [
    "PROJECT_ROOT",
    "GEMINI_MODEL",
    "HEADERS",
    "PROBE_HEADERS",
    "REQUEST_TIMEOUT",
    "PROBE_TIMEOUT",
    "HTML_PREVIEW_CHARS",
    "MIN_LLM_INPUT_CHARS",
    "MAX_NAME_CANDIDATE_CHARS",
    "DENSEST_DESCRIPTION_LINES",
    "MAX_LINKS_PER_BLOCK",
    "get_api_key",
    "get_trace_dir",
]

PROJECT_ROOT = Path(__file__).parent.parent

# Load .env from the project root (no-op when absent)
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

# LLM Configuration (fixed, not configurable per call)
GEMINI_MODEL = "gemini-2.5-flash-lite"

# HTTP headers for the main page fetch and the JSON endpoint probes
HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
}
PROBE_HEADERS = {
    "User-Agent": "Mozilla/5.0",
}

# Request timeouts (seconds)
REQUEST_TIMEOUT = 30
PROBE_TIMEOUT = 8

# Extraction tuning
HTML_PREVIEW_CHARS = 2000
MIN_LLM_INPUT_CHARS = 20
MAX_NAME_CANDIDATE_CHARS = 120
DENSEST_DESCRIPTION_LINES = 5  # lines after the name candidate
MAX_LINKS_PER_BLOCK = 10  # blocks with more links are treated as navigation


def get_api_key() -> str:
    """Get the Gemini API key from the environment ('' when unset)."""
    return os.getenv("GEMINI_API_KEY", "")


def get_trace_dir() -> Optional[Path]:
    """Directory for debug artifacts, or None when tracing is disabled."""
    value = os.getenv("GODSEYE_TRACE_DIR", "").strip()
    return Path(value) if value else None
