"""Text normalization helpers shared by the heuristics."""

import re
from typing import Optional

__all__ = ["normalize_text", "clean_title", "strip_tags"]

NEWLINE_RE = re.compile(r"\r\n|\r")
CONTROL_WS_RE = re.compile(r"[\r\n\t]+")
MULTI_SPACE_RE = re.compile(r"\s{2,}")
TAG_RE = re.compile(r"<[^>]*>")

# Trailing vendor boilerplate such as " - Buy Online" or " | Official Store"
TITLE_SUFFIX_RE = re.compile(
    r"\s*[-|—–:]\s*(buy|official|online|store|website|shop|site|\.in).*$",
    re.IGNORECASE,
)


def normalize_text(value: Optional[str]) -> str:
    """Trim every line, drop blank lines and rejoin with '\\n'."""
    if not value:
        return ""
    lines = NEWLINE_RE.sub("\n", value).split("\n")
    return "\n".join(line.strip() for line in lines if line.strip()).strip()


def clean_title(title: Optional[str]) -> Optional[str]:
    """Collapse whitespace in a page title and strip vendor suffixes."""
    if not title:
        return None
    formatted = CONTROL_WS_RE.sub(" ", title)
    formatted = MULTI_SPACE_RE.sub(" ", formatted).strip()
    formatted = TITLE_SUFFIX_RE.sub("", formatted).strip()
    return formatted or None


def strip_tags(value: str) -> str:
    """Remove markup from an HTML fragment such as a Shopify body_html."""
    return TAG_RE.sub("", value)
