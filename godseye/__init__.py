"""GodsEye product page extractor package."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from godseye.config import GEMINI_MODEL
from godseye.extractor import run_extraction_chain, scrape_and_extract_product_info
from godseye.fetcher import FetchError
from godseye.llm import LLMResponseError
from godseye.models import (
    PRODUCT_FIELDS,
    ExtractionResult,
    ExtractionState,
    Feature,
    ProductInfo,
    TokenUsage,
)
from godseye.shaping import compute_missing_fields, shape_strict
from godseye.trace import FileTraceSink, NullTraceSink
from godseye.url_validation import URLValidationError

__all__ = [
    # Version
    "__version__",
    # Config
    "GEMINI_MODEL",
    # Models
    "PRODUCT_FIELDS",
    "ExtractionResult",
    "ExtractionState",
    "Feature",
    "ProductInfo",
    "TokenUsage",
    # Core functions
    "scrape_and_extract_product_info",
    "run_extraction_chain",
    "shape_strict",
    "compute_missing_fields",
    # Trace sinks
    "FileTraceSink",
    "NullTraceSink",
    # Errors
    "FetchError",
    "LLMResponseError",
    "URLValidationError",
]
