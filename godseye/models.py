"""Data models for extracted products."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "PRODUCT_FIELDS",
    "Feature",
    "ProductInfo",
    "TokenUsage",
    "ExtractionState",
    "ExtractionResult",
]

# Keys of the ProductInfo JSON object, in prompt order
PRODUCT_FIELDS = (
    "product_name",
    "description",
    "general_product_type",
    "specific_product_type",
    "specifications",
    "features",
    "targeted_market",
    "problem_product_is_solving",
)


@dataclass(frozen=True)
class Feature:
    """A single key feature of a product."""

    name: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True)
class ProductInfo:
    """Structured product information returned by the LLM.

    Built by shaping.shape_strict, so scalar fields are either a str or None
    and the collections are always present (possibly empty).
    """

    product_name: Optional[str] = None
    description: Optional[str] = None
    general_product_type: Optional[str] = None
    specific_product_type: Optional[str] = None
    specifications: Dict[str, Any] = field(default_factory=dict)
    features: List[Feature] = field(default_factory=list)
    targeted_market: Optional[str] = None
    problem_product_is_solving: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape (exactly the PRODUCT_FIELDS keys)."""
        return {
            "product_name": self.product_name,
            "description": self.description,
            "general_product_type": self.general_product_type,
            "specific_product_type": self.specific_product_type,
            "specifications": dict(self.specifications),
            "features": [f.to_dict() for f in self.features],
            "targeted_market": self.targeted_market,
            "problem_product_is_solving": self.problem_product_is_solving,
        }


@dataclass(frozen=True)
class TokenUsage:
    """Token counts reported by the LLM for one call."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "totalTokens": self.total_tokens,
        }


@dataclass
class ExtractionState:
    """Working state of the heuristic cascade for one page."""

    product_name: Optional[str] = None
    description: Optional[str] = None
    method: Optional[str] = None
    html_preview: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """True once both the name and description slots are filled."""
        return bool(self.product_name and self.description)


@dataclass
class ExtractionResult:
    """Outcome of scrape_and_extract_product_info."""

    json_data: ProductInfo
    extraction_method: Optional[str]
    raw_response: str
    missing_fields: List[str] = field(default_factory=list)
    token_usage: Optional[TokenUsage] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase JSON shape returned to API callers."""
        return {
            "jsonData": self.json_data.to_dict(),
            "tokenUsage": self.token_usage.to_dict() if self.token_usage else None,
            "extractionMethod": self.extraction_method,
            "rawResponse": self.raw_response,
            "missingFields": list(self.missing_fields),
        }
