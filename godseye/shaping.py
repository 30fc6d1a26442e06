"""Coerce untrusted LLM output into the fixed ProductInfo shape."""

from typing import Any, Dict, List, Mapping

from godseye.models import Feature, ProductInfo

__all__ = ["shape_strict", "compute_missing_fields", "MISSING_FIELD_ORDER"]

# Order in which missing fields are reported
MISSING_FIELD_ORDER = (
    "product_name",
    "description",
    "general_product_type",
    "specific_product_type",
    "targeted_market",
    "problem_product_is_solving",
    "features",
    "specifications",
)


def _str_or_none(record: Mapping[str, Any], key: str) -> Any:
    value = record.get(key)
    return value if isinstance(value, str) else None


def _shape_features(raw: Any) -> List[Feature]:
    if not isinstance(raw, list):
        return []
    features: List[Feature] = []
    for item in raw:
        if isinstance(item, Feature):
            item = item.to_dict()
        if not isinstance(item, dict):
            item = {}
        name = item.get("name") if isinstance(item.get("name"), str) else ""
        description = item.get("description") if isinstance(item.get("description"), str) else ""
        if not name and not description:
            continue
        features.append(Feature(name=name, description=description))
    return features


def shape_strict(obj: Any) -> ProductInfo:
    """Map any object onto ProductInfo, defaulting every mistyped field.

    Non-string scalars become None, a non-dict `specifications` becomes {},
    a non-list `features` becomes [], and features with neither a name nor a
    description are dropped. Applying it to its own output is a no-op.
    """
    if isinstance(obj, ProductInfo):
        obj = obj.to_dict()
    record: Dict[str, Any] = obj if isinstance(obj, dict) else {}

    specifications = record.get("specifications")
    return ProductInfo(
        product_name=_str_or_none(record, "product_name"),
        description=_str_or_none(record, "description"),
        general_product_type=_str_or_none(record, "general_product_type"),
        specific_product_type=_str_or_none(record, "specific_product_type"),
        specifications=dict(specifications) if isinstance(specifications, dict) else {},
        features=_shape_features(record.get("features")),
        targeted_market=_str_or_none(record, "targeted_market"),
        problem_product_is_solving=_str_or_none(record, "problem_product_is_solving"),
    )


def compute_missing_fields(product: ProductInfo) -> List[str]:
    """Names of fields that are None or empty ("" / [] / {} all count)."""
    return [name for name in MISSING_FIELD_ORDER if not getattr(product, name)]
