"""
Normalization step: loose ProductRequest → strict ProductRequestJson.

Defaults every list to [], every missing text to "", and coerces unknown categories to "other"
so the classification engine only ever sees the closed shape.
"""
from typing import Any, get_args
from sourcing.schemas import (
    CustomizationSpec,
    ProductCategory,
    ProductRequest,
    ProductRequestJson,
    ProductSpec,
    Requirements,
)

CATEGORIES = frozenset(get_args(ProductCategory))


def normalize_category(category: str | None) -> str:
    value = (category or "").strip().lower()
    return value if value in CATEGORIES else "other"


def normalize_request(request: ProductRequest) -> ProductRequestJson:
    """Convert the captured request into the engine input."""
    c = request.customization
    return ProductRequestJson(
        product=ProductSpec(
            description=request.description,
            category=normalize_category(request.category),
            size=request.size or "",
            material=request.material or "",
            colors=list(request.colors or []),
        ),
        customization=CustomizationSpec(
            logo=c.logo,
            features=[f.strip() for f in (c.features or []) if f and f.strip()],
            color_variations=[v.strip() for v in (c.color_variations or []) if v and v.strip()],
        ),
        requirements=Requirements(
            price_target=request.price_target,
            moq=request.moq or None,
        ),
    )


def load_request(data: dict[str, Any]) -> ProductRequestJson:
    """
    Accept either an already-normalized document (has a "product" key) or a raw
    ProductRequest document. Raises pydantic.ValidationError on malformed input.
    """
    if "product" in data:
        return ProductRequestJson.model_validate(data)
    return normalize_request(ProductRequest.model_validate(data))
