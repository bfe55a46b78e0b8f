"""
Quote step: CustomizationClassification + selected design → PreliminaryQuote (deterministic).

Indicative only: unit price and MOQ come from the design estimate when present, setup fees
from the classification level.
"""
from sourcing.schemas import (
    AlternativeQuote,
    CustomizationClassification,
    PreliminaryQuote,
    PriceTarget,
    ProductRequestJson,
    VisualizationItem,
)
from sourcing.utils import new_id

DEFAULT_UNIT_PRICE = PriceTarget(min=1, max=5, currency="USD")
DEFAULT_ALTERNATIVE_PRICE = PriceTarget(min=0.5, max=3, currency="USD")
DEFAULT_MOQ = 500
SETUP_FEES = {1: 150, 2: 150, 3: 500, 4: 2000, 5: 5000}


def placeholder_item(request: ProductRequestJson) -> VisualizationItem:
    """Stand-in design when the buyer skipped design selection."""
    product = request.product
    specs = {k: v for k, v in (("size", product.size), ("material", product.material)) if v}
    return VisualizationItem(
        id=new_id(),
        name=product.description[:60] or "Requested product",
        description=product.description,
        specs=specs,
        selected=True,
    )


def generate_quote(
    request_id: str,
    classification: CustomizationClassification,
    selected_item: VisualizationItem,
    requested_moq: int | None = None,
) -> PreliminaryQuote:
    """Build the preliminary quote. Notes are the warning messages; one alternative quote per alternative."""
    return PreliminaryQuote(
        id=new_id(),
        request_id=request_id,
        selected_item=selected_item,
        customization=classification,
        unit_price=selected_item.estimated_price or DEFAULT_UNIT_PRICE.model_copy(),
        moq=selected_item.estimated_moq or requested_moq or DEFAULT_MOQ,
        setup_fees=SETUP_FEES[classification.level],
        lead_time=classification.level_info.development_time,
        notes=[w.message for w in classification.warnings],
        alternatives=[
            AlternativeQuote(
                id=alt.id,
                description=alt.description,
                unit_price=alt.new_price or DEFAULT_ALTERNATIVE_PRICE.model_copy(),
                moq=alt.new_moq or DEFAULT_MOQ,
                tradeoffs=list(alt.tradeoffs),
            )
            for alt in classification.alternatives
        ],
    )


def production_total(quote: PreliminaryQuote) -> float:
    """Estimated production cost at the top of the unit price range."""
    return (quote.unit_price.max or 0) * quote.moq


def grand_total(quote: PreliminaryQuote) -> float:
    return production_total(quote) + quote.setup_fees
