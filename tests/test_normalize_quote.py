"""Normalization of raw requests and preliminary quote synthesis. No LLM."""
import pytest
from pydantic import ValidationError
from sourcing.classify import classify_customization
from sourcing.normalize import load_request, normalize_category, normalize_request
from sourcing.quote import generate_quote, grand_total, placeholder_item, production_total
from sourcing.schemas import CustomizationInput, PriceTarget, ProductRequest, VisualizationItem


def test_normalize_fills_defaults() -> None:
    req = normalize_request(ProductRequest(id="r1", description="Canvas tote"))
    assert req.product.category == "other"
    assert req.product.size == ""
    assert req.product.material == ""
    assert req.product.colors == []
    assert req.customization.logo is None
    assert req.customization.features == []
    assert req.customization.color_variations == []
    assert req.requirements.moq is None
    assert req.requirements.price_target is None


def test_normalize_category_coerces_unknown_values() -> None:
    assert normalize_category("Apparel ") == "apparel"
    assert normalize_category("furniture") == "other"
    assert normalize_category(None) == "other"


def test_normalize_drops_blank_tokens_and_zero_moq() -> None:
    req = normalize_request(ProductRequest(
        id="r2",
        description="Mug",
        customization=CustomizationInput(features=[" print ", "", "  "], color_variations=["red", " "]),
        moq=0,
    ))
    assert req.customization.features == ["print"]
    assert req.customization.color_variations == ["red"]
    assert req.requirements.moq is None


def test_load_request_accepts_raw_camel_case_document() -> None:
    req = load_request({
        "id": "r3",
        "description": "Leather wallet",
        "category": "accessories",
        "customization": {"logo": {"type": "rubber-tag"}, "colorVariations": ["brown"]},
        "priceTarget": {"max": 4, "currency": "EUR"},
        "moq": 250,
    })
    assert req.product.category == "accessories"
    assert req.customization.logo.type == "rubber-tag"
    assert req.requirements.price_target.currency == "EUR"
    assert req.requirements.moq == 250
    assert classify_customization(req).level == 2


def test_load_request_accepts_normalized_document() -> None:
    req = load_request({
        "product": {"description": "Box", "category": "packaging-box"},
        "customization": {"features": ["custom box"]},
        "requirements": {"moq": 800},
    })
    assert req.product.category == "packaging-box"
    assert req.customization.color_variations == []


def test_load_request_rejects_bad_category_and_logo() -> None:
    with pytest.raises(ValidationError):
        load_request({"product": {"description": "Box", "category": "furniture"}})
    with pytest.raises(ValidationError):
        load_request({"id": "r4", "description": "Cap", "customization": {"logo": {"type": "sticker"}}})


def test_quote_for_mold_request() -> None:
    req = load_request({"id": "q1", "description": "Shoe", "customization": {"features": ["custom outsole"]}, "moq": 200})
    classification = classify_customization(req)
    quote = generate_quote("q1", classification, placeholder_item(req), req.requirements.moq)
    assert quote.request_id == "q1"
    assert quote.setup_fees == 2000
    assert quote.moq == 200
    assert quote.lead_time == "30-90 days"
    assert quote.unit_price == PriceTarget(min=1, max=5, currency="USD")
    assert quote.notes == [w.message for w in classification.warnings]
    assert [a.id for a in quote.alternatives] == [a.id for a in classification.alternatives]
    assert quote.alternatives[1].moq == 5000
    assert quote.alternatives[0].unit_price.max == 3
    assert production_total(quote) == 1000
    assert grand_total(quote) == 3000


def test_quote_prefers_design_estimates() -> None:
    req = load_request({"id": "q2", "description": "Tote", "customization": {"features": ["print"]}})
    item = VisualizationItem(id="v1", name="Natural canvas", estimated_price=PriceTarget(min=2, max=3, currency="USD"), estimated_moq=1200)
    quote = generate_quote("q2", classify_customization(req, item), item)
    assert quote.setup_fees == 150
    assert quote.moq == 1200
    assert quote.unit_price.max == 3
    assert quote.alternatives == []


def test_quote_defaults_moq_when_nothing_requested() -> None:
    req = load_request({"id": "q3", "description": "Candle jar", "customization": {"features": ["resize"]}})
    quote = generate_quote("q3", classify_customization(req), placeholder_item(req))
    assert quote.moq == 500
    assert quote.setup_fees == 500
    assert quote.selected_item.name == "Candle jar"
