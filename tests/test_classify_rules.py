"""Rule cascade, constraint thresholds, scoring and alternatives. No LLM."""
import pytest
from pydantic import ValidationError
from sourcing.classify import (
    BASE_FEASIBILITY,
    LEVEL_RULES,
    MOQ_FLOORS,
    PRICE_MULTIPLIERS,
    calculate_feasibility,
    classify_customization,
    describe_customization_type,
    determine_level,
    identify_constraints,
    matching_rule,
)
from sourcing.rulebook import CUSTOMIZATION_LEVELS, level_info
from sourcing.schemas import (
    CustomizationConstraint,
    CustomizationSpec,
    LogoSpec,
    PriceTarget,
    ProductRequestJson,
    ProductSpec,
    Requirements,
)
from sourcing.utils import format_amount


def _request(features=None, colors=None, logo=None, moq=None, price=None) -> ProductRequestJson:
    return ProductRequestJson(
        product=ProductSpec(description="Test product"),
        customization=CustomizationSpec(logo=logo, features=features or [], color_variations=colors or []),
        requirements=Requirements(moq=moq, price_target=price),
    )


def _strip_ids(c) -> dict:
    data = c.model_dump(exclude={"warnings", "alternatives"})
    data["warnings"] = [w.model_dump(exclude={"id"}) for w in c.warnings]
    data["alternatives"] = [a.model_dump(exclude={"id"}) for a in c.alternatives]
    return data


def test_rules_are_ordered_from_most_complex() -> None:
    levels = [r.level for r in LEVEL_RULES]
    assert levels == sorted(levels, reverse=True)
    assert levels[0] == 5 and levels[-1] == 1
    assert len({r.name for r in LEVEL_RULES}) == len(LEVEL_RULES)


@pytest.mark.parametrize("features, expected", [
    (["Multi-Component packaging"], 5),
    (["gift SET"], 5),
    (["custom shape lid"], 4),
    (["Injection molded cap"], 4),
    (["vending unit"], 4),
    (["Size modification"], 3),
    (["capacity change to 500ml"], 3),
    (["material composition blend"], 3),
    (["label insert"], 2),
    (["quieter motor"], 2),
    (["leather strap"], 2),
    (["printed pattern"], 1),
    (["laser engraving"], 1),
    (["gift wrap"], 1),
])
def test_feature_keywords(features, expected) -> None:
    assert determine_level(_request(features=features)) == expected


def test_tooling_rule_wins_over_surface_rule() -> None:
    assert determine_level(_request(features=["mold", "emboss"])) == 4
    assert determine_level(_request(features=["mold"], logo=LogoSpec(type="printing"))) == 4


def test_logo_type_decides_between_level_1_and_2() -> None:
    assert determine_level(_request(logo=LogoSpec(type="rubber-tag"))) == 2
    assert determine_level(_request(logo=LogoSpec(type="label"))) == 2
    assert determine_level(_request(logo=LogoSpec(type="heat-press"))) == 1


def test_many_features_and_colors_alone_is_level_5() -> None:
    req = _request(features=["w", "x", "y", "z"], colors=["r", "g", "b", "k"])
    assert matching_rule(req).name == "many_features_and_colors"
    assert determine_level(req) == 5
    assert determine_level(_request(features=["w", "x", "y"], colors=["r", "g", "b", "k"])) == 1


def test_matching_rule_names() -> None:
    assert matching_rule(_request()) is None
    assert matching_rule(_request(colors=["navy"])).name == "color_variations"
    assert matching_rule(_request(features=["gift wrap"])).name == "any_feature"


def test_customization_type_text() -> None:
    req = _request(features=["d-ring", "zipper"], colors=["red", "blue"], logo=LogoSpec(type="embossing"))
    assert describe_customization_type(req) == "embossing logo + d-ring, zipper + 2 color variation(s)"


def test_thresholds_are_monotonic_in_level() -> None:
    levels = [1, 2, 3, 4, 5]
    assert [MOQ_FLOORS[lv] for lv in levels] == sorted(MOQ_FLOORS.values())
    assert [PRICE_MULTIPLIERS[lv] for lv in levels] == sorted(PRICE_MULTIPLIERS.values())
    assert [BASE_FEASIBILITY[lv] for lv in levels] == sorted(BASE_FEASIBILITY.values(), reverse=True)


def test_moq_constraint_severity_by_level() -> None:
    req = _request(moq=100)
    assert identify_constraints(req, 1)[0].severity == "medium"
    assert identify_constraints(req, 2)[0].severity == "medium"
    assert identify_constraints(req, 3)[0].severity == "high"
    assert identify_constraints(req, 4)[0].severity == "critical"
    assert identify_constraints(_request(moq=500), 1) == []


def test_price_constraint_threshold() -> None:
    low = identify_constraints(_request(price=PriceTarget(max=0.5, currency="EUR")), 1)
    assert [(c.type, c.severity) for c in low] == [("price", "medium")]
    assert low[0].required_value == "~EUR 0.60 estimated"
    assert identify_constraints(_request(price=PriceTarget(max=1.0)), 1) == []
    assert identify_constraints(_request(price=PriceTarget(min=0.1, currency="USD")), 1) == []


def test_non_critical_moq_gap_is_a_warning() -> None:
    c = classify_customization(_request(features=["resize"], moq=100))
    assert c.level == 3
    assert [(w.type, w.severity) for w in c.warnings] == [("moq-mismatch", "warning"), ("timeline-risk", "warning")]
    c = classify_customization(_request(logo=LogoSpec(type="printing"), moq=100))
    assert c.level == 1
    assert [(w.type, w.severity) for w in c.warnings] == [("moq-mismatch", "warning")]


def test_min_only_price_target_still_offers_price_alternative() -> None:
    c = classify_customization(_request(features=["zipper"], price=PriceTarget(min=1)))
    assert c.level == 2
    assert "price" not in {con.type for con in c.constraints}
    price_alt = c.alternatives[-1]
    assert price_alt.negotiable_on == ["price", "customization-type"]
    assert price_alt.new_level == 1
    assert price_alt.new_price.min == 1
    assert price_alt.new_price.max is None


def test_price_values_render_as_plain_decimals() -> None:
    low = identify_constraints(_request(price=PriceTarget(max=0.25)), 3)
    assert low[0].type == "price"
    assert low[0].current_value == "USD 0.25"
    assert format_amount(1500000.0) == "1500000"
    assert format_amount(0.3) == "0.3"
    assert format_amount(12.50) == "12.5"


def test_supplier_and_tooling_only_from_level_4() -> None:
    for level in (1, 2, 3):
        types = {c.type for c in identify_constraints(_request(), level)}
        assert not types & {"supplier", "tooling"}
    for level in (4, 5):
        types = [c.type for c in identify_constraints(_request(), level)]
        assert types == ["timeline", "supplier", "tooling"]


def test_feasibility_penalties_and_clamp() -> None:
    def con(severity):
        return CustomizationConstraint(type="moq", description="", severity=severity, current_value="", required_value="")

    assert calculate_feasibility(1, []) == 95
    assert calculate_feasibility(1, [con("low")]) == 93
    assert calculate_feasibility(2, [con("medium"), con("high")]) == 70
    assert calculate_feasibility(5, [con("critical"), con("critical")]) == 0
    assert calculate_feasibility(3, [con("high"), con("medium")]) == calculate_feasibility(3, [con("medium"), con("high")])


def test_score_bounds_across_requests() -> None:
    requests = [
        _request(),
        _request(features=["mold"], moq=1, price=PriceTarget(max=0.01)),
        _request(features=["assembly"], moq=1, price=PriceTarget(max=0.01)),
        _request(logo=LogoSpec(type="printing"), moq=10_000, price=PriceTarget(max=50)),
    ]
    for req in requests:
        assert 0 <= classify_customization(req).feasibility_score <= 100


def test_classification_is_deterministic_except_ids() -> None:
    req = _request(features=["resize", "zipper"], moq=300, price=PriceTarget(min=1, max=2))
    first = classify_customization(req)
    second = classify_customization(req)
    assert _strip_ids(first) == _strip_ids(second)
    assert {w.id for w in first.warnings}.isdisjoint({w.id for w in second.warnings})


def test_level_reduction_gating() -> None:
    for features, level in ((["print"], 1), (["zipper"], 2), (["resize"], 3), (["mold"], 4), (["assembly"], 5)):
        c = classify_customization(_request(features=features))
        assert c.level == level
        reductions = [a for a in c.alternatives if "customization-level" in a.negotiable_on]
        if level == 1:
            assert reductions == []
        else:
            assert len(reductions) == 1
            assert reductions[0].new_level == level - 1


def test_price_alternative_never_below_level_1() -> None:
    c = classify_customization(_request(logo=LogoSpec(type="printing"), price=PriceTarget(max=20)))
    assert c.level == 1
    assert len(c.alternatives) == 1
    assert c.alternatives[0].new_level == 1


def test_warnings_quote_rulebook_text() -> None:
    c = classify_customization(_request(features=["mold"]))
    info = level_info(4)
    timeline = next(w for w in c.warnings if w.type == "timeline-risk")
    assert info.development_time in timeline.message
    supplier = next(w for w in c.warnings if w.type == "supplier-limited")
    assert info.early_warning_signal in supplier.message
    assert supplier.suggestion is None


def test_rulebook_lookup_is_stable() -> None:
    assert set(CUSTOMIZATION_LEVELS) == {1, 2, 3, 4, 5}
    for level in range(1, 6):
        assert level_info(level) is level_info(level)
        assert level_info(level).level == level
    with pytest.raises(TypeError):
        CUSTOMIZATION_LEVELS[1] = level_info(2)


def test_classification_is_frozen_and_serializes_camel_case() -> None:
    c = classify_customization(_request(features=["zipper"], moq=100))
    with pytest.raises(ValidationError):
        c.level = 3
    data = c.model_dump(by_alias=True)
    assert data["feasibilityScore"] == 80
    assert data["levelInfo"]["developmentTime"] == "7-15 days"
    assert data["constraints"][0]["currentValue"] == "100"
