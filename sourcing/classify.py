"""
Classification step: ProductRequestJson → CustomizationClassification (deterministic, no LLM).

Pipeline: level (ordered keyword rules, L5 first) → constraints (MOQ/price/timeline/supplier/tooling)
→ warnings + feasibility score → negotiable alternatives.
"""
import re
from typing import Callable, NamedTuple, Optional
from sourcing.rulebook import level_info
from sourcing.schemas import (
    AlternativeOption,
    CustomizationClassification,
    CustomizationConstraint,
    CustomizationLevel,
    FeasibilityWarning,
    PriceTarget,
    ProductRequestJson,
    VisualizationItem,
)
from sourcing.utils import format_amount, new_id

MOQ_FLOORS = {1: 500, 2: 1000, 3: 2000, 4: 5000, 5: 10000}
PRICE_MULTIPLIERS = {1: 1.2, 2: 1.5, 3: 2.0, 4: 3.0, 5: 4.0}
MIN_BASE_UNIT_PRICE = 0.5
BASE_FEASIBILITY = {1: 95, 2: 85, 3: 65, 4: 45, 5: 25}
SEVERITY_PENALTIES = {"critical": 20, "high": 10, "medium": 5, "low": 2}
SAVING_PER_LEVEL_PCT = 20

SYSTEM_KEYWORDS = re.compile(r"assembly|multi-component|system|set", re.IGNORECASE)
TOOLING_KEYWORDS = re.compile(r"mold|tooling|outsole|custom shape|injection", re.IGNORECASE)
EQUIPMENT_KEYWORDS = re.compile(r"specialized equipment|vending|machine", re.IGNORECASE)
STRUCTURAL_KEYWORDS = re.compile(r"size modif|capacity change|structural|resize|dimension", re.IGNORECASE)
MATERIAL_KEYWORDS = re.compile(r"material composition|structural adjust", re.IGNORECASE)
COMPONENT_KEYWORDS = re.compile(r"custom box|label insert|motor|inner material|component", re.IGNORECASE)
HARDWARE_KEYWORDS = re.compile(r"hardware|d-ring|strap|zipper", re.IGNORECASE)
SURFACE_KEYWORDS = re.compile(r"print|engrav|emboss|color", re.IGNORECASE)
COMPONENT_LOGO_TYPES = {"label", "rubber-tag"}


class LevelRule(NamedTuple):
    """One entry of the level cascade. First matching rule wins."""

    level: CustomizationLevel
    name: str
    matches: Callable[[ProductRequestJson], bool]


def _any_feature(pattern: re.Pattern) -> Callable[[ProductRequestJson], bool]:
    def check(request: ProductRequestJson) -> bool:
        return any(pattern.search(f) for f in request.customization.features)
    return check


def _many_features_and_colors(request: ProductRequestJson) -> bool:
    c = request.customization
    return len(c.features) > 3 and len(c.color_variations) > 3


def _component_logo(request: ProductRequestJson) -> bool:
    logo = request.customization.logo
    return logo is not None and logo.type in COMPONENT_LOGO_TYPES


def _has_logo(request: ProductRequestJson) -> bool:
    return request.customization.logo is not None


def _has_color_variations(request: ProductRequestJson) -> bool:
    return bool(request.customization.color_variations)


def _has_features(request: ProductRequestJson) -> bool:
    return bool(request.customization.features)


LEVEL_RULES: tuple[LevelRule, ...] = (
    LevelRule(5, "many_features_and_colors", _many_features_and_colors),
    LevelRule(5, "system_keywords", _any_feature(SYSTEM_KEYWORDS)),
    LevelRule(4, "tooling_keywords", _any_feature(TOOLING_KEYWORDS)),
    LevelRule(4, "equipment_keywords", _any_feature(EQUIPMENT_KEYWORDS)),
    LevelRule(3, "structural_keywords", _any_feature(STRUCTURAL_KEYWORDS)),
    LevelRule(3, "material_keywords", _any_feature(MATERIAL_KEYWORDS)),
    LevelRule(2, "component_keywords", _any_feature(COMPONENT_KEYWORDS)),
    LevelRule(2, "component_logo", _component_logo),
    LevelRule(2, "hardware_keywords", _any_feature(HARDWARE_KEYWORDS)),
    LevelRule(1, "logo", _has_logo),
    LevelRule(1, "color_variations", _has_color_variations),
    LevelRule(1, "surface_keywords", _any_feature(SURFACE_KEYWORDS)),
    LevelRule(1, "any_feature", _has_features),
)
DEFAULT_LEVEL: CustomizationLevel = 1


def matching_rule(request: ProductRequestJson) -> Optional[LevelRule]:
    """First rule in LEVEL_RULES that fires, or None when the request has no customization signal."""
    for rule in LEVEL_RULES:
        if rule.matches(request):
            return rule
    return None


def determine_level(request: ProductRequestJson) -> CustomizationLevel:
    rule = matching_rule(request)
    return rule.level if rule else DEFAULT_LEVEL


def describe_customization_type(request: ProductRequestJson) -> str:
    c = request.customization
    parts = []
    if c.logo:
        parts.append(f"{c.logo.type} logo")
    if c.features:
        parts.append(", ".join(c.features))
    if c.color_variations:
        parts.append(f"{len(c.color_variations)} color variation(s)")
    return " + ".join(parts) or "No customization"


def identify_constraints(request: ProductRequestJson, level: CustomizationLevel) -> list[CustomizationConstraint]:
    """Gaps between the stated requirements and what the level typically demands."""
    constraints: list[CustomizationConstraint] = []
    info = level_info(level)
    moq = request.requirements.moq
    price = request.requirements.price_target

    floor = MOQ_FLOORS[level]
    if moq is not None and moq < floor:
        constraints.append(CustomizationConstraint(
            type="moq",
            description=f"Requested MOQ ({moq}) is below typical minimum for Level {level} customization",
            severity="critical" if level >= 4 else "high" if level == 3 else "medium",
            current_value=str(moq),
            required_value=str(floor),
        ))

    multiplier = PRICE_MULTIPLIERS[level]
    if price is not None and price.max:
        if price.max / multiplier < MIN_BASE_UNIT_PRICE:
            constraints.append(CustomizationConstraint(
                type="price",
                description=f"Price target may be too low for Level {level} customization complexity",
                severity="high" if level >= 3 else "medium",
                current_value=f"{price.currency} {format_amount(price.max)}",
                required_value=f"~{price.currency} {price.max * multiplier:.2f} estimated",
            ))

    if level >= 3:
        constraints.append(CustomizationConstraint(
            type="timeline",
            description=f"Level {level} customization requires {info.development_time} development time",
            severity="high" if level >= 4 else "medium",
            current_value="Not specified",
            required_value=info.development_time,
        ))

    if level >= 4:
        constraints.append(CustomizationConstraint(
            type="supplier",
            description=f"Limited supplier availability for Level {level} customization",
            severity="high",
            current_value=info.supplier_availability,
            required_value="Verified supplier with tooling capability required",
        ))
        constraints.append(CustomizationConstraint(
            type="tooling",
            description="New tooling/mold investment required upfront",
            severity="critical",
            current_value="No tooling",
            required_value=f"{'Single mold fee' if level == 4 else 'Multiple tooling fees'} required",
        ))

    return constraints


def _find_constraint(constraints: list[CustomizationConstraint], kind: str) -> Optional[CustomizationConstraint]:
    return next((c for c in constraints if c.type == kind), None)


def generate_warnings(
    request: ProductRequestJson,
    level: CustomizationLevel,
    constraints: list[CustomizationConstraint],
) -> list[FeasibilityWarning]:
    """User-facing warnings in fixed order: moq, price, timeline, supplier, tooling."""
    warnings: list[FeasibilityWarning] = []
    info = level_info(level)

    moq_constraint = _find_constraint(constraints, "moq")
    if moq_constraint:
        warnings.append(FeasibilityWarning(
            id=new_id(),
            type="moq-mismatch",
            message=(
                f"MOQ mismatch: Your requested quantity ({moq_constraint.current_value}) is below the typical "
                f"minimum ({moq_constraint.required_value}) for {info.name} customization."
            ),
            severity="error" if moq_constraint.severity == "critical" else "warning",
            suggestion=f"Consider increasing order quantity to {moq_constraint.required_value} or reducing customization level.",
        ))

    if _find_constraint(constraints, "price"):
        warnings.append(FeasibilityWarning(
            id=new_id(),
            type="price-mismatch",
            message=(
                f"Price target may not accommodate {info.name} level complexity. "
                f"{info.cost_behavior} cost behavior expected."
            ),
            severity="warning",
            suggestion="Consider simplifying customization or adjusting price expectations.",
        ))

    if level >= 3:
        warnings.append(FeasibilityWarning(
            id=new_id(),
            type="timeline-risk",
            message=f"Development timeline: {info.development_time}. Timeline risk is {info.timeline_risk}.",
            severity="error" if level >= 4 else "warning",
        ))

    if level >= 4:
        warnings.append(FeasibilityWarning(
            id=new_id(),
            type="supplier-limited",
            message=f"Supplier availability: {info.supplier_availability}. {info.early_warning_signal}.",
            severity="error",
        ))
        warnings.append(FeasibilityWarning(
            id=new_id(),
            type="tooling-required",
            message=f"Setup fees: {info.setup_fee}. Mold/tooling investment is non-recoverable if project is cancelled.",
            severity="error",
            suggestion="Ensure volume commitment before investing in tooling.",
        ))

    return warnings


def calculate_feasibility(level: CustomizationLevel, constraints: list[CustomizationConstraint]) -> int:
    """Level base rate minus a fixed penalty per constraint severity, clamped to [0, 100]."""
    score = BASE_FEASIBILITY[level]
    for c in constraints:
        score -= SEVERITY_PENALTIES[c.severity]
    return max(0, min(100, score))


def generate_alternatives(
    request: ProductRequestJson,
    level: CustomizationLevel,
    constraints: list[CustomizationConstraint],
) -> list[AlternativeOption]:
    """Negotiable paths: reduce level, raise MOQ, adjust specs to the price target."""
    alternatives: list[AlternativeOption] = []
    requirements = request.requirements

    if level > 1:
        reduced = level - 1
        reduced_info = level_info(reduced)
        # 20% per level is an illustrative heuristic, not a costed estimate
        alternatives.append(AlternativeOption(
            id=new_id(),
            description=f"Reduce to {reduced_info.name} (Level {reduced})",
            negotiable_on=["customization-level"],
            tradeoffs=[
                f"Simplified to {reduced_info.core_definition}",
                f"Faster turnaround: {reduced_info.development_time}",
                f"Lower rework risk: {reduced_info.rework_cost}",
            ],
            estimated_saving=f"{(level - reduced) * SAVING_PER_LEVEL_PCT}% cost reduction estimated",
            new_level=reduced,
        ))

    moq_constraint = _find_constraint(constraints, "moq")
    if moq_constraint and requirements.moq:
        alternatives.append(AlternativeOption(
            id=new_id(),
            description=f"Increase MOQ to {moq_constraint.required_value} units for better pricing",
            negotiable_on=["moq"],
            tradeoffs=[
                "Higher initial investment",
                "Better per-unit pricing",
                "More supplier options available",
            ],
            new_moq=int(moq_constraint.required_value),
        ))

    if requirements.price_target is not None:
        target = requirements.price_target
        alternatives.append(AlternativeOption(
            id=new_id(),
            description="Adjust specifications for price target",
            negotiable_on=["price", "customization-type"],
            tradeoffs=[
                "Simplified customization to meet budget",
                "May use standard materials instead of premium",
                "Logo size or placement may be adjusted",
            ],
            new_price=PriceTarget(min=target.min, max=target.max, currency=target.currency),
            new_level=max(1, level - 1),
        ))

    return alternatives


def classify_customization(
    request: ProductRequestJson,
    selected_item: Optional[VisualizationItem] = None,
) -> CustomizationClassification:
    """
    Classify the request and score its feasibility.
    selected_item is accepted for callers that pass the chosen design; no rule reads it yet.
    """
    level = determine_level(request)
    constraints = identify_constraints(request, level)
    return CustomizationClassification(
        level=level,
        level_info=level_info(level),
        customization_type=describe_customization_type(request),
        constraints=constraints,
        feasibility_score=calculate_feasibility(level, constraints),
        warnings=generate_warnings(request, level, constraints),
        alternatives=generate_alternatives(request, level, constraints),
    )
