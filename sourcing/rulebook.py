"""
Customization rulebook: one CustomizationLevelInfo per level (L1-L5).

Reference data built from supplier case studies. Read-only: CUSTOMIZATION_LEVELS is a
mappingproxy over frozen models, so level_info() always returns the same object.
"""
from types import MappingProxyType
from typing import Mapping
from sourcing.schemas import CustomizationLevel, CustomizationLevelInfo

_LEVELS = (
    CustomizationLevelInfo(
        level=1,
        name="Surface Customization",
        emoji="🟢",
        core_definition="Visual surface changes only, with no structural impact",
        typical_forms=[
            "Logo printing",
            "Engraving or embossing",
            "Packaging sleeve",
            "Minor color adjustments within the standard range",
        ],
        key_risk="MOQ for the decoration process is not surfaced early",
        setup_fee="Low, one-off plate or screen fee",
        moq_impact="MOQ usually negotiable",
        cost_behavior="Linear",
        rework_cost="Low, surface rework only",
        timeline_risk="low",
        supplier_availability="Large supplier pool",
        feasibility="Very High (95%)",
        development_time="1-7 days",
        best_for="Branding an existing catalog product quickly",
        early_warning_signal="Supplier quotes a decoration MOQ above the requested order quantity",
    ),
    CustomizationLevelInfo(
        level=2,
        name="Component-Level Customization",
        emoji="🟡",
        core_definition="Modification to a specific product component while the core structure stays unchanged",
        typical_forms=[
            "Custom packaging box design",
            "Label insert",
            "Motor spec change",
            "Inner material change",
            "Hardware swap (d-rings, straps, zippers)",
        ],
        key_risk="Production starts before the final component design is confirmed",
        setup_fee="Moderate, per customized component",
        moq_impact="MOQ may shift for the customized component",
        cost_behavior="Moderate",
        rework_cost="Moderate, component replacement",
        timeline_risk="moderate",
        supplier_availability="Moderate supplier pool",
        feasibility="High (85%)",
        development_time="7-15 days",
        best_for="Differentiating a proven product without touching its structure",
        early_warning_signal="Component sub-supplier differs from the main factory",
    ),
    CustomizationLevelInfo(
        level=3,
        name="Structural Customization",
        emoji="🟠",
        core_definition="Core structure changed without new mold or tooling",
        typical_forms=[
            "Size modification",
            "Capacity change",
            "Material composition change",
            "Structural adjustment within existing tooling limits",
        ],
        key_risk="Wrong structural parameter locked in early",
        setup_fee="Significant, sampling and pattern adjustments",
        moq_impact="MOQ rises with the structural change",
        cost_behavior="Significant",
        rework_cost="High, new samples required",
        timeline_risk="high",
        supplier_availability="Limited supplier pool",
        feasibility="Moderate (65%)",
        development_time="15-30 days",
        best_for="Buyers with confirmed dimensions and a volume commitment",
        early_warning_signal="Samples requested before the required dimensions are confirmed",
    ),
    CustomizationLevelInfo(
        level=4,
        name="Mold/Engineering Customization",
        emoji="🔴",
        core_definition="New tooling, mold creation, or engineering redesign",
        typical_forms=[
            "Custom outsole shoes",
            "Custom vending machine",
            "Cosmetic mold",
            "Specialized mechanical equipment",
        ],
        key_risk="Mold MOQ far exceeds client needs and the tooling investment is non-recoverable",
        setup_fee="Very high mold fee paid upfront",
        moq_impact="MOQ driven by mold economics, often several thousand units",
        cost_behavior="Non-linear",
        rework_cost="Very high, mold modification or replacement",
        timeline_risk="very high",
        supplier_availability="Few suppliers",
        feasibility="Low-Moderate (45%)",
        development_time="30-90 days",
        best_for="Core product differentiation backed by long-term volume",
        early_warning_signal="Requested quantity is far below the mold MOQ",
    ),
    CustomizationLevelInfo(
        level=5,
        name="Multi-Component System Customization",
        emoji="⚫",
        core_definition="Multiple components, materials, processes and suppliers combined into one system",
        typical_forms=[
            "Jewelry packaging set with several components",
            "Multi-SKU customization",
            "Textile + metal + print + assembly",
        ],
        key_risk="System economics fail even when each component is feasible on its own",
        setup_fee="Multiple tooling and setup fees across components",
        moq_impact="MOQ stacks across all components",
        cost_behavior="Compounding non-linear",
        rework_cost="Extreme, rework cascades across components",
        timeline_risk="extreme",
        supplier_availability="Very few suppliers",
        feasibility="Low (25%)",
        development_time="60-120+ days",
        best_for="Established brands with dedicated sourcing teams",
        early_warning_signal="Combined component MOQs exceed the client's total order",
    ),
)

CUSTOMIZATION_LEVELS: Mapping[int, CustomizationLevelInfo] = MappingProxyType({info.level: info for info in _LEVELS})


def level_info(level: CustomizationLevel) -> CustomizationLevelInfo:
    """Rulebook entry for a level (1-5)."""
    return CUSTOMIZATION_LEVELS[level]
