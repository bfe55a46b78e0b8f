"""
Data shapes for the customization feasibility workflow.

- ProductRequest / ProductRequestJson: what the buyer asked for (raw, then normalized).
- CustomizationClassification: what the deterministic engine produces (level, constraints, score).
- PreliminaryQuote: indicative pricing built from a classification.
- AIFeasibilityResult: what the LLM must return for the deep feasibility check.

Python attributes are snake_case; the JSON interchange form is camelCase.
"""
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ProductCategory = Literal[
    "bags-leather",
    "packaging-paper",
    "packaging-box",
    "apparel",
    "accessories",
    "homeware",
    "electronics",
    "cosmetics",
    "food-packaging",
    "other",
]
LogoType = Literal["embossing", "printing", "engraving", "label", "rubber-tag", "heat-press"]
CustomizationLevel = Literal[1, 2, 3, 4, 5]
ConstraintType = Literal["moq", "price", "timeline", "supplier", "tooling"]
ConstraintSeverity = Literal["low", "medium", "high", "critical"]
WarningType = Literal["moq-mismatch", "price-mismatch", "timeline-risk", "supplier-limited", "tooling-required"]
WarningSeverity = Literal["info", "warning", "error"]
NegotiableOn = Literal["customization-type", "customization-level", "price", "moq"]


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase on input; dump with by_alias=True for camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Request: raw buyer input and the normalized engine input ---

class LogoSpec(CamelModel):
    type: LogoType
    description: Optional[str] = None
    placement: Optional[str] = None


class PriceTarget(CamelModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"


class CustomizationInput(CamelModel):
    logo: Optional[LogoSpec] = None
    features: Optional[List[str]] = None
    color_variations: Optional[List[str]] = None


class ProductRequest(CamelModel):
    """Buyer request as captured by the form. Loose; normalize before classifying."""

    id: str
    description: str
    size: Optional[str] = None
    material: Optional[str] = None
    colors: Optional[List[str]] = None
    customization: CustomizationInput = Field(default_factory=CustomizationInput)
    category: Optional[str] = None
    price_target: Optional[PriceTarget] = None
    moq: Optional[int] = None
    raw_text: Optional[str] = None
    created_at: Optional[str] = None


class ProductSpec(CamelModel):
    description: str
    category: ProductCategory = "other"
    size: str = ""
    material: str = ""
    colors: List[str] = Field(default_factory=list)


class CustomizationSpec(CamelModel):
    logo: Optional[LogoSpec] = None
    features: List[str] = Field(default_factory=list)
    color_variations: List[str] = Field(default_factory=list)


class Requirements(CamelModel):
    price_target: Optional[PriceTarget] = None
    moq: Optional[int] = Field(default=None, gt=0)


class ProductRequestJson(CamelModel):
    """Normalized request: closed category enum, list fields never None."""

    product: ProductSpec
    customization: CustomizationSpec = Field(default_factory=CustomizationSpec)
    requirements: Requirements = Field(default_factory=Requirements)


# --- Classification: rulebook entry, constraints, warnings, alternatives ---

class CustomizationLevelInfo(CamelModel):
    """One rulebook entry. Constant for the process lifetime."""

    model_config = ConfigDict(frozen=True)

    level: CustomizationLevel
    name: str
    emoji: str
    core_definition: str
    typical_forms: List[str]
    key_risk: str
    setup_fee: str
    moq_impact: str
    cost_behavior: str
    rework_cost: str
    timeline_risk: str
    supplier_availability: str
    feasibility: str
    development_time: str
    best_for: str
    early_warning_signal: str


class CustomizationConstraint(CamelModel):
    type: ConstraintType
    description: str
    severity: ConstraintSeverity
    current_value: str
    required_value: str


class FeasibilityWarning(CamelModel):
    id: str
    type: WarningType
    message: str
    severity: WarningSeverity
    suggestion: Optional[str] = None


class AlternativeOption(CamelModel):
    id: str
    description: str
    negotiable_on: List[NegotiableOn]
    tradeoffs: List[str] = Field(default_factory=list)
    estimated_saving: Optional[str] = None
    new_level: Optional[CustomizationLevel] = None
    new_moq: Optional[int] = None
    new_price: Optional[PriceTarget] = None


class CustomizationClassification(CamelModel):
    """Engine output. Built once per request, never mutated."""

    model_config = ConfigDict(frozen=True)

    level: CustomizationLevel
    level_info: CustomizationLevelInfo
    customization_type: str
    constraints: List[CustomizationConstraint] = Field(default_factory=list)
    feasibility_score: int = Field(ge=0, le=100)
    warnings: List[FeasibilityWarning] = Field(default_factory=list)
    alternatives: List[AlternativeOption] = Field(default_factory=list)


# --- Visualization item and preliminary quote ---

class VisualizationItem(CamelModel):
    """A design direction the buyer picked. Optional context for classify and quote."""

    id: str
    name: str
    description: str = ""
    image_prompt: str = ""
    image_placeholder: str = ""
    specs: Dict[str, str] = Field(default_factory=dict)
    estimated_price: Optional[PriceTarget] = None
    estimated_moq: Optional[int] = None
    customization_level: Optional[CustomizationLevel] = None
    selected: bool = False


class AlternativeQuote(CamelModel):
    id: str
    description: str
    unit_price: PriceTarget
    moq: int
    tradeoffs: List[str] = Field(default_factory=list)


class PreliminaryQuote(CamelModel):
    id: str
    request_id: str
    selected_item: VisualizationItem
    customization: CustomizationClassification
    unit_price: PriceTarget
    moq: int
    setup_fees: int
    lead_time: str
    notes: List[str] = Field(default_factory=list)
    alternatives: List[AlternativeQuote] = Field(default_factory=list)


# --- Deep feasibility check (LLM contract) ---

FeasibilityStatus = Literal["feasible", "at-risk", "infeasible"]
FeasibilityVerdict = Literal["proceed", "proceed-with-caution", "reconsider"]


class FeasibilityInput(CamelModel):
    """What the buyer tells the deep check. Product and customization descriptions are required."""

    product_description: str = Field(min_length=1)
    customization_description: str = Field(min_length=1)
    selected_design_name: str = ""
    selected_design_description: str = ""
    moq: Optional[int] = None
    target_price_min: Optional[float] = None
    target_price_max: Optional[float] = None
    price_currency: str = "USD"
    timeline: str = ""


class FeasibilityDimension(CamelModel):
    status: FeasibilityStatus
    headline: str
    detail: str
    risks: List[str]


class FeasibilityAlternative(CamelModel):
    id: str
    title: str
    description: str
    tradeoffs: List[str]
    saves: str
    image_prompt: Optional[str] = None


class AIFeasibilityResult(CamelModel):
    """Report the LLM must fill. No defaults on required fields: missing data fails validation."""

    classification_level: CustomizationLevel
    classification_rationale: str
    customization_feasibility: FeasibilityDimension
    moq_feasibility: FeasibilityDimension
    price_feasibility: FeasibilityDimension
    timeline_feasibility: FeasibilityDimension
    quality_risks: List[str]
    alternatives: List[FeasibilityAlternative]
    overall_verdict: FeasibilityVerdict
    overall_summary: str
