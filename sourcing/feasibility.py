"""
Deep feasibility step: FeasibilityInput → AIFeasibilityResult (LLM).

The model classifies the request on the L1-L5 framework and rates customization, MOQ, price and
timeline feasibility. Output is validated with Pydantic; one repair attempt if invalid, then
FeasibilityReportError. Missing fields are never filled in here.
"""
from pathlib import Path
from openai import OpenAIError
from pydantic import ValidationError
from sourcing.audit import log_event
from sourcing.llm import complete, extract_json_from_response, get_model
from sourcing.schemas import (
    AIFeasibilityResult,
    CustomizationClassification,
    FeasibilityInput,
    ProductRequestJson,
    VisualizationItem,
)
from sourcing.utils import format_amount

FEASIBILITY_SYSTEM = """You are a sourcing expert and customization feasibility analyst for a product sourcing platform. You help buyers understand whether their customization requests are viable before committing to supplier engagements.

## Customization Level Framework (L1-L5)

**L1 - Surface Customization**
- Visual surface changes only, no structural impact: logo printing, engraving, packaging sleeve, minor color adjustments.
- Cost linear and predictable. Setup fee applies but MOQ negotiable. Feasibility very high (95%). Large supplier pool. 1-7 days.
- Risk: MOQ not surfaced early.

**L2 - Component-Level Customization**
- One component modified, core structure unchanged: custom box, label insert, motor spec, inner material.
- Moderate cost jump; MOQ may shift for the component. Feasibility high (85%). Moderate supplier pool. 7-15 days.
- Risk: production starts before final design confirmed; component supplier mismatch.

**L3 - Structural Customization, No Mold**
- Core structure changed without new tooling: size modification, capacity change, material composition, structural adjustment.
- Significant cost jump. Feasibility moderate (65%). Limited supplier pool. 15-30 days, high timeline risk.
- Risk: wrong structural parameter locked in early.

**L4 - Mold/Engineering Customization**
- New tooling, mold or engineering redesign: custom outsole shoes, vending machine, cosmetic mold, specialized equipment.
- High, non-linear cost with very high mold fee upfront. Feasibility low-moderate (45%). Few suppliers. 30-90 days.
- Risk: mold MOQ far exceeds client needs; non-recoverable tooling investment.

**L5 - Multi-Component System Customization**
- Multiple components, materials, processes and suppliers: jewelry packaging set, multi-SKU, textile + metal + print + assembly.
- Compounding non-linear cost; MOQ stacks across components. Feasibility low (25%). Very few suppliers. 60-120+ days.
- Risk: system economics fail even when each component is feasible.

## Known Failure Patterns

1. Hair comb logo (L1): logo printing MOQ 6,000 pcs above the client's 5,000 pcs. MOQ not surfaced early.
2. Play gym label insert (L2): production started before the final label design. Timeline blowout.
3. Cookie tin size (L3): samples produced before confirming dimensions. Wrong size locked in.
4. Custom outsole shoes (L4): client wanted 100-200 pairs, mold MOQ far above. Differentiator abandoned.
5. Jewelry packaging set, 6 components (L5): each component feasible, combined MOQ mismatch with 300-500 units.

## Output

Output ONLY valid JSON with EXACTLY this structure (no markdown, no explanation outside JSON):

{
  "classificationLevel": 1 | 2 | 3 | 4 | 5,
  "classificationRationale": "2-3 sentences citing specific elements of the request",
  "customizationFeasibility": {"status": "feasible | at-risk | infeasible", "headline": "10 words max", "detail": "2-3 sentences", "risks": ["..."]},
  "moqFeasibility": {"status": "...", "headline": "...", "detail": "typical MOQ for this level vs requested qty", "risks": ["..."]},
  "priceFeasibility": {"status": "...", "headline": "...", "detail": "is the target price realistic", "risks": ["..."]},
  "timelineFeasibility": {"status": "...", "headline": "...", "detail": "typical development time vs requested timeline", "risks": ["..."]},
  "qualityRisks": ["product integrity risks caused by the customization itself"],
  "alternatives": [
    {"id": "alt1", "title": "...", "description": "...", "tradeoffs": ["..."], "saves": "cost, time or risk saved",
     "imagePrompt": "only when the alternative changes material, finish or technique; omit otherwise"}
  ],
  "overallVerdict": "proceed | proceed-with-caution | reconsider",
  "overallSummary": "3-4 sentences: assessment, biggest risk, next step"
}

Rules:
- Reference actual numbers when the buyer provided them. When MOQ, price or timeline is missing, state what is typical for the level.
- 1-3 alternatives. Always include a lower-complexity alternative at L3 or above.
- "proceed": all dimensions feasible. "proceed-with-caution": 1-2 at-risk dimensions. "reconsider": multiple infeasible dimensions or a critical blocker (e.g. L4 MOQ mismatch by more than 5x).
"""


class FeasibilityReportError(ValueError):
    """The model reply could not be parsed into an AIFeasibilityResult."""


class FeasibilityCallError(ValueError):
    """The model provider call itself failed."""


def _price_text(data: FeasibilityInput) -> str:
    if data.target_price_min is None and data.target_price_max is None:
        return "Not specified"
    low = "?" if data.target_price_min is None else format_amount(data.target_price_min)
    high = "?" if data.target_price_max is None else format_amount(data.target_price_max)
    return f"{data.price_currency or 'USD'} {low} - {high} per unit"


def build_user_prompt(data: FeasibilityInput) -> str:
    design = data.selected_design_name or "Not specified"
    if data.selected_design_description:
        design += f" ({data.selected_design_description})"
    moq = f"{data.moq} units" if data.moq is not None else "Not specified"
    return (
        "## Buyer Request\n\n"
        f"**Product being sourced:** {data.product_description}\n"
        f"**Selected design direction:** {design}\n\n"
        f"**Customization requested:** {data.customization_description}\n"
        f"**Order quantity (MOQ):** {moq}\n"
        f"**Target price:** {_price_text(data)}\n"
        f"**Required timeline:** {data.timeline or 'Not specified'}\n\n"
        "Analyze this request and return the feasibility assessment JSON."
    )


def input_from_request(
    request: ProductRequestJson,
    classification: CustomizationClassification,
    timeline: str = "",
    selected_item: VisualizationItem | None = None,
) -> FeasibilityInput:
    """Deep-check input from a normalized request; the customization text is the engine's synthesis."""
    price = request.requirements.price_target
    return FeasibilityInput(
        product_description=request.product.description,
        customization_description=classification.customization_type,
        selected_design_name=selected_item.name if selected_item else "",
        selected_design_description=selected_item.description if selected_item else "",
        moq=request.requirements.moq,
        target_price_min=price.min if price else None,
        target_price_max=price.max if price else None,
        price_currency=price.currency if price else "USD",
        timeline=timeline,
    )


def parse_feasibility_report(raw: str) -> AIFeasibilityResult:
    """Fences stripped, first JSON object extracted, then strict validation."""
    try:
        data = extract_json_from_response(raw)
        return AIFeasibilityResult.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise FeasibilityReportError(str(e)) from e


def _call_model(user: str, model_name: str, audit_path: Path | None, run_id: str) -> str:
    try:
        return complete(FEASIBILITY_SYSTEM, user, model=model_name)
    except OpenAIError as e:
        if audit_path:
            log_event(audit_path, run_id, "failure", {"stage": "feasibility_call", "error": str(e)}, model_name=model_name)
        raise FeasibilityCallError(f"AI feasibility call failed: {e}") from e


def run_feasibility_check(
    data: FeasibilityInput,
    audit_path: Path | None,
    run_id: str,
) -> AIFeasibilityResult:
    """
    Ask the model for the report. Validate; one repair on failure; raise FeasibilityReportError after that.
    Provider errors (network, auth, rate limit) surface as FeasibilityCallError.
    """
    model_name = get_model()
    raw = _call_model(build_user_prompt(data), model_name, audit_path, run_id)
    try:
        result = parse_feasibility_report(raw)
        if audit_path:
            log_event(audit_path, run_id, "feasibility_ok", {"classification_level": result.classification_level, "verdict": result.overall_verdict}, model_name=model_name)
        return result
    except FeasibilityReportError as e:
        if audit_path:
            log_event(audit_path, run_id, "feasibility_repair_attempt", {"error": str(e)}, model_name=model_name)
        repair_user = "Previous output was invalid. Error:\n" + str(e) + "\n\nPrevious output:\n" + raw + "\n\nFix and output ONLY valid JSON for the same schema."
        raw2 = _call_model(repair_user, model_name, audit_path, run_id)
        try:
            result = parse_feasibility_report(raw2)
        except FeasibilityReportError as e2:
            if audit_path:
                log_event(audit_path, run_id, "failure", {"stage": "feasibility", "error": str(e2)}, model_name=model_name)
            raise
        if audit_path:
            log_event(audit_path, run_id, "feasibility_repaired", {"verdict": result.overall_verdict}, model_name=model_name)
        return result
