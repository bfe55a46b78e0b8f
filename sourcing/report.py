"""
Report step: classification (+ quote, + optional AI report) → Markdown.

Template-only, no LLM. Savings on level reduction are labelled illustrative.
"""
import os
from sourcing.quote import grand_total, production_total
from sourcing.schemas import AIFeasibilityResult, CustomizationClassification, PreliminaryQuote, ProductRequestJson

PROMPT_VERSION = os.getenv("PROMPT_VERSION", "feasibility-001")


def _price_range(min_value: float | None, max_value: float | None, currency: str) -> str:
    low = f"{min_value:.2f}" if min_value is not None else "?"
    high = f"{max_value:.2f}" if max_value is not None else "?"
    return f"{currency} {low} - {high}"


def render_classification(
    request: ProductRequestJson,
    classification: CustomizationClassification,
    quote: PreliminaryQuote | None,
    run_id: str,
    model_name: str,
) -> str:
    info = classification.level_info
    req = request.requirements
    lines = [
        "# Customization Feasibility Report",
        "",
        "## Request",
        f"- **Product:** {request.product.description}",
        f"- **Category:** {request.product.category}",
        f"- **Customization:** {classification.customization_type}",
        f"- **MOQ requested:** {req.moq if req.moq is not None else 'Not specified'}",
    ]
    if req.price_target:
        p = req.price_target
        lines.append(f"- **Target price:** {_price_range(p.min, p.max, p.currency)}")
    else:
        lines.append("- **Target price:** Not specified")
    lines += [
        "",
        "## Classification",
        f"- **Level:** {info.emoji} L{classification.level} {info.name}",
        f"- **Definition:** {info.core_definition}",
        f"- **Key risk:** {info.key_risk}",
        f"- **Development time:** {info.development_time}",
        f"- **Feasibility score:** {classification.feasibility_score}/100",
        "",
        "## Constraints",
    ]
    if classification.constraints:
        lines.append("| Type | Severity | Current | Required |")
        lines.append("| --- | --- | --- | --- |")
        for c in classification.constraints:
            lines.append(f"| {c.type} | {c.severity} | {c.current_value} | {c.required_value} |")
    else:
        lines.append("- None")
    lines.append("")
    lines.append("## Warnings")
    if classification.warnings:
        for w in classification.warnings:
            suffix = f" *Suggestion:* {w.suggestion}" if w.suggestion else ""
            lines.append(f"- [{w.severity}] {w.message}{suffix}")
    else:
        lines.append("- None")
    lines.append("")
    lines.append("## Alternatives")
    if classification.alternatives:
        for a in classification.alternatives:
            lines.append(f"- **{a.description}** (negotiable on: {', '.join(a.negotiable_on)})")
            for t in a.tradeoffs:
                lines.append(f"  - {t}")
            if a.estimated_saving:
                lines.append(f"  - Estimated saving: {a.estimated_saving} (illustrative)")
    else:
        lines.append("- None")
    if quote:
        lines += [
            "",
            "## Preliminary Quote",
            f"- **Unit price:** {_price_range(quote.unit_price.min, quote.unit_price.max, quote.unit_price.currency)}",
            f"- **MOQ:** {quote.moq:,} units",
            f"- **Setup fees:** ${quote.setup_fees:,}",
            f"- **Lead time:** {quote.lead_time}",
            f"- **Estimated production:** {quote.unit_price.currency} {production_total(quote):,.2f}",
            f"- **Estimated total:** {quote.unit_price.currency} {grand_total(quote):,.2f}",
        ]
    lines.append("")
    lines.append("---")
    lines.append(f"*Run ID:* `{run_id}` | *Model:* {model_name} | *Prompt:* {PROMPT_VERSION}")
    return "\n".join(lines)


def render_feasibility(result: AIFeasibilityResult) -> str:
    """AI report section, appended to the classification report."""
    lines = [
        "## AI Feasibility Check",
        f"- **Verdict:** {result.overall_verdict}",
        f"- **Level (model):** L{result.classification_level}",
        f"- **Rationale:** {result.classification_rationale}",
        "",
    ]
    dimensions = [
        ("Customization", result.customization_feasibility),
        ("MOQ", result.moq_feasibility),
        ("Price", result.price_feasibility),
        ("Timeline", result.timeline_feasibility),
    ]
    for label, d in dimensions:
        lines.append(f"### {label}: {d.status}")
        lines.append(f"**{d.headline}**. {d.detail}")
        for r in d.risks:
            lines.append(f"- {r}")
        lines.append("")
    if result.quality_risks:
        lines.append("### Quality risks")
        lines.extend(f"- {r}" for r in result.quality_risks)
        lines.append("")
    if result.alternatives:
        lines.append("### Alternatives")
        for a in result.alternatives:
            lines.append(f"- **{a.title}**: {a.description} (saves: {a.saves})")
        lines.append("")
    lines.append(result.overall_summary)
    return "\n".join(lines)
