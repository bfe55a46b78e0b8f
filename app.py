"""
Streamlit UI: describe the product and customization, classify it, see constraints, warnings,
alternatives and a preliminary quote; optionally run the AI feasibility check.

Run: streamlit run app.py
"""
from pathlib import Path
from typing import get_args
import streamlit as st
from pydantic import ValidationError
from sourcing.audit import log_event
from sourcing.classify import classify_customization
from sourcing.feasibility import FeasibilityCallError, FeasibilityReportError, input_from_request, run_feasibility_check
from sourcing.llm import MissingCredentialsError, get_model
from sourcing.normalize import normalize_request
from sourcing.quote import generate_quote, grand_total, placeholder_item
from sourcing.report import render_classification, render_feasibility
from sourcing.schemas import CustomizationInput, LogoSpec, LogoType, PriceTarget, ProductCategory, ProductRequest
from sourcing.utils import ensure_output_dir, generate_run_id

PROJECT_ROOT = Path(__file__).resolve().parent
OUTPUTS = PROJECT_ROOT / "outputs"


def _split(text: str) -> list[str]:
    return [part.strip() for part in text.replace("\n", ",").split(",") if part.strip()]


st.set_page_config(page_title="Customization Feasibility", layout="wide")
st.title("Customization Feasibility")
st.caption("Describe the request → Classify (L1-L5, deterministic) → Constraints, warnings, alternatives → Quote → optional AI check")

col1, col2 = st.columns(2)
with col1:
    description = st.text_area("Product", height=80, placeholder="Leather tote bag, 35 x 30 cm")
    category = st.selectbox("Category", get_args(ProductCategory), index=len(get_args(ProductCategory)) - 1)
    material = st.text_input("Material")
    size = st.text_input("Size")
    logo_type = st.selectbox("Logo", ["none", *get_args(LogoType)])
with col2:
    features = st.text_area("Customization features (comma separated)", placeholder="custom d-ring, zipper")
    color_variations = st.text_input("Color variations (comma separated)")
    moq = st.number_input("Order quantity (0 = not specified)", min_value=0, step=100)
    price_max = st.number_input("Target unit price max (0 = not specified)", min_value=0.0, step=0.1)
    currency = st.text_input("Currency", value="USD")
    timeline = st.text_input("Required timeline (AI check only)", placeholder="6 weeks")
deep = st.checkbox("Run AI feasibility check")

if st.button("Classify", type="primary") and description.strip():
    run_id = generate_run_id()
    out_dir = ensure_output_dir(OUTPUTS, run_id)
    audit_path = out_dir / "audit.jsonl"
    log_event(audit_path, run_id, "input_received", {"length": len(description)})

    try:
        request = normalize_request(ProductRequest(
            id=run_id,
            description=description.strip(),
            size=size,
            material=material,
            category=category,
            customization=CustomizationInput(
                logo=None if logo_type == "none" else LogoSpec(type=logo_type),
                features=_split(features),
                color_variations=_split(color_variations),
            ),
            price_target=PriceTarget(max=price_max, currency=currency or "USD") if price_max else None,
            moq=int(moq) or None,
        ))
    except ValidationError as e:
        st.error(f"Invalid request: {e}")
        st.stop()

    classification = classify_customization(request)
    log_event(audit_path, run_id, "classified", {"level": classification.level, "feasibility_score": classification.feasibility_score})
    quote = generate_quote(run_id, classification, placeholder_item(request), request.requirements.moq)
    log_event(audit_path, run_id, "quote_generated", {"setup_fees": quote.setup_fees})

    info = classification.level_info
    m1, m2, m3 = st.columns(3)
    m1.metric("Level", f"{info.emoji} L{classification.level}")
    m2.metric("Feasibility score", f"{classification.feasibility_score}/100")
    m3.metric("Development time", info.development_time)
    st.write(f"**{info.name}**: {info.core_definition}")
    st.write(f"**Customization:** {classification.customization_type}")

    st.subheader("Constraints")
    if classification.constraints:
        st.dataframe([{"Type": c.type, "Severity": c.severity, "Current": c.current_value, "Required": c.required_value} for c in classification.constraints], use_container_width=True)
    else:
        st.info("No constraints")

    st.subheader("Warnings")
    for w in classification.warnings:
        show = st.error if w.severity == "error" else st.warning
        show(w.message + (f"\n\n{w.suggestion}" if w.suggestion else ""))
    if not classification.warnings:
        st.info("No warnings")

    st.subheader("Alternatives")
    for a in classification.alternatives:
        st.markdown(f"**{a.description}**  \n" + "\n".join(f"- {t}" for t in a.tradeoffs))
        if a.estimated_saving:
            st.caption(f"{a.estimated_saving} (illustrative, not a costed estimate)")
    if not classification.alternatives:
        st.info("No alternatives")

    st.subheader("Preliminary quote")
    q1, q2, q3 = st.columns(3)
    q1.metric("MOQ", f"{quote.moq:,}")
    q2.metric("Setup fees", f"${quote.setup_fees:,}")
    q3.metric("Estimated total", f"{quote.unit_price.currency} {grand_total(quote):,.2f}")

    report_md = render_classification(request, classification, quote, run_id, "none (deterministic)")
    (out_dir / "classification.json").write_text(classification.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    (out_dir / "quote.json").write_text(quote.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    (out_dir / "report.md").write_text(report_md, encoding="utf-8")
    log_event(audit_path, run_id, "outputs_written", {})

    if deep:
        try:
            with st.spinner("Running AI feasibility check…"):
                result = run_feasibility_check(input_from_request(request, classification, timeline), audit_path, run_id)
        except MissingCredentialsError as e:
            st.error(str(e))
        except FeasibilityReportError as e:
            st.error(f"Could not parse AI response: {e}")
        except FeasibilityCallError as e:
            st.error(str(e))
        else:
            st.subheader("AI feasibility check")
            st.metric("Verdict", result.overall_verdict)
            section = render_feasibility(result)
            st.markdown(section)
            (out_dir / "feasibility.json").write_text(result.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
            (out_dir / "report.md").write_text(report_md + "\n\n" + section, encoding="utf-8")
            log_event(audit_path, run_id, "outputs_written", {"feasibility": True}, model_name=get_model())
    st.caption(f"Run ID `{run_id}`. Outputs in `outputs/{run_id}/`")
