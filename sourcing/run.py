"""
CLI: run the full workflow.

  request (.json) → normalize → classify (deterministic) → quote → [deep AI check] → outputs

Outputs: request.json, classification.json, quote.json, report.md, [feasibility.json], audit.jsonl
"""
import argparse
import sys
from pathlib import Path
from pydantic import ValidationError
from sourcing.audit import log_event
from sourcing.classify import classify_customization
from sourcing.feasibility import FeasibilityCallError, FeasibilityReportError, input_from_request, run_feasibility_check
from sourcing.llm import MissingCredentialsError, get_model
from sourcing.normalize import load_request
from sourcing.quote import generate_quote, placeholder_item
from sourcing.report import render_classification, render_feasibility
from sourcing.schemas import (
    CustomizationSpec,
    LogoSpec,
    PriceTarget,
    ProductRequestJson,
    ProductSpec,
    Requirements,
    VisualizationItem,
)
from sourcing.utils import ensure_output_dir, generate_run_id, read_request

DEMO_REQUEST = ProductRequestJson(
    product=ProductSpec(
        description="Leather crossbody bag with custom hardware",
        category="bags-leather",
        size="24 x 18 x 6 cm",
        material="full-grain leather",
        colors=["tan", "black"],
    ),
    customization=CustomizationSpec(
        logo=LogoSpec(type="embossing", placement="front flap"),
        features=["custom d-ring", "branded zipper pull"],
        color_variations=["tan", "black"],
    ),
    requirements=Requirements(price_target=PriceTarget(min=8, max=12, currency="USD"), moq=300),
)


def run(
    input_path: str | None,
    out_base: str,
    demo: bool = False,
    deep: bool = False,
    timeline: str = "",
    design_name: str = "",
    design_description: str = "",
) -> int:
    run_id = generate_run_id()
    out_dir = ensure_output_dir(out_base, run_id)
    audit_path = out_dir / "audit.jsonl"

    if demo:
        request = DEMO_REQUEST
        request_id = "demo"
        log_event(audit_path, run_id, "input_received", {"demo": True})
    else:
        try:
            data = read_request(input_path)
        except (FileNotFoundError, ValueError) as e:
            log_event(audit_path, run_id, "failure", {"stage": "input", "error": str(e)})
            print(f"ERROR: Could not read request: {e}")
            return 2
        log_event(audit_path, run_id, "input_received", {"input_path": str(input_path)})
        try:
            request = load_request(data)
        except ValidationError as e:
            log_event(audit_path, run_id, "failure", {"stage": "normalize", "error": str(e)})
            print(f"ERROR: Invalid request: {e}")
            return 2
        request_id = str(data.get("id") or run_id)
    log_event(audit_path, run_id, "request_normalized", {"category": request.product.category})

    selected_item = None
    if design_name:
        selected_item = VisualizationItem(id=f"{request_id}-design", name=design_name, description=design_description, selected=True)

    classification = classify_customization(request, selected_item)
    log_event(audit_path, run_id, "classified", {"level": classification.level, "feasibility_score": classification.feasibility_score, "constraints": [c.type for c in classification.constraints]})

    quote = generate_quote(request_id, classification, selected_item or placeholder_item(request), request.requirements.moq)
    log_event(audit_path, run_id, "quote_generated", {"setup_fees": quote.setup_fees, "moq": quote.moq})

    # deterministic outputs first; the AI check only adds feasibility.json and a report section
    report_md = render_classification(request, classification, quote, run_id, "none (deterministic)")
    (out_dir / "request.json").write_text(request.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    (out_dir / "classification.json").write_text(classification.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    (out_dir / "quote.json").write_text(quote.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    (out_dir / "report.md").write_text(report_md, encoding="utf-8")
    log_event(audit_path, run_id, "outputs_written", {})

    if deep and not demo:
        model_name = get_model()
        try:
            result = run_feasibility_check(input_from_request(request, classification, timeline, selected_item), audit_path, run_id)
        except MissingCredentialsError as e:
            log_event(audit_path, run_id, "failure", {"stage": "feasibility", "error": str(e)})
            print(f"ERROR: {e}")
            return 3
        except FeasibilityReportError as e:
            print(f"ERROR: Could not parse AI feasibility report: {e}")
            return 4
        except FeasibilityCallError as e:
            print(f"ERROR: {e}")
            return 5
        (out_dir / "feasibility.json").write_text(result.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        (out_dir / "report.md").write_text(report_md + "\n\n" + render_feasibility(result), encoding="utf-8")
        log_event(audit_path, run_id, "outputs_written", {"feasibility": True}, model_name=model_name)

    if demo:
        print("(Demo mode: no LLM; used built-in request)")
    info = classification.level_info
    print(f"Run ID: {run_id}")
    print(f"Level: L{classification.level} {info.name}")
    print(f"Feasibility score: {classification.feasibility_score}/100")
    print(f"Output folder: {out_dir}")
    return 0


def main() -> None:
    p = argparse.ArgumentParser(description="Customization feasibility: request → classify → quote → report")
    p.add_argument("--input", help="Path to request .json")
    p.add_argument("--out", default="outputs", help="Output folder")
    p.add_argument("--demo", action="store_true", help="Skip LLM; use built-in request")
    p.add_argument("--deep", action="store_true", help="Also run the AI feasibility check")
    p.add_argument("--timeline", default="", help="Required timeline for the AI check, e.g. '6 weeks'")
    p.add_argument("--design-name", default="", help="Selected design direction")
    p.add_argument("--design-description", default="", help="Selected design description")
    args = p.parse_args()
    if not args.demo and not args.input:
        p.error("--input is required unless --demo is set")
    sys.exit(run(
        args.input,
        args.out,
        demo=args.demo,
        deep=args.deep,
        timeline=args.timeline,
        design_name=args.design_name,
        design_description=args.design_description,
    ))


if __name__ == "__main__":
    main()
