"""Helpers: run_id / element id generation and file I/O."""
import json
import uuid
from decimal import Decimal
from pathlib import Path
from typing import Any


def generate_run_id() -> str:
    """Return a unique run ID (UUID)."""
    return str(uuid.uuid4())


def new_id() -> str:
    """Fresh id for a generated warning, alternative or quote."""
    return str(uuid.uuid4())


def read_request(path: str | Path) -> dict[str, Any]:
    """Read a request JSON document. Raises FileNotFoundError if missing, ValueError if not a JSON object."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Request file not found: {path}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Request must be a JSON object, got {type(data).__name__}")
    return data


def ensure_output_dir(base_out: str | Path, run_id: str) -> Path:
    """Create outputs/<run_id>/ and return the path."""
    out_dir = Path(base_out) / run_id
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


def format_amount(value: float) -> str:
    """Plain decimal text for a price: no exponent, no rounding, no trailing zeros (1500000, 0.3)."""
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
