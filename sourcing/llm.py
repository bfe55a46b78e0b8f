"""LLM client wrapper: OpenAI, Groq (free tier), Ollama (local, free) or Gemini, all via the OpenAI SDK."""
import json
import os
import re
from pathlib import Path
from openai import OpenAI
from dotenv import load_dotenv

# Load .env from project root (parent of sourcing/) so it works when run as python -m sourcing.run
_project_root = Path(__file__).resolve().parent.parent
load_dotenv(_project_root / ".env")

# Provider: openai (default), groq (free tier), ollama (local, free), gemini
GROQ_BASE = "https://api.groq.com/openai/v1"
OLLAMA_BASE = "http://localhost:11434/v1"
GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta/openai/"

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class MissingCredentialsError(ValueError):
    """The selected provider has no usable API key."""


def get_provider() -> str:
    return (os.getenv("LLM_PROVIDER") or "openai").strip().lower()


def _require_key(env_name: str, placeholder: str, hint: str) -> str:
    key = os.getenv(env_name)
    if not key or key.startswith(placeholder):
        raise MissingCredentialsError(f"{env_name} not set. {hint}")
    return key


def get_client() -> OpenAI:
    """Return OpenAI-compatible client based on LLM_PROVIDER in .env."""
    provider = get_provider()

    if provider == "groq":
        key = _require_key(
            "GROQ_API_KEY", "gsk_REPLACE",
            "Set LLM_PROVIDER=groq and GROQ_API_KEY=your-key in .env. Get a free key at https://console.groq.com/",
        )
        return OpenAI(api_key=key, base_url=GROQ_BASE)

    if provider == "ollama":
        # Ollama has no auth; use a placeholder key. Ensure Ollama is running: ollama run llama3.2
        return OpenAI(api_key="ollama", base_url=OLLAMA_BASE)

    if provider == "gemini":
        key = _require_key("GEMINI_API_KEY", "REPLACE", "Set LLM_PROVIDER=gemini and GEMINI_API_KEY=your-key in .env.")
        return OpenAI(api_key=key, base_url=GEMINI_BASE)

    key = _require_key(
        "OPENAI_API_KEY", "sk-REPLACE",
        "Create .env and set OPENAI_API_KEY=your-key, or use LLM_PROVIDER=groq / ollama / gemini.",
    )
    return OpenAI(api_key=key)


def get_model() -> str:
    """Return model name from env or default for current provider."""
    provider = get_provider()
    if provider == "groq":
        return os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
    if provider == "ollama":
        return os.getenv("OLLAMA_MODEL", "llama3.2")
    if provider == "gemini":
        return os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    return os.getenv("OPENAI_MODEL", "gpt-4o-mini")


def complete(system: str, user: str, model: str | None = None) -> str:
    """
    Single completion. Returns the assistant message content.
    """
    client = get_client()
    model = model or get_model()
    resp = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
    )
    msg = resp.choices[0].message
    return msg.content or ""


def extract_json_from_response(text: str) -> dict:
    """
    Find the first balanced JSON object in the response, inside ```json ... ``` fences or raw
    with surrounding prose. Returns the parsed dict or raises ValueError.
    """
    text = text.strip()
    # fenced blocks holding an object first, then the whole reply
    candidates = [m.group(1).strip() for m in _FENCE.finditer(text) if "{" in m.group(1)]
    candidates.append(text)

    decoder = json.JSONDecoder()
    for candidate in candidates:
        start = candidate.find("{")
        while start != -1:
            try:
                obj, _ = decoder.raw_decode(candidate, start)
                return obj
            except json.JSONDecodeError:
                start = candidate.find("{", start + 1)
    raise ValueError("No JSON object found in model response")
