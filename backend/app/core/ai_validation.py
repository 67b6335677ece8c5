# backend/app/core/ai_validation.py

import json
import re
from typing import Any, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from backend.app.core.errors import AIResponseValidationError

M = TypeVar("M", bound=BaseModel)

_FENCED = re.compile(r"```(?:json)?\s*([\[{].*?[\]}])\s*```", re.DOTALL)


def extract_json(text: str) -> Any:
    """
    Pull a JSON value out of an LLM reply.
    Accepts raw JSON, a ```json fenced block, or the outermost {...} / [...] span.
    """
    raw = (text or "").strip()
    if not raw:
        raise AIResponseValidationError(details="Empty response")

    candidates = [raw]
    m = _FENCED.search(raw)
    if m:
        candidates.append(m.group(1))
    for open_ch, close_ch in (("{", "}"), ("[", "]")):
        start, end = raw.find(open_ch), raw.rfind(close_ch)
        if start != -1 and end > start:
            candidates.append(raw[start:end + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    raise AIResponseValidationError(details=f"Response is not valid JSON: {raw[:200]}")


def _summarize(err: ValidationError) -> str:
    parts = []
    for e in err.errors()[:5]:
        loc = ".".join(str(p) for p in e["loc"]) or "<root>"
        parts.append(f"{loc}: {e['msg']}")
    return "; ".join(parts)


def parse_ai_model(text: str, model: Type[M]) -> M:
    """Parse an LLM reply into a validated pydantic model."""
    data = extract_json(text)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise AIResponseValidationError(details=_summarize(e)) from e


def parse_ai_value(text: str, type_: Any) -> Any:
    """Same as parse_ai_model for non-model shapes, e.g. List[str]."""
    data = extract_json(text)
    try:
        return TypeAdapter(type_).validate_python(data)
    except ValidationError as e:
        raise AIResponseValidationError(details=_summarize(e)) from e
