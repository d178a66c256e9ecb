"""Recover lead arrays from text pasted out of an AI chat window.

Parsing is pure: nothing is written until the caller commits the returned
candidates through the lead manager.
"""
from __future__ import annotations

import json
import re
from typing import Any, List, Sequence

from .errors import ValidationError
from .logging_utils import get_logger
from .models import LeadCategory, LeadSource, NormalizedLead
from .normalizer import normalize_lead, resolve_source

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def extract_json_array(text: str) -> str:
    """Strip code fences and surrounding prose, keeping the outermost ``[...]``."""
    text = _FENCE_RE.sub("", text.strip())
    start = text.find("[")
    end = text.rfind("]")
    if start != -1 and end > start:
        text = text[start:end + 1]
    return text.strip()


def decode_lead_array(text: str) -> List[Any]:
    candidate = extract_json_array(text)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ValidationError(
            f"Could not parse the pasted response as JSON ({exc.msg} at line {exc.lineno}, column {exc.colno})"
        ) from exc
    if not isinstance(data, list):
        raise ValidationError(f"Expected an array of leads, got a JSON {type(data).__name__}")
    return data


def parse_leads(
    payload: str | Sequence[Any],
    source: LeadSource | str = LeadSource.AI_SEARCH,
    default_category: LeadCategory | str | None = None,
) -> List[NormalizedLead]:
    """Parse and validate a whole batch, failing on the first bad element."""
    items = decode_lead_array(payload) if isinstance(payload, str) else list(payload)
    if not items:
        raise ValidationError("No leads provided")
    source = resolve_source(source)

    candidates: List[NormalizedLead] = []
    for position, item in enumerate(items, start=1):
        try:
            candidates.append(normalize_lead(item, source=source, default_category=default_category))
        except ValidationError as exc:
            logger.warning("Rejected import batch of %d: lead %d invalid (%s)", len(items), position, exc.message)
            raise ValidationError(
                f"Lead {position} rejected: {exc.message}", field=exc.field, position=position
            ) from exc
    return candidates
