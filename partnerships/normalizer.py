"""Map untrusted lead-like objects onto fully defaulted lead fields."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from .errors import ValidationError
from .models import LeadCategory, LeadSource, LeadStatus, NormalizedLead, Socials

SOCIAL_KEYS = ("instagram", "tiktok", "youtube")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _first_text(raw: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = _text(raw.get(key))
        if value:
            return value
    return ""


def _category(value: Any) -> Optional[LeadCategory]:
    if isinstance(value, LeadCategory):
        return value
    try:
        return LeadCategory(_text(value).lower())
    except ValueError:
        return None


def resolve_source(source: Any) -> LeadSource:
    try:
        return LeadSource(source)
    except ValueError:
        raise ValidationError(f"Unknown lead source: {source!r}", field="source") from None


def _socials(value: Any) -> Socials:
    if not isinstance(value, Mapping):
        return Socials()
    return Socials(**{key: _text(value.get(key)) for key in SOCIAL_KEYS})


def normalize_lead(
    raw: Any,
    source: LeadSource | str = LeadSource.MANUAL,
    default_category: LeadCategory | str | None = None,
) -> NormalizedLead:
    """Build lead fields from ``raw``.

    ``company_name`` is the only required field. Any status carried by the
    input is discarded; new leads always start at ``new``. Pitch and notes fall
    back to the ``why_good_fit`` / ``suggested_collab`` keys that the discovery
    prompts ask for.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("Lead must be a JSON object with a company_name", field="company_name")

    company_name = _text(raw.get("company_name"))
    if not company_name:
        raise ValidationError("Lead is missing company_name", field="company_name")

    category = _category(raw.get("category")) or _category(default_category) or LeadCategory.OTHER

    return NormalizedLead(
        company_name=company_name,
        contact_name=_text(raw.get("contact_name")),
        contact_email=_text(raw.get("contact_email")),
        website=_text(raw.get("website")),
        category=category,
        source=resolve_source(source),
        status=LeadStatus.NEW,
        socials=_socials(raw.get("socials")),
        ai_pitch=_first_text(raw, "ai_pitch", "why_good_fit"),
        notes=_first_text(raw, "notes", "suggested_collab"),
    )
