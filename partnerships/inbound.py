"""Contact-form submissions from the public site."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .logging_utils import get_logger
from .models import ContactSubmission, Lead, LeadCategory, LeadSource, LeadStatus, Socials, new_id
from .store import JsonStore

logger = get_logger(__name__)

INBOUND_NOTES_PREFIX = "Inbound inquiry: "
UNKNOWN_COMPANY = "Unknown Company"


@dataclass
class InboundResult:
    submission: ContactSubmission
    lead: Lead


def _field(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else ""


def record_contact_submission(store: JsonStore, payload: Mapping[str, Any]) -> InboundResult:
    """Store the submission and the inbound lead it creates.

    Both records go into the same document write, so either both are saved
    or neither is.
    """
    now = store.clock()
    submission = ContactSubmission(
        id=new_id(),
        name=_field(payload, "name"),
        email=_field(payload, "email"),
        company=_field(payload, "company"),
        message=_field(payload, "message"),
        created_at=now,
    )
    lead = Lead(
        id=new_id(),
        company_name=submission.company or UNKNOWN_COMPANY,
        contact_name=submission.name,
        contact_email=submission.email,
        website="",
        category=LeadCategory.OTHER,
        source=LeadSource.INBOUND,
        status=LeadStatus.NEW,
        socials=Socials(),
        ai_pitch="",
        notes=f"{INBOUND_NOTES_PREFIX}{submission.message}",
        created_at=now,
        updated_at=now,
    )

    try:
        with store.transaction() as doc:
            doc.contact_submissions.append(submission)
            doc.leads.append(lead)
    except Exception:
        logger.exception("Contact submission from %s was not saved; no lead created", submission.email or "<no email>")
        raise

    logger.info("Contact submission %s recorded as inbound lead %s", submission.id, lead.id)
    return InboundResult(submission=submission, lead=lead)
