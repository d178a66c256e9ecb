"""Email drafts attached to leads.

Drafts are written by hand (usually pasted back from a chat assistant) and
never sent by this service; sent/opened/replied flags are set by the operator.
"""
from __future__ import annotations

from typing import List, Optional

from .errors import ValidationError
from .logging_utils import get_logger
from .models import Email, EmailType, new_id
from .prompts import parse_email_draft
from .store import JsonStore

logger = get_logger(__name__)


def parse_email_type(value: EmailType | str | None) -> EmailType:
    if value is None or value == "":
        return EmailType.FIRST_OUTREACH
    try:
        return EmailType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in EmailType)
        raise ValidationError(f"Invalid email type {value!r}; expected one of: {allowed}", field="type") from None


class OutreachService:
    def __init__(self, store: JsonStore):
        self.store = store

    def create_draft(
        self,
        lead_id: str,
        subject: str = "",
        body: str = "",
        type: EmailType | str | None = EmailType.FIRST_OUTREACH,
    ) -> Email:
        """Save a draft for an existing lead; tracking flags always start cleared."""
        if not lead_id or self.store.get_lead(lead_id) is None:
            raise ValidationError(f"Lead {lead_id!r} does not exist", field="lead_id")

        email = Email(
            id=new_id(),
            lead_id=lead_id,
            subject=subject or "",
            body=body or "",
            type=parse_email_type(type),
            sent_at=None,
            opened=False,
            replied=False,
            created_at=self.store.clock(),
        )
        self.store.create_email(email)
        logger.info("Saved %s draft %s for lead %s", email.type.value, email.id, lead_id)
        return email

    def create_draft_from_text(self, lead_id: str, text: str, type: EmailType | str | None = None) -> Email:
        subject, body = parse_email_draft(text)
        return self.create_draft(lead_id, subject=subject, body=body, type=type)

    def list_for_lead(self, lead_id: str) -> List[Email]:
        return sorted(self.store.get_emails_for_lead(lead_id), key=lambda email: email.created_at, reverse=True)

    def mark_sent(self, email_id: str, sent: bool = True) -> Optional[Email]:
        return self._set(email_id, sent_at=self.store.clock() if sent else None)

    def mark_opened(self, email_id: str, opened: bool = True) -> Optional[Email]:
        return self._set(email_id, opened=opened)

    def mark_replied(self, email_id: str, replied: bool = True) -> Optional[Email]:
        return self._set(email_id, replied=replied)

    def _set(self, email_id: str, **fields) -> Optional[Email]:
        email = self.store.update_email(email_id, fields)
        if email is None:
            logger.warning("Update for unknown email %s", email_id)
        return email

    def delete_draft(self, email_id: str) -> bool:
        deleted = self.store.delete_email(email_id)
        if not deleted:
            logger.warning("Delete for unknown email %s", email_id)
        return deleted
