"""Unit tests for email drafts."""
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from partnerships.errors import ValidationError
from partnerships.lifecycle import LeadManager
from partnerships.models import EmailType
from partnerships.outreach import OutreachService
from partnerships.store import JsonStore


def ticking_clock():
    start = datetime(2024, 3, 1, tzinfo=timezone.utc)
    counter = itertools.count()
    return lambda: start + timedelta(minutes=next(counter))


@pytest.fixture
def store(tmp_path):
    with JsonStore(tmp_path / "database.json", clock=ticking_clock()) as s:
        yield s


@pytest.fixture
def lead(store):
    return LeadManager(store).create_lead({"company_name": "Acme", "contact_name": "Jo"})


@pytest.fixture
def outreach(store):
    return OutreachService(store)


class TestDrafts:
    """Tests for creating and listing drafts."""

    def test_create_draft_defaults(self, outreach, lead):
        email = outreach.create_draft(lead.id, subject="Hi", body="Hello there")

        assert email.type == EmailType.FIRST_OUTREACH
        assert email.sent_at is None
        assert email.opened is False
        assert email.replied is False

    def test_unknown_lead_rejected(self, outreach):
        with pytest.raises(ValidationError) as exc_info:
            outreach.create_draft("missing", subject="Hi")
        assert exc_info.value.field == "lead_id"

    def test_invalid_type_rejected(self, outreach, lead):
        with pytest.raises(ValidationError):
            outreach.create_draft(lead.id, type="breakup")

    def test_list_most_recent_first(self, outreach, lead):
        for email_type in ("first_outreach", "followup1", "followup2"):
            outreach.create_draft(lead.id, subject=email_type, type=email_type)

        subjects = [email.subject for email in outreach.list_for_lead(lead.id)]
        assert subjects == ["followup2", "followup1", "first_outreach"]

    def test_list_other_lead_empty(self, outreach, lead):
        outreach.create_draft(lead.id, subject="Hi")
        assert outreach.list_for_lead("someone-else") == []

    def test_create_from_pasted_text(self, outreach, lead):
        text = "SUBJECT: Cozy spring collab idea\n\nHi Jo,\n\nLove your linen line.\n\nBest,\nMichelle"
        email = outreach.create_draft_from_text(lead.id, text, type="followup1")

        assert email.subject == "Cozy spring collab idea"
        assert email.body.startswith("Hi Jo,")
        assert "SUBJECT" not in email.body
        assert email.type == EmailType.FOLLOWUP1


class TestTracking:
    """Tests for operator-set tracking flags."""

    def test_mark_sent_opened_replied(self, outreach, lead):
        email = outreach.create_draft(lead.id, subject="Hi")

        sent = outreach.mark_sent(email.id)
        assert sent.sent_at is not None

        assert outreach.mark_opened(email.id).opened is True
        replied = outreach.mark_replied(email.id)
        assert replied.replied is True
        assert replied.sent_at == sent.sent_at

    def test_unmark_sent(self, outreach, lead):
        email = outreach.create_draft(lead.id)
        outreach.mark_sent(email.id)
        assert outreach.mark_sent(email.id, sent=False).sent_at is None

    def test_unknown_email(self, outreach):
        assert outreach.mark_sent("missing") is None
        assert outreach.delete_draft("missing") is False

    def test_delete_draft_keeps_lead(self, outreach, lead, store):
        email = outreach.create_draft(lead.id)
        assert outreach.delete_draft(email.id) is True
        assert outreach.list_for_lead(lead.id) == []
        assert store.get_lead(lead.id) is not None
