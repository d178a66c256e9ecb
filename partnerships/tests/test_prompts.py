"""Unit tests for prompt rendering and draft parsing."""
from datetime import datetime, timezone

import pytest

from partnerships.ingestion import parse_leads
from partnerships.models import EmailType, Lead, LeadCategory, LeadSource
from partnerships.prompts import (
    CREATOR_CONTEXT,
    DEFAULT_SUBJECT,
    competitor_lookup_prompt,
    email_prompt_for,
    followup_email_prompt,
    lead_discovery_prompt,
    outreach_email_prompt,
    parse_email_draft,
    pitch_prompt,
)


@pytest.fixture
def lead():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Lead(
        id="lead-1",
        company_name="Acme Home",
        contact_name="Jo",
        category=LeadCategory.HOME,
        source=LeadSource.MANUAL,
        created_at=now,
        updated_at=now,
    )


class TestDiscoveryPrompts:
    """The discovery prompts must request exactly what the importer reads."""

    def test_discovery_prompt_parameters(self):
        prompt = lead_discovery_prompt("skincare", 10)
        assert CREATOR_CONTEXT in prompt
        assert "find 10 brands" in prompt
        assert '"skincare"' in prompt

    def test_discovery_example_is_importable(self):
        """Test the embedded JSON example survives the import parser."""
        candidates = parse_leads(lead_discovery_prompt("beauty"))

        assert len(candidates) == 1
        assert candidates[0].company_name == "Brand Name"
        assert candidates[0].category == LeadCategory.BEAUTY
        assert candidates[0].socials.instagram == "@handle"
        assert candidates[0].ai_pitch
        assert candidates[0].notes

    def test_competitor_example_is_importable(self):
        prompt = competitor_lookup_prompt("Jo Malone")
        candidates = parse_leads(prompt, default_category="lifestyle")

        assert "Jo Malone" in candidates[0].ai_pitch
        assert candidates[0].category == LeadCategory.LIFESTYLE

    def test_rendering_is_deterministic(self):
        assert lead_discovery_prompt("home", 5) == lead_discovery_prompt("home", 5)


class TestEmailPrompts:
    def test_pitch_prompt_website_optional(self):
        assert "website: https://acme.com" in pitch_prompt("Acme", "home", "https://acme.com")
        assert "website:" not in pitch_prompt("Acme", "home")

    def test_outreach_uses_pitch_when_present(self, lead):
        with_pitch = lead.model_copy(update={"ai_pitch": "Linen bedding in neutral tones"})
        assert 'Use this pitch angle: "Linen bedding in neutral tones"' in outreach_email_prompt(with_pitch)

    def test_outreach_falls_back_to_category(self, lead):
        prompt = outreach_email_prompt(lead)
        assert "The brand is in the home category." in prompt
        assert "Acme Home (contact: Jo)" in prompt

    def test_followups_differ(self, lead):
        first = followup_email_prompt(lead, 1, "Cozy collab")
        last = followup_email_prompt(lead, 2, "Cozy collab")
        assert first != last
        assert "SUBJECT: Re: Cozy collab" in first
        assert "last follow-up" in last

    def test_followup_number_checked(self, lead):
        with pytest.raises(ValueError):
            followup_email_prompt(lead, 3)

    @pytest.mark.parametrize("email_type,marker", [
        (EmailType.FIRST_OUTREACH, "cold outreach email"),
        (EmailType.FOLLOWUP1, "follow-up email #1"),
        (EmailType.FOLLOWUP2, "follow-up email #2"),
        ("negotiation", "cold outreach email"),
    ])
    def test_email_prompt_dispatch(self, lead, email_type, marker):
        assert marker in email_prompt_for(lead, email_type)


class TestParseEmailDraft:
    def test_subject_and_body(self):
        subject, body = parse_email_draft("SUBJECT: Hello there\n\nHi Jo,\nThanks!\n\nBest,\nMichelle")
        assert subject == "Hello there"
        assert body == "Hi Jo,\nThanks!\n\nBest,\nMichelle"

    def test_lowercase_marker(self):
        subject, _ = parse_email_draft("subject: quiet luxury\nbody")
        assert subject == "quiet luxury"

    def test_missing_subject_uses_default(self):
        subject, body = parse_email_draft("Hi Jo,\nThanks!")
        assert subject == DEFAULT_SUBJECT
        assert body == "Hi Jo,\nThanks!"

    def test_default_subject_names_creator(self):
        assert DEFAULT_SUBJECT == "Partnership Opportunity with Michelle Choe"

    def test_preamble_dropped(self):
        """Test chatter before the SUBJECT line stays out of the body."""
        subject, body = parse_email_draft("Here's your email:\n\nSUBJECT: Cozy collab\n\nHi team,\nLove it.\n\nBest,\nMichelle")
        assert subject == "Cozy collab"
        assert body == "Hi team,\nLove it.\n\nBest,\nMichelle"

    def test_empty_subject_line(self):
        subject, body = parse_email_draft("SUBJECT:\n\nHi team,\nLove it.")
        assert subject == DEFAULT_SUBJECT
        assert body == "Hi team,\nLove it."
