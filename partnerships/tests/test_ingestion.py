"""Unit tests for parsing pasted lead arrays."""
import json

import pytest

from partnerships.errors import ValidationError
from partnerships.ingestion import extract_json_array, parse_leads
from partnerships.models import LeadCategory, LeadSource, LeadStatus, Socials


class TestExtractJsonArray:
    """Tests for recovering the JSON payload from surrounding text."""

    def test_strips_fence_and_prose(self):
        text = 'Here you go:\n```json\n[{"company_name":"Acme"}]\n```\nHope this helps!'
        assert extract_json_array(text) == '[{"company_name":"Acme"}]'

    def test_strips_plain_fences_anywhere(self):
        text = 'Sure!\n```\n[{"company_name":"A"}]\n```\nand ```json more'
        assert json.loads(extract_json_array(text)) == [{"company_name": "A"}]

    def test_outermost_brackets_kept(self):
        text = 'x [{"company_name": "A", "tags": ["a", "b"]}] y'
        assert json.loads(extract_json_array(text))[0]["tags"] == ["a", "b"]

    def test_text_without_brackets_passed_through(self):
        assert extract_json_array('  {"company_name": "A"}  ') == '{"company_name": "A"}'


class TestParseLeads:
    """Tests for whole-batch parsing and validation."""

    def test_fenced_response_yields_one_candidate(self):
        """Test the common copy-paste shape from a chat assistant."""
        text = 'Here you go:\n```json\n[{"company_name":"Acme"}]\n```\nHope this helps!'
        leads = parse_leads(text)

        assert len(leads) == 1
        lead = leads[0]
        assert lead.company_name == "Acme"
        assert lead.category == LeadCategory.OTHER
        assert lead.socials == Socials(instagram="", tiktok="", youtube="")
        assert lead.status == LeadStatus.NEW
        assert lead.source == LeadSource.AI_SEARCH

    def test_order_preserved(self):
        text = json.dumps([{"company_name": name} for name in ["C", "A", "B"]])
        assert [lead.company_name for lead in parse_leads(text)] == ["C", "A", "B"]

    def test_discovery_fields_mapped(self):
        text = json.dumps([{
            "company_name": "Glow Co",
            "category": "beauty",
            "socials": {"instagram": "@glow", "tiktok": "@glowco", "youtube": ""},
            "why_good_fit": "Soft neutral packaging",
            "suggested_collab": "GRWM video",
        }])
        lead = parse_leads(text)[0]

        assert lead.category == LeadCategory.BEAUTY
        assert lead.socials.tiktok == "@glowco"
        assert lead.ai_pitch == "Soft neutral packaging"
        assert lead.notes == "GRWM video"

    def test_default_category_applied(self):
        leads = parse_leads('[{"company_name": "A"}, {"company_name": "B", "category": "tech"}]', default_category="home")
        assert [lead.category for lead in leads] == [LeadCategory.HOME, LeadCategory.TECH]

    def test_malformed_json_fails_whole_batch(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_leads('[{"company_name": "Acme",}')
        assert "JSON" in exc_info.value.message
        assert exc_info.value.position is None

    @pytest.mark.parametrize("text", ['{"company_name": "Acme"}', '"Acme"', "42"])
    def test_non_array_rejected(self, text):
        with pytest.raises(ValidationError) as exc_info:
            parse_leads(text)
        assert "array" in exc_info.value.message

    def test_empty_array_rejected(self):
        with pytest.raises(ValidationError):
            parse_leads("[]")

    def test_missing_company_name_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_leads('[{"website":"x.com"}]')
        assert exc_info.value.position == 1
        assert exc_info.value.field == "company_name"

    @pytest.mark.parametrize("bad_index", [0, 2, 4])
    def test_first_bad_position_reported(self, bad_index):
        """Test the 1-based position of the first invalid element is reported."""
        items = [{"company_name": f"Brand {i}"} for i in range(5)]
        items[bad_index] = {"website": "x.com"}
        if bad_index < 4:
            items[4] = {"company_name": ""}

        with pytest.raises(ValidationError) as exc_info:
            parse_leads(json.dumps(items))
        assert exc_info.value.position == bad_index + 1
        assert f"Lead {bad_index + 1}" in exc_info.value.message

    def test_non_object_reason_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_leads('[{"company_name": "Acme"}, "Glossier"]')
        assert exc_info.value.position == 2
        assert exc_info.value.message.startswith("Lead 2")
        assert "JSON object" in exc_info.value.message

    def test_decoded_list_accepted(self):
        leads = parse_leads([{"company_name": "Acme"}, {"company_name": "Beta"}])
        assert [lead.company_name for lead in leads] == ["Acme", "Beta"]

    def test_repeatable(self):
        """Test parsing is pure and can be repeated for preview."""
        text = '```json\n[{"company_name": "Acme", "status": "dead"}]\n```'
        assert parse_leads(text) == parse_leads(text)

    def test_unknown_source_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_leads('[{"company_name": "Acme"}]', source="scraper")
        assert exc_info.value.field == "source"
