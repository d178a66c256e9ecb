"""Lead lifecycle: creation, bulk import, status moves, deletion, and pipeline stats."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .errors import ValidationError
from .ingestion import parse_leads
from .logging_utils import get_logger
from .models import Lead, LeadCategory, LeadSource, LeadStatus, NormalizedLead, Socials, new_id
from .normalizer import SOCIAL_KEYS, normalize_lead
from .store import JsonStore

logger = get_logger(__name__)

STATUS_FILTER_ALL = "all"

# Fields an operator may patch; anything else in an update payload is dropped
EDITABLE_FIELDS = (
    "company_name",
    "contact_name",
    "contact_email",
    "website",
    "category",
    "socials",
    "ai_pitch",
    "notes",
    "status",
)


@dataclass
class ImportResult:
    count: int
    leads: List[Lead] = field(default_factory=list)


def parse_status(value: Any) -> LeadStatus:
    try:
        return LeadStatus(value)
    except ValueError:
        allowed = ", ".join(status.value for status in LeadStatus)
        raise ValidationError(f"Invalid status {value!r}; expected one of: {allowed}", field="status") from None


class LeadManager:
    """Operations on leads over their lifetime, backed by a :class:`JsonStore`."""

    def __init__(self, store: JsonStore):
        self.store = store

    def _commit_fields(self, candidate: NormalizedLead) -> Lead:
        now = self.store.clock()
        return Lead(**candidate.model_dump(), id=new_id(), created_at=now, updated_at=now)

    # ---------------- creation ----------------

    def create_lead(
        self,
        raw: Mapping[str, Any],
        source: LeadSource | str = LeadSource.MANUAL,
        default_category: LeadCategory | str | None = None,
    ) -> Lead:
        lead = self._commit_fields(normalize_lead(raw, source=source, default_category=default_category))
        self.store.create_lead(lead)
        logger.info("Created lead %s (%s, source=%s)", lead.id, lead.company_name, lead.source.value)
        return lead

    def preview_import(
        self,
        payload: str | Sequence[Any],
        default_category: LeadCategory | str | None = None,
    ) -> List[NormalizedLead]:
        return parse_leads(payload, source=LeadSource.AI_SEARCH, default_category=default_category)

    def bulk_import(
        self,
        payload: str | Sequence[Any],
        source: LeadSource | str = LeadSource.AI_SEARCH,
        default_category: LeadCategory | str | None = None,
    ) -> ImportResult:
        """Import every lead in ``payload`` or none of them."""
        candidates = parse_leads(payload, source=source, default_category=default_category)
        leads = self.store.bulk_create_leads(self._commit_fields(candidate) for candidate in candidates)
        logger.info("Imported %d leads (source=%s)", len(leads), LeadSource(source).value)
        return ImportResult(count=len(leads), leads=leads)

    # ---------------- reads ----------------

    def get_lead(self, lead_id: str) -> Optional[Lead]:
        return self.store.get_lead(lead_id)

    def list_leads(self) -> List[Lead]:
        return sorted(self.store.get_all_leads(), key=lambda lead: lead.created_at, reverse=True)

    def filter_leads(self, status_filter: str = STATUS_FILTER_ALL, search_text: str = "") -> List[Lead]:
        if status_filter == STATUS_FILTER_ALL:
            leads = self.list_leads()
        else:
            status = parse_status(status_filter)
            leads = [lead for lead in self.list_leads() if lead.status == status]

        needle = (search_text or "").strip().lower()
        if not needle:
            return leads
        return [
            lead for lead in leads
            if needle in lead.company_name.lower() or needle in lead.contact_email.lower()
        ]

    def compute_stats(self) -> Dict[str, int]:
        leads = self.store.get_all_leads()
        stats = {status.value: 0 for status in LeadStatus}
        for lead in leads:
            stats[lead.status.value] += 1
        stats["total"] = len(leads)
        return stats

    # ---------------- mutations ----------------

    def set_status(self, lead_id: str, status: LeadStatus | str) -> Optional[Lead]:
        """Move a lead to any status; there is no enforced transition order."""
        new_status = parse_status(status)
        lead = self.store.update_lead(lead_id, {"status": new_status})
        if lead is None:
            logger.warning("Status update for unknown lead %s", lead_id)
        else:
            logger.info("Lead %s -> %s", lead_id, new_status.value)
        return lead

    def update_lead(self, lead_id: str, fields: Mapping[str, Any]) -> Optional[Lead]:
        patch: Dict[str, Any] = {key: fields[key] for key in EDITABLE_FIELDS if key in fields}

        if "status" in patch:
            patch["status"] = parse_status(patch["status"])
        if "category" in patch:
            try:
                patch["category"] = LeadCategory(patch["category"])
            except ValueError:
                raise ValidationError(f"Invalid category {patch['category']!r}", field="category") from None
        if "company_name" in patch:
            name = patch["company_name"]
            if not isinstance(name, str) or not name.strip():
                raise ValidationError("company_name cannot be empty", field="company_name")
            patch["company_name"] = name.strip()
        if "socials" in patch:
            socials = patch["socials"] if isinstance(patch["socials"], Mapping) else {}
            patch["socials"] = Socials(**{key: str(socials.get(key) or "") for key in SOCIAL_KEYS})
        for key in ("contact_name", "contact_email", "website", "ai_pitch", "notes"):
            if key in patch:
                patch[key] = "" if patch[key] is None else str(patch[key])

        lead = self.store.update_lead(lead_id, patch)
        if lead is None:
            logger.warning("Update for unknown lead %s", lead_id)
        return lead

    def delete_lead(self, lead_id: str) -> bool:
        deleted = self.store.delete_lead(lead_id)
        if not deleted:
            logger.warning("Delete for unknown lead %s", lead_id)
        return deleted
