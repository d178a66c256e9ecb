"""Pydantic records and enums for the partnership pipeline."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = 1


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# Stand-in creation time for records saved before they carried one
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class LeadStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    REPLIED = "replied"
    NEGOTIATING = "negotiating"
    CONTRACT_SENT = "contract_sent"
    CLOSED_WON = "closed_won"
    DEAD = "dead"


class LeadSource(str, enum.Enum):
    AI_SEARCH = "ai-search"
    INBOUND = "inbound"
    UPLOAD = "upload"
    COMPETITOR = "competitor"
    MANUAL = "manual"


class LeadCategory(str, enum.Enum):
    BEAUTY = "beauty"
    SKINCARE = "skincare"
    LIFESTYLE = "lifestyle"
    HOME = "home"
    WELLNESS = "wellness"
    FASHION = "fashion"
    FOOD = "food"
    TECH = "tech"
    OTHER = "other"


class EmailType(str, enum.Enum):
    FIRST_OUTREACH = "first_outreach"
    FOLLOWUP1 = "followup1"
    FOLLOWUP2 = "followup2"
    NEGOTIATION = "negotiation"
    CONTRACT = "contract"


class BrandAssetType(str, enum.Enum):
    MEDIA_KIT = "media_kit"
    ANALYTICS = "analytics"
    EXAMPLES = "examples"
    MOODBOARD = "moodboard"


class Record(BaseModel):
    model_config = ConfigDict(extra="ignore", use_enum_values=False)


class Socials(Record):
    instagram: str = ""
    tiktok: str = ""
    youtube: str = ""


class NormalizedLead(Record):
    """Lead fields ready for commit; id and timestamps are assigned later."""

    company_name: str
    contact_name: str = ""
    contact_email: str = ""
    website: str = ""
    category: LeadCategory = LeadCategory.OTHER
    source: LeadSource = LeadSource.MANUAL
    status: LeadStatus = LeadStatus.NEW
    socials: Socials = Field(default_factory=Socials)
    ai_pitch: str = ""
    notes: str = ""


class Lead(NormalizedLead):
    id: str
    created_at: datetime
    updated_at: datetime


class Email(Record):
    id: str
    lead_id: str
    subject: str = ""
    body: str = ""
    type: EmailType = EmailType.FIRST_OUTREACH
    sent_at: Optional[datetime] = None
    opened: bool = False
    replied: bool = False
    created_at: datetime = EPOCH


class BrandAsset(Record):
    id: str
    name: str
    file_url: str
    type: BrandAssetType
    uploaded_at: datetime


class ContactSubmission(Record):
    id: str
    name: str = ""
    email: str = ""
    company: str = ""
    message: str = ""
    created_at: datetime


class StoreDocument(Record):
    """Everything persisted in the database file."""

    schema_version: int = SCHEMA_VERSION
    leads: List[Lead] = Field(default_factory=list)
    emails: List[Email] = Field(default_factory=list)
    brand_assets: List[BrandAsset] = Field(default_factory=list)
    contact_submissions: List[ContactSubmission] = Field(default_factory=list)
