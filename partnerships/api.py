"""FastAPI app for the partnership dashboard and the public contact form."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import Settings, get_settings
from .errors import PersistenceError, ValidationError
from .inbound import record_contact_submission
from .lifecycle import STATUS_FILTER_ALL, LeadManager
from .logging_utils import configure_logging, get_logger
from .models import BrandAsset, BrandAssetType, EmailType, LeadCategory, new_id
from .outreach import OutreachService
from .prompts import (
    FOLLOWUP_SUBJECT,
    competitor_lookup_prompt,
    email_prompt_for,
    lead_discovery_prompt,
    pitch_prompt,
)
from .store import JsonStore

logger = get_logger(__name__)


class ImportRequest(BaseModel):
    text: Optional[str] = None
    leads: Optional[List[Any]] = None
    default_category: Optional[LeadCategory] = None


class EmailCreateRequest(BaseModel):
    lead_id: str
    subject: str = ""
    body: str = ""
    type: Optional[EmailType] = None
    # Raw "SUBJECT: ..." text pasted from the assistant; overrides subject/body
    draft: Optional[str] = None


class EmailUpdateRequest(BaseModel):
    sent: Optional[bool] = None
    opened: Optional[bool] = None
    replied: Optional[bool] = None


class ContactRequest(BaseModel):
    name: str = ""
    email: str = ""
    company: str = ""
    message: str = ""


class BrandAssetRequest(BaseModel):
    name: str
    file_url: str
    type: BrandAssetType


# ---------------- Dependencies ----------------

def get_store(request: Request) -> JsonStore:
    return request.app.state.store


def get_lead_manager(store: JsonStore = Depends(get_store)) -> LeadManager:
    return LeadManager(store)


def get_outreach(store: JsonStore = Depends(get_store)) -> OutreachService:
    return OutreachService(store)


def require_dashboard(
    request: Request,
    x_dashboard_password: Optional[str] = Header(None),
) -> None:
    """Shared-secret check for dashboard routes."""
    expected = request.app.state.settings.dashboard_password
    if expected and x_dashboard_password != expected:
        raise HTTPException(status_code=401, detail="Dashboard password required")


def _import_payload(body: ImportRequest):
    if body.text is not None:
        return body.text
    if body.leads is not None:
        return body.leads
    raise ValidationError("Provide either 'text' or 'leads'", field="text")


# ---------------- Public routes ----------------

public = APIRouter()


@public.get("/health")
def health():
    return {"status": "ok"}


@public.post("/contact", status_code=201)
def submit_contact(body: ContactRequest, store: JsonStore = Depends(get_store)):
    """Record a contact-form message and open an inbound lead for it."""
    result = record_contact_submission(store, body.model_dump())
    return {
        "status": "ok",
        "message": "Thank you for your message! I'll get back to you within 48 hours.",
        "lead_id": result.lead.id,
    }


# ---------------- Leads ----------------

dashboard = APIRouter(dependencies=[Depends(require_dashboard)])


@dashboard.get("/leads")
def list_leads(
    status: str = STATUS_FILTER_ALL,
    search: str = "",
    manager: LeadManager = Depends(get_lead_manager),
):
    """Leads newest first, optionally filtered by status and company/email search."""
    return {"leads": manager.filter_leads(status, search)}


@dashboard.post("/leads", status_code=201)
def create_lead(payload: Dict[str, Any] = Body(...), manager: LeadManager = Depends(get_lead_manager)):
    source = payload.get("source") or "manual"
    lead = manager.create_lead(payload, source=source)
    return {"lead": lead}


@dashboard.get("/leads/stats")
def lead_stats(manager: LeadManager = Depends(get_lead_manager)):
    return manager.compute_stats()


@dashboard.post("/leads/import/preview")
def preview_import(body: ImportRequest, manager: LeadManager = Depends(get_lead_manager)):
    """Parse pasted text without saving anything."""
    candidates = manager.preview_import(_import_payload(body), default_category=body.default_category)
    return {"count": len(candidates), "leads": candidates}


@dashboard.post("/leads/import", status_code=201)
def import_leads(body: ImportRequest, manager: LeadManager = Depends(get_lead_manager)):
    result = manager.bulk_import(_import_payload(body), default_category=body.default_category)
    return {"status": "ok", "count": result.count, "leads": result.leads}


@dashboard.get("/leads/{lead_id}")
def get_lead(lead_id: str, manager: LeadManager = Depends(get_lead_manager)):
    lead = manager.get_lead(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return {"lead": lead}


@dashboard.patch("/leads/{lead_id}")
def update_lead(lead_id: str, fields: Dict[str, Any] = Body(...), manager: LeadManager = Depends(get_lead_manager)):
    lead = manager.update_lead(lead_id, fields)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return {"lead": lead}


@dashboard.delete("/leads/{lead_id}")
def delete_lead(lead_id: str, manager: LeadManager = Depends(get_lead_manager)):
    return {"deleted": manager.delete_lead(lead_id)}


# ---------------- Emails ----------------

@dashboard.get("/emails")
def list_emails(lead_id: str, outreach: OutreachService = Depends(get_outreach)):
    return {"emails": outreach.list_for_lead(lead_id)}


@dashboard.post("/emails", status_code=201)
def create_email(body: EmailCreateRequest, outreach: OutreachService = Depends(get_outreach)):
    if body.draft:
        email = outreach.create_draft_from_text(body.lead_id, body.draft, type=body.type)
    else:
        email = outreach.create_draft(body.lead_id, subject=body.subject, body=body.body, type=body.type)
    return {"email": email}


@dashboard.patch("/emails/{email_id}")
def update_email(email_id: str, body: EmailUpdateRequest, outreach: OutreachService = Depends(get_outreach)):
    email = outreach.store.get_email(email_id)
    if email is None:
        raise HTTPException(status_code=404, detail="Email not found")
    if body.sent is not None:
        email = outreach.mark_sent(email_id, body.sent)
    if body.opened is not None:
        email = outreach.mark_opened(email_id, body.opened)
    if body.replied is not None:
        email = outreach.mark_replied(email_id, body.replied)
    return {"email": email}


@dashboard.delete("/emails/{email_id}")
def delete_email(email_id: str, outreach: OutreachService = Depends(get_outreach)):
    return {"deleted": outreach.delete_draft(email_id)}


# ---------------- Prompts ----------------

@dashboard.get("/prompts/discovery")
def discovery_prompt(request: Request, category: str = "lifestyle", count: Optional[int] = None):
    count = count or request.app.state.settings.default_discovery_count
    return {"prompt": lead_discovery_prompt(category, count)}


@dashboard.get("/prompts/competitor")
def competitor_prompt(brand: str):
    return {"prompt": competitor_lookup_prompt(brand)}


@dashboard.get("/prompts/pitch/{lead_id}")
def lead_pitch_prompt(lead_id: str, manager: LeadManager = Depends(get_lead_manager)):
    lead = manager.get_lead(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return {"prompt": pitch_prompt(lead.company_name, lead.category.value, lead.website or None)}


@dashboard.get("/prompts/email/{lead_id}")
def lead_email_prompt(
    lead_id: str,
    type: EmailType = EmailType.FIRST_OUTREACH,
    original_subject: str = FOLLOWUP_SUBJECT,
    manager: LeadManager = Depends(get_lead_manager),
):
    lead = manager.get_lead(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return {"prompt": email_prompt_for(lead, type, original_subject)}


# ---------------- Other collections ----------------

@dashboard.get("/contact-submissions")
def contact_submissions(store: JsonStore = Depends(get_store)):
    return {"items": store.get_all_contact_submissions()}


@dashboard.get("/brand-assets")
def brand_assets(store: JsonStore = Depends(get_store)):
    return {"items": store.get_all_brand_assets()}


@dashboard.post("/brand-assets", status_code=201)
def create_brand_asset(body: BrandAssetRequest, store: JsonStore = Depends(get_store)):
    asset = BrandAsset(id=new_id(), uploaded_at=store.clock(), **body.model_dump())
    store.create_brand_asset(asset)
    return {"item": asset}


@dashboard.delete("/brand-assets/{asset_id}")
def delete_brand_asset(asset_id: str, store: JsonStore = Depends(get_store)):
    return {"deleted": store.delete_brand_asset(asset_id)}


# ---------------- App factory ----------------

def create_app(settings: Optional[Settings] = None, store: Optional[JsonStore] = None) -> FastAPI:
    settings = settings or get_settings()
    store = store or JsonStore(settings.database_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.open()
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="Creator Partnerships", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"status": "error", "message": "Could not save changes"})

    app.include_router(public)
    app.include_router(dashboard)
    return app


_settings = get_settings()
configure_logging(_settings.log_level)
app = create_app(_settings)
