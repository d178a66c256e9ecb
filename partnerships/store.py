"""Flat JSON document store holding leads, emails, brand assets and contact submissions.

Every public operation is one read of the database file, an in-memory change,
and at most one write. There is no locking: two processes writing the same
file race with last-write-wins semantics.
"""
from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import pydantic

from .errors import PersistenceError, StoreCorruptedError
from .logging_utils import get_logger
from .models import (
    SCHEMA_VERSION,
    BrandAsset,
    ContactSubmission,
    Email,
    Lead,
    LeadStatus,
    StoreDocument,
    utc_now,
)

logger = get_logger(__name__)

COLLECTIONS = ("leads", "emails", "brand_assets", "contact_submissions")


def _merge(record: pydantic.BaseModel, fields: Dict[str, Any]) -> Dict[str, Any]:
    merged = record.model_dump()
    merged.update(fields)
    return merged


class JsonStore:
    """Handle on a single database file.

    Call :meth:`open` at process start and :meth:`close` at shutdown, or use
    the store as a context manager.
    """

    def __init__(self, path: str | Path, clock: Callable[[], Any] = utc_now):
        self.path = Path(path)
        self.clock = clock
        self._opened = False

    # ---------------- lifecycle ----------------

    def open(self) -> "JsonStore":
        self._ensure_exists()
        # Fail at startup rather than on the first request
        self._load()
        self._opened = True
        logger.info("Opened store at %s", self.path)
        return self

    def close(self) -> None:
        if self._opened:
            logger.info("Closed store at %s", self.path)
        self._opened = False

    def __enter__(self) -> "JsonStore":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---------------- document I/O ----------------

    def _ensure_exists(self) -> None:
        if self.path.exists():
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Cannot create data directory {self.path.parent}: {exc}") from exc
        logger.info("No database at %s, initializing an empty one", self.path)
        self._save(StoreDocument())

    def _load(self) -> StoreDocument:
        self._ensure_exists()
        try:
            raw_text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc

        try:
            raw = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise StoreCorruptedError(f"{self.path} is not valid JSON: {exc}") from exc

        if not isinstance(raw, dict) or not all(isinstance(raw.get(name, []), list) for name in COLLECTIONS):
            raise StoreCorruptedError(f"{self.path} does not hold a database document")

        version = raw.get("schema_version", SCHEMA_VERSION)
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise StoreCorruptedError(
                f"{self.path} has schema_version {version!r}; this build understands up to {SCHEMA_VERSION}"
            )

        try:
            return StoreDocument.model_validate(raw)
        except pydantic.ValidationError as exc:
            raise StoreCorruptedError(f"{self.path} holds malformed records: {exc}") from exc

    def _save(self, document: StoreDocument) -> None:
        document.schema_version = SCHEMA_VERSION
        payload = json.dumps(document.model_dump(mode="json"), indent=2)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".database-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc

    @contextmanager
    def transaction(self) -> Iterator[StoreDocument]:
        """Yield the document; changes are written once when the block exits cleanly."""
        document = self._load()
        yield document
        self._save(document)

    # ---------------- leads ----------------

    def get_all_leads(self) -> List[Lead]:
        return self._load().leads

    def get_lead(self, lead_id: str) -> Optional[Lead]:
        return next((lead for lead in self._load().leads if lead.id == lead_id), None)

    def get_leads_by_status(self, status: LeadStatus) -> Iterator[Lead]:
        return (lead for lead in self._load().leads if lead.status == status)

    def create_lead(self, lead: Lead) -> Lead:
        with self.transaction() as doc:
            doc.leads.append(lead)
        return lead

    def bulk_create_leads(self, leads: Iterable[Lead]) -> List[Lead]:
        leads = list(leads)
        with self.transaction() as doc:
            doc.leads.extend(leads)
        return leads

    def update_lead(self, lead_id: str, fields: Dict[str, Any]) -> Optional[Lead]:
        """Shallow-merge ``fields`` onto the lead; ``updated_at`` is always refreshed."""
        document = self._load()
        for index, lead in enumerate(document.leads):
            if lead.id == lead_id:
                merged = _merge(lead, fields)
                merged["id"] = lead.id
                merged["created_at"] = lead.created_at
                merged["updated_at"] = self.clock()
                document.leads[index] = Lead.model_validate(merged)
                self._save(document)
                return document.leads[index]
        return None

    def delete_lead(self, lead_id: str) -> bool:
        """Remove the lead and every email that references it."""
        document = self._load()
        remaining = [lead for lead in document.leads if lead.id != lead_id]
        if len(remaining) == len(document.leads):
            return False
        document.leads = remaining
        before = len(document.emails)
        document.emails = [email for email in document.emails if email.lead_id != lead_id]
        self._save(document)
        logger.info("Deleted lead %s and %d email(s)", lead_id, before - len(document.emails))
        return True

    # ---------------- emails ----------------

    def get_emails_for_lead(self, lead_id: str) -> List[Email]:
        return [email for email in self._load().emails if email.lead_id == lead_id]

    def get_email(self, email_id: str) -> Optional[Email]:
        return next((email for email in self._load().emails if email.id == email_id), None)

    def create_email(self, email: Email) -> Email:
        with self.transaction() as doc:
            doc.emails.append(email)
        return email

    def update_email(self, email_id: str, fields: Dict[str, Any]) -> Optional[Email]:
        document = self._load()
        for index, email in enumerate(document.emails):
            if email.id == email_id:
                merged = _merge(email, fields)
                merged["id"] = email.id
                merged["lead_id"] = email.lead_id
                document.emails[index] = Email.model_validate(merged)
                self._save(document)
                return document.emails[index]
        return None

    def delete_email(self, email_id: str) -> bool:
        document = self._load()
        remaining = [email for email in document.emails if email.id != email_id]
        if len(remaining) == len(document.emails):
            return False
        document.emails = remaining
        self._save(document)
        return True

    # ---------------- brand assets ----------------

    def get_all_brand_assets(self) -> List[BrandAsset]:
        return self._load().brand_assets

    def create_brand_asset(self, asset: BrandAsset) -> BrandAsset:
        with self.transaction() as doc:
            doc.brand_assets.append(asset)
        return asset

    def delete_brand_asset(self, asset_id: str) -> bool:
        document = self._load()
        remaining = [asset for asset in document.brand_assets if asset.id != asset_id]
        if len(remaining) == len(document.brand_assets):
            return False
        document.brand_assets = remaining
        self._save(document)
        return True

    # ---------------- contact submissions ----------------

    def get_all_contact_submissions(self) -> List[ContactSubmission]:
        return self._load().contact_submissions

    def create_contact_submission(self, submission: ContactSubmission) -> ContactSubmission:
        with self.transaction() as doc:
            doc.contact_submissions.append(submission)
        return submission
