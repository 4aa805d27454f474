from __future__ import annotations

import secrets

from sqlalchemy.orm import Session, joinedload

from timesheet_api.core.errors import NotFound, ValidationError
from timesheet_api.core.logging import get_logger
from timesheet_api.core.observability import record_workflow_event
from timesheet_api.domains.auth.permissions import Action, ensure_allowed
from timesheet_api.models import PaymentEvidence, User, Week
from timesheet_api.storage.documents import (
    DocumentStore,
    UploadedDocument,
    content_type_for,
    epoch_millis,
    safe_name,
)

logger = get_logger(__name__)

DOWNLOAD_PREFIX = "/payment-evidence/download/"


def upload_payment_evidence(
    db: Session,
    store: DocumentStore,
    actor: User,
    user_id: int | None,
    week_id: int | None,
    document: UploadedDocument | None,
) -> PaymentEvidence:
    """Record a proof-of-payment document. Records are never edited or removed."""
    ensure_allowed(actor, Action.MANAGE_PAYMENT_EVIDENCE)
    if not user_id or not week_id or document is None or not document.filename:
        raise ValidationError("Missing required parameters")
    if db.get(User, user_id) is None:
        raise NotFound("User not found")
    if db.get(Week, week_id) is None:
        raise NotFound("Week not found")

    name = f"evidence_{epoch_millis()}_{secrets.token_hex(4)}_{safe_name(document.filename)}"
    stored_name = store.write(name, document.content)
    record = PaymentEvidence(
        user_id=user_id,
        week_id=week_id,
        filename=document.filename,
        stored_name=stored_name,
        file_url=f"{DOWNLOAD_PREFIX}{stored_name}",
        uploaded_by=actor.id,
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info("payment_evidence_uploaded", evidence_id=record.id, user_id=user_id, week_id=week_id)
    record_workflow_event("payment_evidence_uploaded")
    return record


def list_payment_evidence(
    db: Session, actor: User, user_id: int | None = None, week_id: int | None = None
) -> list[PaymentEvidence]:
    ensure_allowed(actor, Action.MANAGE_PAYMENT_EVIDENCE)
    query = db.query(PaymentEvidence).options(joinedload(PaymentEvidence.uploader))
    if user_id:
        query = query.filter(PaymentEvidence.user_id == user_id)
    if week_id:
        query = query.filter(PaymentEvidence.week_id == week_id)
    return query.order_by(PaymentEvidence.created_at.desc(), PaymentEvidence.id.desc()).all()


def get_payment_evidence_file(
    db: Session, store: DocumentStore, actor: User, filename: str
) -> tuple[PaymentEvidence, bytes, str]:
    ensure_allowed(actor, Action.MANAGE_PAYMENT_EVIDENCE)
    record = db.query(PaymentEvidence).filter(PaymentEvidence.stored_name == filename).first()
    if record is None:
        raise NotFound("Payment evidence not found")
    return record, store.read(filename), content_type_for(filename)
