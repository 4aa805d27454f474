from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from timesheet_api.core.errors import NotFound, Unauthorized, ValidationError
from timesheet_api.core.logging import get_logger
from timesheet_api.core.observability import record_workflow_event
from timesheet_api.domains.auth.permissions import Action, ensure_allowed, is_staff
from timesheet_api.domains.invoices.numbering import generate_invoice_number, stored_invoice_name
from timesheet_api.models import Invoice, User, Week
from timesheet_api.models.invoice import INVOICE_STATUSES
from timesheet_api.storage.documents import (
    DocumentStore,
    UploadedDocument,
    content_type_for,
    file_extension,
)

logger = get_logger(__name__)

NUMBERING_ATTEMPTS = 5
DOWNLOAD_PREFIX = "/invoices/download/"


@dataclass
class InvoiceDocument:
    invoice: Invoice
    filename: str
    content: bytes
    content_type: str


def _decimal(value, field_name: str) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid {field_name}") from exc
    if not result.is_finite() or result < 0:
        raise ValidationError(f"Invalid {field_name}")
    return result


def _get_invoice(db: Session, invoice_id: int) -> Invoice:
    invoice = db.get(Invoice, invoice_id)
    if invoice is None:
        raise NotFound("Invoice not found")
    return invoice


def _store_document(store: DocumentStore, invoice_number: str, document: UploadedDocument) -> str:
    name = stored_invoice_name(invoice_number, file_extension(document.filename))
    return store.write(name, document.content)


def create_invoice(
    db: Session,
    store: DocumentStore,
    actor: User,
    user_id: int | None,
    week_id: int | None,
    total_hours,
    amount,
    document: UploadedDocument | None,
) -> Invoice:
    ensure_allowed(actor, Action.MANAGE_INVOICES)
    if not user_id:
        raise ValidationError("Developer must be selected")
    if total_hours in (None, "") or amount in (None, "") or document is None or not document.filename:
        raise ValidationError("Missing required fields")
    hours_value = _decimal(total_hours, "total hours")
    amount_value = _decimal(amount, "amount")

    if db.get(User, user_id) is None:
        raise NotFound("User not found")
    if week_id and db.get(Week, week_id) is None:
        raise NotFound("Week not found")

    invoice = None
    for attempt in range(1, NUMBERING_ATTEMPTS + 1):
        number = generate_invoice_number()
        invoice = Invoice(
            user_id=user_id,
            week_id=week_id or None,
            invoice_number=number,
            total_hours=hours_value,
            amount=amount_value,
            status="pending",
            file_name=document.filename,
            uploaded_by=actor.id,
        )
        try:
            with db.begin_nested():
                db.add(invoice)
                db.flush()
        except IntegrityError:
            logger.warning("invoice_number_collision", invoice_number=number, attempt=attempt)
            invoice = None
            continue
        break
    if invoice is None:
        db.rollback()
        raise ValidationError("Could not allocate a unique invoice number, please retry")

    invoice.stored_name = _store_document(store, invoice.invoice_number, document)
    invoice.file_url = f"{DOWNLOAD_PREFIX}{invoice.stored_name}"
    db.commit()
    db.refresh(invoice)

    logger.info(
        "invoice_created",
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        user_id=user_id,
        week_id=week_id,
    )
    record_workflow_event("invoice_created")
    return invoice


def get_invoice(db: Session, actor: User, invoice_id: int) -> Invoice:
    invoice = _get_invoice(db, invoice_id)
    if not is_staff(actor) and invoice.user_id != actor.id:
        raise Unauthorized()
    return invoice


def update_invoice(
    db: Session,
    store: DocumentStore,
    actor: User,
    invoice_id: int,
    amount=None,
    status: str | None = None,
    document: UploadedDocument | None = None,
) -> Invoice:
    """Partial update; the status may be set to any value in any order."""
    ensure_allowed(actor, Action.MANAGE_INVOICES)
    invoice = _get_invoice(db, invoice_id)

    if amount is not None:
        invoice.amount = _decimal(amount, "amount")
    if status is not None:
        if status not in INVOICE_STATUSES:
            raise ValidationError("Invalid invoice status")
        if status == "paid" and invoice.status != "paid":
            invoice.paid_at = datetime.utcnow()
        elif status != "paid":
            invoice.paid_at = None
        invoice.status = status

    superseded = None
    if document is not None:
        superseded = invoice.stored_name
        invoice.stored_name = _store_document(store, invoice.invoice_number, document)
        invoice.file_name = document.filename
        invoice.file_url = f"{DOWNLOAD_PREFIX}{invoice.stored_name}"

    db.commit()
    db.refresh(invoice)
    if superseded:
        store.delete(superseded)

    logger.info("invoice_updated", invoice_id=invoice.id, status=invoice.status)
    record_workflow_event("invoice_updated", status=invoice.status)
    return invoice


def delete_invoice(db: Session, store: DocumentStore, actor: User, invoice_id: int) -> None:
    ensure_allowed(actor, Action.MANAGE_INVOICES)
    invoice = _get_invoice(db, invoice_id)
    stored_name = invoice.stored_name
    db.delete(invoice)
    db.commit()
    if stored_name:
        store.delete(stored_name)
    logger.info("invoice_deleted", invoice_id=invoice_id)


def list_invoices(db: Session, actor: User, user_id: int | None = None) -> list[Invoice]:
    ensure_allowed(actor, Action.VIEW_INVOICES)
    query = db.query(Invoice).options(joinedload(Invoice.user), joinedload(Invoice.week))
    if not is_staff(actor):
        query = query.filter(Invoice.user_id == actor.id)
    elif user_id:
        query = query.filter(Invoice.user_id == user_id)
    return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()


def get_invoice_file(db: Session, store: DocumentStore, actor: User, filename: str) -> InvoiceDocument:
    if not filename:
        raise ValidationError("No filename provided")
    invoice = db.query(Invoice).filter(Invoice.stored_name == filename).first()
    if invoice is None:
        raise NotFound("Invoice not found")
    if not is_staff(actor) and invoice.user_id != actor.id:
        raise Unauthorized("Not authorized to access this invoice")

    content = store.read(filename)
    return InvoiceDocument(
        invoice=invoice,
        filename=filename,
        content=content,
        content_type=content_type_for(filename),
    )
