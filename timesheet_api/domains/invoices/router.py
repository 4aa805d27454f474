from datetime import date, datetime

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_api.core.errors import ValidationError
from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import get_current_user
from timesheet_api.domains.invoices import service
from timesheet_api.models import Invoice, User
from timesheet_api.storage.documents import DocumentStore, UploadedDocument, get_document_store

router = APIRouter(prefix="/invoices", tags=["invoices"])


class InvoiceUpdate(BaseModel):
    amount: float | None = None
    status: str | None = None


class InvoiceDeveloper(BaseModel):
    id: int
    name: str
    email: str


class InvoiceOut(BaseModel):
    id: int
    invoice_number: str
    user_id: int
    week_id: int | None = None
    week_start_date: date | None = None
    week_end_date: date | None = None
    total_hours: float
    amount: float
    status: str
    file_name: str | None = None
    file_url: str | None = None
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    developer: InvoiceDeveloper


def _invoice_out(invoice: Invoice) -> InvoiceOut:
    return InvoiceOut(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        user_id=invoice.user_id,
        week_id=invoice.week_id,
        week_start_date=invoice.week.start_date if invoice.week else None,
        week_end_date=invoice.week.end_date if invoice.week else None,
        total_hours=float(invoice.total_hours),
        amount=float(invoice.amount),
        status=invoice.status,
        file_name=invoice.file_name,
        file_url=invoice.file_url,
        paid_at=invoice.paid_at,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
        developer=InvoiceDeveloper(
            id=invoice.user.id, name=invoice.user.name, email=invoice.user.email
        ),
    )


async def _read_upload(upload: UploadFile | None) -> UploadedDocument | None:
    if upload is None or not upload.filename:
        return None
    return UploadedDocument(filename=upload.filename, content=await upload.read())


@router.get("", response_model=list[InvoiceOut])
def list_invoices(
    user_id: int | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[InvoiceOut]:
    return [_invoice_out(invoice) for invoice in service.list_invoices(db, user, user_id)]


@router.post("", response_model=InvoiceOut, status_code=201)
async def create_invoice(
    user_id: int | None = Form(default=None),
    week_id: int | None = Form(default=None),
    total_hours: str | None = Form(default=None),
    amount: str | None = Form(default=None),
    file: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    store: DocumentStore = Depends(get_document_store),
) -> InvoiceOut:
    document = await _read_upload(file)
    invoice = service.create_invoice(
        db, store, user, user_id, week_id, total_hours, amount, document
    )
    return _invoice_out(invoice)


@router.get("/download/{filename}")
def download_invoice(
    filename: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    store: DocumentStore = Depends(get_document_store),
) -> Response:
    document = service.get_invoice_file(db, store, user, filename)
    return Response(
        content=document.content,
        media_type=document.content_type,
        headers={"Content-Disposition": f'inline; filename="{document.filename}"'},
    )


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(
    invoice_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_session)
) -> InvoiceOut:
    return _invoice_out(service.get_invoice(db, user, invoice_id))


@router.patch("/{invoice_id}", response_model=InvoiceOut)
def update_invoice(
    invoice_id: int,
    payload: InvoiceUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    store: DocumentStore = Depends(get_document_store),
) -> InvoiceOut:
    invoice = service.update_invoice(
        db, store, user, invoice_id, amount=payload.amount, status=payload.status
    )
    return _invoice_out(invoice)


@router.put("/{invoice_id}/file", response_model=InvoiceOut)
async def replace_invoice_file(
    invoice_id: int,
    file: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    store: DocumentStore = Depends(get_document_store),
) -> InvoiceOut:
    document = await _read_upload(file)
    if document is None:
        raise ValidationError("Missing required fields")
    return _invoice_out(service.update_invoice(db, store, user, invoice_id, document=document))


@router.delete("/{invoice_id}", status_code=204)
def delete_invoice(
    invoice_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    store: DocumentStore = Depends(get_document_store),
) -> None:
    service.delete_invoice(db, store, user, invoice_id)
    return None
