from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from timesheet_api.db.session import get_session
from timesheet_api.domains.auth.deps import get_current_user
from timesheet_api.domains.payment_evidence import service
from timesheet_api.models import PaymentEvidence, User
from timesheet_api.storage.documents import DocumentStore, UploadedDocument, get_document_store

router = APIRouter(prefix="/payment-evidence", tags=["payment-evidence"])


class Uploader(BaseModel):
    id: int
    name: str
    role: str


class PaymentEvidenceOut(BaseModel):
    id: int
    user_id: int
    week_id: int
    filename: str
    file_url: str
    uploaded_at: datetime
    uploaded_by: Uploader


def _evidence_out(record: PaymentEvidence) -> PaymentEvidenceOut:
    return PaymentEvidenceOut(
        id=record.id,
        user_id=record.user_id,
        week_id=record.week_id,
        filename=record.filename,
        file_url=record.file_url,
        uploaded_at=record.created_at,
        uploaded_by=Uploader(
            id=record.uploader.id, name=record.uploader.name, role=record.uploader.role
        ),
    )


@router.get("", response_model=list[PaymentEvidenceOut])
def list_payment_evidence(
    user_id: int | None = None,
    week_id: int | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[PaymentEvidenceOut]:
    return [
        _evidence_out(record)
        for record in service.list_payment_evidence(db, user, user_id=user_id, week_id=week_id)
    ]


@router.post("", response_model=PaymentEvidenceOut, status_code=201)
async def upload_payment_evidence(
    user_id: int | None = Form(default=None),
    week_id: int | None = Form(default=None),
    file: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    store: DocumentStore = Depends(get_document_store),
) -> PaymentEvidenceOut:
    document = None
    if file is not None and file.filename:
        document = UploadedDocument(filename=file.filename, content=await file.read())
    record = service.upload_payment_evidence(db, store, user, user_id, week_id, document)
    return _evidence_out(record)


@router.get("/download/{filename}")
def download_payment_evidence(
    filename: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
    store: DocumentStore = Depends(get_document_store),
) -> Response:
    record, content, content_type = service.get_payment_evidence_file(db, store, user, filename)
    return Response(
        content=content,
        media_type=content_type,
        headers={"Content-Disposition": f'inline; filename="{record.stored_name}"'},
    )
