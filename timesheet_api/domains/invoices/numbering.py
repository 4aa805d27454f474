from __future__ import annotations

import re
import secrets
from datetime import date, datetime

from timesheet_api.core.errors import ValidationError
from timesheet_api.storage.documents import epoch_millis

INVOICE_NUMBER_RE = re.compile(r"^INV-(\d{8})-(\d{4})$")


def generate_invoice_number(today: date | None = None) -> str:
    """``INV-<YYYYMMDD>-<NNNN>`` with a random zero-padded suffix."""
    today = today or date.today()
    return f"INV-{today:%Y%m%d}-{secrets.randbelow(10000):04d}"


def parse_invoice_date(invoice_number: str) -> date:
    match = INVOICE_NUMBER_RE.match(invoice_number or "")
    if not match:
        raise ValidationError(f"Malformed invoice number: {invoice_number!r}")
    try:
        return datetime.strptime(match.group(1), "%Y%m%d").date()
    except ValueError as exc:
        raise ValidationError(f"Malformed invoice number: {invoice_number!r}") from exc


def stored_invoice_name(invoice_number: str, extension: str, millis: int | None = None) -> str:
    if millis is None:
        millis = epoch_millis()
    return f"invoice_{invoice_number}_{millis}.{extension}"
