"""Document storage for invoice files and payment evidence.

The local implementation writes into ``settings.document_dir``. With the
default configuration that is a temp directory, so stored bytes can vanish
across restarts while the database rows that reference them remain; callers
get :class:`DocumentMissing` in that case.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from pathlib import Path, PurePath

from timesheet_api.core.config import settings
from timesheet_api.core.errors import Conflict, DocumentMissing, ValidationError
from timesheet_api.core.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
}


@dataclass
class UploadedDocument:
    filename: str
    content: bytes


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def file_extension(filename: str | None, default: str = "pdf") -> str:
    if not filename or "." not in filename:
        return default
    ext = filename.rsplit(".", 1)[-1].lower()
    return _UNSAFE_CHARS.sub("", ext) or default


def content_type_for(filename: str) -> str:
    return CONTENT_TYPES.get(file_extension(filename, default=""), "application/octet-stream")


def safe_name(filename: str) -> str:
    return _UNSAFE_CHARS.sub("_", PurePath(filename).name).strip("._") or "document"


class DocumentStore:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        if not name or PurePath(name).name != name or name in (".", ".."):
            raise ValidationError("Invalid file name")
        return self.root / name

    def write(self, name: str, data: bytes) -> str:
        """Store a new document. Existing documents are never replaced."""
        path = self._path(name)
        self.root.mkdir(parents=True, exist_ok=True)
        try:
            with path.open("xb") as handle:
                handle.write(data)
        except FileExistsError as exc:
            raise Conflict("A document with this name already exists") from exc
        logger.info("document_stored", name=name, size=len(data))
        return name

    def delete(self, name: str) -> None:
        self._path(name).unlink(missing_ok=True)
        logger.info("document_deleted", name=name)

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def read(self, name: str) -> bytes:
        path = self._path(name)
        if not path.is_file():
            logger.warning("document_missing", name=name, root=str(self.root))
            raise DocumentMissing()
        return path.read_bytes()


def get_document_store() -> DocumentStore:
    return DocumentStore(settings.document_dir)
