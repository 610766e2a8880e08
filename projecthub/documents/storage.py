"""
On-disk storage for project documents.

Uploads are validated as a batch (count, extension, size) before anything is
written. Stored files get a generated name so two uploads of ``report.pdf``
never collide; the original name is kept separately for display and download.
"""
import mimetypes
import os
import re
import secrets
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from fastapi import UploadFile

from projecthub.config import settings
from projecthub.core.errors import invalid_file_type_error, file_too_large_error, too_many_files_error
from projecthub.core.logger import logger

ALLOWED_EXTENSIONS = (".pdf", ".doc", ".docx", ".ppt", ".pptx", ".zip", ".rar")
CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredFile:
    filename: str
    original_name: str
    path: str
    size: int
    mime_type: str


def _upload_size(upload: UploadFile) -> int:
    f = upload.file
    pos = f.tell()
    f.seek(0, os.SEEK_END)
    size = f.tell()
    f.seek(pos)
    return size


class DocumentStore:
    def __init__(
        self,
        root: str | os.PathLike,
        max_file_size: int = settings.max_upload_mb * 1024 * 1024,
        max_files: int = settings.max_upload_files,
        allowed_extensions: Sequence[str] = ALLOWED_EXTENSIONS,
    ):
        self.root = Path(root)
        self.max_file_size = max_file_size
        self.max_files = max_files
        self.allowed_extensions = tuple(e.lower() for e in allowed_extensions)

    @property
    def max_file_size_mb(self) -> int:
        return max(1, self.max_file_size // (1024 * 1024))

    def validate(self, files: Sequence[UploadFile]) -> None:
        """Reject the whole batch if any file breaks a limit."""
        if len(files) > self.max_files:
            raise too_many_files_error(self.max_files)
        for upload in files:
            name = upload.filename or ""
            ext = os.path.splitext(name)[1].lower()
            if ext not in self.allowed_extensions:
                raise invalid_file_type_error(name, ext, self.allowed_extensions)
            if _upload_size(upload) > self.max_file_size:
                raise file_too_large_error(name, self.max_file_size_mb)

    def generate_name(self, original_name: str) -> str:
        base = os.path.basename(original_name)
        stem, ext = os.path.splitext(base)
        stem = re.sub(r"[^A-Za-z0-9._-]+", "_", stem).strip("._") or "document"
        while True:
            candidate = f"{stem}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext.lower()}"
            if not (self.root / candidate).exists():
                return candidate

    def save(self, files: Iterable[UploadFile]) -> list[StoredFile]:
        """Write every upload to disk; on failure nothing from this batch is left behind."""
        self.root.mkdir(parents=True, exist_ok=True)
        stored: list[StoredFile] = []
        written: list[str] = []
        try:
            for upload in files:
                original = os.path.basename(upload.filename or "document")
                name = self.generate_name(original)
                target = self.root / name
                # tracked before the write starts, partial files included
                written.append(str(target))
                upload.file.seek(0)
                with open(target, "wb") as out:
                    shutil.copyfileobj(upload.file, out, CHUNK_SIZE)
                mime = upload.content_type or mimetypes.guess_type(original)[0] or "application/octet-stream"
                stored.append(StoredFile(name, original, str(target), target.stat().st_size, mime))
        except Exception:
            self.remove(p for p in written if self.exists(p))
            raise
        return stored

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def remove(self, paths: Iterable[str]) -> list[str]:
        """Best-effort delete. Returns the paths that could not be removed."""
        failed = []
        for path in paths:
            try:
                os.remove(path)
            except OSError as exc:
                logger.warning("Failed to delete file {}: {}", path, exc)
                failed.append(path)
        return failed


def get_document_store() -> DocumentStore:
    return DocumentStore(settings.upload_dir)
