"""
File-system storage for uploaded report files.

Uploads are first streamed into `<root>/tmp/` and then renamed into `<root>/`
under a name derived from the report id, so a half-written file never
appears under its final name.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from core import config

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MiB


class UploadTooLargeError(ValueError):
    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"File too large. Max is {max_bytes} bytes.")
        self.max_bytes = max_bytes


@dataclass(frozen=True)
class StoredFile:
    filename: str
    path: str


def report_filename(report_id: str) -> str:
    return f"report_{report_id}.csv"


class BlobStore:
    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.tmp_dir = self.root / "tmp"

    async def receive(self, upload: UploadFile, *, max_bytes: int) -> Path:
        """
        Stream the upload into a temporary file and return its path.
        """
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        temp_path = self.tmp_dir / uuid.uuid4().hex
        written = 0
        try:
            with temp_path.open("wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > max_bytes:
                        raise UploadTooLargeError(max_bytes)
                    out.write(chunk)
        except Exception:
            self.discard(temp_path)
            raise
        return temp_path

    def persist(self, temp_path: Path, report_id: str) -> StoredFile:
        """
        Move a received upload to its permanent, id-derived name.
        """
        filename = report_filename(report_id)
        os.replace(temp_path, self.root / filename)
        return StoredFile(filename=filename, path=(self.root / filename).as_posix())

    def discard(self, temp_path: Path) -> None:
        """
        Best-effort removal of a temporary upload. Never raises.
        """
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            logger.warning("temp_upload_cleanup_failed path=%s", temp_path, exc_info=True)


def get_blob_store() -> BlobStore:
    return BlobStore(config.reports_dir())
