"""
Report submission and listing.

Submission flow:
1) Validate form fields (nothing is written before this passes)
2) Generate the report id
3) Move the upload into permanent storage
4) Insert the report row
5) Append the id to the user's `reports_submitted` list
6) Return what happened, including any store failure from steps 4-5

Steps 4 and 5 are separate statements. If 5 fails the report row still
exists; the error is reported to the caller instead of failing the request,
because the file itself is already saved.

The id-list update is read-modify-write with no lock, so two concurrent
submissions by the same user can each read the same list and the later write
drops the other's id.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from fastapi import UploadFile

from core import config
from core.errors import ApiError

from . import schemas
from .repository import ReportRepository, ReportStoreError
from .storage import BlobStore, UploadTooLargeError

logger = logging.getLogger(__name__)

STATUS_SUBMITTED = "submitted"
STATUS_APPROVED = "approved"


@dataclass(frozen=True)
class ReportRecord:
    id: str
    user_id: str
    title: str
    filename: str
    path: str
    status: str
    message: str
    submitted_at: datetime
    updated_at: datetime

    def as_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "filename": self.filename,
            "path": self.path,
            "status": self.status,
            "message": self.message,
            "submitted_at": self.submitted_at,
            "updated_at": self.updated_at,
        }


@dataclass
class SubmissionResult:
    report: ReportRecord
    store_error: str | None = None
    store_data: dict[str, Any] | None = field(default=None)

    @property
    def fully_recorded(self) -> bool:
        return self.store_error is None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(ts: datetime) -> str:
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_report_id() -> str:
    return str(uuid.uuid4())


def validate_submission(
    user_id: str | None,
    title: str | None,
    file: UploadFile | None,
) -> tuple[str, str, UploadFile]:
    """
    Check required fields in order, returning them once all are present.
    """
    if not (user_id or "").strip():
        raise ApiError(400, "Missing 'user_id' in form data")
    if not (title or "").strip():
        raise ApiError(400, "Missing 'title' in form data")
    if file is None or not file.filename:
        raise ApiError(400, "Missing CSV file in form data (field name: 'file')")
    return user_id, title, file


async def _record_in_store(store: ReportRepository, result: SubmissionResult) -> None:
    report = result.report
    try:
        inserted = await store.insert_report(report.as_row())
    except ReportStoreError as e:
        result.store_error = str(e)
        logger.warning("report_insert_failed id=%s user_id=%s error=%s", report.id, report.user_id, e)
        return
    result.store_data = {"report": [inserted]}

    try:
        report_ids = await store.fetch_user_report_ids(report.user_id)
        report_ids.append(report.id)
        updated_user = await store.update_user_report_ids(report.user_id, report_ids)
    except ReportStoreError as e:
        result.store_error = str(e)
        logger.warning("user_reports_update_failed id=%s user_id=%s error=%s", report.id, report.user_id, e)
        return
    result.store_data = {"report": [inserted], "user": updated_user}


async def submit_report(
    store: ReportRepository,
    blobs: BlobStore,
    *,
    user_id: str | None,
    title: str | None,
    message: str | None,
    file: UploadFile | None,
) -> SubmissionResult:
    user_id, title, file = validate_submission(user_id, title, file)

    report_id = new_report_id()
    submitted_at = _utc_now()

    try:
        temp_path = await blobs.receive(file, max_bytes=config.max_upload_bytes())
    except UploadTooLargeError as e:
        raise ApiError(413, "Uploaded file is too large", details=str(e)) from e
    except OSError as e:
        logger.exception("report_upload_receive_failed id=%s", report_id)
        raise ApiError(500, "Failed to save report file", details=str(e)) from e

    try:
        stored = blobs.persist(temp_path, report_id)
    except OSError as e:
        logger.exception("report_file_move_failed id=%s temp=%s", report_id, temp_path)
        blobs.discard(temp_path)
        raise ApiError(500, "Failed to save report file", details=str(e)) from e

    result = SubmissionResult(
        report=ReportRecord(
            id=report_id,
            user_id=user_id,
            title=title,
            filename=stored.filename,
            path=stored.path,
            status=STATUS_SUBMITTED,
            message=message or "",
            submitted_at=submitted_at,
            updated_at=submitted_at,
        )
    )
    await _record_in_store(store, result)

    logger.info(
        "report_submitted id=%s user_id=%s recorded=%s",
        report_id,
        user_id,
        result.fully_recorded,
    )
    return result


def to_submission_response(result: SubmissionResult) -> schemas.SubmissionResponse:
    report = result.report
    return schemas.SubmissionResponse(
        id=report.id,
        filename=report.filename,
        path=report.path,
        status=report.status,
        title=report.title,
        message=report.message,
        submitted_at=_iso(report.submitted_at),
        updated_at=_iso(report.updated_at),
        sub_errors=result.store_error,
        sub_data=result.store_data,
    )


async def _list_reports(store: ReportRepository, error: str, **filters: Any) -> schemas.ReportListResponse:
    try:
        rows = await store.query_reports(**filters)
    except ReportStoreError as e:
        logger.warning("report_query_failed filters=%s error=%s", filters, e)
        raise ApiError(500, error, details=str(e)) from e
    return schemas.ReportListResponse(
        count=len(rows),
        reports=[schemas.ReportResponse(**row) for row in rows],
    )


async def recent_reports_for_user(store: ReportRepository, user_id: str) -> schemas.ReportListResponse:
    return await _list_reports(
        store,
        "Failed to fetch user recent reports",
        user_id=user_id,
        limit=config.recent_reports_limit(),
    )


async def recent_reports(store: ReportRepository) -> schemas.ReportListResponse:
    return await _list_reports(
        store,
        "Failed to fetch recent reports",
        limit=config.recent_reports_limit(),
    )


async def approved_reports(store: ReportRepository) -> schemas.ReportListResponse:
    response = await _list_reports(
        store,
        "Failed to fetch approved reports",
        status=STATUS_APPROVED,
    )
    logger.info("approved_reports_fetched count=%s", response.count)
    return response
