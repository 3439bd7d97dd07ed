"""
Report API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile

from . import schemas, service
from .repository import ReportRepository, get_report_store
from .storage import BlobStore, get_blob_store

router = APIRouter()


@router.post("/api/report")
async def submit_report(
    user_id: str | None = Form(default=None),
    title: str | None = Form(default=None),
    message: str | None = Form(default=None),
    file: UploadFile | None = File(default=None),
    store: ReportRepository = Depends(get_report_store),
    blobs: BlobStore = Depends(get_blob_store),
) -> dict:
    """
    Save an uploaded CSV report and record it for the user.

    Responds 200 once the file is saved, even if recording it in the store
    failed; `subErrors` then carries the store error.
    """
    result = await service.submit_report(
        store,
        blobs,
        user_id=user_id,
        title=title,
        message=message,
        file=file,
    )
    return service.to_submission_response(result).model_dump(mode="json", by_alias=True)


@router.get("/api/user/{user_id}/recent-reports", response_model=schemas.ReportListResponse)
async def user_recent_reports(
    user_id: str,
    store: ReportRepository = Depends(get_report_store),
) -> schemas.ReportListResponse:
    return await service.recent_reports_for_user(store, user_id)


@router.get("/api/recent-reports", response_model=schemas.ReportListResponse)
async def recent_reports(store: ReportRepository = Depends(get_report_store)) -> schemas.ReportListResponse:
    return await service.recent_reports(store)


@router.get("/api/reports/approved", response_model=schemas.ReportListResponse)
async def approved_reports(store: ReportRepository = Depends(get_report_store)) -> schemas.ReportListResponse:
    return await service.approved_reports(store)
