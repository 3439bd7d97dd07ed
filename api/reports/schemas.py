"""
Report API schemas (response models).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ReportResponse(BaseModel):
    id: str
    user_id: str
    title: str
    filename: str
    path: str
    status: str
    message: str | None = None
    submitted_at: datetime
    updated_at: datetime


class ReportListResponse(BaseModel):
    count: int
    reports: list[ReportResponse]


class SubmissionResponse(BaseModel):
    id: str
    filename: str
    path: str
    status: str
    title: str
    message: str
    submitted_at: str
    updated_at: str
    # Store bookkeeping outcome. The file is already saved when these are set.
    sub_errors: str | None = Field(default=None, serialization_alias="subErrors")
    sub_data: dict[str, Any] | None = Field(default=None, serialization_alias="subData")
