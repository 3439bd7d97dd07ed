"""
Test data and in-memory stand-ins shared across test modules.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from reports.repository import ReportRepository, ReportStoreError, UserNotFoundError

HEADER = "State,District,Location,Longitude,Latitude,Cd,Cr,Cu,Pb,Mn,Ni,Fe,Zn"

SAMPLE_ROWS = [
    "Gujarat,Ahmedabad,Vatva,72.63,22.96,0.01,0.05,0.02,0.03,0.10,0.02,1.20,0.40",
    "Kerala,Ernakulam,Eloor,76.30,10.07,0.00,0.01,0.01,0.02,0.05,0.01,0.80,0.20",
    "Andaman & Nicobar Islands,South Andaman,Port Blair,92.73,11.62,0.00,0.00,0.01,0.01,0.02,0.00,0.30,0.10",
    "gujarat,Surat,Sachin,72.83,21.09,0.02,0.04,0.03,0.05,0.12,0.03,1.50,0.50",
    "Andhra Pradesh,Visakhapatnam,Gajuwaka,83.21,17.69,0.01,0.02,0.02,0.02,0.08,0.01,0.90,0.30",
    ",Unknown,Unlabelled,0,0,0,0,0,0,0,0,0,0",
    "Gujarat,Vadodara,Nandesari,73.07,22.41,0.03,0.06,0.04,0.06,0.15,0.04,1.70,0.60",
]


def write_csv(path: Path, rows: list[str], header: str = HEADER) -> Path:
    path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
    return path


def ts(day: int, hour: int = 0) -> datetime:
    return datetime(2026, 1, day, hour, tzinfo=timezone.utc)


class FakeReportStore(ReportRepository):
    """
    In-memory stand-in for the Postgres-backed repository.

    Set `fail_on` to a method name to make that call raise ReportStoreError.
    """

    def __init__(self) -> None:
        self.reports: list[dict[str, Any]] = []
        self.users: dict[str, list[str]] = {}
        self.fail_on: set[str] = set()

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail_on:
            raise ReportStoreError(f"{name} failed")

    async def insert_report(self, record: dict[str, Any]) -> dict[str, Any]:
        self._maybe_fail("insert_report")
        row = dict(record)
        self.reports.append(row)
        return row

    async def fetch_user_report_ids(self, user_id: str) -> list[str]:
        self._maybe_fail("fetch_user_report_ids")
        if user_id not in self.users:
            raise UserNotFoundError(f"User not found: {user_id}")
        return list(self.users[user_id])

    async def update_user_report_ids(self, user_id: str, report_ids: list[str]) -> dict[str, Any]:
        self._maybe_fail("update_user_report_ids")
        self.users[user_id] = list(report_ids)
        return {"id": user_id, "reports_submitted": list(report_ids)}

    async def query_reports(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self._maybe_fail("query_reports")
        rows = [
            r
            for r in self.reports
            if (user_id is None or r["user_id"] == user_id) and (status is None or r["status"] == status)
        ]
        rows.sort(key=lambda r: r["submitted_at"], reverse=True)
        return rows[:limit] if limit is not None else rows

    def seed_report(self, report_id: str, *, user_id: str, status: str, submitted_at: datetime) -> None:
        self.reports.append(
            {
                "id": report_id,
                "user_id": user_id,
                "title": f"Report {report_id}",
                "filename": f"report_{report_id}.csv",
                "path": f"data_reports/report_{report_id}.csv",
                "status": status,
                "message": "",
                "submitted_at": submitted_at,
                "updated_at": submitted_at,
            }
        )
