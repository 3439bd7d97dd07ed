"""
Report persistence.
This module is where report-related SQL lives.

Each method is a single, independent statement. Nothing here spans a
transaction: callers that chain several calls get no atomicity.
"""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

from core import db

T = TypeVar("T")


class ReportStoreError(RuntimeError):
    pass


class UserNotFoundError(ReportStoreError):
    pass


def _store_call(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Re-raise driver and connection failures as ReportStoreError.
    """

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await fn(*args, **kwargs)
        except ReportStoreError:
            raise
        except (*db.STORE_ERRORS, RuntimeError) as e:
            raise ReportStoreError(str(e) or e.__class__.__name__) from e

    return wrapper


class ReportRepository:
    @_store_call
    async def insert_report(self, record: dict[str, Any]) -> dict[str, Any]:
        row = await db.fetch_one(
            """
            INSERT INTO reports (id, user_id, title, filename, path, status, message, submitted_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING id, user_id, title, filename, path, status, message, submitted_at, updated_at
            """,
            record["id"],
            record["user_id"],
            record["title"],
            record["filename"],
            record["path"],
            record["status"],
            record["message"],
            record["submitted_at"],
            record["updated_at"],
        )
        if row is None:
            raise ReportStoreError("Failed to insert report.")
        return row

    @_store_call
    async def fetch_user_report_ids(self, user_id: str) -> list[str]:
        row = await db.fetch_one(
            """
            SELECT reports_submitted
            FROM users
            WHERE id = $1
            """,
            user_id,
        )
        if row is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return [str(x) for x in (row.get("reports_submitted") or [])]

    @_store_call
    async def update_user_report_ids(self, user_id: str, report_ids: list[str]) -> dict[str, Any]:
        row = await db.fetch_one(
            """
            UPDATE users
            SET reports_submitted = $2::text[]
            WHERE id = $1
            RETURNING id, reports_submitted
            """,
            user_id,
            report_ids,
        )
        if row is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return row

    @_store_call
    async def query_reports(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Reports newest first, optionally filtered by owner and/or status.

        `limit=None` means no limit (LIMIT NULL in Postgres).
        """
        return await db.fetch_all(
            """
            SELECT id, user_id, title, filename, path, status, message, submitted_at, updated_at
            FROM reports
            WHERE ($1::text IS NULL OR user_id = $1)
              AND ($2::text IS NULL OR status = $2)
            ORDER BY submitted_at DESC
            LIMIT $3
            """,
            user_id,
            status,
            limit,
        )


_repository = ReportRepository()


def get_report_store() -> ReportRepository:
    return _repository
