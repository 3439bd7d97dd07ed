"""
In-memory dataset cache.

The CSV resource is read once per process, on first need, and held for the
process lifetime. A failed load leaves the cache empty so the next call
retries; there is no reload once a load succeeds.
"""

from __future__ import annotations

import asyncio
import csv
import io
import logging
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

KEY_FIELD = "State"

Row = dict[str, str]


class DatasetError(RuntimeError):
    pass


class DatasetMissingError(DatasetError):
    pass


class DatasetParseError(DatasetError):
    pass


@dataclass(frozen=True)
class _Snapshot:
    rows: list[Row]
    keys: list[str]
    loaded_at: datetime


def _parse_csv(text: str) -> list[Row]:
    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        header = next(reader, None)
        if not header:
            raise DatasetParseError("CSV has no header row.")
        columns = [name.strip() for name in header]

        rows: list[Row] = []
        for values in reader:
            if not values:
                continue
            if len(values) != len(columns):
                raise DatasetParseError(
                    f"Invalid record length on line {reader.line_num}: "
                    f"expected {len(columns)} fields, got {len(values)}"
                )
            rows.append({name: value.strip() for name, value in zip(columns, values)})
    except csv.Error as e:
        raise DatasetParseError(f"Malformed CSV on line {reader.line_num}: {e}") from e
    return rows


def collation_key(value: str) -> tuple:
    """
    Multi-level sort key close to a root-locale collation:
    letters first (accents and case ignored), then accents, then case with
    lower-case ahead of upper-case.
    """
    folded = value.casefold()
    base = "".join(
        c for c in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(c)
    )
    return (base, folded, tuple(c.isupper() for c in value), value)


def distinct_keys(rows: list[Row], key_field: str = KEY_FIELD) -> list[str]:
    """
    Unique non-empty key values in collation order.
    """
    values = {row.get(key_field) or "" for row in rows}
    values.discard("")
    return sorted(values, key=collation_key)


class DatasetCache:
    def __init__(self, path: Path | str, *, key_field: str = KEY_FIELD) -> None:
        self.path = Path(path)
        self.key_field = key_field
        self._snapshot: _Snapshot | None = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def row_count(self) -> int:
        return len(self._snapshot.rows) if self._snapshot is not None else 0

    @property
    def keys(self) -> list[str]:
        return list(self._snapshot.keys) if self._snapshot is not None else []

    @property
    def loaded_at(self) -> datetime | None:
        return self._snapshot.loaded_at if self._snapshot is not None else None

    def _read(self) -> list[Row]:
        if not self.path.is_file():
            raise DatasetMissingError(f"Data file missing: {self.path}")
        try:
            text = self.path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise DatasetParseError(f"Data file is not valid UTF-8: {self.path}") from e
        return _parse_csv(text)

    async def load(self) -> list[Row]:
        """
        Return all rows, reading the CSV on the first call only.

        Concurrent first calls share a single read: later callers wait on the
        lock and find the snapshot already populated.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot.rows

        async with self._lock:
            if self._snapshot is not None:
                return self._snapshot.rows

            rows = await asyncio.to_thread(self._read)
            snapshot = _Snapshot(
                rows=rows,
                keys=distinct_keys(rows, self.key_field),
                loaded_at=datetime.now(timezone.utc),
            )
            self._snapshot = snapshot

        logger.info(
            "dataset_loaded path=%s rows=%s keys=%s",
            self.path,
            len(snapshot.rows),
            len(snapshot.keys),
        )
        return snapshot.rows
