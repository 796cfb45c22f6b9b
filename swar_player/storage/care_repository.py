"""SQLite persistence for instrument care records."""
from __future__ import annotations

import logging
import os
import sqlite3
import threading
from datetime import date
from typing import Any, Mapping

from ..domain.care import CareRecord

logger = logging.getLogger(__name__)

_TABLE = "instruments"
_EDITABLE_COLUMNS = (
    "instrument_type",
    "instrument_name",
    "purchase_date",
    "purchase_location",
    "warranty_expiry",
    "next_tuning_date",
)


class CareRepository:
    """Create/read/update/delete of care records keyed by (record_id, owner_id)."""

    def __init__(self, db_path: str, logger_instance=None) -> None:
        self.db_path = str(db_path or "").strip()
        self.logger = logger_instance or logger
        self._db_lock = threading.Lock()
        self._schema_ready = False
        if not self.db_path:
            raise ValueError("Care DB path is empty.")

    def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        self._ensure_parent_dir()
        with self._db_lock:
            connection = sqlite3.connect(self.db_path)
            try:
                with connection:
                    connection.execute(
                        f"""
                        CREATE TABLE IF NOT EXISTS "{_TABLE}" (
                            "id" TEXT NOT NULL,
                            "user_id" TEXT NOT NULL,
                            "instrument_type" TEXT NOT NULL,
                            "instrument_name" TEXT NOT NULL,
                            "purchase_date" TEXT NOT NULL,
                            "purchase_location" TEXT,
                            "warranty_expiry" TEXT NOT NULL,
                            "next_tuning_date" TEXT NOT NULL,
                            "created_at" TEXT NOT NULL,
                            PRIMARY KEY ("id", "user_id")
                        )
                        """
                    )
                    connection.execute(
                        f'CREATE INDEX IF NOT EXISTS "idx_{_TABLE}_user_created" '
                        f'ON "{_TABLE}" ("user_id", "created_at")'
                    )
            finally:
                connection.close()
        self._schema_ready = True

    def insert(self, record: CareRecord) -> CareRecord:
        row = _record_to_row(record)
        columns = list(row.keys())
        quoted_columns = ", ".join(f'"{column}"' for column in columns)
        placeholders = ", ".join("?" for _ in columns)
        sql = f'INSERT INTO "{_TABLE}" ({quoted_columns}) VALUES ({placeholders})'
        self.ensure_schema()
        with self._db_lock:
            connection = sqlite3.connect(self.db_path)
            try:
                with connection:
                    connection.execute(sql, [row[column] for column in columns])
            finally:
                connection.close()
        self.logger.info("Care record created: id=%s owner=%s", record.record_id, record.owner_id)
        return record

    def get(self, record_id: str, owner_id: str) -> CareRecord | None:
        sql = f'SELECT * FROM "{_TABLE}" WHERE "id" = ? AND "user_id" = ?'
        self.ensure_schema()
        with self._db_lock:
            connection = sqlite3.connect(self.db_path)
            connection.row_factory = sqlite3.Row
            try:
                row = connection.execute(sql, (str(record_id), str(owner_id))).fetchone()
            finally:
                connection.close()
        return _row_to_record(row) if row is not None else None

    def list_for_owner(self, owner_id: str) -> list[CareRecord]:
        sql = (
            f'SELECT * FROM "{_TABLE}" WHERE "user_id" = ? '
            'ORDER BY "created_at" DESC, "rowid" DESC'
        )
        self.ensure_schema()
        with self._db_lock:
            connection = sqlite3.connect(self.db_path)
            connection.row_factory = sqlite3.Row
            try:
                rows = connection.execute(sql, (str(owner_id),)).fetchall()
            finally:
                connection.close()
        return [_row_to_record(row) for row in rows]

    def update(self, record_id: str, owner_id: str, changes: Mapping[str, Any]) -> int:
        payload = {
            column: _to_db_value(value)
            for column, value in changes.items()
            if column in _EDITABLE_COLUMNS
        }
        if not payload:
            raise ValueError("No editable fields in payload.")
        assignments = ", ".join(f'"{column}" = ?' for column in payload.keys())
        values = list(payload.values()) + [str(record_id), str(owner_id)]
        sql = f'UPDATE "{_TABLE}" SET {assignments} WHERE "id" = ? AND "user_id" = ?'
        self.ensure_schema()
        with self._db_lock:
            connection = sqlite3.connect(self.db_path)
            try:
                with connection:
                    cursor = connection.execute(sql, values)
                    return int(cursor.rowcount or 0)
            finally:
                connection.close()

    def delete(self, record_id: str, owner_id: str) -> int:
        sql = f'DELETE FROM "{_TABLE}" WHERE "id" = ? AND "user_id" = ?'
        self.ensure_schema()
        with self._db_lock:
            connection = sqlite3.connect(self.db_path)
            try:
                with connection:
                    cursor = connection.execute(sql, (str(record_id), str(owner_id)))
                    deleted = int(cursor.rowcount or 0)
            finally:
                connection.close()
        if deleted:
            self.logger.info("Care record deleted: id=%s owner=%s", record_id, owner_id)
        return deleted

    def _ensure_parent_dir(self) -> None:
        if self.db_path == ":memory:":
            return
        parent = os.path.dirname(os.path.abspath(self.db_path))
        if parent:
            os.makedirs(parent, exist_ok=True)


def _to_db_value(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


def _record_to_row(record: CareRecord) -> dict[str, Any]:
    return {
        "id": record.record_id,
        "user_id": record.owner_id,
        "instrument_type": record.instrument_type,
        "instrument_name": record.instrument_name,
        "purchase_date": record.purchase_date.isoformat(),
        "purchase_location": record.purchase_location,
        "warranty_expiry": record.warranty_expiry.isoformat(),
        "next_tuning_date": record.next_tuning_date.isoformat(),
        "created_at": record.created_at,
    }


def _row_to_record(row: sqlite3.Row) -> CareRecord:
    return CareRecord(
        record_id=str(row["id"]),
        owner_id=str(row["user_id"]),
        instrument_type=str(row["instrument_type"]),
        instrument_name=str(row["instrument_name"]),
        purchase_date=date.fromisoformat(row["purchase_date"]),
        purchase_location=row["purchase_location"],
        warranty_expiry=date.fromisoformat(row["warranty_expiry"]),
        next_tuning_date=date.fromisoformat(row["next_tuning_date"]),
        created_at=str(row["created_at"]),
    )
