"""
Ordered map of medicine records backed by SQLite.

``MedicineStore`` is the only place that talks to the ``medicines``
table.  It behaves like a map from id to record: ``insert`` always
writes the complete record (insert or overwrite), ``values`` iterates
in key order, and nothing else about the schema leaks out.  Each call
opens its own connection, as the rest of the application does.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from medicine_tracker_api.app.core.db import get_connection, get_database_path, init_db
from medicine_tracker_api.app.schemas.medicine import MedicineRead

logger = logging.getLogger(__name__)


_COLUMNS = (
    "id, creator, title, description, created_date, updated_at, "
    "expiry_date, assigned_to, tags, status, priority, comments"
)


class MedicineStore:
    """SQLite-backed ordered map ``id -> MedicineRead``."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or get_database_path()
        version = init_db(self.db_path)
        logger.info("MedicineStore ready db=%s schema=%s total=%s", self.db_path, version, self.count())

    def _connect(self) -> sqlite3.Connection:
        return get_connection(self.db_path)

    # ------------------------------------------------------------------
    # Row conversion
    # ------------------------------------------------------------------
    @staticmethod
    def _load_list(raw: Optional[str]) -> List[str]:
        if not raw:
            return []
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding malformed JSON list %r", raw)
            return []
        return [str(v) for v in value] if isinstance(value, list) else []

    @classmethod
    def _row_to_medicine(cls, row: sqlite3.Row) -> MedicineRead:
        return MedicineRead(
            id=row["id"],
            creator=row["creator"],
            title=row["title"],
            description=row["description"],
            created_date=datetime.fromisoformat(row["created_date"]),
            updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
            expiry_date=row["expiry_date"],
            assigned_to=row["assigned_to"] or "",
            tags=cls._load_list(row["tags"]),
            status=row["status"],
            priority=row["priority"] or "",
            comments=cls._load_list(row["comments"]),
        )

    # ------------------------------------------------------------------
    # Map operations
    # ------------------------------------------------------------------
    def get(self, medicine_id: str) -> Optional[MedicineRead]:
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM medicines WHERE id = ?",
                (medicine_id,),
            ).fetchone()
            return self._row_to_medicine(row) if row else None
        finally:
            conn.close()

    def contains(self, medicine_id: str) -> bool:
        conn = self._connect()
        try:
            row = conn.execute("SELECT 1 FROM medicines WHERE id = ?", (medicine_id,)).fetchone()
            return row is not None
        finally:
            conn.close()

    def insert(self, medicine: MedicineRead) -> Optional[MedicineRead]:
        """Store ``medicine`` under its id, replacing any existing record.

        Returns the record previously stored under that id, if any.
        """
        conn = self._connect()
        try:
            previous_row = conn.execute(
                f"SELECT {_COLUMNS} FROM medicines WHERE id = ?",
                (medicine.id,),
            ).fetchone()
            conn.execute(
                f"INSERT OR REPLACE INTO medicines ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    medicine.id,
                    medicine.creator,
                    medicine.title,
                    medicine.description,
                    medicine.created_date.isoformat(),
                    medicine.updated_at.isoformat() if medicine.updated_at else None,
                    medicine.expiry_date,
                    medicine.assigned_to,
                    json.dumps(medicine.tags, ensure_ascii=False),
                    medicine.status,
                    medicine.priority,
                    json.dumps(medicine.comments, ensure_ascii=False),
                ),
            )
            conn.commit()
            return self._row_to_medicine(previous_row) if previous_row else None
        finally:
            conn.close()

    def remove(self, medicine_id: str) -> Optional[MedicineRead]:
        """Delete the record stored under ``medicine_id`` and return it."""
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM medicines WHERE id = ?",
                (medicine_id,),
            ).fetchone()
            if not row:
                return None
            conn.execute("DELETE FROM medicines WHERE id = ?", (medicine_id,))
            conn.commit()
            return self._row_to_medicine(row)
        finally:
            conn.close()

    def values(self) -> List[MedicineRead]:
        """All records in key order."""
        conn = self._connect()
        try:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM medicines ORDER BY id ASC").fetchall()
            return [self._row_to_medicine(row) for row in rows]
        finally:
            conn.close()

    def count(self) -> int:
        conn = self._connect()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM medicines").fetchone()
            return int(n)
        finally:
            conn.close()
