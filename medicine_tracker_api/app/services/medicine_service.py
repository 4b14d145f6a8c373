"""
Business logic for medicine records.

``MedicineService`` implements every query and update the API exposes
on top of a ``MedicineStore``.  Reads are linear scans over the store's
values; writes fetch a record, build a modified copy and re-insert the
whole record under the same id.  A rejected operation raises one of
the ``core.errors`` exceptions before anything is written.

Ownership: only a record's creator may read it by id, update, delete,
tag, assign, re-prioritise or change its status.  Completing a record,
sending a reminder and commenting are not restricted to the creator.

Only ``add_tags`` and ``update_medicine`` stamp ``updated_at``; the
single-field setters (assign, status, priority, complete, comment)
leave it unchanged.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from medicine_tracker_api.app.core.clock import Clock, SystemClock
from medicine_tracker_api.app.core.config import settings
from medicine_tracker_api.app.core.errors import (
    InvalidInputError,
    MedicineNotFoundError,
    NoRecordsError,
    NotAuthorizedError,
    PreconditionFailedError,
    StorageError,
)
from medicine_tracker_api.app.schemas.medicine import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    MedicinePayload,
    MedicineRead,
)
from medicine_tracker_api.app.services.medicine_store import MedicineStore

logger = logging.getLogger(__name__)


OVERDUE_MESSAGE = "Medicine is overdue. Please complete it."


def parse_expiry(value: str) -> datetime:
    """Parse an ``expiry_date`` string into an aware UTC datetime.

    Accepts ISO-8601 dates (``2026-10-19``, read as midnight UTC) and
    datetimes with or without an offset (naive values are UTC).

    Offset values whose UTC instant falls outside the ``datetime`` range
    (``0001-01-01T00:00:00+01:00``, ``9999-12-31T23:59:59-01:00``) are
    clamped to ``datetime.min`` / ``datetime.max`` in UTC, which keeps
    their ordering against any representable "now".

    Raises
    ------
    ValueError
        If the string is not ISO-8601.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        bound = datetime.max if parsed.year == datetime.max.year else datetime.min
        return bound.replace(tzinfo=timezone.utc)


def _is_overdue(medicine: MedicineRead, now: datetime) -> bool:
    if medicine.status == STATUS_COMPLETED:
        return False
    try:
        expiry = parse_expiry(medicine.expiry_date)
    except ValueError:
        logger.warning("Medicine %s has unparseable expiry_date %r", medicine.id, medicine.expiry_date)
        return False
    return expiry < now


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class MedicineService:
    """Queries and updates over a single medicine store."""

    def __init__(
        self,
        store: MedicineStore,
        clock: Optional[Clock] = None,
        initial_load_size: Optional[int] = None,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.initial_load_size = (
            initial_load_size if initial_load_size is not None else settings.initial_load_size
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require(self, medicine_id: str, not_found: Optional[str] = None) -> MedicineRead:
        medicine = self.store.get(medicine_id)
        if medicine is None:
            raise MedicineNotFoundError(not_found or f"Medicine with id:{medicine_id} not found")
        return medicine

    @staticmethod
    def _ensure_creator(medicine: MedicineRead, principal: str, message: str) -> None:
        if medicine.creator != principal:
            logger.warning(
                "Principal %s denied on medicine %s owned by %s",
                principal,
                medicine.id,
                medicine.creator,
            )
            raise NotAuthorizedError(message)

    def _save(self, medicine: MedicineRead) -> MedicineRead:
        try:
            self.store.insert(medicine)
        except sqlite3.Error as exc:
            logger.exception("Failed to store medicine %s", medicine.id)
            raise StorageError("Failed to store medicine") from exc
        return medicine

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def get_initial_medicines(self) -> List[MedicineRead]:
        """Return the first page of records in store order."""
        medicines = self.store.values()[: self.initial_load_size]
        if not medicines:
            raise NoRecordsError("No initial medicines found")
        return medicines

    async def load_more_medicines(self, offset: Any, limit: Any) -> List[MedicineRead]:
        """Return the slice ``[offset, offset + limit)`` of all records.

        Both arguments must be non-negative integers.  The slice must lie
        entirely within the store and start on an existing record.
        """
        if not _is_non_negative_int(offset) or not _is_non_negative_int(limit):
            raise InvalidInputError("Invalid input parameters")

        all_medicines = self.store.values()
        total = len(all_medicines)
        if total == 0 or offset >= total or offset + limit > total:
            raise NoRecordsError("Invalid offset or limit")
        return all_medicines[offset : offset + limit]

    async def get_medicine(self, medicine_id: str, principal: str) -> MedicineRead:
        if not medicine_id:
            raise InvalidInputError("Invalid id parameter")
        medicine = self._require(medicine_id)
        self._ensure_creator(medicine, principal, "You are not authorized to access Medicine")
        return medicine

    async def get_medicines_by_tag(self, tag: str) -> List[MedicineRead]:
        return [m for m in self.store.values() if tag in m.tags]

    async def search_medicines(self, query: str) -> List[MedicineRead]:
        """Case-insensitive substring match on title or description."""
        needle = query.lower()
        return [
            m
            for m in self.store.values()
            if needle in m.title.lower() or needle in m.description.lower()
        ]

    async def get_medicines_by_status(self, status: str) -> List[MedicineRead]:
        return [m for m in self.store.values() if m.status == status]

    async def get_medicines_by_creator(self, creator: str) -> List[MedicineRead]:
        return [m for m in self.store.values() if m.creator == creator]

    async def get_overdue_medicines(self) -> List[MedicineRead]:
        """Records past their expiry whose status is not ``Completed``."""
        now = self.clock.now()
        return [m for m in self.store.values() if _is_overdue(m, now)]

    async def count(self) -> int:
        return self.store.count()

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------
    async def add_medicine(self, payload: MedicinePayload, principal: str) -> MedicineRead:
        """Create a record owned by ``principal``.

        All payload fields are required.  The expiry date must parse and
        must not lie before the current time.
        """
        if not (payload.title and payload.description and payload.assigned_to and payload.expiry_date):
            raise InvalidInputError("Missing or invalid input data")

        now = self.clock.now()
        try:
            expiry = parse_expiry(payload.expiry_date)
        except ValueError as exc:
            raise InvalidInputError("Invalid expiry date") from exc
        if expiry < now:
            raise InvalidInputError("Expiry date cannot be in the past")

        medicine = MedicineRead(
            id=str(uuid.uuid4()),
            creator=principal,
            title=payload.title,
            description=payload.description,
            created_date=now,
            updated_at=None,
            expiry_date=payload.expiry_date,
            assigned_to=payload.assigned_to,
            tags=[],
            status=STATUS_IN_PROGRESS,
            priority="",
            comments=[],
        )
        try:
            self.store.insert(medicine)
        except sqlite3.Error as exc:
            logger.exception("Failed to insert medicine %s", medicine.id)
            raise StorageError("Failed to insert medicine into storage") from exc
        logger.info("Principal %s created medicine %s '%s'", principal, medicine.id, medicine.title)
        return medicine

    async def complete_medicine(self, medicine_id: str) -> MedicineRead:
        """Set status to ``Completed``; the record must have an assignee."""
        medicine = self._require(medicine_id)
        if not medicine.assigned_to:
            raise PreconditionFailedError("No one was assigned the Medicine")
        completed = self._save(medicine.model_copy(update={"status": STATUS_COMPLETED}))
        logger.info("Medicine %s completed", medicine_id)
        return completed

    async def add_tags(self, medicine_id: str, tags: List[str], principal: str) -> MedicineRead:
        if not tags:
            raise InvalidInputError("Invalid tags")
        medicine = self._require(medicine_id)
        self._ensure_creator(medicine, principal, "You are not authorized to access Medicine")
        updated = self._save(
            medicine.model_copy(
                update={"tags": [*medicine.tags, *tags], "updated_at": self.clock.now()}
            )
        )
        logger.info("Medicine %s tagged with %s", medicine_id, tags)
        return updated

    async def update_medicine(
        self, medicine_id: str, payload: MedicinePayload, principal: str
    ) -> MedicineRead:
        """Overwrite title, description, assignee and expiry date.

        All four fields must be present in the payload; a partial body
        is rejected rather than blanking the fields it leaves out.
        Values are not re-validated: empty strings and past expiry dates
        are stored as given.
        """
        missing = set(MedicinePayload.model_fields) - payload.model_fields_set
        if missing:
            raise InvalidInputError("Missing or invalid input data")
        medicine = self._require(medicine_id)
        self._ensure_creator(medicine, principal, "You are not authorized to access Medicine")
        updated = self._save(
            medicine.model_copy(
                update={**payload.model_dump(), "updated_at": self.clock.now()}
            )
        )
        logger.info("Medicine %s updated by %s", medicine_id, principal)
        return updated

    async def delete_medicine(self, medicine_id: str, principal: str) -> MedicineRead:
        """Remove the record and return it as confirmation."""
        medicine = self._require(
            medicine_id, f"Medicine with id:{medicine_id} not found, could not be deleted"
        )
        self._ensure_creator(medicine, principal, "You are not authorized to access Medicine")
        try:
            self.store.remove(medicine_id)
        except sqlite3.Error as exc:
            logger.exception("Failed to delete medicine %s", medicine_id)
            raise StorageError("Failed to delete medicine from storage") from exc
        logger.info("Medicine %s deleted by %s", medicine_id, principal)
        return medicine

    async def assign_medicine(self, medicine_id: str, assigned_to: str, principal: str) -> MedicineRead:
        medicine = self._require(medicine_id)
        self._ensure_creator(medicine, principal, "You are not authorized to assign a Medicine")
        updated = self._save(medicine.model_copy(update={"assigned_to": assigned_to}))
        logger.info("Medicine %s assigned to '%s'", medicine_id, assigned_to)
        return updated

    async def change_medicine_status(self, medicine_id: str, new_status: str, principal: str) -> MedicineRead:
        """Set any status string; no transition rules are applied."""
        medicine = self._require(medicine_id)
        self._ensure_creator(
            medicine, principal, "You are not authorized to change the Medicine status"
        )
        updated = self._save(medicine.model_copy(update={"status": new_status}))
        logger.info("Medicine %s status '%s' -> '%s'", medicine_id, medicine.status, new_status)
        return updated

    async def set_medicine_priority(self, medicine_id: str, priority: str, principal: str) -> MedicineRead:
        medicine = self._require(medicine_id)
        self._ensure_creator(medicine, principal, "You are not authorized to set Medicine priority")
        return self._save(medicine.model_copy(update={"priority": priority}))

    async def send_due_date_reminder(self, medicine_id: str) -> str:
        """Return the overdue message, or fail if there is nothing to remind about."""
        medicine = self._require(medicine_id)
        if not _is_overdue(medicine, self.clock.now()):
            raise PreconditionFailedError("Medicine is not overdue or already completed.")
        logger.info("Reminder issued for overdue medicine %s", medicine_id)
        return OVERDUE_MESSAGE

    async def add_medicine_comment(self, medicine_id: str, comment: Optional[str]) -> MedicineRead:
        """Append a comment.  Any authenticated caller may comment."""
        if not medicine_id or comment is None:
            raise InvalidInputError(f"Invalid id:{medicine_id} or comment")
        medicine = self._require(medicine_id)
        return self._save(medicine.model_copy(update={"comments": [*medicine.comments, comment]}))
