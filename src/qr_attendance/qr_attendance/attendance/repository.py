from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def find_by_registration_number(self, registration_number: str) -> Optional[AttendanceRecord]:
        """Return the record for `registration_number`, or None when no row exists."""

        raise NotImplementedError

    def insert(self, record: AttendanceRecord) -> None:
        """Insert a new record.

        Raises `DuplicateRecordError` when the registration number is already stored.
        """

        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
