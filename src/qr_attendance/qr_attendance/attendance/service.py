from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..core.constants import DEFAULT_ATTENDANCE_LIST_LIMIT
from ..core.enums import OutcomeKind, PersistenceErrorKind
from ..core.exceptions import DuplicateRecordError, PersistenceError
from ..payload.model import IdentityRecord
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: mark a scanned person present exactly once.

    Check-then-insert is not transactional. Two concurrent scans of the same
    registration number can both pass the lookup; the store's primary key
    turns the second insert into a `DuplicateRecordError`, reported here as
    already marked.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def mark_present(self, identity: IdentityRecord, *, now: datetime | None = None) -> OutcomeKind:
        """Returns RECORDED or ALREADY_MARKED; raises PersistenceError on store failures."""

        key = identity.registration_number
        try:
            existing = self._attendance.find_by_registration_number(key)
        except Exception as e:
            raise PersistenceError(PersistenceErrorKind.LOOKUP_FAILED, str(e)) from e

        if existing:
            logger.info("%s already marked present", key)
            return OutcomeKind.ALREADY_MARKED

        record = AttendanceRecord(
            registration_number=key,
            first_name=identity.first_name,
            last_name=identity.last_name,
            marked_at=now or datetime.now(),
        )
        try:
            self._attendance.insert(record)
        except DuplicateRecordError:
            logger.info("%s inserted concurrently, treating as already marked", key)
            return OutcomeKind.ALREADY_MARKED
        except Exception as e:
            raise PersistenceError(PersistenceErrorKind.INSERT_FAILED, str(e)) from e

        logger.info("%s marked present", key)
        return OutcomeKind.RECORDED

    def list_present(self, *, limit: int = DEFAULT_ATTENDANCE_LIST_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_recent(int(limit))

    def to_ui(self, r: AttendanceRecord) -> dict:
        return {
            "registration_number": r.registration_number,
            "first_name": r.first_name,
            "last_name": r.last_name,
            "marked_at": r.marked_at.strftime("%Y-%m-%d %H:%M:%S") if r.marked_at else None,
        }
