from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import (
    MSG_ALREADY_MARKED,
    MSG_INVALID_PAYLOAD,
    MSG_PERSISTENCE_FAILURE,
    MSG_RECORDED,
)
from ..core.enums import OutcomeKind


@dataclass(frozen=True)
class AttendanceRecord:
    """A persisted attendance row, keyed by registration number."""

    registration_number: str
    first_name: str
    last_name: str
    marked_at: Optional[datetime] = None


_MESSAGES = {
    OutcomeKind.ALREADY_MARKED: MSG_ALREADY_MARKED,
    OutcomeKind.RECORDED: MSG_RECORDED,
    OutcomeKind.REJECTED_INVALID_PAYLOAD: MSG_INVALID_PAYLOAD,
    OutcomeKind.REJECTED_PERSISTENCE_FAILURE: MSG_PERSISTENCE_FAILURE,
}


@dataclass(frozen=True)
class AttendanceOutcome:
    """Result shown to the operator at the end of a scan cycle."""

    kind: OutcomeKind
    message: str

    @classmethod
    def of(cls, kind: OutcomeKind) -> "AttendanceOutcome":
        return cls(kind=kind, message=_MESSAGES[kind])

    @property
    def is_success(self) -> bool:
        return self.kind in {OutcomeKind.RECORDED, OutcomeKind.ALREADY_MARKED}
