from __future__ import annotations

from enum import Enum


class CaptureErrorKind(str, Enum):
    """Why a camera could not be started; each kind has its own remedy message."""

    PERMISSION_DENIED = "PERMISSION_DENIED"
    DEVICE_NOT_FOUND = "DEVICE_NOT_FOUND"
    INSECURE_CONTEXT = "INSECURE_CONTEXT"
    UNKNOWN = "UNKNOWN"


class ParseErrorKind(str, Enum):
    INVALID_FORMAT = "INVALID_FORMAT"


class PersistenceErrorKind(str, Enum):
    LOOKUP_FAILED = "LOOKUP_FAILED"
    INSERT_FAILED = "INSERT_FAILED"


class OutcomeKind(str, Enum):
    """Terminal result of one scan cycle."""

    ALREADY_MARKED = "ALREADY_MARKED"
    RECORDED = "RECORDED"
    REJECTED_INVALID_PAYLOAD = "REJECTED_INVALID_PAYLOAD"
    REJECTED_PERSISTENCE_FAILURE = "REJECTED_PERSISTENCE_FAILURE"


class WorkflowState(str, Enum):
    """States of the scan -> confirm -> submit -> show cycle."""

    IDLE = "IDLE"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"
    SUBMITTING = "SUBMITTING"
    SHOWING_RESULT = "SHOWING_RESULT"
