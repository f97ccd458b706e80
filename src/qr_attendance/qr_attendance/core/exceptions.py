from __future__ import annotations

from .constants import (
    MSG_CAMERA_INSECURE,
    MSG_CAMERA_NOT_FOUND,
    MSG_CAMERA_PERMISSION_DENIED,
    MSG_CAMERA_UNKNOWN,
)
from .enums import CaptureErrorKind, ParseErrorKind, PersistenceErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTransitionError(DomainError):
    """Raised when an operator action does not apply to the current workflow state."""


class ParseError(DomainError):
    """Raised when a decoded payload is not `<registration number> <name...>`."""

    def __init__(self, kind: ParseErrorKind, raw: str):
        super().__init__(f"{kind.value}: {raw!r}")
        self.kind = kind
        self.raw = raw


_CAPTURE_MESSAGES = {
    CaptureErrorKind.PERMISSION_DENIED: MSG_CAMERA_PERMISSION_DENIED,
    CaptureErrorKind.DEVICE_NOT_FOUND: MSG_CAMERA_NOT_FOUND,
    CaptureErrorKind.INSECURE_CONTEXT: MSG_CAMERA_INSECURE,
    CaptureErrorKind.UNKNOWN: MSG_CAMERA_UNKNOWN,
}


class CaptureError(DomainError):
    """Raised when a capture device cannot be bound."""

    def __init__(self, kind: CaptureErrorKind, detail: str = ""):
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
        self.kind = kind
        self.detail = detail

    @property
    def user_message(self) -> str:
        return _CAPTURE_MESSAGES[self.kind]


class DecodeWarning(DomainError):
    """Non-fatal decoder fault for a single frame."""


class PersistenceError(DomainError):
    def __init__(self, kind: PersistenceErrorKind, detail: str = ""):
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
        self.kind = kind
        self.detail = detail


class DuplicateRecordError(PersistenceError):
    """The store rejected an insert because the registration number already exists."""

    def __init__(self, registration_number: str):
        super().__init__(PersistenceErrorKind.INSERT_FAILED, f"duplicate key {registration_number!r}")
        self.registration_number = registration_number
