from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..camera.manager import CameraDeviceManager
from ..core.enums import OutcomeKind, WorkflowState
from ..core.exceptions import CaptureError, InvalidTransitionError, ParseError, PersistenceError
from ..payload.model import IdentityRecord, ScanEvent
from ..payload.parser import parse
from ..scanning.loop import DecodeLoop
from .model import AttendanceOutcome
from .service import AttendanceService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowSnapshot:
    """Read-model handed to the presentation layer."""

    state: WorkflowState
    identity: Optional[IdentityRecord] = None
    outcome: Optional[AttendanceOutcome] = None
    camera_notice: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "confirmation": (
                {
                    "registration_number": self.identity.registration_number,
                    "name": self.identity.full_name,
                }
                if self.identity and self.state == WorkflowState.AWAITING_CONFIRMATION
                else None
            ),
            "outcome": (
                {"kind": self.outcome.kind.value, "message": self.outcome.message}
                if self.outcome
                else None
            ),
            "camera_notice": self.camera_notice,
        }


class AttendanceWorkflow:
    """Scan -> confirm -> submit -> show result -> scan again.

    Transitions run under one lock. The persistence round trip runs outside
    it so the UI can still read the SUBMITTING state; a second confirm during
    that time is rejected by the state check.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        loop: DecodeLoop,
        camera: CameraDeviceManager,
        *,
        parser: Callable[[str], IdentityRecord] = parse,
    ):
        self._attendance = attendance
        self._loop = loop
        self._camera = camera
        self._parse = parser
        self._lock = threading.Lock()
        self._state = WorkflowState.IDLE
        self._identity: Optional[IdentityRecord] = None
        self._outcome: Optional[AttendanceOutcome] = None
        self._camera_notice: Optional[str] = None

    @property
    def state(self) -> WorkflowState:
        with self._lock:
            return self._state

    def snapshot(self) -> WorkflowSnapshot:
        with self._lock:
            return WorkflowSnapshot(
                state=self._state,
                identity=self._identity,
                outcome=self._outcome,
                camera_notice=self._camera_notice,
            )

    def _require(self, expected: WorkflowState, action: str) -> None:
        if self._state != expected:
            raise InvalidTransitionError(f"cannot {action} while {self._state.value}")

    def _move(self, state: WorkflowState) -> None:
        logger.info("workflow %s -> %s", self._state.value, state.value)
        self._state = state

    def on_scan(self, event: ScanEvent) -> WorkflowSnapshot:
        with self._lock:
            if self._state != WorkflowState.IDLE:
                logger.warning("scan ignored while %s", self._state.value)
                raise InvalidTransitionError(f"cannot accept a scan while {self._state.value}")

            # Uploaded images bypass the loop, so make sure the camera stays quiet too.
            self._loop.pause()
            try:
                self._identity = self._parse(event.raw_payload)
            except ParseError as e:
                logger.info("rejected payload: %s", e)
                self._identity = None
                self._outcome = AttendanceOutcome.of(OutcomeKind.REJECTED_INVALID_PAYLOAD)
                self._move(WorkflowState.SHOWING_RESULT)
            else:
                self._outcome = None
                self._move(WorkflowState.AWAITING_CONFIRMATION)
        return self.snapshot()

    def cancel(self) -> WorkflowSnapshot:
        with self._lock:
            self._require(WorkflowState.AWAITING_CONFIRMATION, "cancel")
            self._identity = None
            self._move(WorkflowState.IDLE)
            self._loop.resume()
        return self.snapshot()

    def confirm(self) -> WorkflowSnapshot:
        with self._lock:
            self._require(WorkflowState.AWAITING_CONFIRMATION, "confirm")
            identity = self._identity
            self._move(WorkflowState.SUBMITTING)

        try:
            outcome = AttendanceOutcome.of(self._attendance.mark_present(identity))
        except PersistenceError as e:
            logger.error("failed to update details for %s: %s", identity.registration_number, e)
            outcome = AttendanceOutcome.of(OutcomeKind.REJECTED_PERSISTENCE_FAILURE)
        except Exception:
            logger.exception("unexpected failure while recording %s", identity.registration_number)
            outcome = AttendanceOutcome.of(OutcomeKind.REJECTED_PERSISTENCE_FAILURE)

        with self._lock:
            self._outcome = outcome
            self._move(WorkflowState.SHOWING_RESULT)
        return self.snapshot()

    def acknowledge(self) -> WorkflowSnapshot:
        with self._lock:
            self._require(WorkflowState.SHOWING_RESULT, "acknowledge")
            self._identity = None
            self._outcome = None
            self._move(WorkflowState.IDLE)
            if self._camera.is_active:
                self._loop.resume()
        return self.snapshot()

    def camera_started(self) -> None:
        with self._lock:
            self._camera_notice = None
            if self._state == WorkflowState.IDLE:
                self._loop.resume()

    def report_capture_error(self, error: CaptureError) -> None:
        with self._lock:
            self._camera_notice = error.user_message
