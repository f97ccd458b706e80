from __future__ import annotations

import os
from datetime import datetime
from typing import Any, Optional

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.qr_attendance.qr_attendance.attendance.model import AttendanceRecord
from src.qr_attendance.qr_attendance.camera.model import CaptureDevice
from src.qr_attendance.qr_attendance.container import ScannerSettings, build_container
from src.qr_attendance.qr_attendance.core.exceptions import DecodeWarning, DuplicateRecordError
from src.qr_attendance.qr_attendance.scanning.decoder import DecodeResult


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[str, AttendanceRecord] = {}
        self.insert_calls = 0
        self.lookup_error: Optional[Exception] = None
        self.insert_error: Optional[Exception] = None
        # Simulates a concurrent writer: lookup misses, insert hits the key.
        self.hide_from_lookup: set[str] = set()

    def find_by_registration_number(self, registration_number: str) -> Optional[AttendanceRecord]:
        if self.lookup_error:
            raise self.lookup_error
        if registration_number in self.hide_from_lookup:
            return None
        return self.rows.get(registration_number)

    def insert(self, record: AttendanceRecord) -> None:
        self.insert_calls += 1
        if self.insert_error:
            raise self.insert_error
        if record.registration_number in self.rows:
            raise DuplicateRecordError(record.registration_number)
        self.rows[record.registration_number] = record

    def list_recent(self, limit: int):
        items = sorted(self.rows.values(), key=lambda r: r.marked_at or datetime.min, reverse=True)
        return items[:limit]


class FakeCaptureService:
    """Capture service whose frames are queued by the test."""

    def __init__(self, devices: list[CaptureDevice]):
        self.devices = list(devices)
        self.bind_calls: list[str] = []
        self.release_calls = 0
        self.bind_errors: dict[str, Exception] = {}
        self.release_error: Optional[Exception] = None
        self.bound: Optional[str] = None
        self.frames: list[Any] = []
        self._sink = None

    def list_devices(self):
        return list(self.devices)

    def bind(self, device_id: str, sink) -> None:
        self.bind_calls.append(device_id)
        if device_id in self.bind_errors:
            raise self.bind_errors[device_id]
        self.bound = device_id
        self._sink = sink

    def release(self) -> None:
        self.release_calls += 1
        if self.release_error:
            raise self.release_error
        self.bound = None
        if self._sink is not None:
            self._sink.clear()
        self._sink = None

    def read(self):
        if self.bound is None:
            return None
        frame = self.frames.pop(0) if self.frames else DecodeResult.not_found()
        if isinstance(frame, DecodeWarning):
            raise frame
        if self._sink is not None:
            self._sink.push(frame)
        return frame


class FakeDecoder:
    """Frames are either DecodeResult objects or payload strings."""

    def __init__(self):
        self.calls = 0
        self.forced: Optional[DecodeResult] = None

    def decode(self, frame: Any) -> DecodeResult:
        self.calls += 1
        if self.forced is not None:
            return self.forced
        if isinstance(frame, DecodeResult):
            return frame
        return DecodeResult.found(str(frame))


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 30, 0)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def capture_service() -> FakeCaptureService:
    return FakeCaptureService(
        [
            CaptureDevice(id="0", label="Integrated Webcam"),
            CaptureDevice(id="1", label="Back Camera"),
        ]
    )


@pytest.fixture
def empty_capture_service() -> FakeCaptureService:
    return FakeCaptureService([])


@pytest.fixture
def decoder() -> FakeDecoder:
    return FakeDecoder()


@pytest.fixture
def container(attendance_repo, capture_service, decoder):
    c = build_container(
        settings=ScannerSettings(scan_interval_seconds=0.01),
        attendance_repo=attendance_repo,
        capture_service=capture_service,
        decoder=decoder,
    )
    yield c
    c.shutdown()
