from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.workflow import AttendanceWorkflow
from .camera.manager import CameraDeviceManager
from .camera.service import CaptureService
from .core.constants import DEFAULT_CAMERA_MAX_PROBE, DEFAULT_SCAN_INTERVAL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .scanning.decoder import FrameDecoder
from .scanning.loop import DecodeLoop


@dataclass(frozen=True)
class ScannerSettings:
    camera_max_probe: int = DEFAULT_CAMERA_MAX_PROBE
    camera_urls: Sequence[str] = field(default_factory=tuple)
    require_secure_streams: bool = False
    scan_interval_seconds: float = DEFAULT_SCAN_INTERVAL_SECONDS
    auto_start_camera: bool = False

    @classmethod
    def from_settings(cls, settings: Any) -> "ScannerSettings":
        return cls(
            camera_max_probe=int(getattr(settings, "CAMERA_MAX_PROBE", DEFAULT_CAMERA_MAX_PROBE)),
            camera_urls=tuple(getattr(settings, "CAMERA_URLS", ()) or ()),
            require_secure_streams=bool(getattr(settings, "REQUIRE_SECURE_STREAMS", False)),
            scan_interval_seconds=float(getattr(settings, "SCAN_INTERVAL_SECONDS", DEFAULT_SCAN_INTERVAL_SECONDS)),
            auto_start_camera=bool(getattr(settings, "AUTO_START_CAMERA", False)),
        )


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    settings: ScannerSettings

    attendance_repo: AttendanceRepository
    attendance_service: AttendanceService

    decoder: FrameDecoder
    camera_manager: CameraDeviceManager
    decode_loop: DecodeLoop
    workflow: AttendanceWorkflow

    def shutdown(self) -> None:
        self.decode_loop.stop()
        self.camera_manager.close()


def build_container(
    *,
    db_config: Optional[dict] = None,
    settings: Optional[ScannerSettings] = None,
    attendance_repo: Optional[AttendanceRepository] = None,
    capture_service: Optional[CaptureService] = None,
    decoder: Optional[FrameDecoder] = None,
) -> Container:
    """Wire the single camera manager, decode loop and workflow for one app.

    Collaborators can be injected (tests use in-memory fakes); otherwise the
    MySQL, OpenCV and pyzbar implementations are used.
    """

    settings = settings or ScannerSettings()

    conn = None
    if attendance_repo is None:
        if db_config is None:
            raise ValueError("db_config is required when no attendance repository is given")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        attendance_repo = MySQLAttendanceRepository(conn)

    # OpenCV and zbar load native libraries on import. Only the default
    # implementations need them, so they are imported here and nowhere above.
    if capture_service is None:
        from .camera.opencv_capture_service import OpenCVCaptureService

        capture_service = OpenCVCaptureService(
            max_probe=settings.camera_max_probe,
            urls=settings.camera_urls,
            require_secure_streams=settings.require_secure_streams,
        )
    if decoder is None:
        from .scanning.pyzbar_decoder import PyzbarFrameDecoder

        decoder = PyzbarFrameDecoder()

    attendance_service = AttendanceService(attendance_repo)
    camera_manager = CameraDeviceManager(capture_service)
    decode_loop = DecodeLoop(camera_manager, decoder, interval=settings.scan_interval_seconds)
    workflow = AttendanceWorkflow(attendance_service, decode_loop, camera_manager)
    decode_loop.set_observer(workflow.on_scan)

    return Container(
        conn=conn,
        settings=settings,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        decoder=decoder,
        camera_manager=camera_manager,
        decode_loop=decode_loop,
        workflow=workflow,
    )
