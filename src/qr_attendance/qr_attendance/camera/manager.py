from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Sequence

from ..core.constants import REAR_CAMERA_HINTS
from ..core.enums import CaptureErrorKind
from ..core.exceptions import CaptureError
from .model import CaptureDevice, FrameSink
from .service import CaptureService

logger = logging.getLogger(__name__)


def pick_default_device(devices: Sequence[CaptureDevice]) -> Optional[CaptureDevice]:
    """Prefer a rear/environment-facing camera, else the first one listed."""

    for device in devices:
        label = device.label.lower()
        if any(hint in label for hint in REAR_CAMERA_HINTS):
            return device
    return devices[0] if devices else None


class CameraDeviceManager:
    """Single owner of the active capture session.

    All session changes and frame reads happen under one lock, so a device
    switch is atomic from the decode loop's point of view and two sessions
    can never be open at once.
    """

    def __init__(self, service: CaptureService, *, sink: Optional[FrameSink] = None):
        self._service = service
        self._sink = sink or FrameSink()
        self._lock = threading.RLock()
        self._devices: list[CaptureDevice] = []
        self._preferred_id: Optional[str] = None
        self._bound_id: Optional[str] = None
        self._active = False

    @property
    def sink(self) -> FrameSink:
        return self._sink

    @property
    def devices(self) -> list[CaptureDevice]:
        with self._lock:
            return list(self._devices)

    @property
    def preferred_device_id(self) -> Optional[str]:
        with self._lock:
            return self._preferred_id

    @property
    def active_device_id(self) -> Optional[str]:
        with self._lock:
            return self._bound_id if self._active else None

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._active

    def list_devices(self) -> list[CaptureDevice]:
        # Probing opens devices, so it must not race a bind in progress.
        with self._lock:
            devices = list(self._service.list_devices())
            self._devices = devices
            ids = {d.id for d in devices}
            if self._preferred_id not in ids and not self._active:
                self._preferred_id = None
        logger.info("found %d capture device(s)", len(devices))
        return devices

    def select_default(self, devices: Sequence[CaptureDevice]) -> Optional[CaptureDevice]:
        device = pick_default_device(devices)
        if device is None:
            return None
        with self._lock:
            self._preferred_id = device.id
        return device

    def _bind(self, device_id: str) -> None:
        try:
            self._service.bind(device_id, self._sink)
        except CaptureError:
            raise
        except Exception as e:
            raise CaptureError(CaptureErrorKind.UNKNOWN, str(e)) from e

    def _release(self) -> None:
        try:
            self._service.release()
        finally:
            self._active = False
            self._sink.clear()

    def start(self, device_id: Optional[str] = None) -> str:
        """Bind a device and begin producing frames. Returns the bound device id."""

        with self._lock:
            if not self._devices:
                raise CaptureError(CaptureErrorKind.DEVICE_NOT_FOUND, "no capture devices available")

            target = device_id or self._preferred_id or self._bound_id
            if target is None:
                default = pick_default_device(self._devices)
                target = default.id if default else None
            if target is None:
                raise CaptureError(CaptureErrorKind.DEVICE_NOT_FOUND, "no capture device selected")

            if self._active:
                if target == self._bound_id:
                    return target
                self._release()

            try:
                self._bind(target)
            except CaptureError as e:
                logger.warning("failed to start camera %s: %s", target, e)
                raise

            self._active = True
            self._bound_id = target
            self._preferred_id = target
            logger.info("camera %s started", target)
            return target

    def stop(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._release()
            logger.info("camera %s stopped", self._bound_id)

    def switch_device(self, device_id: str) -> None:
        with self._lock:
            if not self._active:
                self._preferred_id = device_id
                return
            if device_id == self._bound_id:
                return

            previous = self._bound_id
            try:
                self._service.release()
            except Exception as e:
                self._active = False
                self._sink.clear()
                logger.warning("releasing camera %s failed, session ended", previous)
                raise CaptureError(CaptureErrorKind.UNKNOWN, str(e)) from e
            try:
                self._bind(device_id)
            except CaptureError:
                logger.warning("switch to camera %s failed, restoring %s", device_id, previous)
                try:
                    self._bind(previous)
                except CaptureError:
                    logger.exception("could not restore camera %s", previous)
                    self._active = False
                    self._sink.clear()
                raise

            self._bound_id = device_id
            self._preferred_id = device_id
            logger.info("camera switched %s -> %s", previous, device_id)

    def restart(self) -> str:
        with self._lock:
            target = self._bound_id or self._preferred_id
            self.stop()
            return self.start(target)

    def read_frame(self) -> Optional[Any]:
        """Next frame of the active session, or None when no session is active."""

        with self._lock:
            if not self._active:
                return None
            return self._service.read()

    def close(self) -> None:
        self.stop()
