from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional, Sequence
from urllib.parse import urlparse

import cv2

from ..core.enums import CaptureErrorKind
from ..core.exceptions import CaptureError, DecodeWarning
from .model import CaptureDevice, FrameSink
from .service import CaptureService

logger = logging.getLogger(__name__)

V4L_SYSFS = Path("/sys/class/video4linux")

_INSECURE_SCHEMES = {"http", "rtsp", "rtmp"}


def _node_index(path: Path) -> int:
    m = re.search(r"(\d+)$", path.name)
    return int(m.group(1)) if m else -1


def _label_for_url(url: str) -> str:
    parsed = urlparse(url)
    return f"Network camera ({parsed.hostname or url})"


class OpenCVCaptureService(CaptureService):
    """Capture devices backed by OpenCV `VideoCapture`.

    Local cameras are identified by their index (as a string); network cameras
    configured in `CAMERA_URLS` are identified by their URL.
    """

    def __init__(
        self,
        *,
        max_probe: int = 4,
        urls: Sequence[str] = (),
        require_secure_streams: bool = False,
        sysfs_root: Path = V4L_SYSFS,
    ):
        self._max_probe = int(max_probe)
        self._urls = [u for u in urls if u]
        self._require_secure = bool(require_secure_streams)
        self._sysfs_root = sysfs_root
        self._cap = None
        self._sink: Optional[FrameSink] = None
        self._bound_id: Optional[str] = None

    def list_devices(self) -> Sequence[CaptureDevice]:
        if self._sysfs_root.is_dir():
            devices = self._list_v4l_devices()
        else:
            devices = self._probe_devices()
        devices.extend(CaptureDevice(id=url, label=_label_for_url(url)) for url in self._urls)
        return devices

    def _list_v4l_devices(self) -> list[CaptureDevice]:
        devices: list[CaptureDevice] = []
        for entry in sorted(self._sysfs_root.glob("video*"), key=_node_index):
            # Each camera exposes extra metadata nodes; only index 0 streams video.
            index_file = entry / "index"
            if index_file.exists() and index_file.read_text(encoding="utf-8").strip() != "0":
                continue
            idx = _node_index(entry)
            name_file = entry / "name"
            label = name_file.read_text(encoding="utf-8").strip() if name_file.exists() else ""
            devices.append(CaptureDevice(id=str(idx), label=label or f"Camera {idx}"))
        return devices

    def _probe_devices(self) -> list[CaptureDevice]:
        devices: list[CaptureDevice] = []
        for idx in range(self._max_probe):
            if self._bound_id == str(idx):
                # Opening a second handle on the bound camera would fail.
                devices.append(CaptureDevice(id=str(idx), label=f"Camera {idx}"))
                continue
            cap = cv2.VideoCapture(idx)
            try:
                if cap.isOpened():
                    devices.append(CaptureDevice(id=str(idx), label=f"Camera {idx}"))
            finally:
                cap.release()
        return devices

    def _check_local(self, index: int) -> None:
        dev_path = Path(f"/dev/video{index}")
        if not self._sysfs_root.is_dir():
            return
        if not dev_path.exists():
            raise CaptureError(CaptureErrorKind.DEVICE_NOT_FOUND, str(dev_path))
        if not os.access(dev_path, os.R_OK | os.W_OK):
            raise CaptureError(CaptureErrorKind.PERMISSION_DENIED, str(dev_path))

    def _check_url(self, url: str) -> None:
        scheme = urlparse(url).scheme.lower()
        if not scheme:
            raise CaptureError(CaptureErrorKind.DEVICE_NOT_FOUND, url)
        if self._require_secure and scheme in _INSECURE_SCHEMES:
            raise CaptureError(CaptureErrorKind.INSECURE_CONTEXT, url)

    def bind(self, device_id: str, sink: FrameSink) -> None:
        if self._cap is not None:
            self.release()

        source: Any
        if device_id.isdigit():
            source = int(device_id)
            self._check_local(source)
        else:
            source = device_id
            self._check_url(source)

        try:
            cap = cv2.VideoCapture(source)
        except cv2.error as e:
            raise CaptureError(CaptureErrorKind.UNKNOWN, str(e)) from e

        if not cap.isOpened():
            cap.release()
            kind = CaptureErrorKind.DEVICE_NOT_FOUND if isinstance(source, int) else CaptureErrorKind.UNKNOWN
            raise CaptureError(kind, f"could not open {device_id}")

        self._cap = cap
        self._sink = sink
        self._bound_id = device_id
        logger.debug("opened capture device %s", device_id)

    def release(self) -> None:
        cap, self._cap = self._cap, None
        sink, self._sink = self._sink, None
        self._bound_id = None
        if cap is not None:
            cap.release()
        if sink is not None:
            sink.clear()

    def read(self) -> Optional[Any]:
        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise DecodeWarning(f"no frame from device {self._bound_id}")
        if self._sink is not None:
            self._sink.push(frame)
        return frame
