from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CaptureDevice:
    """A camera as reported by one enumeration. Enumerations may differ over time."""

    id: str
    label: str


class FrameSink:
    """Video output a capture session writes into.

    Holds only the most recent frame; the preview endpoint reads it from
    request threads while the decode loop writes it from the sampler thread.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._frame: Optional[Any] = None

    def push(self, frame: Any) -> None:
        with self._lock:
            self._frame = frame

    def latest(self) -> Optional[Any]:
        with self._lock:
            return self._frame

    def clear(self) -> None:
        with self._lock:
            self._frame = None

    def latest_jpeg(self, *, quality: int = 80) -> Optional[bytes]:
        frame = self.latest()
        if frame is None:
            return None
        import cv2

        ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
        if not ok:
            return None
        return buf.tobytes()
