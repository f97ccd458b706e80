from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import CaptureDevice, FrameSink


class CaptureService(Protocol):
    """Access to the platform's capture devices.

    Only `CameraDeviceManager` talks to this; everything else goes through it.
    """

    def list_devices(self) -> Sequence[CaptureDevice]:
        raise NotImplementedError

    def bind(self, device_id: str, sink: FrameSink) -> None:
        """Open `device_id` and route its frames to `sink`.

        Raises `CaptureError` with the kind matching the failure.
        """

        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError

    def read(self) -> Optional[Any]:
        """Grab the next frame, or None when nothing is bound.

        Raises `DecodeWarning` when the device returns no usable frame.
        """

        raise NotImplementedError
