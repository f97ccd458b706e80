from __future__ import annotations

from typing import Any

import cv2
import numpy as np
from PIL import Image
from pyzbar.pyzbar import ZBarSymbol
from pyzbar.pyzbar import decode as pyzbar_decode

from .decoder import DecodeResult, FrameDecoder


class PyzbarFrameDecoder(FrameDecoder):
    """Decode QR codes from OpenCV frames (BGR ndarrays) or PIL images."""

    def __init__(self, *, symbols=(ZBarSymbol.QRCODE,)):
        self._symbols = list(symbols)

    def _to_gray(self, frame: Any):
        if isinstance(frame, Image.Image):
            return frame.convert("L")
        if not isinstance(frame, np.ndarray) or frame.size == 0:
            raise ValueError("frame is not an image array")
        if frame.ndim == 2:
            return frame
        return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)

    def decode(self, frame: Any) -> DecodeResult:
        try:
            symbols = pyzbar_decode(self._to_gray(frame), symbols=self._symbols)
            if not symbols:
                return DecodeResult.not_found()
            return DecodeResult.found(symbols[0].data.decode("utf-8"))
        except Exception as e:
            return DecodeResult.failed(e)
