from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding one frame: a payload, nothing, or a decoder fault."""

    payload: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def found(cls, payload: str) -> "DecodeResult":
        return cls(payload=payload)

    @classmethod
    def not_found(cls) -> "DecodeResult":
        return cls()

    @classmethod
    def failed(cls, error: Exception) -> "DecodeResult":
        return cls(error=error)

    @property
    def is_found(self) -> bool:
        return self.payload is not None


class FrameDecoder(Protocol):
    def decode(self, frame: Any) -> DecodeResult:
        raise NotImplementedError
