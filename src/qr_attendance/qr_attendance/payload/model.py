from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScanEvent:
    """One successful decode, consumed immediately by the workflow."""

    raw_payload: str


@dataclass(frozen=True)
class IdentityRecord:
    """Who a scanned badge belongs to. Lives for a single workflow cycle."""

    registration_number: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
