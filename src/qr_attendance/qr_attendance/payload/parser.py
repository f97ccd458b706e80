"""Badge payload parsing.

A badge encodes `<registration number> <first name> [<last name>...]`.
"""

from __future__ import annotations

from ..core.enums import ParseErrorKind
from ..core.exceptions import ParseError
from .model import IdentityRecord


def parse(raw: str) -> IdentityRecord:
    tokens = (raw or "").split()
    if len(tokens) < 2:
        raise ParseError(ParseErrorKind.INVALID_FORMAT, raw)

    first_name, _, last_name = " ".join(tokens[1:]).partition(" ")
    return IdentityRecord(
        registration_number=tokens[0],
        first_name=first_name,
        last_name=last_name,
    )
