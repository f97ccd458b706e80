from __future__ import annotations

import io

import qrcode

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..payload.parser import parse


def badge_payload(registration_number: str, name: str) -> str:
    """Text a badge encodes; always parseable by `payload.parser.parse`."""

    reg = require_non_empty(registration_number, "registration_number")
    if len(reg.split()) != 1:
        raise ValidationError("registration_number must not contain spaces")
    full_name = " ".join(require_non_empty(name, "name").split())
    payload = f"{reg} {full_name}"
    parse(payload)
    return payload


def make_badge_png(registration_number: str, name: str, *, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(badge_payload(registration_number, name))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
