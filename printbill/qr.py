"""QR codes pointing at a bill's invoice PDF."""

from __future__ import annotations

from io import BytesIO, StringIO

import qrcode
from qrcode.image.pil import PilImage


def _build(payload: str, border: int) -> qrcode.QRCode:
    if not payload:
        raise ValueError("QR payload must not be empty")
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)
    return qr


def generate_qrcode_png(payload: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """Render ``payload`` (normally the invoice URL) as PNG bytes."""
    qr = _build(payload, border)
    qr.box_size = box_size

    img: PilImage = qr.make_image(fill_color="black", back_color="white")

    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_qrcode_ascii(payload: str) -> str:
    """Render ``payload`` with block characters for terminal display."""
    qr = _build(payload, border=1)
    out = StringIO()
    qr.print_ascii(out=out, invert=True)
    return out.getvalue()
