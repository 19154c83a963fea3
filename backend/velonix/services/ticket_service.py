"""
Ticket QR generation.

A ticket is a PNG QR code that encodes the registration id; it is shown on
the confirmation screen and embedded in the applicant's email.
"""

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from velonix.core.logging_config import logger

PNG_DATA_URI_PREFIX = "data:image/png;base64,"


def generate_ticket_png(registration_id: str, box_size: int = 10, border: int = 4) -> bytes:
    """
    Render a QR code for the registration id.

    Args:
        registration_id: Value encoded in the QR code
        box_size: Pixels per QR module
        border: Quiet-zone width in modules

    Returns:
        PNG image bytes
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(registration_id)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    png = buffer.getvalue()

    logger.debug(f"[Ticket] Generated QR code for {registration_id} ({len(png)} bytes)")
    return png


def to_data_uri(png: bytes) -> str:
    """Encode PNG bytes as an inline data: URI"""
    return PNG_DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")

