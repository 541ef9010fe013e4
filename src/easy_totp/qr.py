"""QR rendering of provisioning URIs via the ``qrcode`` library.

BEWARE: every image produced here embeds the secret.
"""

from __future__ import annotations

import base64
import io
import logging

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.exceptions import DataOverflowError

from easy_totp.config import ErrorCorrection, settings
from easy_totp.errors import EncodingError

logger = logging.getLogger(__name__)

_ERROR_CORRECTION = {
    ErrorCorrection.L: ERROR_CORRECT_L,
    ErrorCorrection.M: ERROR_CORRECT_M,
    ErrorCorrection.Q: ERROR_CORRECT_Q,
    ErrorCorrection.H: ERROR_CORRECT_H,
}


def _build(
    uri: str,
    *,
    box_size: int | None = None,
    border: int | None = None,
    error_correction: ErrorCorrection | str | None = None,
) -> qrcode.QRCode:
    level = ErrorCorrection(error_correction or settings.qr_error_correction)
    qr = qrcode.QRCode(
        error_correction=_ERROR_CORRECTION[level],
        box_size=box_size if box_size is not None else settings.qr_box_size,
        border=border if border is not None else settings.qr_border,
    )
    qr.add_data(uri)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        raise EncodingError("Provisioning URI does not fit in a QR code") from exc
    logger.debug("QR symbol version %d, error correction %s", qr.version, level)
    return qr


def render_png(
    uri: str,
    *,
    box_size: int | None = None,
    border: int | None = None,
    error_correction: ErrorCorrection | str | None = None,
) -> bytes:
    """PNG image bytes of the QR code for ``uri``."""
    qr = _build(uri, box_size=box_size, border=border, error_correction=error_correction)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def render_base64(uri: str, **kwargs) -> str:
    """Base64 of the PNG, ready for a ``data:image/png;base64,`` URL."""
    return base64.b64encode(render_png(uri, **kwargs)).decode()


def render_terminal(uri: str, *, invert: bool = False, border: int | None = None) -> str:
    """Text drawing of the QR code using half-block characters."""
    qr = _build(uri, border=border)
    out = io.StringIO()
    qr.print_ascii(out=out, invert=invert)
    return out.getvalue()
