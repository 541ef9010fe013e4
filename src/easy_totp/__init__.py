"""easy_totp: RFC 6238 TOTP codes and authenticator enrollment QR codes."""

from easy_totp.api import (
    create_qr_base64,
    create_qr_payload,
    create_qr_png,
    create_qr_terminal,
    generate_token,
    verify_token,
)
from easy_totp.clock import FixedClock, SystemClock
from easy_totp.config import Algorithm, SecretEncoding
from easy_totp.errors import (
    EasyTotpError,
    EncodingError,
    InvalidConfig,
    InvalidInput,
    InvalidSecret,
)
from easy_totp.totp import Totp

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "EasyTotpError",
    "EncodingError",
    "FixedClock",
    "InvalidConfig",
    "InvalidInput",
    "InvalidSecret",
    "SecretEncoding",
    "SystemClock",
    "Totp",
    "create_qr_base64",
    "create_qr_payload",
    "create_qr_png",
    "create_qr_terminal",
    "generate_token",
    "verify_token",
]
