"""Caller-facing entry points.

Parameters left as ``None`` fall back to ``easy_totp.config.settings``.
Text secrets are taken as raw UTF-8 bytes unless ``encoding="base32"``.
"""

from __future__ import annotations

from easy_totp import qr, secret as secret_codec, totp, uri
from easy_totp.config import Algorithm, SecretEncoding, settings
from easy_totp.errors import InvalidInput

Secret = bytes | bytearray | str


def create_qr_payload(
    secret: Secret,
    issuer: str | None,
    account_name: str,
    *,
    digits: int | None = None,
    time_step: int | None = None,
    algorithm: Algorithm | str | None = None,
    encoding: SecretEncoding | str = SecretEncoding.RAW,
) -> str:
    """Provisioning URI to encode into a QR code."""
    return uri.build_uri(
        secret_codec.to_bytes(secret, encoding=encoding),
        account_name,
        issuer=issuer if issuer is not None else settings.default_issuer,
        digits=digits if digits is not None else settings.digits,
        time_step=time_step if time_step is not None else settings.time_step,
        algorithm=algorithm or settings.algorithm,
    )


def create_qr_png(secret: Secret, issuer: str | None, account_name: str, **kwargs) -> bytes:
    """PNG bytes of the enrollment QR code. BEWARE: the image contains the secret."""
    return qr.render_png(create_qr_payload(secret, issuer, account_name, **kwargs))


def create_qr_base64(secret: Secret, issuer: str | None, account_name: str, **kwargs) -> str:
    return qr.render_base64(create_qr_payload(secret, issuer, account_name, **kwargs))


def create_qr_terminal(secret: Secret, issuer: str | None, account_name: str, **kwargs) -> str:
    return qr.render_terminal(create_qr_payload(secret, issuer, account_name, **kwargs))


def generate_token(
    secret: Secret,
    issuer: str | None = None,
    account_name: str | None = None,
    digits: int | None = None,
    time_step: int | None = None,
    *,
    now: float | None = None,
    algorithm: Algorithm | str | None = None,
    encoding: SecretEncoding | str = SecretEncoding.RAW,
) -> str:
    """Current TOTP code.

    ``issuer`` and ``account_name`` do not affect the code; they are checked
    the same way the URI builder checks them so a token is never produced
    for an identity that could not be enrolled.
    """
    for name, value in (("issuer", issuer), ("account_name", account_name)):
        if value and ":" in value:
            raise InvalidInput(f"{name} must not contain ':'")
    return totp.generate_token(
        secret_codec.to_bytes(secret, encoding=encoding),
        digits if digits is not None else settings.digits,
        time_step if time_step is not None else settings.time_step,
        now,
        algorithm=algorithm or settings.algorithm,
    )


def verify_token(
    secret: Secret,
    submitted_code: str,
    digits: int | None = None,
    time_step: int | None = None,
    window: int | None = None,
    *,
    now: float | None = None,
    algorithm: Algorithm | str | None = None,
    encoding: SecretEncoding | str = SecretEncoding.RAW,
) -> bool:
    """True if ``submitted_code`` matches any step within the window."""
    return totp.verify_code(
        secret_codec.to_bytes(secret, encoding=encoding),
        submitted_code,
        digits if digits is not None else settings.digits,
        time_step if time_step is not None else settings.time_step,
        now,
        window if window is not None else settings.window,
        algorithm=algorithm or settings.algorithm,
    )
