"""Shared-secret handling: base32 text form, random generation, input normalization."""

from __future__ import annotations

import base64
import binascii
import logging
import secrets

from easy_totp.config import RECOMMENDED_SECRET_BYTES, SecretEncoding
from easy_totp.errors import EncodingError, InvalidConfig, InvalidSecret

logger = logging.getLogger(__name__)

BASE32_ALPHABET = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ234567")


def encode(secret: bytes) -> str:
    """Render secret bytes as unpadded RFC 4648 base32."""
    if not secret:
        raise InvalidSecret("Secret must not be empty")
    return base64.b32encode(bytes(secret)).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """Parse base32 text (any case, padding and whitespace optional) into bytes."""
    if not isinstance(text, str):
        raise InvalidSecret("Base32 secret must be text")
    s = "".join(text.split()).upper().rstrip("=")
    if not s:
        raise InvalidSecret("Base32 secret is empty")
    if not BASE32_ALPHABET.issuperset(s):
        raise InvalidSecret("Base32 secret contains characters outside A-Z and 2-7")

    pad = (-len(s)) % 8
    try:
        raw = base64.b32decode(s + "=" * pad)
    except binascii.Error as exc:
        raise InvalidSecret("Base32 secret has an impossible length") from exc
    if not raw:
        raise InvalidSecret("Base32 secret decodes to zero bytes")
    return raw


def random_secret(length: int = 20) -> bytes:
    """Return ``length`` bytes from the OS CSPRNG."""
    if length < 1:
        raise InvalidSecret(f"Secret length must be at least 1 byte, got {length}")
    if length < RECOMMENDED_SECRET_BYTES:
        logger.warning(
            "Generating a %d-byte secret; at least %d bytes is recommended",
            length, RECOMMENDED_SECRET_BYTES,
        )
    return secrets.token_bytes(length)


def random_base32(length: int = 20) -> str:
    """Generate a new secret and return it in base32 form."""
    return encode(random_secret(length))


def to_bytes(
    secret: bytes | bytearray | str,
    *,
    encoding: SecretEncoding | str = SecretEncoding.RAW,
) -> bytes:
    """Normalize a caller-supplied secret to key bytes.

    Bytes are used as-is. Text is either taken as its UTF-8 bytes
    (``SecretEncoding.RAW``) or parsed as base32 (``SecretEncoding.BASE32``).
    """
    try:
        encoding = SecretEncoding(encoding)
    except ValueError:
        raise InvalidConfig(f"Unknown secret encoding: {encoding!r}") from None

    if isinstance(secret, (bytes, bytearray)):
        raw = bytes(secret)
    elif isinstance(secret, str):
        if encoding is SecretEncoding.BASE32:
            raw = decode(secret)
        else:
            try:
                raw = secret.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise EncodingError("Secret text is not valid Unicode") from exc
    else:
        raise InvalidSecret(f"Secret must be bytes or str, not {type(secret).__name__}")

    if not raw:
        raise InvalidSecret("Secret must not be empty")
    if len(raw) < RECOMMENDED_SECRET_BYTES:
        logger.warning(
            "Secret is %d bytes; at least %d bytes is recommended",
            len(raw), RECOMMENDED_SECRET_BYTES,
        )
    return raw
