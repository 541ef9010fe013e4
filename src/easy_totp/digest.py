"""HMAC primitive used by the token engine (backed by ``cryptography``)."""

from __future__ import annotations

from cryptography.hazmat.primitives import constant_time, hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from easy_totp.config import Algorithm
from easy_totp.errors import InvalidConfig

_HASHES: dict[Algorithm, type[hashes.HashAlgorithm]] = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}


def resolve_algorithm(algorithm: Algorithm | str) -> Algorithm:
    """Coerce ``"sha256"``, ``"SHA-256"`` or an ``Algorithm`` to an ``Algorithm``."""
    if isinstance(algorithm, Algorithm):
        return algorithm
    name = str(algorithm).strip().upper().replace("-", "")
    try:
        return Algorithm(name)
    except ValueError:
        raise InvalidConfig(
            f"Unsupported algorithm: {algorithm!r} (expected one of {', '.join(Algorithm)})"
        ) from None


def hmac_digest(algorithm: Algorithm | str, key: bytes, message: bytes) -> bytes:
    """Compute HMAC(key, message) with the given hash."""
    h = crypto_hmac.HMAC(key, _HASHES[resolve_algorithm(algorithm)]())
    h.update(message)
    return h.finalize()


def constant_time_equals(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without short-circuiting on the first mismatch."""
    return constant_time.bytes_eq(a, b)
