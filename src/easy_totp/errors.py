"""Exception hierarchy for easy_totp.

Messages never carry secret material or submitted codes.
"""

from __future__ import annotations


class EasyTotpError(Exception):
    """Base class for every error raised by easy_totp."""


class InvalidSecret(EasyTotpError, ValueError):
    """Secret is empty, or its base32 text is malformed."""


class InvalidConfig(EasyTotpError, ValueError):
    """Digits, time step, window or algorithm outside the allowed range."""


class InvalidInput(EasyTotpError, ValueError):
    """A required field is empty or unusable (account name, timestamp, URI)."""


class EncodingError(EasyTotpError, ValueError):
    """Text could not be encoded for a secret, URI or QR payload."""
