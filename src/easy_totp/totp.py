"""RFC 6238 time-based one-time passwords.

Codes are HOTP values (RFC 4226) over a counter derived from the Unix time:

    counter = floor(unix_time / time_step)
    code    = truncate(HMAC(secret, counter as 8 big-endian bytes)) mod 10**digits

Everything here is a pure function of its arguments plus the clock reading,
so it is safe to call from any number of threads.
"""

from __future__ import annotations

import logging
import math
import struct
from dataclasses import dataclass, field

from easy_totp import secret as secret_codec
from easy_totp.clock import SYSTEM_CLOCK, Clock, read_time
from easy_totp.config import MAX_DIGITS, MIN_DIGITS, Algorithm
from easy_totp.digest import constant_time_equals, hmac_digest, resolve_algorithm
from easy_totp.errors import InvalidConfig, InvalidInput, InvalidSecret

logger = logging.getLogger(__name__)

MAX_COUNTER = 2**64 - 1


# === Parameter checks ===


def check_digits(digits: int) -> int:
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise InvalidConfig(f"digits must be an integer, got {type(digits).__name__}")
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidConfig(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {digits}")
    return digits


def check_time_step(time_step: int) -> int:
    if isinstance(time_step, bool) or not isinstance(time_step, int):
        raise InvalidConfig(f"time_step must be an integer, got {type(time_step).__name__}")
    if time_step <= 0:
        raise InvalidConfig(f"time_step must be positive, got {time_step}")
    return time_step


def check_window(window: int) -> int:
    if isinstance(window, bool) or not isinstance(window, int):
        raise InvalidConfig(f"window must be an integer, got {type(window).__name__}")
    if window < 0:
        raise InvalidConfig(f"window must not be negative, got {window}")
    return window


def _check_key(secret: bytes) -> bytes:
    if not isinstance(secret, (bytes, bytearray)):
        raise InvalidSecret(f"Secret must be bytes, not {type(secret).__name__}")
    if not secret:
        raise InvalidSecret("Secret must not be empty")
    return bytes(secret)


# === Engine ===


def _check_time(unix_time: float) -> float:
    if not math.isfinite(unix_time):
        raise InvalidInput("Timestamp must be a finite number")
    if unix_time < 0:
        raise InvalidInput("Timestamp must not be before the Unix epoch")
    return unix_time


def compute_counter(unix_time: float, time_step: int = 30) -> int:
    """Number of whole time steps elapsed since the Unix epoch."""
    check_time_step(time_step)
    _check_time(unix_time)
    counter = int(unix_time // time_step)
    if counter > MAX_COUNTER:
        raise InvalidInput("Timestamp is too far in the future for a 64-bit counter")
    logger.debug("Counter %d for step %ds", counter, time_step)
    return counter


def generate_code(
    secret: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm | str = Algorithm.SHA1,
) -> str:
    """HOTP value for ``counter``, zero-padded to ``digits`` characters."""
    key = _check_key(secret)
    check_digits(digits)
    if not 0 <= counter <= MAX_COUNTER:
        raise InvalidConfig("counter must fit in an unsigned 64-bit integer")

    digest = hmac_digest(algorithm, key, struct.pack(">Q", counter))

    # Dynamic truncation (RFC 4226 section 5.3)
    offset = digest[-1] & 0x0F
    code_int = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF
    return str(code_int % 10**digits).zfill(digits)


def generate_token(
    secret: bytes,
    digits: int = 6,
    time_step: int = 30,
    now: float | None = None,
    *,
    algorithm: Algorithm | str = Algorithm.SHA1,
    clock: Clock | None = None,
) -> str:
    """Code for the time step containing ``now`` (the clock's reading by default)."""
    counter = compute_counter(read_time(now, clock), time_step)
    return generate_code(secret, counter, digits, algorithm)


def _well_formed(code: object, digits: int) -> bool:
    return (
        isinstance(code, str)
        and len(code) == digits
        and code.isascii()
        and code.isdigit()
    )


def verify_code(
    secret: bytes,
    submitted_code: str,
    digits: int = 6,
    time_step: int = 30,
    now: float | None = None,
    window: int = 1,
    *,
    algorithm: Algorithm | str = Algorithm.SHA1,
    clock: Clock | None = None,
) -> bool:
    """Check ``submitted_code`` against every step in ``[-window, +window]``.

    Every offset is evaluated and compared in constant time; there is no
    early exit on a match. A malformed code is simply a failed verification.
    """
    key = _check_key(secret)
    check_digits(digits)
    check_time_step(time_step)
    check_window(window)
    algorithm = resolve_algorithm(algorithm)

    counter = compute_counter(read_time(now, clock), time_step)
    if not _well_formed(submitted_code, digits):
        logger.info("TOTP verification failed")
        return False

    submitted = submitted_code.encode("ascii")

    matched = False
    for delta in range(-window, window + 1):
        candidate = counter + delta
        if not 0 <= candidate <= MAX_COUNTER:
            continue
        expected = generate_code(key, candidate, digits, algorithm).encode("ascii")
        matched |= constant_time_equals(expected, submitted)

    if not matched:
        logger.info("TOTP verification failed")
    return matched


def time_remaining(
    time_step: int = 30,
    now: float | None = None,
    *,
    clock: Clock | None = None,
) -> int:
    """Whole seconds until the current code rolls over (1..time_step)."""
    check_time_step(time_step)
    t = int(_check_time(read_time(now, clock)))
    return time_step - (t % time_step)


# === Convenience wrapper ===


@dataclass
class Totp:
    """A secret plus its token parameters.

    The secret is excluded from ``repr`` and never logged; equality compares
    it in constant time.
    """

    secret: bytes = field(repr=False, compare=False)
    digits: int = 6
    time_step: int = 30
    algorithm: Algorithm = Algorithm.SHA1
    window: int = 1
    issuer: str | None = None
    account_name: str | None = None
    clock: Clock = field(default=SYSTEM_CLOCK, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.secret = _check_key(self.secret)
        check_digits(self.digits)
        check_time_step(self.time_step)
        check_window(self.window)
        self.algorithm = resolve_algorithm(self.algorithm)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Totp):
            return NotImplemented
        same_params = (
            (self.digits, self.time_step, self.algorithm, self.window, self.issuer, self.account_name)
            == (other.digits, other.time_step, other.algorithm, other.window, other.issuer, other.account_name)
        )
        return constant_time_equals(self.secret, other.secret) and same_params

    @classmethod
    def from_base32(cls, text: str, **kwargs) -> Totp:
        return cls(secret_codec.decode(text), **kwargs)

    @classmethod
    def generate(cls, length: int = 20, **kwargs) -> Totp:
        """New instance with a fresh random secret."""
        return cls(secret_codec.random_secret(length), **kwargs)

    @classmethod
    def from_uri(cls, uri: str, **kwargs) -> Totp:
        """Rebuild from an otpauth://totp URI."""
        from easy_totp.uri import parse_uri

        params = parse_uri(uri)
        return cls(
            secret=params.secret,
            digits=params.digits,
            time_step=params.period,
            algorithm=params.algorithm,
            issuer=params.issuer,
            account_name=params.account_name,
            **kwargs,
        )

    @property
    def base32_secret(self) -> str:
        return secret_codec.encode(self.secret)

    def counter(self, now: float | None = None) -> int:
        return compute_counter(read_time(now, self.clock), self.time_step)

    def at(self, unix_time: float) -> str:
        return generate_token(
            self.secret, self.digits, self.time_step, unix_time, algorithm=self.algorithm
        )

    def now(self) -> str:
        return self.at(self.clock.now())

    def verify(self, code: str, now: float | None = None) -> bool:
        return verify_code(
            self.secret,
            code,
            self.digits,
            self.time_step,
            read_time(now, self.clock),
            self.window,
            algorithm=self.algorithm,
        )

    def time_remaining(self, now: float | None = None) -> int:
        return time_remaining(self.time_step, read_time(now, self.clock))

    def provisioning_uri(self) -> str:
        from easy_totp.uri import build_uri

        return build_uri(
            self.secret,
            self.account_name or "",
            issuer=self.issuer,
            digits=self.digits,
            time_step=self.time_step,
            algorithm=self.algorithm,
        )
