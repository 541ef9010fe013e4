"""Tests for counter derivation, code generation and windowed verification."""

from __future__ import annotations

import hashlib

import pyotp
import pytest

from easy_totp.clock import FixedClock
from easy_totp.config import Algorithm
from easy_totp.errors import InvalidConfig, InvalidInput, InvalidSecret
from easy_totp import totp as totp_module
from easy_totp.secret import encode
from easy_totp.totp import (
    MAX_COUNTER,
    Totp,
    compute_counter,
    generate_code,
    generate_token,
    time_remaining,
    verify_code,
)

# RFC 6238 appendix B seeds (ASCII "1234567890" repeated to the hash size)
SEED_SHA1 = b"12345678901234567890"
SEED_SHA256 = b"12345678901234567890123456789012"
SEED_SHA512 = b"1234567890123456789012345678901234567890123456789012345678901234"

# RFC 4226 appendix D, counters 0..9
HOTP_VECTORS = [
    "755224", "287082", "359152", "969429", "338314",
    "254676", "287922", "162583", "399871", "520489",
]


# === Counter ===


@pytest.mark.parametrize(
    ("unix_time", "step", "expected"),
    [(0, 30, 0), (29, 30, 0), (30, 30, 1), (59, 30, 1), (59.9, 30, 1), (1111111109, 30, 37037036), (120, 60, 2)],
)
def test_compute_counter(unix_time, step, expected):
    assert compute_counter(unix_time, step) == expected


@pytest.mark.parametrize("step", [0, -30])
def test_compute_counter_rejects_bad_step(step):
    with pytest.raises(InvalidConfig):
        compute_counter(100, step)


def test_compute_counter_rejects_negative_time():
    with pytest.raises(InvalidInput):
        compute_counter(-1, 30)


# === Code generation ===


@pytest.mark.parametrize(("counter", "expected"), list(enumerate(HOTP_VECTORS)))
def test_generate_code_rfc4226_vectors(rfc_secret, counter, expected):
    assert generate_code(rfc_secret, counter, 6) == expected


@pytest.mark.parametrize(
    ("unix_time", "expected"),
    [(59, "94287082"), (1111111109, "07081804"), (1111111111, "14050471")],
)
def test_generate_token_rfc6238_golden_values(unix_time, expected):
    assert generate_token(b"12345678901234567890", 8, 30, unix_time) == expected


@pytest.mark.parametrize(
    ("unix_time", "sha1", "sha256", "sha512"),
    [
        (59, "94287082", "46119246", "90693936"),
        (1111111109, "07081804", "68084774", "25091201"),
        (1111111111, "14050471", "67062674", "99943326"),
        (1234567890, "89005924", "91819424", "93441116"),
        (2000000000, "69279037", "90698825", "38618901"),
        (20000000000, "65353130", "77737706", "47863826"),
    ],
)
def test_generate_token_rfc6238_all_algorithms(unix_time, sha1, sha256, sha512):
    assert generate_token(SEED_SHA1, 8, 30, unix_time, algorithm=Algorithm.SHA1) == sha1
    assert generate_token(SEED_SHA256, 8, 30, unix_time, algorithm=Algorithm.SHA256) == sha256
    assert generate_token(SEED_SHA512, 8, 30, unix_time, algorithm="sha512") == sha512


@pytest.mark.parametrize("digits", [6, 7, 8])
def test_code_length_matches_digits(digits):
    for counter in range(0, 5000, 37):
        code = generate_code(b"another secret of twenty+ bytes", counter, digits)
        assert len(code) == digits
        assert code.isdigit()


def test_generate_code_is_deterministic(rfc_secret):
    assert generate_code(rfc_secret, 42, 6) == generate_code(rfc_secret, 42, 6)


@pytest.mark.parametrize("digits", [5, 9, 0, True])
def test_generate_code_rejects_bad_digits(rfc_secret, digits):
    with pytest.raises(InvalidConfig):
        generate_code(rfc_secret, 1, digits)


def test_generate_code_rejects_empty_secret():
    with pytest.raises(InvalidSecret):
        generate_code(b"", 1, 6)


@pytest.mark.parametrize("counter", [-1, MAX_COUNTER + 1])
def test_generate_code_rejects_out_of_range_counter(rfc_secret, counter):
    with pytest.raises(InvalidConfig):
        generate_code(rfc_secret, counter, 6)


def test_generate_code_accepts_max_counter(rfc_secret):
    assert len(generate_code(rfc_secret, MAX_COUNTER, 6)) == 6


def test_unknown_algorithm(rfc_secret):
    with pytest.raises(InvalidConfig, match="Unsupported algorithm"):
        generate_code(rfc_secret, 1, 6, "MD5")


@pytest.mark.parametrize(
    ("algorithm", "digest"),
    [(Algorithm.SHA1, hashlib.sha1), (Algorithm.SHA256, hashlib.sha256), (Algorithm.SHA512, hashlib.sha512)],
)
@pytest.mark.parametrize("digits", [6, 8])
def test_matches_pyotp(algorithm, digest, digits):
    key = b"an independent oracle check!"
    oracle = pyotp.TOTP(encode(key), digits=digits, digest=digest, interval=30)
    for t in (59, 1700000000, 1700000029, 1700000030, 4102444800):
        assert generate_token(key, digits, 30, t, algorithm=algorithm) == oracle.at(t)


def test_generate_token_reads_clock(rfc_secret):
    assert generate_token(rfc_secret, 8, 30, clock=FixedClock(59)) == "94287082"


# === Verification ===


def test_verify_roundtrip(rfc_secret):
    for t in (0, 59, 1700000000, 1700000017):
        code = generate_token(rfc_secret, 6, 30, t)
        for window in (0, 1, 3):
            assert verify_code(rfc_secret, code, 6, 30, t, window)


def test_verify_window_tolerance(rfc_secret):
    # Counter 4's code is 338314; codes for counters 0..9 are all distinct.
    code = HOTP_VECTORS[4]
    at = lambda counter: counter * 30 + 7  # noqa: E731

    assert verify_code(rfc_secret, code, 6, 30, at(4), window=0)
    assert not verify_code(rfc_secret, code, 6, 30, at(5), window=0)

    for counter in (3, 4, 5):
        assert verify_code(rfc_secret, code, 6, 30, at(counter), window=1)
    for counter in (2, 6):
        assert not verify_code(rfc_secret, code, 6, 30, at(counter), window=1)

    for counter in (2, 6):
        assert verify_code(rfc_secret, code, 6, 30, at(counter), window=2)
    for counter in (1, 7):
        assert not verify_code(rfc_secret, code, 6, 30, at(counter), window=2)


def test_verify_near_epoch_skips_negative_counters(rfc_secret):
    assert verify_code(rfc_secret, HOTP_VECTORS[0], 6, 30, 0, window=2)
    assert verify_code(rfc_secret, HOTP_VECTORS[1], 6, 30, 0, window=1)


@pytest.mark.parametrize(
    "submitted",
    ["", "12345", "1234567", "12345a", "12 345", " 755224", "７５５２２４", "٧٥٥٢٢٤", None, 755224, b"755224"],
)
def test_verify_malformed_code_is_false(rfc_secret, submitted):
    assert verify_code(rfc_secret, submitted, 6, 30, 0, window=1) is False


def _count_comparisons(monkeypatch) -> list[tuple[bytes, bytes]]:
    calls: list[tuple[bytes, bytes]] = []
    real = totp_module.constant_time_equals

    def counting(a: bytes, b: bytes) -> bool:
        calls.append((a, b))
        return real(a, b)

    monkeypatch.setattr("easy_totp.totp.constant_time_equals", counting)
    return calls


@pytest.mark.parametrize("window", [0, 1, 3])
def test_verify_compares_every_offset(rfc_secret, monkeypatch, window):
    calls = _count_comparisons(monkeypatch)
    # Matching code sits in the middle of the window; no early exit allowed.
    assert verify_code(rfc_secret, HOTP_VECTORS[4], 6, 30, 4 * 30 + 7, window)
    assert len(calls) == 2 * window + 1


def test_verify_compares_every_offset_on_mismatch(rfc_secret, monkeypatch):
    calls = _count_comparisons(monkeypatch)
    assert not verify_code(rfc_secret, "000000", 6, 30, 4 * 30 + 7, window=3)
    assert len(calls) == 7
    assert all(b == b"000000" for _, b in calls)


@pytest.mark.parametrize("submitted", ["755224", "abc", ""])
def test_verify_bad_timestamp_raises_regardless_of_code_format(rfc_secret, submitted):
    with pytest.raises(InvalidInput):
        verify_code(rfc_secret, submitted, 6, 30, -5, window=1)


@pytest.mark.parametrize("now", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_timestamps_raise(rfc_secret, now):
    with pytest.raises(InvalidInput, match="finite"):
        compute_counter(now, 30)
    with pytest.raises(InvalidInput):
        generate_token(rfc_secret, 6, 30, now)
    with pytest.raises(InvalidInput):
        time_remaining(30, now)


def test_verify_wrong_code_is_false(rfc_secret):
    assert verify_code(rfc_secret, "000000", 6, 30, 0, window=0) is False


@pytest.mark.parametrize(
    ("digits", "step", "window"),
    [(5, 30, 1), (9, 30, 1), (6, 0, 1), (6, -1, 1), (6, 30, -1)],
)
def test_verify_bad_config_raises(rfc_secret, digits, step, window):
    with pytest.raises(InvalidConfig):
        verify_code(rfc_secret, "123456", digits, step, 0, window)


def test_verify_bad_config_raises_even_for_malformed_code(rfc_secret):
    with pytest.raises(InvalidConfig):
        verify_code(rfc_secret, "nope", 6, 30, 0, window=-1)


def test_verify_empty_secret_raises():
    with pytest.raises(InvalidSecret):
        verify_code(b"", "123456", 6, 30, 0, 1)


def test_verify_logs_without_code(rfc_secret, caplog):
    with caplog.at_level("INFO", logger="easy_totp.totp"):
        verify_code(rfc_secret, "000000", 6, 30, 0, window=0)
    assert "verification failed" in caplog.text
    assert "000000" not in caplog.text


# === Time remaining ===


@pytest.mark.parametrize(("now", "expected"), [(0, 30), (1, 29), (29, 1), (29.9, 1), (30, 30), (95, 25)])
def test_time_remaining(now, expected):
    assert time_remaining(30, now) == expected


# === Totp wrapper ===


def test_totp_wrapper_uses_clock(rfc_secret):
    clock = FixedClock(59)
    t = Totp(rfc_secret, digits=8, clock=clock)
    assert t.now() == "94287082"
    assert t.counter() == 1
    assert t.time_remaining() == 1

    clock.advance(1111111109 - 59)
    assert t.now() == "07081804"
    assert t.verify("07081804")
    assert t.verify("14050471")  # next step, inside the default window
    assert not t.verify("94287082")


def test_totp_repr_hides_secret(rfc_secret):
    t = Totp(rfc_secret, issuer="Acme", account_name="alice")
    assert "1234567890" not in repr(t)
    assert encode(rfc_secret) not in repr(t)
    assert "Acme" in repr(t)


def test_totp_validates_parameters(rfc_secret):
    with pytest.raises(InvalidConfig):
        Totp(rfc_secret, digits=10)
    with pytest.raises(InvalidConfig):
        Totp(rfc_secret, window=-1)
    with pytest.raises(InvalidSecret):
        Totp(b"")


def test_totp_equality_compares_secret_in_constant_time(rfc_secret, monkeypatch):
    calls = _count_comparisons(monkeypatch)
    assert Totp(rfc_secret, issuer="Acme") == Totp(bytearray(rfc_secret), issuer="Acme")
    assert Totp(rfc_secret) != Totp(b"a different secret, 20+ bytes")
    assert Totp(rfc_secret, digits=8) != Totp(rfc_secret, digits=6)
    assert len(calls) == 3
    assert Totp(rfc_secret) != rfc_secret


def test_totp_from_base32_and_generate():
    t = Totp.from_base32("JBSWY3DPEHPK3PXP")
    assert t.secret == b"Hello!\xde\xad\xbe\xef"
    assert t.base32_secret == "JBSWY3DPEHPK3PXP"

    g = Totp.generate(32, algorithm="sha256")
    assert len(g.secret) == 32
    assert g.algorithm is Algorithm.SHA256


def test_totp_uri_roundtrip(rfc_secret):
    t = Totp(rfc_secret, digits=8, time_step=60, algorithm=Algorithm.SHA512,
             issuer="Acme Corp", account_name="alice@example.com")
    back = Totp.from_uri(t.provisioning_uri())
    assert back == t


def test_totp_provisioning_uri_needs_account(rfc_secret):
    with pytest.raises(InvalidInput):
        Totp(rfc_secret).provisioning_uri()
