"""Tests for configuration loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from easy_totp.config import Algorithm, ErrorCorrection, SecretEncoding, Settings


def test_settings_defaults():
    s = Settings(_env_file=None)
    assert s.digits == 6
    assert s.time_step == 30
    assert s.window == 1
    assert s.algorithm == Algorithm.SHA1
    assert s.secret_length == 20
    assert s.default_issuer is None
    assert s.qr_error_correction == ErrorCorrection.M


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("EASY_TOTP_DIGITS", "8")
    monkeypatch.setenv("EASY_TOTP_TIME_STEP", "60")
    monkeypatch.setenv("EASY_TOTP_ALGORITHM", "SHA512")
    monkeypatch.setenv("EASY_TOTP_DEFAULT_ISSUER", "McCormick")
    s = Settings(_env_file=None)
    assert s.digits == 8
    assert s.time_step == 60
    assert s.algorithm == Algorithm.SHA512
    assert s.default_issuer == "McCormick"


@pytest.mark.parametrize(
    ("var", "value"),
    [("EASY_TOTP_DIGITS", "9"), ("EASY_TOTP_TIME_STEP", "0"), ("EASY_TOTP_WINDOW", "-1"), ("EASY_TOTP_ALGORITHM", "MD5")],
)
def test_settings_rejects_out_of_range(monkeypatch, var, value):
    monkeypatch.setenv(var, value)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_enums():
    assert Algorithm.SHA256 == "SHA256"
    assert SecretEncoding.BASE32 == "base32"
    assert len(Algorithm) == 3
    assert len(ErrorCorrection) == 4
