"""Central configuration loaded from environment variables (EASY_TOTP_*)."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_DIGITS = 6
MAX_DIGITS = 8
RECOMMENDED_SECRET_BYTES = 16


class Algorithm(StrEnum):
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


class SecretEncoding(StrEnum):
    RAW = "raw"
    BASE32 = "base32"


class ErrorCorrection(StrEnum):
    L = "L"
    M = "M"
    Q = "Q"
    H = "H"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EASY_TOTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Token parameters
    digits: int = Field(default=6, ge=MIN_DIGITS, le=MAX_DIGITS)
    time_step: int = Field(default=30, gt=0)
    window: int = Field(default=1, ge=0)
    algorithm: Algorithm = Algorithm.SHA1

    # Secrets
    secret_length: int = Field(default=20, ge=1)
    default_issuer: str | None = None

    # QR rendering
    qr_error_correction: ErrorCorrection = ErrorCorrection.M
    qr_box_size: int = Field(default=10, gt=0)
    qr_border: int = Field(default=4, ge=0)

    # Logging
    log_level: str = "WARNING"


settings = Settings()
