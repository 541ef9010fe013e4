"""Pydantic models for values passed between the URI builder, parser and callers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from easy_totp.config import MAX_DIGITS, MIN_DIGITS, Algorithm
from easy_totp.secret import encode


class ProvisioningParams(BaseModel):
    """Everything an otpauth://totp URI carries."""

    model_config = ConfigDict(frozen=True)

    secret: bytes = Field(repr=False, min_length=1)
    account_name: str = Field(min_length=1)
    issuer: str | None = None
    digits: int = Field(default=6, ge=MIN_DIGITS, le=MAX_DIGITS)
    period: int = Field(default=30, gt=0)
    algorithm: Algorithm = Algorithm.SHA1

    @property
    def base32_secret(self) -> str:
        return encode(self.secret)
