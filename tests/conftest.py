"""Shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture
def rfc_secret() -> bytes:
    """RFC 4226 / RFC 6238 SHA-1 seed."""
    return b"12345678901234567890"
