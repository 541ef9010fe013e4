"""otpauth:// provisioning URIs for authenticator-app enrollment.

Format (Google Authenticator "Key Uri Format"):

    otpauth://totp/{issuer}:{account}?secret=...&issuer=...&algorithm=SHA1&digits=6&period=30

The issuer appears both in the label and as a query parameter; older
authenticator apps only read one or the other.
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, quote, unquote, urlsplit

from easy_totp import secret as secret_codec
from easy_totp.config import Algorithm
from easy_totp.digest import resolve_algorithm
from easy_totp.errors import EncodingError, InvalidConfig, InvalidInput, InvalidSecret
from easy_totp.models import ProvisioningParams
from easy_totp.totp import check_digits, check_time_step

logger = logging.getLogger(__name__)

SCHEME = "otpauth"
OTP_TYPE = "totp"


def _quote(value: str) -> str:
    try:
        return quote(value, safe="")
    except UnicodeEncodeError as exc:
        raise EncodingError("Value cannot be percent-encoded as UTF-8") from exc


def _check_label_part(name: str, value: str) -> None:
    if ":" in value:
        raise InvalidInput(f"{name} must not contain ':'")


def build_uri(
    secret: bytes,
    account_name: str,
    issuer: str | None = None,
    digits: int = 6,
    time_step: int = 30,
    algorithm: Algorithm | str = Algorithm.SHA1,
) -> str:
    """Assemble the provisioning URI handed to a QR renderer."""
    if not isinstance(secret, (bytes, bytearray)):
        raise InvalidSecret(f"Secret must be bytes, not {type(secret).__name__}")
    b32 = secret_codec.encode(secret)
    check_digits(digits)
    check_time_step(time_step)
    algorithm = resolve_algorithm(algorithm)

    account = (account_name or "").strip()
    if not account:
        raise InvalidInput("account_name must not be empty")
    issuer = (issuer or "").strip() or None
    _check_label_part("account_name", account)

    label = _quote(account)
    params = [("secret", b32)]
    if issuer:
        _check_label_part("issuer", issuer)
        issuer_enc = _quote(issuer)
        label = f"{issuer_enc}:{label}"
        params.append(("issuer", issuer_enc))
    params += [
        ("algorithm", algorithm.value),
        ("digits", str(digits)),
        ("period", str(time_step)),
    ]

    logger.debug("Built provisioning URI (issuer=%r, algorithm=%s)", issuer, algorithm)
    query = "&".join(f"{k}={v}" for k, v in params)
    return f"{SCHEME}://{OTP_TYPE}/{label}?{query}"


def _int_param(query: dict[str, str], name: str, default: int) -> int:
    raw = query.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfig(f"{name} must be an integer, got {raw!r}") from None


def parse_uri(uri: str) -> ProvisioningParams:
    """Parse an otpauth://totp URI back into its parameters."""
    parts = urlsplit(uri.strip())
    if parts.scheme.lower() != SCHEME:
        raise InvalidInput(f"Not an {SCHEME}:// URI")
    if parts.netloc.lower() != OTP_TYPE:
        raise InvalidInput(f"Unsupported OTP type: {parts.netloc!r}")

    query = {k: v[0] for k, v in parse_qs(parts.query, keep_blank_values=True).items()}

    label = unquote(parts.path.lstrip("/"))
    label_issuer = None
    account = label
    if ":" in label:
        label_issuer, account = label.split(":", 1)
        label_issuer = label_issuer.strip() or None
    account = account.strip()
    if not account:
        raise InvalidInput("URI label has no account name")

    issuer = query.get("issuer", "").strip() or None
    if issuer and label_issuer and issuer != label_issuer:
        raise InvalidInput("Issuer in label does not match issuer parameter")
    issuer = issuer or label_issuer

    if "secret" not in query:
        raise InvalidInput("URI has no secret parameter")
    key = secret_codec.decode(query["secret"])

    digits = check_digits(_int_param(query, "digits", 6))
    period = check_time_step(_int_param(query, "period", 30))
    algorithm = resolve_algorithm(query.get("algorithm", Algorithm.SHA1))

    return ProvisioningParams(
        secret=key,
        account_name=account,
        issuer=issuer,
        digits=digits,
        period=period,
        algorithm=algorithm,
    )
