"""CLI entry point for easy_totp."""

from __future__ import annotations

import logging
import sys
from functools import wraps
from pathlib import Path

import click
from rich.console import Console

from easy_totp.config import Algorithm, SecretEncoding, settings
from easy_totp.errors import EasyTotpError

console = Console()
err_console = Console(stderr=True)


def _encoding(base32: bool) -> SecretEncoding:
    return SecretEncoding.BASE32 if base32 else SecretEncoding.RAW


def _handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except EasyTotpError as e:
            err_console.print(f"[red]{e}[/red]")
            sys.exit(2)

    return wrapper


def token_options(func):
    """Options shared by every command that takes token parameters."""
    func = click.option("--algorithm", type=click.Choice([a.value for a in Algorithm], case_sensitive=False),
                        default=None, help="HMAC hash (default from settings)")(func)
    func = click.option("--period", "time_step", type=int, default=None, help="Time step in seconds")(func)
    func = click.option("--digits", type=int, default=None, help="Code length (6-8)")(func)
    func = click.option("--base32", is_flag=True, help="SECRET is base32 text, not raw characters")(func)
    return func


@click.group()
@click.option("--log-level", default=None, help="Logging level (default from settings)")
def main(log_level: str | None) -> None:
    """easy-totp: TOTP codes and authenticator enrollment QR codes."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


@main.command()
@click.option("--length", type=int, default=None, help="Secret length in bytes")
@_handle_errors
def secret(length: int | None) -> None:
    """Print a new random base32 secret."""
    from easy_totp.secret import random_base32

    click.echo(random_base32(length if length is not None else settings.secret_length))


@main.command()
@click.argument("secret_value", metavar="SECRET")
@click.argument("account")
@click.option("--issuer", default=None, help="Issuer shown in the authenticator app")
@token_options
@_handle_errors
def uri(secret_value: str, account: str, issuer: str | None, base32: bool,
        digits: int | None, time_step: int | None, algorithm: str | None) -> None:
    """Print the otpauth:// provisioning URI."""
    from easy_totp.api import create_qr_payload

    click.echo(create_qr_payload(
        secret_value, issuer, account,
        digits=digits, time_step=time_step, algorithm=algorithm, encoding=_encoding(base32),
    ))


@main.command()
@click.argument("secret_value", metavar="SECRET")
@click.option("--at", "timestamp", type=int, default=None, help="Unix time instead of now")
@token_options
@_handle_errors
def code(secret_value: str, timestamp: int | None, base32: bool,
         digits: int | None, time_step: int | None, algorithm: str | None) -> None:
    """Print the code for the current (or given) time."""
    from easy_totp.api import generate_token
    from easy_totp.totp import time_remaining

    token = generate_token(
        secret_value, digits=digits, time_step=time_step, now=timestamp,
        algorithm=algorithm, encoding=_encoding(base32),
    )
    click.echo(token)
    if timestamp is None:
        left = time_remaining(time_step or settings.time_step)
        err_console.print(f"[dim]valid for {left}s[/dim]")


@main.command()
@click.argument("secret_value", metavar="SECRET")
@click.argument("submitted")
@click.option("--window", type=int, default=None, help="Adjacent steps tolerated each side")
@click.option("--at", "timestamp", type=int, default=None, help="Unix time instead of now")
@token_options
@_handle_errors
def verify(secret_value: str, submitted: str, window: int | None, timestamp: int | None,
           base32: bool, digits: int | None, time_step: int | None, algorithm: str | None) -> None:
    """Check a code; exit status 0 if it matches, 1 if not."""
    from easy_totp.api import verify_token

    ok = verify_token(
        secret_value, submitted, digits, time_step, window,
        now=timestamp, algorithm=algorithm, encoding=_encoding(base32),
    )
    if ok:
        console.print("[green]valid[/green]")
    else:
        console.print("[red]invalid[/red]")
        sys.exit(1)


@main.command()
@click.argument("secret_value", metavar="SECRET")
@click.argument("account")
@click.option("--issuer", default=None, help="Issuer shown in the authenticator app")
@click.option("--png", "png_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write a PNG here instead of drawing in the terminal")
@click.option("--invert", is_flag=True, help="Invert terminal colors (light-on-dark terminals)")
@token_options
@_handle_errors
def qr(secret_value: str, account: str, issuer: str | None, png_path: Path | None, invert: bool,
       base32: bool, digits: int | None, time_step: int | None, algorithm: str | None) -> None:
    """Render the enrollment QR code. The output contains the secret."""
    from easy_totp import qr as qr_render
    from easy_totp.api import create_qr_payload

    payload = create_qr_payload(
        secret_value, issuer, account,
        digits=digits, time_step=time_step, algorithm=algorithm, encoding=_encoding(base32),
    )
    if png_path is None:
        click.echo(qr_render.render_terminal(payload, invert=invert), nl=False)
        return
    png_path.write_bytes(qr_render.render_png(payload))
    console.print(f"QR code saved to [bold]{png_path}[/bold]")


@main.command("settings")
def show_settings() -> None:
    """Show the effective configuration."""
    console.print_json(data=settings.model_dump(mode="json"))


if __name__ == "__main__":
    main()
