"""CLI entrypoint for apw-keychain."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Optional

import orjson
import typer
import yaml

from apw_keychain.client import APWClient
from apw_keychain.core.config import get_settings
from apw_keychain.core.errors import KeychainError
from apw_keychain.core.logging import configure_logging
from apw_keychain.models.entities import PASSWORD_NOT_INCLUDED, Query

app = typer.Typer(name="apwk", help="Look up credentials through the apw helper")

MASK = "********"


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override log level"),
    json_logs: Optional[bool] = typer.Option(None, "--json-logs/--text-logs", help="Emit JSON log lines"),
) -> None:
    try:
        settings = get_settings()
        configure_logging(
            level=log_level or settings.log_level,
            use_json=settings.log_json if json_logs is None else json_logs,
        )
    except (ValueError, yaml.YAMLError) as exc:
        raise _fail(exc, "Invalid configuration") from exc


def _client(apw: Optional[Path]) -> APWClient:
    if apw:
        return APWClient(apw)
    return APWClient.from_settings(get_settings())


def _mask(password: str) -> str:
    if not password or password == PASSWORD_NOT_INCLUDED:
        return password
    return MASK


def _fail(exc: Exception, what: str = "Lookup failed") -> typer.Exit:
    typer.echo(f"{what}: {exc}", err=True)
    return typer.Exit(code=1)


def _render_query(query: Query, show_passwords: bool) -> dict[str, Any]:
    payload = orjson.loads(query.to_json())
    if not show_passwords:
        for row in payload["results"]:
            row["password"] = _mask(row["password"])
    return payload


@app.command()
def get(
    domain: str = typer.Argument(..., help="Domain to look up"),
    apw: Optional[Path] = typer.Option(None, "--apw", help="Path to the apw executable"),
    show_passwords: bool = typer.Option(False, "--show-passwords", help="Print passwords in clear text"),
) -> None:
    """List every stored credential for a domain."""
    try:
        query = _client(apw).retrieve(domain)
    except (KeychainError, OSError, subprocess.CalledProcessError, ValueError) as exc:
        raise _fail(exc) from exc
    typer.echo(json.dumps(_render_query(query, show_passwords), indent=2))


@app.command()
def account(
    domain: str = typer.Argument(..., help="Domain to look up"),
    username: str = typer.Argument(..., help="Account username"),
    apw: Optional[Path] = typer.Option(None, "--apw", help="Path to the apw executable"),
    show_password: bool = typer.Option(False, "--show-password", help="Print the password in clear text"),
) -> None:
    """Resolve one account with a usable password."""
    try:
        acct = _client(apw).retrieve_account(domain, username)
    except (KeychainError, OSError, subprocess.CalledProcessError, ValueError) as exc:
        raise _fail(exc) from exc
    password = acct.password if show_password else _mask(acct.password)
    typer.echo(json.dumps({"domain": domain, "username": acct.username, "password": password}, indent=2))


@app.command()
def config() -> None:
    """Show the effective configuration."""
    typer.echo(json.dumps(get_settings().model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    app()
