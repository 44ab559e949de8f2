from __future__ import annotations
import json
import logging
from typing import List, Optional

import typer
from rich import print

from kraken_api.client import KrakenSpotClient
from kraken_api.crypto import decode_secret, sign as sign_body
from kraken_api.errors import KrakenError
from kraken_api.logutil import setup_logging
from kraken_api.nonce import make_nonce_generator
from kraken_api.settings import settings

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, help="Logging level"),
):
    setup_logging(getattr(logging, log_level.upper(), logging.INFO))


def _client() -> KrakenSpotClient:
    try:
        return KrakenSpotClient.from_settings(settings)
    except KrakenError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=2)


def _dump(obj) -> None:
    if hasattr(obj, "model_dump"):
        obj = obj.model_dump(by_alias=False)
    elif isinstance(obj, dict):
        obj = {k: v.model_dump() if hasattr(v, "model_dump") else v for k, v in obj.items()}
    elif isinstance(obj, list):
        obj = [v.model_dump() if hasattr(v, "model_dump") else v for v in obj]
    print(json.loads(json.dumps(obj, default=str)))


def _run(fn, *args, **kwargs) -> None:
    try:
        _dump(fn(*args, **kwargs))
    except KrakenError as e:
        print(f"[red]{type(e).__name__}[/red]: {e}")
        raise typer.Exit(code=1)


@app.command()
def sign(
    path: str = typer.Argument(..., help="URL path, e.g. /0/private/AddOrder"),
    body: str = typer.Argument(..., help="Form-encoded body including nonce"),
    secret: Optional[str] = typer.Option(
        None, help="Base64 API secret (default: KRAKEN_API_SECRET)"
    ),
):
    """Print the API-Sign value for a request body."""
    secret = secret or settings.api_secret
    if not secret:
        print("[red]no API secret: pass --secret or set KRAKEN_API_SECRET[/red]")
        raise typer.Exit(code=1)
    try:
        key = decode_secret(secret)
        typer.echo(sign_body(path, body, key))
    except ValueError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def nonce(
    kind: str = typer.Option(settings.nonce_generator, help="Generator: millis|hf"),
    count: int = typer.Option(1, help="How many nonces to draw"),
):
    """Draw nonces from a generator (useful to check clock skew)."""
    try:
        gen = make_nonce_generator(kind)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    for _ in range(count):
        typer.echo(gen.generate())


@app.command()
def server_time():
    _run(_client().get_server_time)


@app.command()
def status():
    """Exchange system status (online, maintenance, cancel_only, post_only)."""
    _run(_client().get_system_status)


@app.command()
def ticker(pair: List[str] = typer.Argument(..., help="One or more pairs, e.g. XBTUSD")):
    _run(_client().get_ticker_information, pair)


@app.command()
def balance():
    """Account balance (needs KRAKEN_API_KEY / KRAKEN_API_SECRET)."""
    _run(_client().get_account_balance)


@app.command()
def deposit_methods(asset: str = typer.Argument(..., help="Asset, e.g. XBT")):
    _run(_client().get_deposit_methods, asset)


if __name__ == "__main__":
    app()
