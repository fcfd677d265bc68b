from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import logging

import typer

from .bootstrap import build_app
from .config_loader import ConfigError, redacted_view
from .core.errors import ToolkitError
from .hashing.digest import digest as compute_digest, random_token
from .net.retry import OPS, NetworkFailure, is_retryable
from .secrets.secret import dump_json, dump_yaml
from .utils.membership import contains, contains_all, contains_any, key_path as join_key_path

app = typer.Typer(add_completion=False)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _fail(e: Exception) -> None:
    typer.echo(f"error: {e}", err=True)
    raise typer.Exit(code=1)


@app.command()
def digest(
    text: str,
    algorithm: str = typer.Option(..., "--algorithm", "-a", help="md5, sha1, sha256, sha512 or fnv64a"),
):
    """Print the hex digest of TEXT."""
    try:
        typer.echo(compute_digest(text, algorithm))
    except ToolkitError as e:
        _fail(e)


@app.command()
def token():
    """Print a random 32-char hex token."""
    try:
        typer.echo(random_token())
    except ToolkitError as e:
        _fail(e)


@app.command()
def retryable(
    timeout: bool = typer.Option(False, "--timeout", help="The operation timed out."),
    op: Optional[str] = typer.Option(None, "--op", help="dial, read, write or other"),
    code: Optional[str] = typer.Option(None, "--code", help="errno name, e.g. ECONNREFUSED"),
):
    """Print whether a failure with this shape is safe to retry."""
    if op and not contains(OPS, op.lower()):
        _fail(ValueError(f"Unknown op '{op}'. Allowed: {list(OPS)}"))
    failure = NetworkFailure(
        timeout=timeout,
        op=op.lower() if op else None,
        code=code.upper() if code else None,
    )
    typer.echo("true" if is_retryable(failure) else "false")


@app.command("show-config")
def show_config(
    config: Path = typer.Option(Path("config/default.yaml"), "--config", "-c"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of YAML."),
):
    """Print the effective config with secrets redacted."""
    try:
        ctx = build_app(config)
    except (ConfigError, FileNotFoundError) as e:
        _fail(e)
        return
    view = redacted_view(ctx["cfg"])
    if as_json:
        typer.echo(dump_json(view, indent=2))
    else:
        typer.echo(dump_yaml(view), nl=False)


@app.command()
def find(
    values: List[str],
    among: str = typer.Option(..., "--in", help="Comma-separated set to search, e.g. n1,n2,n3"),
    op: str = typer.Option("or", "--op", help="'or': any value present, 'and': all present"),
):
    """Print whether VALUES are in the --in set."""
    items = [s.strip() for s in among.split(",") if s.strip()]
    mode = op.lower()
    if not contains(("or", "and"), mode):
        _fail(ValueError(f"Unknown operator '{op}' (expected 'or' or 'and')."))
    if len(values) == 1:
        found = contains(items, values[0])
    elif mode == "or":
        found = contains_any(items, values)
    else:
        found = contains_all(items, values)
    typer.echo("true" if found else "false")


@app.command("key-path")
def key_path(keys: List[str]):
    """Print the store key path built from KEYS."""
    typer.echo(join_key_path(*keys))
