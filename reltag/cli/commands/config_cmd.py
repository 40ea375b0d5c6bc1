"""config command - print the resolved configuration."""

from __future__ import annotations

from pathlib import Path

import typer

from reltag.cli.commands._helpers import load_tagger_config
from reltag.cli.context import build_context


def show_config(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (default: $RELTAG_CONFIG or ./reltag.toml)"
    ),
    remote: str | None = typer.Option(None, "--remote", help="Remote repository URL"),
    path: Path | None = typer.Option(None, "--path", help="Working copy location"),
    marker: str | None = typer.Option(None, "--marker", "-t", help="Tag to ensure"),
    signer_name: str | None = typer.Option(None, "--signer-name", help="Tagger name"),
    signer_email: str | None = typer.Option(None, "--signer-email", help="Tagger email"),
    key: Path | None = typer.Option(None, "--key", help="SSH private key"),
) -> None:
    """Show the configuration a run would use, after defaults and overrides."""
    ctx = build_context()
    config = load_tagger_config(
        ctx,
        config_path=config_path,
        overrides={
            "remote_url": remote,
            "local_path": path,
            "marker_name": marker,
            "signer_name": signer_name,
            "signer_email": signer_email,
            "key_path": key,
        },
    )

    rows = [
        ("remote", f"{config.remote_name} {config.remote_url}"),
        ("path", str(config.local_path)),
        ("tag", config.marker_name),
        ("message", config.marker_message),
        ("signer", f"{config.signer_name} <{config.signer_email}>"),
        ("key", f"{config.key_path} (as {config.principal})"),
        ("exit_zero_on_error", str(config.exit_zero_on_error).lower()),
    ]
    for label, value in rows:
        ctx.console.print(f"{label}: {value}")
