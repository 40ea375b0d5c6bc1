"""run command - ensure the release tag exists locally and on the remote."""

from __future__ import annotations

from pathlib import Path

import typer

from reltag.cli.commands._helpers import exit_with_code, load_tagger_config, report_error
from reltag.cli.context import CLIContext, build_context
from reltag.core.result import Err, Ok
from reltag.output.console import Style
from reltag.tagging.model import TaggingReport
from reltag.tagging.workflow import run_tagging


def run(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (default: $RELTAG_CONFIG or ./reltag.toml)"
    ),
    remote: str | None = typer.Option(None, "--remote", help="Remote repository URL"),
    path: Path | None = typer.Option(None, "--path", help="Working copy location"),
    marker: str | None = typer.Option(None, "--marker", "-t", help="Tag to ensure, e.g. v0.1.0"),
    message: str | None = typer.Option(None, "--message", "-m", help="Tag message"),
    signer_name: str | None = typer.Option(None, "--signer-name", help="Tagger name"),
    signer_email: str | None = typer.Option(None, "--signer-email", help="Tagger email"),
    key: Path | None = typer.Option(None, "--key", help="SSH private key"),
    remote_name: str | None = typer.Option(None, "--remote-name", help="Remote to push to"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Look up the tag, change nothing"),
    exit_zero: bool | None = typer.Option(
        None,
        "--exit-zero/--no-exit-zero",
        help="Exit 0 even when the run fails (errors are still reported)",
    ),
) -> None:
    """Clone (or reuse) the repository, tag HEAD if the tag is missing, push tags."""
    ctx = build_context()

    config = load_tagger_config(
        ctx,
        config_path=config_path,
        overrides={
            "remote_url": remote,
            "local_path": path,
            "marker_name": marker,
            "marker_message": message,
            "signer_name": signer_name,
            "signer_email": signer_email,
            "key_path": key,
            "remote_name": remote_name,
            "exit_zero_on_error": exit_zero,
        },
    )

    match run_tagging(config, console=ctx.console, dry_run=dry_run):
        case Err(e):
            report_error(e, ctx)
            if config.exit_zero_on_error:
                ctx.console.print(
                    f"exit_zero_on_error set; exiting 0 instead of {int(e.exit_code)}", Style.DIM
                )
                return
            exit_with_code(int(e.exit_code))
        case Ok(report):
            _print_summary(ctx, report)


def _print_summary(ctx: CLIContext, report: TaggingReport) -> None:
    console = ctx.console
    console.header("Summary")
    console.print(f"tag: {report.marker}")
    console.print(f"working copy: {'reused' if report.obtain == 'reused' else 'cloned'}")
    if report.marker_existed:
        console.print("status: already present, nothing created or pushed")
    elif report.dry_run:
        console.print("status: missing (dry run, not created)")
    elif report.published == "up_to_date":
        console.print("status: created, remote already up to date")
    else:
        console.print("status: created and pushed")
