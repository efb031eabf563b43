"""Click CLI entry point for cdktf-checkpoint."""
from __future__ import annotations

import json
import logging

import click
from rich.console import Console
from rich.table import Table

from cdktf_checkpoint import __version__
from cdktf_checkpoint.config import PRODUCT, CheckpointSettings, is_disabled
from cdktf_checkpoint.log import configure_logging
from cdktf_checkpoint.telemetry import send_telemetry
from cdktf_checkpoint.telemetry.ci import detect_ci
from cdktf_checkpoint.telemetry.identity import (
    PROJECT_ID_KEY, USER_ID_KEY, project_id_path, read_identifier, user_id_path,
)
from cdktf_checkpoint.telemetry.transport import telemetry_url

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="cdktf-checkpoint")
def cli() -> None:
    """cdktf-checkpoint - anonymous usage telemetry for CDK for Terraform."""
    pass


@cli.command()
@click.argument("command")
@click.option("--payload", "payload_json", default="{}",
              help="JSON object sent as the report payload")
@click.option("--language", default=None,
              help="Project language (overrides payload.language)")
@click.option("--project-dir", type=click.Path(file_okay=False), default=None,
              help="Directory holding cdktf.json (default: current directory)")
@click.option("--verbose", is_flag=True, help="Log the outcome of the report")
def send(command: str, payload_json: str, language: str | None,
         project_dir: str | None, verbose: bool) -> None:
    """Report one invocation of COMMAND to the checkpoint service."""
    configure_logging(verbose)

    try:
        payload = json.loads(payload_json)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--payload") from e
    if not isinstance(payload, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--payload")
    if language:
        payload["language"] = language

    result = send_telemetry(command, payload, project_dir=project_dir)
    if result.skipped:
        logger.info("Telemetry disabled, nothing sent")
    elif result.delivered:
        logger.info("Telemetry sent for %s", command)


@cli.command()
@click.option("--project-dir", type=click.Path(file_okay=False), default=None,
              help="Directory holding cdktf.json (default: current directory)")
def status(project_dir: str | None) -> None:
    """Show telemetry state and the stored anonymous identifiers."""
    console = Console()
    settings = CheckpointSettings.from_env()
    ci = detect_ci()

    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Telemetry", "[red]disabled[/red]" if is_disabled() else "[green]enabled[/green]")
    table.add_row("Endpoint", telemetry_url(PRODUCT, settings.base_url))
    table.add_row("CI", ci or "[dim]not detected[/dim]")

    user_path = user_id_path()
    user_id = read_identifier(user_path, USER_ID_KEY)
    table.add_row("User ID", user_id or "[dim]none[/dim]")
    table.add_row("User file", user_path)

    project_path = project_id_path(project_dir)
    project_id = read_identifier(project_path, PROJECT_ID_KEY)
    table.add_row("Project ID", project_id or "[dim]none[/dim]")
    table.add_row("Project file", project_path)

    console.print(table)
    if ci:
        console.print("  [dim]User ID is not reported inside CI.[/dim]")


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
