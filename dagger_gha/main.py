import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from dagger_gha.cli import CLI, StandardCLI
from dagger_gha.globals.cli_config import CLIConfig
from dagger_gha.loader import DEFAULT_DEFINITION_FILE

app = typer.Typer(help="Generate GitHub Actions workflows from Dagger pipelines.")

PUBLIC_TOKEN_ENV = "DAGGER_CLOUD_PUBLIC_TOKEN"


def settings_overrides(
    runner: Optional[str] = None,
    dagger_version: Optional[str] = None,
    public_token: Optional[str] = None,
    no_traces: Optional[bool] = None,
    stop_engine: Optional[bool] = None,
    as_json: Optional[bool] = None,
) -> Dict[str, Any]:
    """Settings fields given on the command line or in the environment."""
    overrides = {
        "runner": runner,
        "dagger_version": dagger_version,
        "public_token": public_token or os.getenv(PUBLIC_TOKEN_ENV),
        "no_traces": no_traces,
        "stop_engine": stop_engine,
        "as_json": as_json,
    }
    return {key: value for key, value in overrides.items() if value is not None}


@app.callback()
def main(
    ctx: typer.Context,
    file: Path = typer.Option(
        Path(DEFAULT_DEFINITION_FILE), "--file", "-f", help="Pipeline definition file"
    ),
    runner: Optional[str] = typer.Option(None, help="Default runner for all workflows"),
    dagger_version: Optional[str] = typer.Option(
        None, help="Dagger version to run in the workflows"
    ),
    public_token: Optional[str] = typer.Option(
        None,
        help="Public Dagger Cloud token, for open-source projects. "
        "DO NOT PASS YOUR PRIVATE DAGGER CLOUD TOKEN!",
    ),
    no_traces: Optional[bool] = typer.Option(
        None, "--no-traces/--traces", help="Disable sending traces to Dagger Cloud"
    ),
    stop_engine: Optional[bool] = typer.Option(
        None, "--stop-engine/--keep-engine", help="Stop the Dagger Engine after the pipeline"
    ),
    as_json: Optional[bool] = typer.Option(
        None, "--as-json/--as-yaml", help="Encode generated files as JSON"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Main CLI entry point for dagger-gha.

    Reads the pipelines to run on each GitHub event from a definition file,
    then checks them or generates the matching workflow files.

    Environment Variables:
        DAGGER_CLOUD_PUBLIC_TOKEN: Public Dagger Cloud token, if --public-token
            isn't given.

    Examples:
        Check all pipelines:
            $ dagger-gha check

        Generate workflows:
            $ dagger-gha config --output-dir .github/workflows
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {
        "file": file,
        "overrides": settings_overrides(
            runner, dagger_version, public_token, no_traces, stop_engine, as_json
        ),
    }


@app.command()
def check(
    ctx: typer.Context,
    repo: Path = typer.Option(Path("."), help="Repository to check the pipelines against"),
    timeout: Optional[float] = typer.Option(None, help="Seconds before each check is aborted"),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Checks to run at once"),
):
    """Dry-run every pipeline in a container to catch invalid commands early."""
    config = CLIConfig(
        definition_file=ctx.obj["file"],
        repo=repo,
        timeout=timeout,
        jobs=jobs,
        settings_overrides=ctx.obj["overrides"],
    )
    cli: CLI = StandardCLI(config)
    sys.exit(cli.check())


@app.command()
def config(
    ctx: typer.Context,
    output_dir: Path = typer.Option(
        Path(".github/workflows"), help="Directory receiving the workflow files"
    ),
    prefix: str = typer.Option("", help="Prefix to use for generated workflow filenames"),
):
    """Generate one workflow file per configured trigger."""
    cli_config = CLIConfig(
        definition_file=ctx.obj["file"],
        output_dir=output_dir,
        prefix=prefix,
        settings_overrides=ctx.obj["overrides"],
    )
    cli: CLI = StandardCLI(cli_config)
    sys.exit(cli.config())
