"""perfgate command line entry point.

Evaluates the performance reports in a workspace as a new build, compares
them with the previous build and reports whether performance regressed.

Dependencies:
    - perfgate.common.yaml_config: Threshold and parser configuration loading
    - perfgate.common.display: Console output and formatting
"""

import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.markup import escape

from perfgate.common.config import ConfigError, Settings
from perfgate.common.display import get_console, print_outcome
from perfgate.common.logging import configure_log_path
from perfgate.common.models import Outcome
from perfgate.common.yaml_config import load_publisher_config
from perfgate.evaluator.context import FileBuildStore
from perfgate.evaluator.ingestor import available_formats, build_parsers
from perfgate.evaluator.publisher import describe_thresholds, evaluate_build

app = typer.Typer()

EXIT_FAILURE = 1
EXIT_UNSTABLE = 2


@app.command()
def evaluate(
    config_path: Annotated[
        Path | None, typer.Option("--config", help="Path to the perfgate YAML configuration")
    ] = None,
    workspace: Annotated[
        Path | None, typer.Option("--workspace", help="Directory to search for report files")
    ] = None,
    builds_dir: Annotated[
        Path | None, typer.Option("--builds-dir", help="Directory holding recorded builds")
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show the configuration without recording a build"),
    ] = False,
    strict: Annotated[
        bool, typer.Option("--strict", help="Exit non-zero when the build is unstable")
    ] = False,
) -> None:
    """Evaluate performance reports as a new build."""
    console = get_console()
    settings = Settings()
    config_path = config_path or settings.config_path
    workspace = workspace or settings.workspace
    builds_dir = builds_dir or settings.builds_dir

    configure_log_path(settings.log_path)

    try:
        config = load_publisher_config(str(config_path))
        parsers = build_parsers(config.parsers)
    except (ConfigError, FileNotFoundError, ValidationError) as e:
        console.print(f"[error]Error loading configuration: {escape(str(e))}[/error]")
        sys.exit(EXIT_FAILURE)

    if not parsers:
        console.print(f"[warning]No parsers configured in {config_path}[/warning]")

    if dry_run:
        for line in describe_thresholds(config.thresholds):
            console.print(escape(line))
        for parser in parsers:
            console.print(f"[info]Would record {parser.display_name} reports[/info]")
            console.print(f"  [dim]{escape(parser.glob)}[/dim]")
        sys.exit(0)

    store = FileBuildStore(builds_dir)
    build = store.new_build(workspace)
    console.print(f"[info]Evaluating build #{build.number}[/info]")

    result = evaluate_build(
        build,
        config.thresholds,
        parsers,
        log_callback=lambda line: console.print(escape(line)),
    )

    console.print()
    print_outcome(result.outcome)
    console.print(f"  Evaluated {len(result.reports)} report(s), recorded in {build.root_dir}")

    if result.outcome is Outcome.FAILURE:
        sys.exit(EXIT_FAILURE)
    if strict and result.outcome is Outcome.UNSTABLE:
        sys.exit(EXIT_UNSTABLE)


@app.command()
def formats() -> None:
    """List the registered report formats."""
    console = get_console()
    for name in available_formats():
        console.print(name)


if __name__ == "__main__":
    app()
