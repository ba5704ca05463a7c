"""
slstest — CLI entry point.

Usage:
  slstest create test --function hello
  slstest invoke test                              # every function with a test file
  slstest invoke test -f hello -f goodbye --stage prod --region eu-west-1
  slstest invoke test --reporter junit --reporter-options output=out/results.xml
  slstest plugins
  slstest --version

The process exit code of ``invoke test`` is the number of failed tests
(capped at 255); any configuration or I/O error exits with 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.markup import escape

from slstest.core.config import ENV_PREFIX, MAX_EXIT_CODE
from slstest.core.environment import ProcessEnvironment
from slstest.core.exceptions import Error
from slstest.core.service import ServiceConfig
from slstest.plugins import get_plugins, register_all, run_command
from slstest.plugins.base import CommandContext

from . import __version__
from .display import console, err, info, ok, print_plugins, print_run_result, setup_logging

# ── App ───────────────────────────────────────────────────────────────────────

app = typer.Typer(
    name="slstest",
    help="Scaffold and run unit tests for serverless functions",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)
create_app = typer.Typer(help="Create tests for a service function", no_args_is_help=True)
invoke_app = typer.Typer(help="Invoke tests for service functions", no_args_is_help=True)
app.add_typer(create_app, name="create")
app.add_typer(invoke_app, name="invoke")

# ── Shared options ────────────────────────────────────────────────────────────

SERVICE_PATH_OPT = typer.Option(
    Path("."), "--service-path", "-p", help="Directory holding serverless.yml", envvar=f"{ENV_PREFIX}SERVICE_PATH"
)
VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Show debug logging")


@app.callback()
def root(
    version: bool = typer.Option(False, "--version", "-V", help="Print version and exit", is_eager=True),
) -> None:
    """[bold]slstest[/bold] — unit tests for serverless functions"""
    if version:
        console.print(f"slstest [bold]v{__version__}[/bold]")
        raise typer.Exit()


# ── Subcommands ───────────────────────────────────────────────────────────────


@create_app.command("test")
def create_test(
    function: str = typer.Option(..., "--function", "-f", help="Name of the function"),
    service_path: Path = SERVICE_PATH_OPT,
    verbose: bool = VERBOSE_OPT,
) -> None:
    """Create [bold]tests/test_<function>.py[/bold] from the test template."""
    setup_logging(verbose)
    test_path = _dispatch(("create", "test"), service_path, {"function": function})
    ok(f"Created [bold]{escape(str(test_path))}[/bold]")


@invoke_app.command("test")
def invoke_test(
    function: list[str] = typer.Option(None, "--function", "-f", help="Name of the function (repeatable)"),
    reporter: str = typer.Option(None, "--reporter", "-R", help="Reporter: progress | spec | dot | min | junit"),
    reporter_options: str = typer.Option(None, "--reporter-options", "-O", help="Reporter options: k=v,flag,..."),
    stage: str = typer.Option(
        None, "--stage", "-s", help="Stage whose variables are applied", envvar=f"{ENV_PREFIX}STAGE"
    ),
    region: str = typer.Option(
        None, "--region", "-r", help="Region whose variables are applied", envvar=f"{ENV_PREFIX}REGION"
    ),
    service_path: Path = SERVICE_PATH_OPT,
    verbose: bool = VERBOSE_OPT,
) -> None:
    """
    Run the unit tests of one, several or all functions.

    Examples:
      slstest invoke test
      slstest invoke test -f hello --reporter spec
      slstest invoke test --reporter junit -O output=out/junit.xml,tb=short
    """
    setup_logging(verbose)
    options = {
        "function": function or [],
        "reporter": reporter,
        "reporter-options": reporter_options,
        "stage": stage,
        "region": region,
    }
    result = _dispatch(("invoke", "test"), service_path, options)

    print_run_result(result)
    raise typer.Exit(min(result.failures, MAX_EXIT_CODE))


@app.command()
def plugins() -> None:
    """List registered plugins with their commands and lifecycle events."""
    register_all()
    print_plugins(get_plugins())


# ── Helpers ───────────────────────────────────────────────────────────────────


def _dispatch(path: tuple[str, ...], service_path: Path, options: dict[str, Any]) -> Any:
    """Load the service, fire the command's lifecycle hooks; errors exit with 1."""
    register_all()
    try:
        service = ServiceConfig.load(service_path)
        ctx = CommandContext(service=service, options=options, environment=ProcessEnvironment())
        return run_command(path, ctx)
    except Error as exc:
        err(escape(str(exc)))
        if not service_path.exists():
            info(f"Service path [bold]{escape(str(service_path))}[/bold] does not exist")
        raise typer.Exit(1) from exc


# ── Entry ─────────────────────────────────────────────────────────────────────


def main() -> None:
    app()


if __name__ == "__main__":
    main()
