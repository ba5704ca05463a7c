"""Rich display helpers — status lines, run summary, plugin table."""

from __future__ import annotations

import logging

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

# ── Colour palette ───────────────────────────────────────────────────────────
THEME = Theme(
    {
        "sls.accent": "#FD5750",
        "sls.silver": "#A4B4CC",
        "sls.muted": "#5A6278",
        "sls.ok": "#3d9e5a",
        "sls.warn": "#d4a017",
        "sls.err": "#e05555",
        "sls.cmd": "bold white",
        "sls.dim": "dim #5A6278",
    }
)

console = Console(theme=THEME, highlight=False)

_HANDLER_NAME = "slstest-rich"


def setup_logging(verbose: bool = False) -> None:
    """Route the ``slstest`` loggers through rich; safe to call repeatedly."""
    logger = logging.getLogger("slstest")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return
    handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)


# ── Run results ───────────────────────────────────────────────────────────────


def print_run_result(result) -> None:
    if not result.ran:
        return
    color = "sls.ok" if result.success else "sls.err"
    icon = "✓" if result.success else "✗"

    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column(style="sls.muted", no_wrap=True, width=10)
    table.add_column()
    table.add_row("Suites", f"[sls.silver]{len(result.files)}[/sls.silver]")
    table.add_row("Passed", f"[sls.ok]{result.passed}[/sls.ok]")
    table.add_row("Failed", f"[{color}]{result.failures}[/{color}]")

    console.print(
        Panel(table, title=f"[{color}]{icon} Unit tests[/{color}]", border_style=color, padding=(0, 2), expand=False)
    )


def print_plugins(plugins: list) -> None:
    table = Table(box=box.SIMPLE, padding=(0, 2))
    table.add_column("Plugin", style="sls.accent", no_wrap=True)
    table.add_column("Command", style="sls.cmd", no_wrap=True)
    table.add_column("Lifecycle events", style="sls.silver")

    for meta in plugins:
        if not meta.commands:
            table.add_row(meta.name, "—", "")
        for command in meta.commands:
            table.add_row(meta.name, " ".join(command.path), ", ".join(command.event_names()))

    console.print(table)


# ── Utility ───────────────────────────────────────────────────────────────────


def ok(message: str) -> None:
    console.print(f"  [sls.ok]✓[/sls.ok]  {message}")


def err(message: str) -> None:
    console.print(f"  [sls.err]✗[/sls.err]  [sls.err]{message}[/sls.err]")


def info(message: str) -> None:
    console.print(f"  [sls.muted]·[/sls.muted]  [sls.silver]{message}[/sls.silver]")
