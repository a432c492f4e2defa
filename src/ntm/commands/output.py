"""Output capture commands for ntm.

Commands:
    - copy-output: Copy a pane's scrollback to the clipboard
    - save-outputs: Save every pane's scrollback to timestamped files
"""

import logging

import click
from rich.console import Console
from rich.markup import escape

from ntm.commands.cli_helpers import (
    complete_sessions,
    get_orchestrator,
    handle_errors,
    validate_session,
)

logger = logging.getLogger(__name__)

__all__ = ["copy_output_command", "save_outputs_command"]


@click.command(name="copy-output")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.argument("pane", default="0")
@click.argument("lines", type=click.IntRange(min=1), required=False)
@click.pass_context
def copy_output_command(ctx: click.Context, session: str, pane: str, lines: int | None) -> None:
    """Copy the last LINES lines (default 500) of a pane to the clipboard.

    PANE is a pane index in the first window (default 0) or a pane id
    such as %3. An empty pane is an error.

    \b
    Examples:
        ntm copy-output myproject
        ntm copy-output myproject 2 1000
    """
    console = Console()

    with handle_errors("copy-output"):
        orchestrator = get_orchestrator(ctx)
        lines = lines or orchestrator.config.copy_lines
        orchestrator.copy_output(session, pane, lines)
        console.print(f"Copied {lines} lines from pane {escape(pane)} to clipboard")


@click.command(name="save-outputs")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.argument("output_dir", type=click.Path(file_okay=False), required=False)
@click.pass_context
def save_outputs_command(ctx: click.Context, session: str, output_dir: str | None) -> None:
    """Save the scrollback of every pane to timestamped log files.

    Files are written to OUTPUT_DIR/<session>_<timestamp>/ (default
    ~/tmux-logs). A pane that cannot be captured gets an empty file and a
    warning; the other panes are still saved.

    \b
    Examples:
        ntm save-outputs myproject
        ntm save-outputs myproject ~/logs
    """
    console = Console()

    with handle_errors("save-outputs"):
        orchestrator = get_orchestrator(ctx)
        result = orchestrator.save_outputs(session, output_dir)

        for pane_id, error in result.failures:
            console.print(f"[yellow]Warning: could not capture {pane_id}: {escape(error)}[/yellow]")

        directory = escape(str(result.directory))
        console.print(
            f"[green]✓[/green] Saved {result.attempted} pane(s) to [cyan]{directory}[/cyan]"
        )
