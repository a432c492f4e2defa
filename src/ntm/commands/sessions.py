"""Session management commands for ntm.

Commands:
    - create: Create a session with N panes
    - reconnect: Reattach to a session (offers to create it if missing)
    - list: List tmux sessions
    - status: Show panes and agent counts of a session
    - view: Unzoom and tile all panes, then attach
    - kill: Kill a session
    - zoom: Zoom to a pane by index or agent type
"""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ntm.commands.cli_helpers import (
    EXIT_FAILURE,
    attach_unless,
    complete_sessions,
    get_orchestrator,
    handle_errors,
    validate_session,
)
from ntm.models import AgentType, SessionSummary, StatusReport

logger = logging.getLogger(__name__)

__all__ = [
    "create_command",
    "kill_command",
    "list_command",
    "reconnect_command",
    "render_sessions",
    "render_status",
    "status_command",
    "view_command",
    "zoom_command",
]

no_attach_option = click.option(
    "--no-attach", is_flag=True, help="Do not attach to the session afterwards"
)


def render_sessions(console: Console, sessions: list[SessionSummary]) -> None:
    """Print sessions as a table, or a notice when there are none."""
    if not sessions:
        console.print("No tmux sessions running")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Session", style="cyan", no_wrap=True)
    table.add_column("Windows", justify="right")
    table.add_column("Attached")
    table.add_column("Created", style="dim")
    table.add_column("Directory", style="dim")

    for session in sessions:
        table.add_row(
            escape(session.name),
            str(session.windows),
            "[green]yes[/green]" if session.attached else "no",
            session.created_time,
            escape(session.path),
        )

    console.print(table)


def render_status(console: Console, report: StatusReport) -> None:
    """Print a session status report."""
    console.print()
    console.print(f"[bold]Session:[/bold] {escape(report.session)}")
    console.print(f"[bold]Directory:[/bold] {escape(report.working_directory)}")
    console.print()

    table = Table(title="Panes", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Command")
    table.add_column("Size", justify="right", style="dim")

    for pane in report.panes:
        table.add_row(
            str(pane.index),
            escape(pane.title),
            escape(pane.current_command),
            f"{pane.width}x{pane.height}",
        )

    console.print(table)
    counts = ", ".join(f"{report.count(t)}x {t.value}" for t in AgentType.ordered())
    console.print(f"Agents: {counts}")
    console.print()


@click.command(name="create")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.argument("panes", type=click.IntRange(min=1), required=False)
@no_attach_option
@click.pass_context
def create_command(ctx: click.Context, session: str, panes: int | None, no_attach: bool) -> None:
    """Create a session with PANES panes (default 10) and attach.

    The session's working directory is <projects_base>/<session>; you are
    asked before it is created. Re-running against an existing session only
    adds missing panes.

    \b
    Examples:
        ntm create myproject
        ntm create myproject 6
    """
    console = Console()

    with handle_errors("create"):
        orchestrator = get_orchestrator(ctx)
        panes = panes or orchestrator.config.default_panes

        if orchestrator.registry.exists(session):
            console.print(f"Session '{escape(session)}' already exists")
        else:
            console.print(f"[dim]Creating session '{escape(session)}' with {panes} pane(s)...[/dim]")

        orchestrator.create_session(session, panes)
        console.print(f"[green]✓[/green] Session '{escape(session)}' ready")
        attach_unless(orchestrator, session, no_attach)


@click.command(name="reconnect")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.pass_context
def reconnect_command(ctx: click.Context, session: str) -> None:
    """Reattach to a session.

    If the session does not exist, the available sessions are listed and
    you are offered to create it with default settings.

    \b
    Examples:
        ntm reconnect myproject
    """
    console = Console()

    with handle_errors("reconnect"):
        orchestrator = get_orchestrator(ctx)

        if not orchestrator.registry.exists(session):
            console.print(f"Session '{escape(session)}' does not exist.")
            console.print()
            console.print("Available sessions:")
            render_sessions(console, orchestrator.list_sessions())
            console.print()

        orchestrator.reconnect(session)
        attach_unless(orchestrator, session, no_attach=False)


@click.command(name="list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """List all tmux sessions."""
    console = Console()

    with handle_errors("list"):
        orchestrator = get_orchestrator(ctx)
        render_sessions(console, orchestrator.list_sessions())


@click.command(name="status")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.pass_context
def status_command(ctx: click.Context, session: str) -> None:
    """Show panes, running commands and agent counts of a session.

    \b
    Examples:
        ntm status myproject
    """
    console = Console()

    with handle_errors("status"):
        orchestrator = get_orchestrator(ctx)
        render_status(console, orchestrator.status(session))


@click.command(name="view")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@no_attach_option
@click.pass_context
def view_command(ctx: click.Context, session: str, no_attach: bool) -> None:
    """Unzoom and tile all panes of a session, then attach."""
    with handle_errors("view"):
        orchestrator = get_orchestrator(ctx)
        orchestrator.view(session)
        attach_unless(orchestrator, session, no_attach)


@click.command(name="kill")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.pass_context
def kill_command(ctx: click.Context, force: bool, session: str) -> None:
    """Kill a session and every agent running in it.

    Asks for confirmation unless --force is given. Without a terminal to
    confirm on, the session is left alone unless --force is given.

    \b
    Examples:
        ntm kill myproject
        ntm kill -f myproject
    """
    console = Console()

    with handle_errors("kill"):
        orchestrator = get_orchestrator(ctx)
        result = orchestrator.kill(session, force=force)

        if not result.destroyed:
            console.print("Aborted.")
            sys.exit(EXIT_FAILURE)

        console.print(f"[green]✓[/green] Killed session '{escape(session)}'")


@click.command(name="zoom")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.argument("target")
@no_attach_option
@click.pass_context
def zoom_command(ctx: click.Context, session: str, target: str, no_attach: bool) -> None:
    """Zoom to a pane by index, or to the first pane of an agent type.

    TARGET is a pane index in the first window, or one of cc, cod, gmi.

    \b
    Examples:
        ntm zoom myproject 3
        ntm zoom myproject cc
    """
    with handle_errors("zoom"):
        orchestrator = get_orchestrator(ctx)
        orchestrator.zoom(session, target)
        attach_unless(orchestrator, session, no_attach)
