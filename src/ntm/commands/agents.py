"""Agent commands for ntm.

Commands:
    - spawn: Create a session and launch agents into it
    - add: Add agents to an existing session
    - quick-setup: Create a project with git, then spawn agents
    - send: Send a command to panes
    - broadcast: Send a prompt to every agent of a type
    - interrupt: Send Ctrl+C to every agent pane
"""

import logging

import click
from rich.console import Console
from rich.markup import escape

from ntm.agent_assigner import Assignment
from ntm.command_router import BROADCAST_ALL
from ntm.commands.cli_helpers import (
    COUNT,
    attach_unless,
    complete_sessions,
    get_orchestrator,
    handle_errors,
    validate_session,
)
from ntm.models import AgentCounts, AgentType, SendResult

logger = logging.getLogger(__name__)

__all__ = [
    "add_command",
    "broadcast_command",
    "interrupt_command",
    "quick_setup_command",
    "send_command",
    "spawn_command",
]

no_attach_option = click.option(
    "--no-attach", is_flag=True, help="Do not attach to the session afterwards"
)

# Everything after the session name belongs to the command text
PASSTHROUGH_SETTINGS = {"allow_interspersed_args": False}

AGENT_TYPES = [agent_type.value for agent_type in AgentType.ordered()]


def _print_assignments(console: Console, assignments: list[Assignment], verb: str) -> None:
    for pane_id, tag in assignments:
        console.print(f"[dim]  {pane_id}  {escape(tag.to_title())}[/dim]")
    console.print(f"[green]✓[/green] {verb} {len(assignments)} agent(s)")


def _print_send_result(console: Console, result: SendResult, what: str) -> None:
    if result.no_match:
        console.print("[yellow]No matching panes found[/yellow]")
    else:
        console.print(
            f"Sent {what} to {result.matched} pane(s) in session '{escape(result.session)}'"
        )


@click.command(name="spawn")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.argument("cc", type=COUNT)
@click.argument("cod", type=COUNT)
@click.argument("gmi", type=COUNT, default=0)
@no_attach_option
@click.pass_context
def spawn_command(
    ctx: click.Context, session: str, cc: int, cod: int, gmi: int, no_attach: bool
) -> None:
    """Create a session and launch CC Claude, COD Codex and GMI Gemini agents.

    The first pane is left for you; agents fill the panes after it, all
    Claude agents first, then Codex, then Gemini. Each agent pane is titled
    <session>__<type>_<n>.

    \b
    Examples:
        ntm spawn myproject 6 6 2
        ntm spawn myproject 3 0
    """
    console = Console()
    counts = AgentCounts(cc=cc, cod=cod, gmi=gmi)

    with handle_errors("spawn"):
        orchestrator = get_orchestrator(ctx)
        console.print(f"[dim]Launching agents: {counts.describe()}...[/dim]")
        assignments = orchestrator.spawn(session, counts)
        _print_assignments(console, assignments, "Launched")
        attach_unless(orchestrator, session, no_attach)


@click.command(name="add")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.argument("cc", type=COUNT)
@click.argument("cod", type=COUNT)
@click.argument("gmi", type=COUNT, default=0)
@click.pass_context
def add_command(ctx: click.Context, session: str, cc: int, cod: int, gmi: int) -> None:
    """Add agents to an existing session.

    One new pane is created per agent; existing panes are never relabelled.

    \b
    Examples:
        ntm add myproject 2 0
        ntm add myproject 0 1 1
    """
    console = Console()
    counts = AgentCounts(cc=cc, cod=cod, gmi=gmi)

    with handle_errors("add"):
        orchestrator = get_orchestrator(ctx)
        console.print(
            f"[dim]Adding {counts.total} agent(s) to session '{escape(session)}'...[/dim]"
        )
        assignments = orchestrator.add_agents(session, counts)
        _print_assignments(console, assignments, "Added")


@click.command(name="quick-setup")
@click.argument("project", callback=validate_session)
@click.argument("cc", type=COUNT, default=2)
@click.argument("cod", type=COUNT, default=2)
@click.argument("gmi", type=COUNT, default=0)
@no_attach_option
@click.pass_context
def quick_setup_command(
    ctx: click.Context, project: str, cc: int, cod: int, gmi: int, no_attach: bool
) -> None:
    """Create a project directory with a git repository, then spawn agents.

    An existing project directory is used as-is.

    \b
    Examples:
        ntm quick-setup newproject
        ntm quick-setup newproject 3 3 1
    """
    console = Console()
    counts = AgentCounts(cc=cc, cod=cod, gmi=gmi)

    with handle_errors("quick-setup"):
        orchestrator = get_orchestrator(ctx)
        assignments = orchestrator.quick_setup(project, counts)
        _print_assignments(console, assignments, "Launched")
        attach_unless(orchestrator, project, no_attach)


@click.command(name="send", context_settings=PASSTHROUGH_SETTINGS)
@click.option("--skip-first", "-s", is_flag=True, help="Skip the first (user) pane")
@click.option("--cc", "agent_filter", flag_value="cc", help="Send only to Claude (cc) panes")
@click.option("--cod", "agent_filter", flag_value="cod", help="Send only to Codex (cod) panes")
@click.option("--gmi", "agent_filter", flag_value="gmi", help="Send only to Gemini (gmi) panes")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def send_command(
    ctx: click.Context,
    skip_first: bool,
    agent_filter: str | None,
    session: str,
    command: tuple[str, ...],
) -> None:
    """Send COMMAND followed by Enter to the panes of a session.

    Options must come before the session name; everything after it is
    sent as the command.

    \b
    Examples:
        ntm send -s myproject git status
        ntm send --cc myproject /exit
    """
    console = Console()
    tag_filter = AgentType(agent_filter) if agent_filter else None

    with handle_errors("send"):
        orchestrator = get_orchestrator(ctx)
        result = orchestrator.send(
            session, " ".join(command), tag_filter=tag_filter, skip_first=skip_first
        )
        _print_send_result(console, result, "command")


@click.command(name="broadcast", context_settings=PASSTHROUGH_SETTINGS)
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.argument("target", type=click.Choice([*AGENT_TYPES, BROADCAST_ALL]))
@click.argument("prompt", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def broadcast_command(
    ctx: click.Context, session: str, target: str, prompt: tuple[str, ...]
) -> None:
    """Send the same PROMPT to every agent of a type.

    TARGET is cc, cod or gmi, or 'all' for every pane except the first.

    \b
    Examples:
        ntm broadcast myproject cc "run the tests and fix failures"
        ntm broadcast myproject all "commit your work"
    """
    console = Console()

    with handle_errors("broadcast"):
        orchestrator = get_orchestrator(ctx)
        result = orchestrator.broadcast(session, target, " ".join(prompt))
        _print_send_result(console, result, "prompt")


@click.command(name="interrupt")
@click.argument("session", callback=validate_session, shell_complete=complete_sessions)
@click.pass_context
def interrupt_command(ctx: click.Context, session: str) -> None:
    """Send Ctrl+C to every agent pane of a session."""
    console = Console()

    with handle_errors("interrupt"):
        orchestrator = get_orchestrator(ctx)
        result = orchestrator.interrupt(session)
        console.print(f"Sent Ctrl+C to {result.matched} agent pane(s)")
