"""Shared helper functions for CLI commands.

Functions in this module are used across the command modules:
- argument validation callbacks and parameter types
- orchestrator construction (config resolution, tmux availability)
- uniform error reporting and exit codes
- attach handling
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import click
from click.shell_completion import CompletionItem
from rich.console import Console
from rich.markup import escape

from ntm.config_manager import ConfigManager, NtmConfig
from ntm.exceptions import NtmError, UsageError
from ntm.modules.interaction_handler import CLIInteractionHandler, InteractionHandler
from ntm.modules.tmux_installer import ensure_tmux
from ntm.orchestrator import SessionOrchestrator
from ntm.session_registry import validate_session_name

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

# Agent counts: non-negative integers
COUNT = click.IntRange(min=0)


def validate_session(ctx: click.Context, param: click.Parameter, value: str) -> str:
    """Click callback rejecting empty session names and names with ':' or '.'."""
    try:
        return validate_session_name(value)
    except UsageError as e:
        raise click.BadParameter(str(e)) from e


def complete_sessions(
    ctx: click.Context, param: click.Parameter, incomplete: str
) -> list[CompletionItem]:
    """Shell completion for session arguments: running tmux session names."""
    obj = ctx.ensure_object(dict)
    try:
        orchestrator = obj.get("orchestrator") or SessionOrchestrator.from_config(
            get_config(ctx), get_interaction(ctx)
        )
        sessions = orchestrator.list_sessions()
    except NtmError as e:
        logger.debug(f"Session completion unavailable: {e}")
        return []
    return [CompletionItem(s.name) for s in sessions if s.name.startswith(incomplete)]


def get_interaction(ctx: click.Context) -> InteractionHandler:
    obj = ctx.ensure_object(dict)
    return obj.setdefault("interaction", CLIInteractionHandler())


def get_config(ctx: click.Context) -> NtmConfig:
    """Resolve configuration once per invocation.

    Raises:
        ConfigError: If the config file cannot be loaded
    """
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        obj["config"] = ConfigManager.resolve(obj.get("config_path"))
    return obj["config"]


def get_orchestrator(ctx: click.Context) -> SessionOrchestrator:
    """Build the orchestrator for this invocation, making sure tmux is available.

    Raises:
        DependencyMissingError: If tmux is missing and could not be installed
    """
    obj = ctx.ensure_object(dict)
    if "orchestrator" not in obj:
        interaction = get_interaction(ctx)
        config = get_config(ctx)
        ensure_tmux(interaction)
        obj["orchestrator"] = SessionOrchestrator.from_config(config, interaction)
    return obj["orchestrator"]


def print_error(message: str) -> None:
    Console(stderr=True).print(f"[red]Error: {escape(message)}[/red]")


@contextmanager
def handle_errors(action: str) -> Iterator[None]:
    """Translate exceptions into the CLI's exit codes.

    NtmError exits 1 with its message, Ctrl+C exits 130, and anything
    unexpected is logged with its traceback and exits 1.
    """
    try:
        yield
    except NtmError as e:
        print_error(str(e))
        sys.exit(EXIT_FAILURE)
    except KeyboardInterrupt:
        Console(stderr=True).print("\n[yellow]Operation cancelled[/yellow]")
        sys.exit(EXIT_INTERRUPTED)
    except (click.exceptions.Exit, click.exceptions.Abort, click.ClickException):
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception(f"{action} failed")
        sys.exit(EXIT_FAILURE)


def attach_unless(orchestrator: SessionOrchestrator, session: str, no_attach: bool) -> None:
    """Attach to (or switch to) the session unless --no-attach was given."""
    if no_attach:
        return
    code = orchestrator.attach(session)
    if code != 0:
        logger.warning(f"tmux attach to '{session}' exited with code {code}")


__all__ = [
    "COUNT",
    "EXIT_FAILURE",
    "EXIT_INTERRUPTED",
    "attach_unless",
    "complete_sessions",
    "get_config",
    "get_interaction",
    "get_orchestrator",
    "handle_errors",
    "print_error",
    "validate_session",
]
