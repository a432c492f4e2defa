"""System commands for ntm.

Commands:
    - deps: Check that the agent CLIs are installed
    - config show: Show the resolved configuration
    - config set: Persist a configuration value
"""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ntm.commands.cli_helpers import EXIT_FAILURE, get_config, handle_errors
from ntm.config_manager import ConfigManager
from ntm.modules.prerequisites import PrerequisiteChecker

logger = logging.getLogger(__name__)

__all__ = ["config_group", "deps_command"]


@click.command(name="deps")
def deps_command() -> None:
    """Check that the claude, codex and gemini CLIs are installed.

    Exits 1 and prints install commands when any of them is missing.
    """
    console = Console()
    result = PrerequisiteChecker.check_agents()

    if result.available:
        console.print(f"[green]✓ Available:[/green] {' '.join(result.available)}")

    if result.missing:
        console.print(f"[red]✗ Missing:[/red] {' '.join(result.missing)}")
        console.print()
        console.print("Install with:")
        for tool in result.missing:
            console.print(f"  {PrerequisiteChecker.AGENT_INSTALL_COMMANDS[tool]}")
        sys.exit(EXIT_FAILURE)


@click.group(name="config")
def config_group():
    """Show or change ntm configuration.

    Configuration is stored in ~/.ntm/config.toml (or the file given with
    --config). The PROJECTS_BASE environment variable overrides
    projects_base.

    \b
    Examples:
        ntm config show
        ntm config set projects_base ~/code
        ntm config set agent_commands.cc "claude"
    """
    pass


@config_group.command(name="show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    console = Console()

    with handle_errors("config show"):
        config = get_config(ctx)
        path = ConfigManager.get_config_path(ctx.ensure_object(dict).get("config_path"))

        console.print(f"[bold]Config file:[/bold] {escape(str(path))}")
        console.print()

        table = Table(show_header=True, header_style="bold")
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value")

        table.add_row("projects_base", escape(str(config.base_dir)))
        table.add_row("default_panes", str(config.default_panes))
        table.add_row("log_dir", escape(config.log_dir))
        table.add_row("copy_lines", str(config.copy_lines))
        table.add_row("tmux_timeout", str(config.tmux_timeout))
        for agent_type, command in config.agent_commands.items():
            table.add_row(f"agent_commands.{agent_type}", escape(command))

        console.print(table)


@config_group.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Persist a configuration value.

    \b
    Keys:
        projects_base, default_panes, log_dir, copy_lines, tmux_timeout,
        agent_commands.cc, agent_commands.cod, agent_commands.gmi
    """
    console = Console()

    with handle_errors("config set"):
        ConfigManager.set_value(key, value, ctx.ensure_object(dict).get("config_path"))
        console.print(f"[green]✓[/green] Set {escape(key)} = {escape(value)}")
