"""CLI entry point for ntm.

This module wires the command modules into the main click group and sets
up logging. All user-facing output goes through rich consoles in the
command modules; logging is for diagnostics (-v for debug output).
"""

import logging

import click

from ntm import __version__
from ntm.click_group import NtmGroup
from ntm.commands import (
    add_command,
    broadcast_command,
    config_group,
    copy_output_command,
    create_command,
    deps_command,
    interrupt_command,
    kill_command,
    list_command,
    quick_setup_command,
    reconnect_command,
    save_outputs_command,
    send_command,
    spawn_command,
    status_command,
    view_command,
    zoom_command,
)

logger = logging.getLogger(__name__)


@click.group(
    cls=NtmGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Config file path (default: ~/.ntm/config.toml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.version_option(version=__version__, prog_name="ntm")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """ntm - Named tmux manager for AI coding agents.

    Creates a tmux session per project, fills it with panes and launches
    Claude Code (cc), Codex (cod) and Gemini (gmi) agents into them.
    Agent panes are titled <session>__<type>_<n> so commands can be routed
    to them by type.

    \b
    SESSION CREATION:
        create        Create a session with N panes (cnt)
        spawn         Create a session and launch agents (sat)
        add           Add agents to an existing session (ant)
        quick-setup   Create project + git repo, then spawn (qps)

    \b
    SESSION NAVIGATION:
        reconnect     Reattach to a session (rnt)
        list          List sessions (lnt)
        status        Show panes and agent counts (snt)
        view          Unzoom, tile all panes and attach (vnt)
        zoom          Zoom to a pane or first agent of a type (znt)

    \b
    COMMANDS & OUTPUT:
        send          Send a command to panes (sct)
        broadcast     Send a prompt to all agents of a type (bp)
        interrupt     Send Ctrl+C to all agent panes (int)
        copy-output   Copy pane output to the clipboard (cpo)
        save-outputs  Save all pane outputs to files (sso)

    \b
    CLEANUP & SETUP:
        kill          Kill a session (knt)
        deps          Check agent CLI installation (cad)
        config        Show or change configuration

    \b
    EXAMPLES:
        $ ntm spawn myproject 6 6 2
        $ ntm send --cc myproject "run the tests"
        $ ntm kill -f myproject

    \b
    CONFIGURATION:
        Config file: ~/.ntm/config.toml
        PROJECTS_BASE overrides projects_base (default ~/Developer on
        macOS, /data/projects elsewhere)

    For help on any command: ntm <command> --help
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(message)s")

    obj = ctx.ensure_object(dict)
    if config_path:
        obj["config_path"] = config_path

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


main.add_command(create_command)
main.add_command(spawn_command)
main.add_command(add_command)
main.add_command(quick_setup_command)
main.add_command(reconnect_command)
main.add_command(list_command)
main.add_command(status_command)
main.add_command(view_command)
main.add_command(zoom_command)
main.add_command(send_command)
main.add_command(broadcast_command)
main.add_command(interrupt_command)
main.add_command(copy_output_command)
main.add_command(save_outputs_command)
main.add_command(kill_command)
main.add_command(deps_command)
main.add_command(config_group)


if __name__ == "__main__":
    main()
