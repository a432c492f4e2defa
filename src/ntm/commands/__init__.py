"""Command groups for ntm CLI."""

from ntm.commands.agents import (
    add_command,
    broadcast_command,
    interrupt_command,
    quick_setup_command,
    send_command,
    spawn_command,
)
from ntm.commands.output import copy_output_command, save_outputs_command
from ntm.commands.sessions import (
    create_command,
    kill_command,
    list_command,
    reconnect_command,
    status_command,
    view_command,
    zoom_command,
)
from ntm.commands.system import config_group, deps_command

__all__ = [
    "add_command",
    "broadcast_command",
    "config_group",
    "copy_output_command",
    "create_command",
    "deps_command",
    "interrupt_command",
    "kill_command",
    "list_command",
    "quick_setup_command",
    "reconnect_command",
    "save_outputs_command",
    "send_command",
    "spawn_command",
    "status_command",
    "view_command",
    "zoom_command",
]
