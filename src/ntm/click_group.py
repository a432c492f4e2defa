"""Custom Click group with short aliases and help display on errors.

Usage errors print the message followed by the help of the command that
failed, and exit 1 (click's own default is 2).
"""

import sys
from typing import Any, ClassVar

import click

USAGE_EXIT_CODE = 1

_USAGE_ERRORS = (
    click.exceptions.UsageError,
    click.exceptions.BadParameter,
    click.exceptions.MissingParameter,
)


def _report_usage_error(error: click.exceptions.UsageError, ctx: click.Context | None) -> None:
    click.echo(f"Error: {error.format_message()}", err=True)
    if ctx is not None:
        click.echo("", err=True)
        click.echo(ctx.get_help(), err=True)


class NtmGroup(click.Group):
    """Click group that resolves short aliases and reports usage errors with help."""

    # Short names kept from the shell functions ntm grew out of
    ALIASES: ClassVar[dict[str, str]] = {
        "cnt": "create",
        "sat": "spawn",
        "ant": "add",
        "rnt": "reconnect",
        "lnt": "list",
        "snt": "status",
        "vnt": "view",
        "sct": "send",
        "int": "interrupt",
        "knt": "kill",
        "cpo": "copy-output",
        "sso": "save-outputs",
        "znt": "zoom",
        "bp": "broadcast",
        "qps": "quick-setup",
        "cad": "deps",
    }

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Resolve a command name, falling back to the alias table."""
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command
        target = self.ALIASES.get(cmd_name)
        if target is None:
            return None
        return super().get_command(ctx, target)

    def main(self, *args: Any, **kwargs: Any) -> Any:
        """Override main to display help on usage errors raised outside invoke."""
        try:
            return super().main(*args, **kwargs)
        except _USAGE_ERRORS as e:
            _report_usage_error(e, e.ctx)
            if e.ctx is not None:
                e.ctx.exit(USAGE_EXIT_CODE)
            sys.exit(USAGE_EXIT_CODE)

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        """Parse group-level options; their usage errors also exit 1."""
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except _USAGE_ERRORS as e:
            e.exit_code = USAGE_EXIT_CODE
            raise

    def invoke(self, ctx: click.Context) -> Any:
        """Invoke the subcommand, reporting usage errors with the most specific help."""
        try:
            return super().invoke(ctx)
        except _USAGE_ERRORS as e:
            error_ctx = e.ctx or ctx
            _report_usage_error(e, error_ctx)
            error_ctx.exit(USAGE_EXIT_CODE)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        """Override to show help when the command is not found."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            # Parameter errors are reported by invoke()
            if isinstance(e, click.exceptions.MissingParameter | click.exceptions.BadParameter):
                raise
            _report_usage_error(e, ctx)
            ctx.exit(USAGE_EXIT_CODE)


# Subgroups created with @main.group() also use NtmGroup
NtmGroup.group_class = NtmGroup
