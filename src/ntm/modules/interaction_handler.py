"""User interaction abstraction for CLI and testing.

Operations that need a yes/no answer (killing a session, creating a missing
project directory, installing tmux) receive an ``InteractionHandler`` instead
of reading the terminal themselves, so tests can answer deterministically.

Example:
    >>> handler = CLIInteractionHandler()
    >>> if handler.confirm("Kill session 'demo' with 4 pane(s)?"):
    ...     handler.show_info("Killed session 'demo'")

    Testing example:
    >>> test_handler = MockInteractionHandler(confirm_responses=[False])
    >>> test_handler.confirm("Kill session?")
    False
"""

import sys
from typing import Protocol, runtime_checkable

import click


@runtime_checkable
class InteractionHandler(Protocol):
    """Protocol for user interaction."""

    def is_interactive(self) -> bool:
        """Whether a human can answer prompts right now."""
        ...

    def confirm(self, message: str, default: bool = False) -> bool:
        """Prompt for yes/no confirmation.

        Args:
            message: Confirmation question to display
            default: Default value if user just presses Enter

        Returns:
            True if confirmed, False otherwise
        """
        ...

    def show_warning(self, message: str) -> None:
        """Display a warning message."""
        ...

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        ...


class CLIInteractionHandler:
    """Click-based CLI interaction handler.

    Confirmation prompts only run when stdin is a terminal. Without one,
    ``confirm`` answers no, so destructive operations fail closed instead
    of blocking on input that will never arrive.
    """

    def is_interactive(self) -> bool:
        try:
            return sys.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def confirm(self, message: str, default: bool = False) -> bool:
        if not self.is_interactive():
            return False
        try:
            return click.confirm(click.style(message, fg="yellow"), default=default)
        except click.Abort:
            click.echo()
            return False

    def show_warning(self, message: str) -> None:
        click.secho(f"Warning: {message}", fg="yellow", err=True)

    def show_info(self, message: str) -> None:
        click.echo(message)


class MockInteractionHandler:
    """Mock interaction handler for testing with pre-programmed responses.

    Tracks all interactions for verification in tests.

    Example:
        >>> handler = MockInteractionHandler(confirm_responses=[True, False])
        >>> handler.confirm("Continue?")
        True
        >>> handler.confirm("Really?")
        False
        >>> len(handler.interactions)
        2
    """

    def __init__(
        self,
        confirm_responses: list[bool] | None = None,
        interactive: bool = True,
    ):
        """Initialize test handler with pre-programmed responses.

        Args:
            confirm_responses: List of boolean confirmation responses in sequence
            interactive: Value reported by is_interactive()
        """
        self.confirm_responses = confirm_responses or []
        self.interactive = interactive
        self.interactions: list[dict] = []
        self._confirm_index = 0

    def is_interactive(self) -> bool:
        return self.interactive

    def confirm(self, message: str, default: bool = False) -> bool:
        """Return next pre-programmed confirmation response.

        Raises:
            IndexError: If no more confirm responses available
        """
        if self._confirm_index >= len(self.confirm_responses):
            raise IndexError(
                f"No more confirm responses available. "
                f"Provided {len(self.confirm_responses)}, "
                f"needed {self._confirm_index + 1}"
            )

        response = self.confirm_responses[self._confirm_index]
        self._confirm_index += 1

        self.interactions.append(
            {
                "type": "confirm",
                "message": message,
                "default": default,
                "response": response,
            }
        )

        return response

    def show_warning(self, message: str) -> None:
        self.interactions.append({"type": "warning", "message": message})

    def show_info(self, message: str) -> None:
        self.interactions.append({"type": "info", "message": message})


__all__ = ["CLIInteractionHandler", "InteractionHandler", "MockInteractionHandler"]
