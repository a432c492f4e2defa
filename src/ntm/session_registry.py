"""Named session registry.

Existence checks, creation, enumeration and destruction of named tmux
sessions. Destruction asks the injected InteractionHandler for confirmation
unless forced, and fails closed when nobody can answer.
"""

import logging
from pathlib import Path

from ntm.exceptions import ConfirmationRequiredError, SessionNotFoundError, UsageError
from ntm.models import DestroyResult, SessionSummary
from ntm.modules.interaction_handler import InteractionHandler
from ntm.tmux_client import TmuxClient

logger = logging.getLogger(__name__)

INVALID_NAME_CHARS = (":", ".")


def validate_session_name(name: str) -> str:
    """Validate a session name (non-empty, no ':' or '.').

    Raises:
        UsageError: If the name is invalid
    """
    if not name:
        raise UsageError("session name cannot be empty")
    if any(c in name for c in INVALID_NAME_CHARS):
        raise UsageError("session name cannot contain ':' or '.'")
    return name


class SessionRegistry:
    """Session lifecycle operations against tmux."""

    def __init__(self, client: TmuxClient, interaction: InteractionHandler):
        self.client = client
        self.interaction = interaction

    def exists(self, name: str) -> bool:
        return self.client.has_session(name)

    def require(self, name: str) -> None:
        """Raise SessionNotFoundError unless the session exists."""
        if not self.exists(name):
            raise SessionNotFoundError(name)

    def create(self, name: str, workdir: Path | str) -> SessionSummary:
        """Create a session with one window rooted at workdir (idempotent).

        Returns:
            Summary of the existing or newly created session
        """
        validate_session_name(name)

        if self.exists(name):
            logger.debug(f"Session '{name}' already exists")
        else:
            self.client.new_session(name, str(workdir))
            logger.info(f"Created session '{name}' in {workdir}")

        return self.get(name)

    def get(self, name: str) -> SessionSummary:
        """Return the summary of one session.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        for session in self.client.list_sessions():
            if session.name == name:
                return session
        raise SessionNotFoundError(name)

    def list(self) -> list[SessionSummary]:
        """List all sessions (empty list when none exist)."""
        return self.client.list_sessions()

    def destroy(self, name: str, force: bool = False) -> DestroyResult:
        """Kill a session and every process running in its panes.

        Args:
            name: Session to destroy
            force: Skip confirmation

        Returns:
            DestroyResult; destroyed is False when confirmation was declined

        Raises:
            SessionNotFoundError: If the session does not exist
            ConfirmationRequiredError: If not forced and nobody can confirm
        """
        self.require(name)
        pane_count = len(self.client.list_panes(name))

        if not force:
            if not self.interaction.is_interactive():
                raise ConfirmationRequiredError(
                    f"Refusing to kill session '{name}' without confirmation "
                    "(non-interactive shell). Use --force to skip confirmation."
                )
            if not self.interaction.confirm(
                f"Kill session '{name}' with {pane_count} pane(s)?", default=False
            ):
                logger.info(f"Kill of session '{name}' declined")
                return DestroyResult(session=name, destroyed=False, pane_count=pane_count)

        self.client.kill_session(name)
        logger.info(f"Killed session '{name}' ({pane_count} panes)")
        return DestroyResult(session=name, destroyed=True, pane_count=pane_count)


__all__ = ["SessionRegistry", "validate_session_name"]
