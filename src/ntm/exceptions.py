"""Exceptions raised by ntm operations.

Every error carries a human-readable message that the CLI prints as-is.
"""


class NtmError(Exception):
    """Base exception for ntm errors."""

    pass


class UsageError(NtmError):
    """Arguments are missing or malformed."""

    pass


class NotFoundError(NtmError):
    """A referenced session or pane does not exist."""

    pass


class SessionNotFoundError(NotFoundError):
    """Session is not registered in tmux."""

    def __init__(self, session: str):
        self.session = session
        super().__init__(f"Session '{session}' not found")


class PaneNotFoundError(NotFoundError):
    """Pane does not exist in the session."""

    def __init__(self, session: str, pane_ref: str):
        self.session = session
        self.pane_ref = pane_ref
        super().__init__(f"Pane '{pane_ref}' not found in session '{session}'")


class DependencyMissingError(NtmError):
    """The tmux binary is not available."""

    pass


class AllocationError(NtmError):
    """Unable to resolve the addressable window or pane set of a session."""

    pass


class NothingToDoError(NtmError):
    """All requested agent counts are zero."""

    pass


class EmptyCommandError(NtmError):
    """A send or broadcast was requested with empty text."""

    pass


class EmptyOutputError(NtmError):
    """A pane capture returned no content where content is required."""

    pass


class ConfirmationRequiredError(NtmError):
    """A destructive operation needs confirmation but no terminal is attached."""

    pass


class MultiplexerError(NtmError):
    """A tmux command failed or timed out."""

    pass


class ClipboardError(NtmError):
    """Clipboard delivery failed."""

    pass


class ProjectSetupError(NtmError):
    """Project directory or repository initialisation failed."""

    pass


__all__ = [
    "AllocationError",
    "ClipboardError",
    "ConfirmationRequiredError",
    "DependencyMissingError",
    "EmptyCommandError",
    "EmptyOutputError",
    "MultiplexerError",
    "NotFoundError",
    "NothingToDoError",
    "NtmError",
    "PaneNotFoundError",
    "ProjectSetupError",
    "SessionNotFoundError",
    "UsageError",
]
