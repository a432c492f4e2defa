"""tmux command surface.

This module is the only place that talks to the tmux binary. Every query uses
a ``-F`` format with tab-separated fields, one item per line, and is parsed
into the models of ``ntm.models``.

Security:
- Arguments passed as a list (no shell=True)
- Text sent to panes with ``send-keys -l`` (no key-name interpretation)
- Timeout enforcement on every call
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from datetime import datetime

from ntm.exceptions import DependencyMissingError, MultiplexerError
from ntm.models import Pane, SessionSummary, WindowRef

logger = logging.getLogger(__name__)

FIELD_SEP = "\t"

SESSION_FORMAT = FIELD_SEP.join(
    [
        "#{session_name}",
        "#{session_windows}",
        "#{session_created}",
        "#{session_attached}",
        "#{session_path}",
    ]
)
WINDOW_FORMAT = FIELD_SEP.join(["#{window_index}", "#{window_zoomed_flag}"])
# Title goes last: it is free text and may itself contain the separator.
PANE_FORMAT = FIELD_SEP.join(
    [
        "#{pane_id}",
        "#{pane_index}",
        "#{window_index}",
        "#{pane_current_command}",
        "#{pane_width}",
        "#{pane_height}",
        "#{pane_title}",
    ]
)

# stderr fragments tmux prints when there is simply nothing to list
NO_SERVER_MARKERS = ("no server running", "no sessions", "error connecting to", "no current")


@dataclass
class TmuxResult:
    """Result from a tmux invocation."""

    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


def session_target(session: str) -> str:
    """Target a session by exact name (tmux otherwise prefix-matches)."""
    return f"={session}"


class TmuxClient:
    """Run tmux commands and parse their structured output.

    This class provides:
    - Session existence, creation, listing and destruction
    - Window and pane listing
    - Pane splitting, layout, titles, keystrokes and capture
    - Client attach/switch
    """

    def __init__(
        self,
        binary: str = "tmux",
        timeout: int = 30,
        inside_tmux: bool | None = None,
    ):
        self.binary = binary
        self.timeout = timeout
        self.inside_tmux = bool(os.environ.get("TMUX")) if inside_tmux is None else inside_tmux

    def run(self, *args: str) -> TmuxResult:
        """Execute a tmux command.

        Args:
            *args: tmux subcommand and its arguments

        Returns:
            TmuxResult object (non-zero exit codes are not raised)

        Raises:
            DependencyMissingError: If the tmux binary cannot be executed
            MultiplexerError: If the command times out
        """
        cmd = [self.binary, *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise DependencyMissingError(f"tmux not found: {self.binary}") from e
        except subprocess.TimeoutExpired as e:
            raise MultiplexerError(
                f"tmux {args[0] if args else ''} timed out after {self.timeout}s"
            ) from e

        return TmuxResult(
            args=cmd,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    def _checked(self, *args: str) -> TmuxResult:
        """Execute a tmux command and raise on non-zero exit."""
        result = self.run(*args)
        if not result.success:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise MultiplexerError(f"tmux {args[0]} failed: {detail}")
        return result

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def has_session(self, session: str) -> bool:
        return self.run("has-session", "-t", session_target(session)).success

    def new_session(self, session: str, workdir: str) -> None:
        self._checked("new-session", "-d", "-s", session, "-c", workdir)

    def kill_session(self, session: str) -> None:
        self._checked("kill-session", "-t", session_target(session))

    def list_sessions(self) -> list[SessionSummary]:
        """List all sessions on the server.

        Returns:
            List of SessionSummary objects (empty if no server is running)
        """
        result = self.run("list-sessions", "-F", SESSION_FORMAT)
        if not result.success:
            stderr = result.stderr.lower()
            if any(marker in stderr for marker in NO_SERVER_MARKERS):
                return []
            raise MultiplexerError(f"tmux list-sessions failed: {result.stderr.strip()}")
        return self.parse_sessions(result.stdout)

    @classmethod
    def parse_sessions(cls, output: str) -> list[SessionSummary]:
        """Parse list-sessions output produced with SESSION_FORMAT.

        Example line (tab separated):
            dev  3  1728554400  1  /data/projects/dev
        """
        sessions: list[SessionSummary] = []

        for fields in cls._records(output, 5):
            name, windows, created, attached, path = fields
            try:
                created_time = datetime.fromtimestamp(int(created)).isoformat()
            except ValueError:
                created_time = created
            sessions.append(
                SessionSummary(
                    name=name,
                    windows=cls._to_int(windows),
                    created_time=created_time,
                    attached=cls._to_int(attached) > 0,
                    path=path,
                )
            )

        return sessions

    # ------------------------------------------------------------------
    # Windows and panes
    # ------------------------------------------------------------------

    def list_windows(self, session: str) -> list[WindowRef]:
        result = self._checked("list-windows", "-t", session_target(session), "-F", WINDOW_FORMAT)
        return [
            WindowRef(session=session, index=self._to_int(index), zoomed=zoomed.strip() == "1")
            for index, zoomed in self._records(result.stdout, 2)
        ]

    def list_panes(self, session: str, window_index: int | None = None) -> list[Pane]:
        """List panes of one window, or of the whole session.

        Args:
            session: Session name
            window_index: Window to list; None lists every window (``-s``)

        Returns:
            Panes in the order tmux reports them
        """
        if window_index is None:
            args = ["list-panes", "-s", "-t", session_target(session)]
        else:
            args = ["list-panes", "-t", f"{session_target(session)}:{window_index}"]
        result = self._checked(*args, "-F", PANE_FORMAT)
        return self.parse_panes(result.stdout)

    @classmethod
    def parse_panes(cls, output: str) -> list[Pane]:
        """Parse list-panes output produced with PANE_FORMAT."""
        panes: list[Pane] = []

        for fields in cls._records(output, 7):
            pane_id, index, window_index, command, width, height, title = fields
            panes.append(
                Pane(
                    pane_id=pane_id,
                    index=cls._to_int(index),
                    window_index=cls._to_int(window_index),
                    title=title,
                    current_command=command,
                    width=cls._to_int(width),
                    height=cls._to_int(height),
                )
            )

        return panes

    def split_window(self, target: str, workdir: str | None = None) -> str:
        """Split a window and return the new pane's stable id."""
        args = ["split-window", "-t", target, "-P", "-F", "#{pane_id}"]
        if workdir:
            args.extend(["-c", workdir])
        result = self._checked(*args)
        return result.stdout.strip()

    def select_layout(self, target: str, layout: str = "tiled") -> None:
        self._checked("select-layout", "-t", target, layout)

    def set_pane_title(self, pane_id: str, title: str) -> None:
        self._checked("select-pane", "-t", pane_id, "-T", title)

    def select_pane(self, target: str) -> None:
        self._checked("select-pane", "-t", target)

    def toggle_zoom(self, target: str) -> None:
        self._checked("resize-pane", "-t", target, "-Z")

    # ------------------------------------------------------------------
    # Keystrokes and capture
    # ------------------------------------------------------------------

    def send_text(self, pane_id: str, text: str, enter: bool = True) -> None:
        """Type text literally into a pane, optionally followed by Enter.

        tmux splits commands on a trailing ``;`` even after ``--``, so it
        is escaped to reach the pane intact.
        """
        if text.endswith(";"):
            text = text[:-1] + "\\;"
        self._checked("send-keys", "-t", pane_id, "-l", "--", text)
        if enter:
            self._checked("send-keys", "-t", pane_id, "C-m")

    def send_interrupt(self, pane_id: str) -> None:
        self._checked("send-keys", "-t", pane_id, "C-c")

    def capture_pane(self, target: str, lines: int) -> str:
        """Capture the last ``lines`` lines of a pane's scrollback.

        Raises:
            MultiplexerError: If tmux cannot capture the pane
        """
        result = self._checked("capture-pane", "-t", target, "-p", "-S", f"-{lines}")
        return result.stdout

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    def attach(self, session: str) -> int:
        """Attach to a session, or switch to it when already inside tmux.

        Runs with the caller's terminal so the user lands in the session.

        Returns:
            tmux exit code
        """
        if self.inside_tmux:
            cmd = [self.binary, "switch-client", "-t", session_target(session)]
        else:
            cmd = [self.binary, "attach-session", "-t", session_target(session)]

        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            return subprocess.run(cmd, check=False).returncode
        except FileNotFoundError as e:
            raise DependencyMissingError(f"tmux not found: {self.binary}") from e

    # ------------------------------------------------------------------
    # Parsing helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _records(output: str, field_count: int) -> list[list[str]]:
        """Split formatted output into records, skipping malformed lines."""
        records: list[list[str]] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            fields = line.split(FIELD_SEP, field_count - 1)
            if len(fields) != field_count:
                logger.debug(f"Skipping malformed tmux record: {line!r}")
                continue
            records.append(fields)
        return records

    @staticmethod
    def _to_int(value: str) -> int:
        try:
            return int(value.strip())
        except ValueError:
            return 0


__all__ = ["TmuxClient", "TmuxResult", "session_target"]
