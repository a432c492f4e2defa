"""Pane scrollback capture.

Capturing a single pane distinguishes a missing pane (raised) from an empty
one (returned), leaving the caller to decide whether empty is a failure.
Saving a whole session is best-effort: one pane failing to capture leaves an
empty log file and does not stop the batch.
"""

import logging
from datetime import datetime
from pathlib import Path

from ntm.exceptions import MultiplexerError, PaneNotFoundError
from ntm.models import CaptureResult, CaptureStatus, Pane, SaveResult
from ntm.pane_allocator import PaneAllocator
from ntm.session_registry import SessionRegistry
from ntm.tmux_client import TmuxClient

logger = logging.getLogger(__name__)

SAVE_ALL_LINES = 10000


def safe_title(title: str) -> str:
    """Make a pane title usable in a filename (non-alphanumeric -> '_')."""
    return "".join(c if c.isascii() and c.isalnum() else "_" for c in title)


class OutputCapture:
    """Capture pane output to text or files."""

    def __init__(self, client: TmuxClient, registry: SessionRegistry, allocator: PaneAllocator):
        self.client = client
        self.registry = registry
        self.allocator = allocator

    def resolve_pane(self, session: str, pane_ref: str | int) -> Pane:
        """Find a pane by stable id (``%N``) or by index in the first window.

        Raises:
            SessionNotFoundError: If the session does not exist
            PaneNotFoundError: If no pane matches
        """
        self.registry.require(session)
        ref = str(pane_ref)

        if ref.startswith("%"):
            panes = self.client.list_panes(session)
            matches = [pane for pane in panes if pane.pane_id == ref]
        else:
            try:
                index = int(ref)
            except ValueError as e:
                raise PaneNotFoundError(session, ref) from e
            window = self.allocator.first_window(session)
            panes = self.client.list_panes(session, window.index)
            matches = [pane for pane in panes if pane.index == index]

        if not matches:
            raise PaneNotFoundError(session, ref)
        return matches[0]

    def capture_pane_id(self, pane_id: str, lines: int) -> CaptureResult:
        """Capture a pane by id without raising on tmux failure."""
        try:
            text = self.client.capture_pane(pane_id, lines)
        except MultiplexerError as e:
            logger.warning(f"Capture of {pane_id} failed: {e}")
            return CaptureResult(pane_id=pane_id, status=CaptureStatus.FAILED, error=str(e))

        status = CaptureStatus.EMPTY if not text.strip() else CaptureStatus.OK
        return CaptureResult(pane_id=pane_id, status=status, text=text)

    def capture(self, session: str, pane_ref: str | int, max_lines: int) -> CaptureResult:
        """Capture up to max_lines of a pane's scrollback.

        Returns:
            CaptureResult with status OK, EMPTY, or FAILED

        Raises:
            SessionNotFoundError: If the session does not exist
            PaneNotFoundError: If the pane does not exist
        """
        pane = self.resolve_pane(session, pane_ref)
        return self.capture_pane_id(pane.pane_id, max_lines)

    def _fresh_directory(self, output_dir: Path, session: str) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base = output_dir / f"{session}_{timestamp}"
        candidate = base
        suffix = 1
        while candidate.exists():
            candidate = base.with_name(f"{base.name}_{suffix}")
            suffix += 1
        candidate.mkdir(parents=True)
        return candidate

    def save_all(self, session: str, output_dir: Path | str, lines: int = SAVE_ALL_LINES) -> SaveResult:
        """Save every pane's scrollback to ``{index}_{safeTitle}.log``.

        Args:
            session: Session name
            output_dir: Parent directory for the timestamped save directory
            lines: Scrollback depth per pane

        Returns:
            SaveResult; attempted counts every pane, including failed captures

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        self.registry.require(session)
        save_dir = self._fresh_directory(Path(output_dir).expanduser(), session)
        result = SaveResult(session=session, directory=save_dir)

        used_names: set[str] = set()
        for pane in self.client.list_panes(session):
            name = f"{pane.index}_{safe_title(pane.title)}.log"
            if name in used_names:
                name = f"{pane.index}_{safe_title(pane.title)}_{pane.pane_id.lstrip('%')}.log"
            used_names.add(name)

            capture = self.capture_pane_id(pane.pane_id, lines)
            if capture.status == CaptureStatus.FAILED:
                result.failures.append((pane.pane_id, capture.error or "capture failed"))

            path = save_dir / name
            path.write_text(capture.text)
            result.files.append(path)

        logger.info(f"Saved {result.attempted} pane(s) to {save_dir}")
        return result


__all__ = ["SAVE_ALL_LINES", "OutputCapture", "safe_title"]
