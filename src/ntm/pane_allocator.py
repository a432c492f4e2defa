"""Pane allocation within a session's first window.

Pane counts only ever grow here. ``reconcile`` reads the current count and
splits until the requested minimum is reached, re-tiling after each split.

The read-then-split sequence is not atomic: two invocations reconciling the
same session at once can both observe the old count and overshoot.
"""

import logging

from ntm.exceptions import AllocationError
from ntm.models import WindowRef
from ntm.tmux_client import TmuxClient

logger = logging.getLogger(__name__)


class PaneAllocator:
    """Resolve the addressable window and grow its pane count."""

    LAYOUT = "tiled"

    def __init__(self, client: TmuxClient):
        self.client = client

    def first_window(self, session: str) -> WindowRef:
        """Return the window with the lowest index.

        The minimum index depends on the tmux base-index setting, so it is
        looked up rather than assumed to be 0.

        Raises:
            AllocationError: If the session has no windows
        """
        windows = self.client.list_windows(session)
        if not windows:
            raise AllocationError(f"could not determine first window for session '{session}'")
        return min(windows, key=lambda w: w.index)

    def pane_count(self, window: WindowRef) -> int:
        return len(self.client.list_panes(window.session, window.index))

    def split(self, window: WindowRef, workdir: str | None = None) -> str:
        """Add one pane to the window and re-tile.

        Returns:
            Stable id of the new pane
        """
        pane_id = self.client.split_window(window.target, workdir)
        self.client.select_layout(window.target, self.LAYOUT)
        logger.debug(f"Split {window.target} -> {pane_id}")
        return pane_id

    def reconcile(self, window: WindowRef, desired_minimum: int, workdir: str | None = None) -> int:
        """Grow the window to at least desired_minimum panes.

        Args:
            window: Window to grow
            desired_minimum: Minimum number of panes wanted
            workdir: Working directory for new panes

        Returns:
            Pane count after reconciliation (never less than before)
        """
        existing = self.pane_count(window)
        if existing >= desired_minimum:
            logger.debug(f"{window.target} already has {existing} panes (>= {desired_minimum})")
            return existing

        to_add = desired_minimum - existing
        logger.info(f"Creating {to_add} pane(s) ({existing} -> {desired_minimum})")
        for _ in range(to_add):
            self.split(window, workdir)

        return self.pane_count(window)


__all__ = ["PaneAllocator"]
