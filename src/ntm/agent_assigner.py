"""Agent-to-pane assignment.

Assignment order is fixed: every cc slot is filled before any cod slot, and
every cod slot before any gmi slot. Panes are addressed by their stable id
once chosen, so tmux renumbering cannot redirect a title or launch command.
"""

import logging
import shlex
from pathlib import Path

from ntm.config_manager import NtmConfig
from ntm.exceptions import AllocationError, NothingToDoError
from ntm.models import AgentCounts, AgentTag, AgentType, WindowRef
from ntm.pane_allocator import PaneAllocator
from ntm.session_registry import SessionRegistry
from ntm.tmux_client import TmuxClient

logger = logging.getLogger(__name__)

Assignment = tuple[str, AgentTag]


class AgentAssigner:
    """Tag panes with agent labels and launch agents into them."""

    def __init__(
        self,
        client: TmuxClient,
        allocator: PaneAllocator,
        registry: SessionRegistry,
        config: NtmConfig,
    ):
        self.client = client
        self.allocator = allocator
        self.registry = registry
        self.config = config

    def launch_command(self, agent_type: AgentType, workdir: Path | str) -> str:
        """Shell command that starts an agent in its project directory."""
        return f"cd {shlex.quote(str(workdir))} && {self.config.agent_command(agent_type.value)}"

    def _launch(self, pane_id: str, tag: AgentTag, workdir: Path | str) -> None:
        self.client.set_pane_title(pane_id, tag.to_title())
        self.client.send_text(pane_id, self.launch_command(tag.agent_type, workdir))
        logger.debug(f"Launched {tag} in {pane_id}")

    def assign(
        self,
        window: WindowRef,
        counts: AgentCounts,
        workdir: Path | str,
        reserved_slots: int = 1,
    ) -> list[Assignment]:
        """Fill a window with agents.

        Grows the window to reserved_slots + total panes, keeps the first
        reserved_slots panes (by index) untagged for the user, and tags the
        rest in index order: cc_1..cc_n, cod_1..cod_n, gmi_1..gmi_n.

        Args:
            window: Window to fill
            counts: Requested agents per type
            workdir: Project directory the agents start in
            reserved_slots: Leading panes left for the user

        Returns:
            List of (pane_id, tag) in assignment order

        Raises:
            NothingToDoError: If all counts are zero
            AllocationError: If the window has fewer panes than needed
        """
        if counts.is_empty:
            raise NothingToDoError("nothing to spawn (all counts are zero)")

        self.allocator.reconcile(window, reserved_slots + counts.total, str(workdir))

        panes = sorted(self.client.list_panes(window.session, window.index), key=lambda p: p.index)
        slots = [pane.pane_id for pane in panes[reserved_slots:]]
        if len(slots) < counts.total:
            raise AllocationError(
                f"expected at least {counts.total} agent panes in {window.target}, "
                f"found {len(slots)}"
            )

        assignments: list[Assignment] = []
        slot_iter = iter(slots)
        for agent_type, count in counts.items():
            for ordinal in range(1, count + 1):
                pane_id = next(slot_iter)
                tag = AgentTag(session=window.session, agent_type=agent_type, ordinal=ordinal)
                self._launch(pane_id, tag, workdir)
                assignments.append((pane_id, tag))

        logger.info(f"Launched {len(assignments)} agent(s) in '{window.session}'")
        return assignments

    def next_added_ordinals(self, session: str) -> dict[AgentType, int]:
        """Highest ``_added_`` ordinal per type currently present in the session."""
        highest = {agent_type: 0 for agent_type in AgentType.ordered()}
        for pane in self.client.list_panes(session):
            tag = pane.tag
            if tag is not None and tag.added and tag.session == session:
                highest[tag.agent_type] = max(highest[tag.agent_type], tag.ordinal)
        return highest

    def add(self, window: WindowRef, counts: AgentCounts, workdir: Path | str) -> list[Assignment]:
        """Append new agent panes to an existing session.

        Creates exactly one new pane per agent and never relabels existing
        panes. Added tags continue after the highest existing ``_added_``
        ordinal of their type.

        Raises:
            SessionNotFoundError: If the session does not exist
            NothingToDoError: If all counts are zero
        """
        self.registry.require(window.session)
        if counts.is_empty:
            raise NothingToDoError("nothing to add (all counts are zero)")

        offsets = self.next_added_ordinals(window.session)
        assignments: list[Assignment] = []

        for agent_type, count in counts.items():
            for i in range(1, count + 1):
                pane_id = self.allocator.split(window, str(workdir))
                tag = AgentTag(
                    session=window.session,
                    agent_type=agent_type,
                    ordinal=offsets[agent_type] + i,
                    added=True,
                )
                self._launch(pane_id, tag, workdir)
                assignments.append((pane_id, tag))

        logger.info(f"Added {len(assignments)} agent(s) to '{window.session}'")
        return assignments


__all__ = ["AgentAssigner", "Assignment"]
