"""Structured session status."""

import logging

from ntm.models import AgentType, PaneStatus, StatusReport
from ntm.session_registry import SessionRegistry
from ntm.tmux_client import TmuxClient

logger = logging.getLogger(__name__)


class SessionInspector:
    """Build status reports for sessions."""

    def __init__(self, client: TmuxClient, registry: SessionRegistry):
        self.client = client
        self.registry = registry

    def status(self, session: str) -> StatusReport:
        """Report working directory, panes and agent counts of a session.

        Agent counts are substring matches on pane titles, so a title carrying
        two markers would be counted twice.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        summary = self.registry.get(session)
        panes = self.client.list_panes(session)

        report = StatusReport(session=session, working_directory=summary.path)
        report.panes = [
            PaneStatus(
                index=pane.index,
                title=pane.title,
                current_command=pane.current_command,
                width=pane.width,
                height=pane.height,
                pane_id=pane.pane_id,
                window_index=pane.window_index,
            )
            for pane in panes
        ]
        report.agent_counts = {
            agent_type: sum(1 for pane in panes if pane.has_marker(agent_type))
            for agent_type in AgentType.ordered()
        }

        logger.debug(f"Status of '{session}': {report.pane_count} panes")
        return report


__all__ = ["SessionInspector"]
