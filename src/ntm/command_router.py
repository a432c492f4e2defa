"""Route text and interrupts to panes by tag.

Panes are listed across every window of the session in the order tmux
reports them. A filter keeps panes whose title contains ``__<type>``;
skip-first drops the first listed pane (the user pane by convention).
Matching zero panes is a normal outcome, reported through SendResult.
"""

import logging

from ntm.exceptions import EmptyCommandError, UsageError
from ntm.models import AgentType, Pane, SendResult
from ntm.session_registry import SessionRegistry
from ntm.tmux_client import TmuxClient

logger = logging.getLogger(__name__)

BROADCAST_ALL = "all"


def parse_agent_type(value: str) -> AgentType:
    """Parse 'cc', 'cod' or 'gmi'.

    Raises:
        UsageError: For any other value
    """
    try:
        return AgentType(value)
    except ValueError as e:
        raise UsageError("agent type must be cc, cod, or gmi") from e


class CommandRouter:
    """Deliver commands and interrupts to matching panes."""

    def __init__(self, client: TmuxClient, registry: SessionRegistry):
        self.client = client
        self.registry = registry

    def select_panes(
        self,
        session: str,
        tag_filter: AgentType | None = None,
        skip_first: bool = False,
    ) -> list[Pane]:
        """Apply skip-first and tag filters to the session's panes."""
        panes = self.client.list_panes(session)
        if skip_first:
            panes = panes[1:]
        if tag_filter is not None:
            panes = [pane for pane in panes if pane.has_marker(tag_filter)]
        return panes

    def send(
        self,
        session: str,
        command_text: str,
        tag_filter: AgentType | None = None,
        skip_first: bool = False,
    ) -> SendResult:
        """Type a command followed by Enter into every matching pane.

        Raises:
            SessionNotFoundError: If the session does not exist
            EmptyCommandError: If command_text is empty
        """
        self.registry.require(session)
        if not command_text:
            raise EmptyCommandError("no command specified")

        result = SendResult(session=session)
        for pane in self.select_panes(session, tag_filter, skip_first):
            self.client.send_text(pane.pane_id, command_text)
            result.pane_ids.append(pane.pane_id)

        logger.info(f"Sent command to {result.matched} pane(s) in '{session}'")
        return result

    def broadcast(self, session: str, target: str, prompt: str) -> SendResult:
        """Send the same prompt to every agent of a type, or to all non-user panes.

        Args:
            session: Session name
            target: 'cc', 'cod', 'gmi' or 'all'
            prompt: Text to send
        """
        if target == BROADCAST_ALL:
            return self.send(session, prompt, tag_filter=None, skip_first=True)
        try:
            agent_type = AgentType(target)
        except ValueError as e:
            raise UsageError("agent type must be cc, cod, gmi, or all") from e
        return self.send(session, prompt, tag_filter=agent_type, skip_first=False)

    def interrupt(self, session: str) -> SendResult:
        """Send Ctrl+C to every agent-tagged pane."""
        self.registry.require(session)

        result = SendResult(session=session)
        for pane in self.client.list_panes(session):
            if pane.is_agent():
                self.client.send_interrupt(pane.pane_id)
                result.pane_ids.append(pane.pane_id)

        logger.info(f"Sent Ctrl+C to {result.matched} agent pane(s) in '{session}'")
        return result


__all__ = ["BROADCAST_ALL", "CommandRouter", "parse_agent_type"]
