"""Session orchestration.

SessionOrchestrator wires the tmux client, registry, allocator, assigner,
router, capture and inspector together for the CLI flows. Every
operation receives the resolved NtmConfig; nothing here reads the
environment.

Example:
    >>> config = ConfigManager.resolve()
    >>> orchestrator = SessionOrchestrator.from_config(config, CLIInteractionHandler())
    >>> orchestrator.spawn("myproject", AgentCounts(cc=2, cod=1))
"""

import logging
from pathlib import Path

from ntm import project_setup
from ntm.agent_assigner import AgentAssigner, Assignment
from ntm.command_router import CommandRouter, parse_agent_type
from ntm.config_manager import NtmConfig
from ntm.exceptions import (
    EmptyOutputError,
    MultiplexerError,
    NothingToDoError,
    NotFoundError,
    PaneNotFoundError,
    SessionNotFoundError,
)
from ntm.models import (
    AgentCounts,
    AgentType,
    CaptureResult,
    CaptureStatus,
    DestroyResult,
    Pane,
    SaveResult,
    SendResult,
    SessionSummary,
    StatusReport,
)
from ntm.modules.clipboard import Clipboard
from ntm.modules.interaction_handler import InteractionHandler
from ntm.output_capture import OutputCapture
from ntm.pane_allocator import PaneAllocator
from ntm.session_inspector import SessionInspector
from ntm.session_registry import SessionRegistry, validate_session_name
from ntm.tmux_client import TmuxClient

logger = logging.getLogger(__name__)


class SessionOrchestrator:
    """Facade over the session, pane and agent components."""

    def __init__(self, client: TmuxClient, config: NtmConfig, interaction: InteractionHandler):
        self.client = client
        self.config = config
        self.interaction = interaction

        self.registry = SessionRegistry(client, interaction)
        self.allocator = PaneAllocator(client)
        self.assigner = AgentAssigner(client, self.allocator, self.registry, config)
        self.router = CommandRouter(client, self.registry)
        self.capture = OutputCapture(client, self.registry, self.allocator)
        self.inspector = SessionInspector(client, self.registry)

    @classmethod
    def from_config(
        cls, config: NtmConfig, interaction: InteractionHandler
    ) -> "SessionOrchestrator":
        return cls(TmuxClient(timeout=config.tmux_timeout), config, interaction)

    def workdir(self, session: str) -> Path:
        return self.config.project_dir(session)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_session(self, name: str, panes: int) -> SessionSummary:
        """Ensure the project directory, the session and its pane count.

        Raises:
            UsageError: If the name is invalid
            NotFoundError: If the project directory is missing and not created
        """
        validate_session_name(name)
        workdir = project_setup.ensure_project_dir(self.workdir(name), self.interaction)

        self.registry.create(name, workdir)
        window = self.allocator.first_window(name)
        count = self.allocator.reconcile(window, panes, str(workdir))
        logger.info(f"Session '{name}' has {count} pane(s)")
        return self.registry.get(name)

    def spawn(self, name: str, counts: AgentCounts) -> list[Assignment]:
        """Ensure the session and launch agents into it.

        The first pane is reserved for the user; agents fill the rest.

        Raises:
            NothingToDoError: If all counts are zero
        """
        validate_session_name(name)
        if counts.is_empty:
            raise NothingToDoError("nothing to spawn (all counts are zero)")

        workdir = project_setup.ensure_project_dir(self.workdir(name), self.interaction)
        self.registry.create(name, workdir)
        window = self.allocator.first_window(name)
        return self.assigner.assign(window, counts, workdir)

    def add_agents(self, name: str, counts: AgentCounts) -> list[Assignment]:
        """Append agents to an existing session.

        Raises:
            SessionNotFoundError: If the session does not exist
            NothingToDoError: If all counts are zero
        """
        self.registry.require(name)
        window = self.allocator.first_window(name)
        return self.assigner.add(window, counts, self.workdir(name))

    def quick_setup(self, project: str, counts: AgentCounts) -> list[Assignment]:
        """Create the project directory with a git repository, then spawn.

        Raises:
            ProjectSetupError: If the directory or repository cannot be created
        """
        validate_session_name(project)
        if counts.is_empty:
            raise NothingToDoError("nothing to spawn (all counts are zero)")

        if project_setup.quick_setup(self.workdir(project), project):
            self.interaction.show_info(f"Created project directory: {self.workdir(project)}")
        return self.spawn(project, counts)

    def reconnect(self, name: str) -> SessionSummary:
        """Return an existing session, or offer to create it with defaults.

        Raises:
            SessionNotFoundError: If the session is absent and creation was not confirmed
        """
        if self.registry.exists(name):
            return self.registry.get(name)

        if not self.interaction.is_interactive():
            raise SessionNotFoundError(name)
        if not self.interaction.confirm(
            f"Create '{name}' with default settings?", default=False
        ):
            raise SessionNotFoundError(name)

        return self.create_session(name, self.config.default_panes)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def view(self, name: str) -> int:
        """Unzoom and tile every window of a session.

        Returns:
            Number of windows re-tiled
        """
        self.registry.require(name)
        windows = self.client.list_windows(name)
        for window in windows:
            if window.zoomed:
                self.client.toggle_zoom(window.target)
            self.client.select_layout(window.target, PaneAllocator.LAYOUT)
        return len(windows)

    def find_zoom_target(self, name: str, target: str) -> Pane:
        """Resolve a pane index or agent type to a pane in the first window.

        Raises:
            SessionNotFoundError: If the session does not exist
            UsageError: If target is neither an index nor an agent type
            NotFoundError: If no pane matches
        """
        self.registry.require(name)
        window = self.allocator.first_window(name)
        panes = self.client.list_panes(name, window.index)

        if target.isascii() and target.isdigit():
            matches = [pane for pane in panes if pane.index == int(target)]
            if not matches:
                raise PaneNotFoundError(name, target)
            return matches[0]

        agent_type = parse_agent_type(target)
        for pane in panes:
            if pane.has_marker(agent_type):
                return pane
        raise NotFoundError(f"No pane found matching '{target}'")

    def zoom(self, name: str, target: str) -> Pane:
        """Select and zoom the first pane matching an index or agent type."""
        pane = self.find_zoom_target(name, target)

        # resize-pane -Z toggles, so clear an existing zoom first
        window = self.allocator.first_window(name)
        if window.zoomed:
            self.client.toggle_zoom(window.target)

        self.client.select_pane(pane.pane_id)
        self.client.toggle_zoom(pane.pane_id)
        logger.info(f"Zoomed pane {pane.index} ({pane.pane_id}) in '{name}'")
        return pane

    def attach(self, name: str) -> int:
        return self.client.attach(name)

    # ------------------------------------------------------------------
    # Delegation
    # ------------------------------------------------------------------

    def list_sessions(self) -> list[SessionSummary]:
        return self.registry.list()

    def status(self, name: str) -> StatusReport:
        report = self.inspector.status(name)
        if not report.working_directory:
            report.working_directory = str(self.workdir(name))
        return report

    def kill(self, name: str, force: bool = False) -> DestroyResult:
        return self.registry.destroy(name, force=force)

    def send(
        self,
        name: str,
        command_text: str,
        tag_filter: AgentType | None = None,
        skip_first: bool = False,
    ) -> SendResult:
        return self.router.send(name, command_text, tag_filter=tag_filter, skip_first=skip_first)

    def broadcast(self, name: str, target: str, prompt: str) -> SendResult:
        return self.router.broadcast(name, target, prompt)

    def interrupt(self, name: str) -> SendResult:
        return self.router.interrupt(name)

    def save_outputs(self, name: str, output_dir: Path | str | None = None) -> SaveResult:
        return self.capture.save_all(name, output_dir or self.config.log_path)

    def copy_output(self, name: str, pane_ref: str, lines: int) -> CaptureResult:
        """Capture one pane and copy the text to the clipboard.

        Raises:
            EmptyOutputError: If the pane has no content
            MultiplexerError: If tmux could not capture the pane
            ClipboardError: If the clipboard tool is missing or fails
        """
        result = self.capture.capture(name, pane_ref, lines)
        if result.status == CaptureStatus.FAILED:
            raise MultiplexerError(result.error or f"capture of pane {pane_ref} failed")
        if result.is_empty:
            raise EmptyOutputError(f"No content captured from pane {pane_ref}")

        Clipboard.copy(result.text)
        return result


__all__ = ["SessionOrchestrator"]
