"""CLI tests for session commands: create, reconnect, list, status, view, kill, zoom."""

import click
import pytest

from ntm.cli import main
from ntm.commands.cli_helpers import complete_sessions
from ntm.exceptions import MultiplexerError
from ntm.modules.interaction_handler import MockInteractionHandler
from ntm.orchestrator import SessionOrchestrator


@pytest.fixture
def project(projects_base):
    path = projects_base / "proj"
    path.mkdir()
    return path


def orchestrator_with(fake_tmux, ntm_config, **handler_kwargs):
    return SessionOrchestrator(fake_tmux, ntm_config, MockInteractionHandler(**handler_kwargs))


class TestCreateCommand:
    def test_create_and_attach(self, invoke, fake_tmux, project):
        result = invoke(["create", "proj", "3"])

        assert result.exit_code == 0, result.output
        assert len(fake_tmux.pane_ids("proj")) == 3
        assert fake_tmux.attached == ["proj"]

    def test_default_pane_count(self, invoke, fake_tmux, ntm_config, project):
        ntm_config.default_panes = 4
        result = invoke(["create", "proj", "--no-attach"])

        assert result.exit_code == 0, result.output
        assert len(fake_tmux.pane_ids("proj")) == 4
        assert fake_tmux.attached == []

    def test_existing_session_is_reported(self, invoke, fake_tmux, project):
        fake_tmux.add_session("proj", panes=2)
        result = invoke(["create", "proj", "2", "--no-attach"])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert fake_tmux.split_count == 0

    def test_directory_declined(self, invoke, fake_tmux, ntm_config):
        override = orchestrator_with(fake_tmux, ntm_config, confirm_responses=[False])
        result = invoke(["create", "proj", "--no-attach"], override)

        assert result.exit_code == 1
        assert "Directory not found" in result.output
        assert fake_tmux.sessions == {}


class TestReconnectCommand:
    def test_existing_session_attaches(self, invoke, fake_tmux):
        fake_tmux.add_session("proj")
        result = invoke(["rnt", "proj"])

        assert result.exit_code == 0
        assert fake_tmux.attached == ["proj"]

    def test_missing_session_lists_and_fails_without_terminal(self, invoke, fake_tmux, ntm_config):
        fake_tmux.add_session("other")
        override = orchestrator_with(fake_tmux, ntm_config, interactive=False)

        result = invoke(["reconnect", "proj"], override)

        assert result.exit_code == 1
        assert "does not exist" in result.output
        assert "other" in result.output
        assert "proj" not in fake_tmux.sessions

    def test_missing_session_created_on_confirm(self, invoke, fake_tmux, ntm_config, project):
        ntm_config.default_panes = 2
        override = orchestrator_with(fake_tmux, ntm_config, confirm_responses=[True])

        result = invoke(["reconnect", "proj"], override)

        assert result.exit_code == 0, result.output
        assert len(fake_tmux.pane_ids("proj")) == 2
        assert fake_tmux.attached == ["proj"]


class TestListAndStatus:
    def test_list_empty(self, invoke):
        result = invoke(["list"])
        assert result.exit_code == 0
        assert "No tmux sessions running" in result.output

    def test_list_sessions(self, invoke, fake_tmux):
        fake_tmux.add_session("alpha")
        fake_tmux.add_session("beta")
        result = invoke(["list"])

        assert "alpha" in result.output
        assert "beta" in result.output

    def test_status(self, invoke, fake_tmux):
        fake_tmux.add_session("proj", panes=3, titles=["", "proj__cc_1", "proj__cc_2"])
        result = invoke(["status", "proj"])

        assert result.exit_code == 0
        assert "proj__cc_2" in result.output
        assert "Agents: 2x cc, 0x cod, 0x gmi" in result.output

    def test_status_missing_session(self, invoke):
        result = invoke(["snt", "ghost"])
        assert result.exit_code == 1
        assert "Session 'ghost' not found" in result.output


class TestViewAndZoom:
    def test_view_tiles_and_attaches(self, invoke, fake_tmux):
        session = fake_tmux.add_session("proj", panes=2)
        session.windows[0].zoomed = True

        result = invoke(["view", "proj"])

        assert result.exit_code == 0
        assert not session.windows[0].zoomed
        assert fake_tmux.layouts == [("=proj:0", "tiled")]
        assert fake_tmux.attached == ["proj"]

    def test_zoom_agent_type(self, invoke, fake_tmux):
        fake_tmux.add_session("proj", panes=3, titles=["", "proj__cod_1", "proj__cc_1"])
        result = invoke(["zoom", "proj", "cc", "--no-attach"])

        assert result.exit_code == 0
        assert fake_tmux.selected == [fake_tmux.pane_ids("proj")[2]]

    def test_zoom_no_match(self, invoke, fake_tmux):
        fake_tmux.add_session("proj", panes=2)
        result = invoke(["znt", "proj", "gmi", "--no-attach"])

        assert result.exit_code == 1
        assert "No pane found matching 'gmi'" in result.output


class TestKillCommand:
    def test_force(self, invoke, fake_tmux):
        fake_tmux.add_session("proj", panes=3)
        result = invoke(["kill", "-f", "proj"])

        assert result.exit_code == 0
        assert "Killed session 'proj'" in result.output
        assert fake_tmux.sessions == {}

    def test_confirmed(self, invoke, fake_tmux, ntm_config):
        fake_tmux.add_session("proj")
        override = orchestrator_with(fake_tmux, ntm_config, confirm_responses=[True])

        result = invoke(["kill", "proj"], override)

        assert result.exit_code == 0
        assert override.interaction.interactions[0]["message"] == (
            "Kill session 'proj' with 1 pane(s)?"
        )

    def test_declined(self, invoke, fake_tmux, ntm_config):
        fake_tmux.add_session("proj")
        override = orchestrator_with(fake_tmux, ntm_config, confirm_responses=[False])

        result = invoke(["knt", "proj"], override)

        assert result.exit_code == 1
        assert "Aborted." in result.output
        assert "proj" in fake_tmux.sessions

    def test_non_interactive_requires_force(self, invoke, fake_tmux, ntm_config):
        fake_tmux.add_session("proj")
        override = orchestrator_with(fake_tmux, ntm_config, interactive=False)

        result = invoke(["kill", "proj"], override)

        assert result.exit_code == 1
        assert "--force" in result.output
        assert "proj" in fake_tmux.sessions

    def test_missing_session(self, invoke):
        result = invoke(["kill", "-f", "ghost"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestSessionCompletion:
    """Shell completion of session names."""

    def test_completes_running_sessions_by_prefix(self, orchestrator, fake_tmux):
        for name in ("proj", "project-b", "other"):
            fake_tmux.add_session(name, panes=1)
        ctx = click.Context(main, obj={"orchestrator": orchestrator})

        items = complete_sessions(ctx, None, "pro")

        assert sorted(item.value for item in items) == ["proj", "project-b"]

    def test_tmux_failure_completes_nothing(self, orchestrator, monkeypatch):
        def fail():
            raise MultiplexerError("no server running")

        monkeypatch.setattr(orchestrator, "list_sessions", fail)
        ctx = click.Context(main, obj={"orchestrator": orchestrator})

        assert complete_sessions(ctx, None, "") == []

    def test_session_arguments_use_completion(self, orchestrator, fake_tmux):
        fake_tmux.add_session("proj", panes=1)
        for name in ("status", "kill", "send", "save-outputs"):
            command = main.commands[name]
            param = next(p for p in command.params if p.name == "session")
            ctx = click.Context(command, obj={"orchestrator": orchestrator})

            assert [item.value for item in param.shell_complete(ctx, "p")] == ["proj"]
