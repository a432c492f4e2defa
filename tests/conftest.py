"""
Shared test fixtures for ntm tests.

This module provides common fixtures used across the unit tests:
- An in-memory tmux server (FakeTmuxClient)
- Scripted interaction handlers
- A configuration rooted in a temporary projects directory
- A wired SessionOrchestrator and a CLI runner that uses it
"""

import pytest
from click.testing import CliRunner

from ntm.cli import main
from ntm.config_manager import NtmConfig
from ntm.modules.interaction_handler import MockInteractionHandler
from ntm.orchestrator import SessionOrchestrator
from tests.mocks.fake_tmux import FakeTmuxClient

# ============================================================================
# DIRECTORY FIXTURES
# ============================================================================


@pytest.fixture
def temp_home_dir(tmp_path, monkeypatch):
    """Temporary home directory for testing.

    Sets HOME so nothing touches the real user home directory.
    """
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def projects_base(tmp_path):
    """Projects base directory for per-session working directories."""
    base = tmp_path / "projects"
    base.mkdir()
    return base


# ============================================================================
# TMUX / ORCHESTRATION FIXTURES
# ============================================================================


@pytest.fixture
def fake_tmux():
    """In-memory tmux server."""
    return FakeTmuxClient()


@pytest.fixture
def interaction():
    """Interactive handler that has no scripted answers.

    Any unexpected confirmation prompt fails the test with IndexError.
    """
    return MockInteractionHandler()


@pytest.fixture
def ntm_config(projects_base, tmp_path):
    return NtmConfig(projects_base=str(projects_base), log_dir=str(tmp_path / "logs"))


@pytest.fixture
def orchestrator(fake_tmux, ntm_config, interaction):
    return SessionOrchestrator(fake_tmux, ntm_config, interaction)


# ============================================================================
# CLI FIXTURES
# ============================================================================


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def invoke(cli_runner, orchestrator):
    """Invoke the ntm CLI against the fake orchestrator.

    Example:
        result = invoke(["send", "--cc", "dev", "hello"])
        assert result.exit_code == 0
    """

    def _invoke(args, orchestrator_override=None):
        obj = {
            "orchestrator": orchestrator_override or orchestrator,
            "config": (orchestrator_override or orchestrator).config,
            "interaction": (orchestrator_override or orchestrator).interaction,
        }
        return cli_runner.invoke(main, args, obj=obj)

    return _invoke
