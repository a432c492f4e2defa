"""Unit tests for project directory setup."""

import subprocess
from unittest.mock import patch

import pytest

from ntm.exceptions import NotFoundError, ProjectSetupError
from ntm.modules.interaction_handler import MockInteractionHandler
from ntm.project_setup import ensure_project_dir, quick_setup
from tests.mocks.subprocess_mock import SubprocessCallCapture


class TestEnsureProjectDir:
    """Confirmation before creating a working directory."""

    def test_existing_directory(self, tmp_path):
        handler = MockInteractionHandler()
        assert ensure_project_dir(tmp_path, handler) == tmp_path
        assert handler.interactions == []

    def test_create_confirmed(self, tmp_path):
        target = tmp_path / "a" / "b"
        ensure_project_dir(target, MockInteractionHandler(confirm_responses=[True]))
        assert target.is_dir()

    def test_create_declined(self, tmp_path):
        target = tmp_path / "proj"
        with pytest.raises(NotFoundError):
            ensure_project_dir(target, MockInteractionHandler(confirm_responses=[False]))
        assert not target.exists()


class TestQuickSetup:
    """Project directory with an initial git commit."""

    def test_initialises_repository(self, tmp_path):
        capture = SubprocessCallCapture()
        target = tmp_path / "proj"

        with patch("ntm.project_setup.subprocess.run", side_effect=capture.capture):
            created = quick_setup(target, "proj")

        assert created is True
        assert (target / "README.md").read_text() == "# proj\n"
        assert capture.commands == [
            ["git", "-C", str(target), "init"],
            ["git", "-C", str(target), "add", "README.md"],
            ["git", "-C", str(target), "commit", "-m", "Initial commit"],
        ]

    def test_existing_directory_untouched(self, tmp_path):
        capture = SubprocessCallCapture()
        with patch("ntm.project_setup.subprocess.run", side_effect=capture.capture):
            assert quick_setup(tmp_path, "proj") is False
        capture.assert_call_count(0)
        assert not (tmp_path / "README.md").exists()

    def test_git_failure(self, tmp_path):
        capture = SubprocessCallCapture()
        capture.configure_response("commit", returncode=1, stderr="Please tell me who you are")

        with patch("ntm.project_setup.subprocess.run", side_effect=capture.capture):
            with pytest.raises(ProjectSetupError, match="who you are"):
                quick_setup(tmp_path / "proj", "proj")

    def test_git_missing(self, tmp_path):
        capture = SubprocessCallCapture()
        capture.configure_error("git", FileNotFoundError("git"))

        with patch("ntm.project_setup.subprocess.run", side_effect=capture.capture):
            with pytest.raises(ProjectSetupError, match="git not found"):
                quick_setup(tmp_path / "proj", "proj")

    def test_git_timeout(self, tmp_path):
        capture = SubprocessCallCapture()
        capture.configure_error("init", subprocess.TimeoutExpired(["git"], 60))

        with patch("ntm.project_setup.subprocess.run", side_effect=capture.capture):
            with pytest.raises(ProjectSetupError, match="timed out"):
                quick_setup(tmp_path / "proj", "proj")
