"""CLI tests for copy-output and save-outputs."""

from unittest.mock import patch

from ntm.exceptions import ClipboardError


class TestCopyOutputCommand:
    def test_default_pane_and_lines(self, invoke, fake_tmux):
        fake_tmux.add_session("proj", panes=2)
        fake_tmux.captures[fake_tmux.pane_ids("proj")[0]] = "hello"

        with patch("ntm.orchestrator.Clipboard.copy") as copy:
            result = invoke(["copy-output", "proj"])

        assert result.exit_code == 0, result.output
        assert "Copied 500 lines from pane 0 to clipboard" in result.output
        copy.assert_called_once_with("hello")

    def test_explicit_pane_and_lines(self, invoke, fake_tmux):
        fake_tmux.add_session("proj", panes=3)
        fake_tmux.captures[fake_tmux.pane_ids("proj")[2]] = "a\nb\nc"

        with patch("ntm.orchestrator.Clipboard.copy") as copy:
            result = invoke(["cpo", "proj", "2", "2"])

        assert result.exit_code == 0
        copy.assert_called_once_with("b\nc")

    def test_empty_pane(self, invoke, fake_tmux):
        fake_tmux.add_session("proj")

        with patch("ntm.orchestrator.Clipboard.copy") as copy:
            result = invoke(["copy-output", "proj"])

        assert result.exit_code == 1
        assert "No content captured from pane 0" in result.output
        copy.assert_not_called()

    def test_missing_pane(self, invoke, fake_tmux):
        fake_tmux.add_session("proj")
        result = invoke(["copy-output", "proj", "5"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_clipboard_unavailable(self, invoke, fake_tmux):
        fake_tmux.add_session("proj")
        fake_tmux.captures[fake_tmux.pane_ids("proj")[0]] = "text"

        with patch(
            "ntm.orchestrator.Clipboard.copy", side_effect=ClipboardError("No clipboard tool found.")
        ):
            result = invoke(["copy-output", "proj"])

        assert result.exit_code == 1
        assert "No clipboard tool found" in result.output


class TestSaveOutputsCommand:
    def test_save_to_directory(self, invoke, fake_tmux, tmp_path):
        fake_tmux.add_session("proj", panes=2, titles=["", "proj__cc_1"])
        out = tmp_path / "out"

        result = invoke(["save-outputs", "proj", str(out)])

        assert result.exit_code == 0, result.output
        assert "Saved 2 pane(s)" in result.output
        (session_dir,) = out.iterdir()
        assert sorted(path.name for path in session_dir.iterdir()) == ["0_.log", "1_proj__cc_1.log"]

    def test_failure_warns_and_continues(self, invoke, fake_tmux, tmp_path):
        fake_tmux.add_session("proj", panes=2)
        fake_tmux.capture_failures.add(fake_tmux.pane_ids("proj")[0])

        result = invoke(["sso", "proj", str(tmp_path)])

        assert result.exit_code == 0
        assert "Warning: could not capture" in result.output
        assert "Saved 2 pane(s)" in result.output

    def test_missing_session(self, invoke, tmp_path):
        out = tmp_path / "out"
        result = invoke(["save-outputs", "ghost", str(out)])
        assert result.exit_code == 1
        assert not out.exists()
