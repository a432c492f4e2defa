"""Unit tests for output capture and session status."""

import re

import pytest

from ntm.exceptions import PaneNotFoundError, SessionNotFoundError
from ntm.models import AgentType, CaptureStatus
from ntm.modules.interaction_handler import MockInteractionHandler
from ntm.output_capture import OutputCapture, safe_title
from ntm.pane_allocator import PaneAllocator
from ntm.session_inspector import SessionInspector
from ntm.session_registry import SessionRegistry


@pytest.fixture
def registry(fake_tmux):
    return SessionRegistry(fake_tmux, MockInteractionHandler())


@pytest.fixture
def capture(fake_tmux, registry):
    return OutputCapture(fake_tmux, registry, PaneAllocator(fake_tmux))


@pytest.fixture
def panes(fake_tmux):
    fake_tmux.add_session("proj", panes=3, titles=["host", "proj__cc_1", "proj__cod_1"])
    return fake_tmux.pane_ids("proj")


class TestCapture:
    """Single-pane capture."""

    def test_by_index(self, fake_tmux, capture, panes):
        fake_tmux.captures[panes[1]] = "working...\ndone"
        result = capture.capture("proj", "1", 500)
        assert result.status == CaptureStatus.OK
        assert result.pane_id == panes[1]
        assert result.text == "working...\ndone"

    def test_by_pane_id(self, fake_tmux, capture, panes):
        fake_tmux.captures[panes[2]] = "output"
        assert capture.capture("proj", panes[2], 10).text == "output"

    def test_limits_lines(self, fake_tmux, capture, panes):
        fake_tmux.captures[panes[0]] = "\n".join(f"line{i}" for i in range(10))
        assert capture.capture("proj", 0, 2).text == "line8\nline9"

    def test_empty_is_result_not_error(self, capture, panes):
        result = capture.capture("proj", "0", 500)
        assert result.status == CaptureStatus.EMPTY
        assert result.is_empty

    def test_whitespace_only_is_empty(self, fake_tmux, capture, panes):
        fake_tmux.captures[panes[0]] = "\n\n   \n"
        assert capture.capture("proj", "0", 500).status == CaptureStatus.EMPTY

    def test_missing_pane(self, capture, panes):
        with pytest.raises(PaneNotFoundError):
            capture.capture("proj", "9", 500)

    def test_non_numeric_pane(self, capture, panes):
        with pytest.raises(PaneNotFoundError):
            capture.capture("proj", "abc", 500)

    def test_missing_session(self, capture):
        with pytest.raises(SessionNotFoundError):
            capture.capture("ghost", "0", 500)

    def test_transient_failure(self, fake_tmux, capture, panes):
        fake_tmux.capture_failures.add(panes[1])
        result = capture.capture("proj", "1", 500)
        assert result.status == CaptureStatus.FAILED
        assert result.error


class TestSaveAll:
    """Best-effort batch save."""

    def test_writes_one_file_per_pane(self, fake_tmux, capture, panes, tmp_path):
        for pane_id in panes:
            fake_tmux.captures[pane_id] = f"output of {pane_id}"

        result = capture.save_all("proj", tmp_path)

        assert result.attempted == 3
        assert result.failures == []
        assert re.fullmatch(r"proj_\d{8}_\d{6}", result.directory.name)
        names = sorted(path.name for path in result.directory.iterdir())
        assert names == ["0_host.log", "1_proj__cc_1.log", "2_proj__cod_1.log"]
        assert (result.directory / "1_proj__cc_1.log").read_text() == f"output of {panes[1]}"

    def test_one_failing_pane_does_not_stop_batch(self, fake_tmux, capture, panes, tmp_path):
        for pane_id in panes:
            fake_tmux.captures[pane_id] = "text"
        fake_tmux.capture_failures.add(panes[1])

        result = capture.save_all("proj", tmp_path)

        assert result.attempted == 3
        assert [pane_id for pane_id, _ in result.failures] == [panes[1]]
        assert (result.directory / "1_proj__cc_1.log").read_text() == ""
        assert (result.directory / "2_proj__cod_1.log").read_text() == "text"

    def test_empty_pane_still_saved(self, fake_tmux, capture, panes, tmp_path):
        fake_tmux.captures[panes[0]] = "text"
        result = capture.save_all("proj", tmp_path)
        assert result.attempted == 3
        assert result.failures == []

    def test_duplicate_names_get_pane_id(self, fake_tmux, capture, tmp_path):
        fake_tmux.add_session("multi", panes=1, titles=["shell"])
        fake_tmux.add_window("multi", panes=1, titles=["shell"])

        result = capture.save_all("multi", tmp_path)

        assert len({path.name for path in result.files}) == 2

    def test_fresh_directory_each_run(self, capture, panes, tmp_path):
        first = capture.save_all("proj", tmp_path)
        second = capture.save_all("proj", tmp_path)
        assert first.directory != second.directory

    def test_missing_session(self, capture, tmp_path):
        with pytest.raises(SessionNotFoundError):
            capture.save_all("ghost", tmp_path)
        assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "title,expected",
    [("proj__cc_1", "proj__cc_1"), ("a b/c", "a_b_c"), ("café", "caf_"), ("", "")],
)
def test_safe_title(title, expected):
    assert safe_title(title) == expected


class TestSessionInspector:
    """Structured status reports."""

    def test_status_report(self, fake_tmux, registry, panes):
        fake_tmux.add_window("proj", panes=1, titles=["proj__cc_added_1"])

        report = SessionInspector(fake_tmux, registry).status("proj")

        assert report.session == "proj"
        assert report.working_directory == "/tmp/work"
        assert report.pane_count == 4
        assert report.count(AgentType.CC) == 2
        assert report.count(AgentType.COD) == 1
        assert report.count(AgentType.GMI) == 0
        assert [p.title for p in report.panes][:2] == ["host", "proj__cc_1"]
        assert report.panes[0].width == 80

    def test_status_missing_session(self, fake_tmux, registry):
        with pytest.raises(SessionNotFoundError):
            SessionInspector(fake_tmux, registry).status("ghost")
