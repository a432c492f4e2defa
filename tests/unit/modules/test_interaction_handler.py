"""Unit tests for interaction_handler module.

Tests CLI and Mock handlers for user interaction abstraction.
"""

from unittest.mock import patch

import click
import pytest

from ntm.modules.interaction_handler import (
    CLIInteractionHandler,
    InteractionHandler,
    MockInteractionHandler,
)


class TestCLIInteractionHandler:
    """Test CLI interaction handler."""

    def test_satisfies_protocol(self):
        assert isinstance(CLIInteractionHandler(), InteractionHandler)

    @patch("ntm.modules.interaction_handler.click.confirm")
    @patch("ntm.modules.interaction_handler.sys.stdin")
    def test_confirm_on_terminal(self, mock_stdin, mock_confirm):
        """A terminal gets the real prompt."""
        mock_stdin.isatty.return_value = True
        mock_confirm.return_value = True

        assert CLIInteractionHandler().confirm("Kill session?") is True
        mock_confirm.assert_called_once()

    @patch("ntm.modules.interaction_handler.click.confirm")
    @patch("ntm.modules.interaction_handler.sys.stdin")
    def test_confirm_without_terminal_fails_closed(self, mock_stdin, mock_confirm):
        """No terminal means no, without prompting."""
        mock_stdin.isatty.return_value = False

        assert CLIInteractionHandler().confirm("Kill session?", default=True) is False
        mock_confirm.assert_not_called()

    @patch("ntm.modules.interaction_handler.click.echo")
    @patch("ntm.modules.interaction_handler.click.confirm", side_effect=click.Abort())
    @patch("ntm.modules.interaction_handler.sys.stdin")
    def test_confirm_abort_is_no(self, mock_stdin, mock_confirm, mock_echo):
        mock_stdin.isatty.return_value = True
        assert CLIInteractionHandler().confirm("Continue?") is False

    @patch("ntm.modules.interaction_handler.click.secho")
    def test_show_warning_goes_to_stderr(self, mock_secho):
        CLIInteractionHandler().show_warning("careful")
        mock_secho.assert_called_once_with("Warning: careful", fg="yellow", err=True)


class TestMockInteractionHandler:
    """Test mock interaction handler."""

    def test_responses_in_order(self):
        handler = MockInteractionHandler(confirm_responses=[True, False])
        assert handler.confirm("first?") is True
        assert handler.confirm("second?") is False

    def test_runs_out_of_responses(self):
        handler = MockInteractionHandler()
        with pytest.raises(IndexError, match="No more confirm responses"):
            handler.confirm("anything?")

    def test_records_interactions(self):
        handler = MockInteractionHandler(confirm_responses=[True])
        handler.show_info("hello")
        handler.show_warning("uh oh")
        handler.confirm("ok?", default=True)

        assert [i["type"] for i in handler.interactions] == ["info", "warning", "confirm"]
        assert handler.interactions[2]["default"] is True

    def test_interactive_flag(self):
        assert MockInteractionHandler().is_interactive()
        assert not MockInteractionHandler(interactive=False).is_interactive()
