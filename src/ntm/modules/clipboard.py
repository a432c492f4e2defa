"""Clipboard delivery via the platform's clipboard tool.

Supports macOS (pbcopy) and Linux (xclip, xsel, wl-copy).

Security:
- Text passed on stdin, never on the command line
- No shell=True for subprocess

The tool's stdout is discarded rather than piped; xclip forks a child that
holds it open after the parent exits.
"""

import logging
import shutil
import subprocess
import sys
from typing import ClassVar

from ntm.exceptions import ClipboardError

logger = logging.getLogger(__name__)


class Clipboard:
    """Copy text to the system clipboard."""

    LINUX_TOOLS: ClassVar[list[list[str]]] = [
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
        ["wl-copy"],
    ]

    @classmethod
    def find_command(cls, platform: str | None = None) -> list[str] | None:
        """Return the clipboard command for this platform, or None."""
        platform = platform or sys.platform

        if platform == "darwin":
            return ["pbcopy"] if shutil.which("pbcopy") else None

        for command in cls.LINUX_TOOLS:
            if shutil.which(command[0]):
                return command
        return None

    @classmethod
    def copy(cls, text: str, platform: str | None = None) -> None:
        """Copy text to the clipboard.

        Raises:
            ClipboardError: If no clipboard tool is installed or it fails
        """
        command = cls.find_command(platform)
        if command is None:
            raise ClipboardError("No clipboard tool found. Install xclip, xsel, or wl-copy.")

        logger.debug(f"Copying {len(text)} characters with {command[0]}")
        try:
            result = subprocess.run(
                command,
                input=text,
                text=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                timeout=10,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ClipboardError(f"{command[0]} failed: {e}") from e

        if result.returncode != 0:
            raise ClipboardError(f"{command[0]} failed: {result.stderr.strip()}")


__all__ = ["Clipboard"]
