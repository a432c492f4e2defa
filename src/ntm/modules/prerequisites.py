"""
Prerequisites Checker Module

Verifies that tmux and the agent CLIs are installed.

Security Requirements:
- Read-only system checks
- No shell=True in subprocess calls
"""

import logging
import platform
import shutil
from dataclasses import dataclass
from typing import ClassVar

logger = logging.getLogger(__name__)


@dataclass
class PrerequisiteResult:
    """Result of prerequisite checks."""

    all_available: bool
    missing: list[str]
    available: list[str]
    platform_name: str


class PrerequisiteChecker:
    """
    Check required external tools are installed.

    Required tools:
    - tmux

    Agent tools (reported by 'ntm deps'):
    - claude (cc)
    - codex (cod)
    - gemini (gmi)
    """

    REQUIRED_TOOLS: ClassVar[list[str]] = ["tmux"]
    AGENT_TOOLS: ClassVar[list[str]] = ["claude", "codex", "gemini"]

    AGENT_INSTALL_COMMANDS: ClassVar[dict[str, str]] = {
        "claude": "npm install -g @anthropic-ai/claude-code",
        "codex": "npm install -g @openai/codex",
        "gemini": "npm install -g @google/gemini-cli",
    }

    @classmethod
    def check_tool(cls, tool_name: str) -> bool:
        """
        Check if a single tool is available in PATH.

        Security: Uses shutil.which (safe, no subprocess)
        """
        result = shutil.which(tool_name)
        if result:
            logger.debug(f"Found {tool_name} at {result}")
            return True
        logger.debug(f"Tool not found: {tool_name}")
        return False

    @classmethod
    def _check_tools(cls, tools: list[str]) -> PrerequisiteResult:
        missing: list[str] = []
        available: list[str] = []

        for tool in tools:
            if cls.check_tool(tool):
                available.append(tool)
            else:
                missing.append(tool)

        return PrerequisiteResult(
            all_available=(len(missing) == 0),
            missing=missing,
            available=available,
            platform_name=cls.detect_platform(),
        )

    @classmethod
    def check_all(cls) -> PrerequisiteResult:
        """
        Check required tools (tmux).

        Example:
            >>> result = PrerequisiteChecker.check_all()
            >>> if not result.all_available:
            ...     print(f"Missing: {result.missing}")
        """
        result = cls._check_tools(cls.REQUIRED_TOOLS)

        if result.all_available:
            logger.debug(f"All prerequisites available ({result.platform_name})")
        else:
            logger.error(f"Missing prerequisites: {', '.join(result.missing)}")

        return result

    @classmethod
    def check_agents(cls) -> PrerequisiteResult:
        """Check the agent CLIs launched into panes."""
        return cls._check_tools(cls.AGENT_TOOLS)

    @classmethod
    def detect_platform(cls) -> str:
        """
        Detect the operating system platform.

        Returns:
            str: Platform name (macos, linux, wsl, windows, unknown)
        """
        system = platform.system().lower()

        if system == "darwin":
            return "macos"
        if system == "linux":
            if cls._is_wsl():
                return "wsl"
            return "linux"
        if system == "windows":
            return "windows"
        return "unknown"

    @classmethod
    def _is_wsl(cls) -> bool:
        try:
            with open("/proc/version") as f:
                version = f.read().lower()
                return "microsoft" in version or "wsl" in version
        except (FileNotFoundError, PermissionError) as e:
            logger.debug(f"Failed to check for WSL: {e}")
            return False

    @classmethod
    def format_missing_message(cls, missing: list[str], platform_name: str) -> str:
        """
        Format user-friendly installation instructions for missing tools.

        Example:
            >>> msg = PrerequisiteChecker.format_missing_message(["tmux"], "macos")
            >>> print(msg)
        """
        if not missing:
            return "All prerequisites are installed."

        lines: list[str] = ["Missing required tools:", ""]
        lines.extend(f"  - {tool}" for tool in missing)
        lines.append("")
        lines.append(f"Platform: {platform_name}")
        lines.append("")
        lines.append("Installation instructions:")
        lines.append("")

        if "tmux" in missing:
            if platform_name == "macos":
                lines.extend(["Install tmux:", "  brew install tmux", ""])
            elif platform_name in ("linux", "wsl"):
                lines.extend(
                    [
                        "Install tmux with your package manager, for example:",
                        "  sudo apt-get install tmux",
                        "  sudo dnf install tmux",
                        "  sudo pacman -S tmux",
                        "",
                    ]
                )
            elif platform_name == "windows":
                lines.extend(
                    [
                        "Note: tmux is not natively available on Windows.",
                        "  Consider using WSL for full Linux compatibility.",
                        "",
                    ]
                )
            else:
                lines.extend(["  - tmux: https://github.com/tmux/tmux", ""])

        lines.extend(
            f"Install {tool}:\n  {cls.AGENT_INSTALL_COMMANDS[tool]}\n"
            for tool in missing
            if tool in cls.AGENT_INSTALL_COMMANDS
        )

        lines.append("After installing, run 'ntm' again.")
        return "\n".join(lines)


__all__ = ["PrerequisiteChecker", "PrerequisiteResult"]
