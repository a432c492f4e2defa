"""Interactive tmux installation.

Philosophy:
- Single responsibility: get tmux onto PATH
- Ask first, never install silently
- Non-interactive contexts fail immediately with guidance

Public API (the "studs"):
    InstallStatus: Installation status enum
    InstallResult: Installation result dataclass
    TmuxInstaller: Main installer class
    ensure_tmux: Check, offer install, re-check
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from ntm.exceptions import DependencyMissingError
from ntm.modules.interaction_handler import InteractionHandler
from ntm.modules.prerequisites import PrerequisiteChecker

logger = logging.getLogger(__name__)


class InstallStatus(Enum):
    """Installation status."""

    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"
    ALREADY_INSTALLED = "already_installed"


@dataclass
class InstallResult:
    """Result of installation attempt."""

    status: InstallStatus
    command: list[str] | None = None
    error_message: str | None = None


class TmuxInstaller:
    """Installs tmux with the platform's package manager."""

    INSTALL_TIMEOUT = 600

    # Checked in order; the first manager found on PATH is used
    LINUX_PACKAGE_MANAGERS: ClassVar[list[tuple[str, list[list[str]]]]] = [
        ("apt-get", [["sudo", "apt-get", "update"], ["sudo", "apt-get", "install", "-y", "tmux"]]),
        ("apt", [["sudo", "apt", "update"], ["sudo", "apt", "install", "-y", "tmux"]]),
        ("dnf", [["sudo", "dnf", "install", "-y", "tmux"]]),
        ("yum", [["sudo", "yum", "install", "-y", "tmux"]]),
        ("pacman", [["sudo", "pacman", "-Sy", "--noconfirm", "tmux"]]),
        ("zypper", [["sudo", "zypper", "install", "-y", "tmux"]]),
        ("apk", [["sudo", "apk", "add", "tmux"]]),
    ]

    def __init__(self, platform_name: str | None = None):
        self.platform_name = platform_name or PrerequisiteChecker.detect_platform()

    def install_commands(self) -> list[list[str]] | None:
        """Return the commands that would install tmux, or None if unsupported."""
        if self.platform_name == "macos":
            if shutil.which("brew"):
                return [["brew", "install", "tmux"]]
            return None

        if self.platform_name in ("linux", "wsl"):
            for manager, commands in self.LINUX_PACKAGE_MANAGERS:
                if shutil.which(manager):
                    return commands

        return None

    def install(self, interaction: InteractionHandler) -> InstallResult:
        """
        Offer and execute tmux installation.

        Args:
            interaction: Handler used to ask for consent

        Returns:
            InstallResult with installation outcome
        """
        if PrerequisiteChecker.check_tool("tmux"):
            return InstallResult(status=InstallStatus.ALREADY_INSTALLED)

        commands = self.install_commands()
        if commands is None:
            if self.platform_name == "macos":
                message = (
                    "Homebrew not found; install it from https://brew.sh "
                    "then run 'brew install tmux'."
                )
            else:
                message = (
                    "Could not detect a supported package manager "
                    "(apt, dnf, yum, pacman, zypper, apk). "
                    "Install tmux manually with your distro's package manager."
                )
            return InstallResult(status=InstallStatus.FAILED, error_message=message)

        if not interaction.confirm("Attempt to install tmux now?", default=False):
            return InstallResult(status=InstallStatus.CANCELLED)

        for command in commands:
            interaction.show_info(f"Running: {' '.join(command)}")
            try:
                result = subprocess.run(command, timeout=self.INSTALL_TIMEOUT, check=False)
            except subprocess.TimeoutExpired:
                return InstallResult(
                    status=InstallStatus.FAILED,
                    command=command,
                    error_message=f"Installation timeout after {self.INSTALL_TIMEOUT} seconds",
                )
            except OSError as e:
                return InstallResult(
                    status=InstallStatus.FAILED,
                    command=command,
                    error_message=f"Command not found or OS error: {e!s}",
                )

            if result.returncode != 0:
                return InstallResult(
                    status=InstallStatus.FAILED,
                    command=command,
                    error_message=f"'{' '.join(command)}' exited with code {result.returncode}",
                )

        if not PrerequisiteChecker.check_tool("tmux"):
            return InstallResult(
                status=InstallStatus.FAILED,
                command=commands[-1],
                error_message="Installation completed, but tmux is still not on PATH.",
            )

        logger.info("tmux installed successfully")
        return InstallResult(status=InstallStatus.SUCCESS, command=commands[-1])


def ensure_tmux(interaction: InteractionHandler, installer: TmuxInstaller | None = None) -> None:
    """Make sure tmux is available, offering to install it interactively.

    Raises:
        DependencyMissingError: If tmux is missing and could not be installed
    """
    result = PrerequisiteChecker.check_all()
    if result.all_available:
        return

    guidance = PrerequisiteChecker.format_missing_message(result.missing, result.platform_name)

    if not interaction.is_interactive():
        raise DependencyMissingError(
            "tmux not found (non-interactive shell, not attempting auto-install).\n\n" + guidance
        )

    installer = installer or TmuxInstaller(result.platform_name)
    install_result = installer.install(interaction)

    if install_result.status in (InstallStatus.SUCCESS, InstallStatus.ALREADY_INSTALLED):
        interaction.show_info("tmux installed successfully.")
        return

    if install_result.status == InstallStatus.CANCELLED:
        raise DependencyMissingError("Please install tmux manually and retry.\n\n" + guidance)

    raise DependencyMissingError(
        f"Automatic tmux installation failed: {install_result.error_message}\n\n" + guidance
    )


__all__ = ["InstallResult", "InstallStatus", "TmuxInstaller", "ensure_tmux"]
