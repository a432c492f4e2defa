"""Project directory preparation.

Creates the per-session working directory (after confirmation) and, for
quick-setup, initialises a git repository with a README commit.

Security:
- No shell=True for subprocess
- Timeout on every git call
"""

import logging
import subprocess
from pathlib import Path

from ntm.exceptions import NotFoundError, ProjectSetupError
from ntm.modules.interaction_handler import InteractionHandler

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 60


def ensure_project_dir(path: Path, interaction: InteractionHandler) -> Path:
    """Make sure a project directory exists, asking before creating it.

    Raises:
        NotFoundError: If the directory is missing and creation was declined
        ProjectSetupError: If the directory cannot be created
    """
    if path.is_dir():
        return path

    interaction.show_info(f"Directory not found: {path}")
    if not interaction.confirm("Create it?", default=False):
        raise NotFoundError(f"Directory not found: {path}")

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ProjectSetupError(f"Failed to create {path}: {e}") from e

    logger.info(f"Created {path}")
    return path


def _git(path: Path, *args: str) -> None:
    cmd = ["git", "-C", str(path), *args]
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=GIT_TIMEOUT, check=False
        )
    except FileNotFoundError as e:
        raise ProjectSetupError("git not found. Install git and retry.") from e
    except subprocess.TimeoutExpired as e:
        raise ProjectSetupError(f"git {args[0]} timed out after {GIT_TIMEOUT}s") from e

    if result.returncode != 0:
        raise ProjectSetupError(f"git {args[0]} failed: {result.stderr.strip()}")


def quick_setup(path: Path, project: str) -> bool:
    """Create a project directory with an initial git commit.

    An existing directory is left untouched.

    Args:
        path: Project directory
        project: Project name written to the README heading

    Returns:
        True if the directory was created, False if it already existed

    Raises:
        ProjectSetupError: If creation or git initialisation fails
    """
    if path.is_dir():
        logger.debug(f"Project directory already exists: {path}")
        return False

    logger.info(f"Creating project directory: {path}")
    try:
        path.mkdir(parents=True)
    except OSError as e:
        raise ProjectSetupError(f"Failed to create {path}: {e}") from e

    logger.info("Initializing git repository")
    _git(path, "init")
    (path / "README.md").write_text(f"# {project}\n")
    _git(path, "add", "README.md")
    _git(path, "commit", "-m", "Initial commit")

    return True


__all__ = ["ensure_project_dir", "quick_setup"]
