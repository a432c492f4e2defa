"""Pytest configuration and fixtures for ntm tests.

CRITICAL: Protects the user's configuration from test modifications.
"""

import os
import shutil
from pathlib import Path

import pytest


@pytest.fixture(scope="session", autouse=True)
def protect_production_config():
    """Protect ~/.ntm/config.toml from being modified by tests.

    This fixture:
    1. Backs up the real config.toml before any tests run
    2. Restores it after all tests complete
    """
    config_path = Path.home() / ".ntm" / "config.toml"
    backup_path = Path.home() / ".ntm" / ".config.toml.pytest-backup"

    config_existed = config_path.exists()
    if config_existed:
        shutil.copy2(config_path, backup_path)

    yield

    if config_existed and backup_path.exists():
        shutil.copy2(backup_path, config_path)
        backup_path.unlink()
    elif backup_path.exists():
        backup_path.unlink()


@pytest.fixture(scope="session", autouse=True)
def isolate_environment():
    """Keep the caller's tmux and PROJECTS_BASE settings out of tests."""
    saved = {key: os.environ.pop(key) for key in ("TMUX", "PROJECTS_BASE") if key in os.environ}

    yield

    os.environ.update(saved)


@pytest.fixture
def isolated_config(tmp_path):
    """Provide an isolated config directory for tests.

    Example:
        def test_something(isolated_config):
            config_path = isolated_config / "config.toml"
            # Safe to modify - it's in tmp_path
    """
    config_dir = tmp_path / ".ntm"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def mock_config_path(isolated_config, monkeypatch):
    """Point ConfigManager at the isolated config instead of ~/.ntm.

    Example:
        def test_something(mock_config_path):
            ConfigManager.save_config(config)  # Safe!
    """
    config_file = isolated_config / "config.toml"

    from ntm.config_manager import ConfigManager

    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_DIR", isolated_config)
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", config_file)

    return config_file
