"""Configuration management module.

This module handles persistent configuration storage using TOML format.
Stores the projects base directory, agent launch commands and defaults.

The projects base is resolved once, here, and threaded explicitly through
every operation:

    PROJECTS_BASE env var  >  projects_base in config.toml  >  platform default

Security:
- Config file permissions: 0600 (owner read/write only)
- Atomic writes via temp file + rename
"""

import logging
import os
import sys
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, ClassVar

import tomlkit

from ntm.exceptions import NtmError

logger = logging.getLogger(__name__)

PROJECTS_BASE_ENV = "PROJECTS_BASE"

DEFAULT_AGENT_COMMANDS: dict[str, str] = {
    "cc": (
        'NODE_OPTIONS="--max-old-space-size=32768" ENABLE_BACKGROUND_TASKS=1 '
        "claude --dangerously-skip-permissions"
    ),
    "cod": (
        "codex --dangerously-bypass-approvals-and-sandbox -m gpt-5.1-codex-max "
        '-c model_reasoning_effort="high" -c model_reasoning_summary_format=experimental '
        "--enable web_search_request"
    ),
    "gmi": "gemini --yolo",
}


class ConfigError(NtmError):
    """Raised when configuration operations fail."""

    pass


def default_projects_base(platform: str | None = None) -> Path:
    """Platform default for the projects base directory."""
    platform = platform or sys.platform
    if platform == "darwin":
        return Path.home() / "Developer"
    return Path("/data/projects")


@dataclass
class NtmConfig:
    """ntm configuration data."""

    projects_base: str | None = None
    default_panes: int = 10
    log_dir: str = "~/tmux-logs"
    copy_lines: int = 500
    tmux_timeout: int = 30
    agent_commands: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_AGENT_COMMANDS))

    @property
    def base_dir(self) -> Path:
        """Resolved projects base directory."""
        if self.projects_base:
            return Path(self.projects_base).expanduser()
        return default_projects_base()

    @property
    def log_path(self) -> Path:
        return Path(self.log_dir).expanduser()

    def project_dir(self, session: str) -> Path:
        """Working directory for a session's project."""
        return self.base_dir / session

    def agent_command(self, agent_type: str) -> str:
        return self.agent_commands.get(agent_type) or DEFAULT_AGENT_COMMANDS[agent_type]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NtmConfig":
        """Create from dictionary."""
        agent_commands = dict(DEFAULT_AGENT_COMMANDS)
        agent_commands.update(data.get("agent_commands", {}) or {})
        return cls(
            projects_base=data.get("projects_base"),
            default_panes=int(data.get("default_panes", 10)),
            log_dir=data.get("log_dir", "~/tmux-logs"),
            copy_lines=int(data.get("copy_lines", 500)),
            tmux_timeout=int(data.get("tmux_timeout", 30)),
            agent_commands=agent_commands,
        )


class ConfigManager:
    """Manage ntm configuration file.

    Configuration is stored at ~/.ntm/config.toml with secure permissions.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".ntm"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    # Keys settable from the command line, with their value types
    SETTABLE_KEYS: ClassVar[dict[str, type]] = {
        "projects_base": str,
        "default_panes": int,
        "log_dir": str,
        "copy_lines": int,
        "tmux_timeout": int,
    }

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Raises:
            ConfigError: If a custom path is given but does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> NtmConfig:
        """Load configuration from file.

        Raises:
            ConfigError: If loading fails
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return NtmConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)

            logger.debug(f"Loaded config from: {config_path}")
            return NtmConfig.from_dict(data)

        except (tomllib.TOMLDecodeError, ValueError, OSError) as e:
            raise ConfigError(f"Failed to load config: {e}") from e

    @classmethod
    def resolve(
        cls, custom_path: str | None = None, environ: dict[str, str] | None = None
    ) -> NtmConfig:
        """Load configuration and apply the PROJECTS_BASE override.

        Args:
            custom_path: Custom config file path (optional)
            environ: Environment mapping (defaults to os.environ)

        Returns:
            NtmConfig with projects_base resolved
        """
        config = cls.load_config(custom_path)
        environ = os.environ if environ is None else environ

        env_base = environ.get(PROJECTS_BASE_ENV)
        if env_base:
            logger.debug(f"Using {PROJECTS_BASE_ENV}={env_base}")
            config.projects_base = env_base

        return config

    @classmethod
    def save_config(cls, config: NtmConfig, custom_path: str | None = None) -> Path:
        """Save configuration to file.

        Returns:
            Path written

        Raises:
            ConfigError: If saving fails
        """
        temp_path: Path | None = None
        try:
            if custom_path:
                config_path = Path(custom_path).expanduser().resolve()
                config_path.parent.mkdir(parents=True, exist_ok=True)
            else:
                cls.DEFAULT_CONFIG_DIR.mkdir(parents=True, exist_ok=True, mode=0o700)
                config_path = cls.DEFAULT_CONFIG_FILE

            temp_path = config_path.with_suffix(".tmp")

            # Load existing file if it exists (preserves comments/formatting)
            if config_path.exists():
                with open(config_path) as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()

            for key, value in config.to_dict().items():
                doc[key] = value

            with open(temp_path, "w") as f:
                tomlkit.dump(doc, f)

            os.chmod(temp_path, 0o600)
            temp_path.replace(config_path)

            logger.debug(f"Saved config to: {config_path}")
            return config_path

        except Exception as e:
            if temp_path and temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config: {e}") from e

    @classmethod
    def _load_for_update(cls, custom_path: str | None) -> NtmConfig:
        """Load the config to modify; a custom path may not exist yet."""
        if custom_path and not Path(custom_path).expanduser().exists():
            return NtmConfig()
        return cls.load_config(custom_path)

    @classmethod
    def set_value(cls, key: str, value: str, custom_path: str | None = None) -> NtmConfig:
        """Update a single configuration value and save.

        Raises:
            ConfigError: If the key is unknown or the value has the wrong type
        """
        if key.startswith("agent_commands."):
            agent_type = key.split(".", 1)[1]
            if agent_type not in DEFAULT_AGENT_COMMANDS:
                raise ConfigError(f"Unknown agent type: {agent_type}")
            config = cls._load_for_update(custom_path)
            config.agent_commands[agent_type] = value
        elif key in cls.SETTABLE_KEYS:
            try:
                typed_value = cls.SETTABLE_KEYS[key](value)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {key}: {value}") from e
            if isinstance(typed_value, int) and typed_value < 1:
                raise ConfigError(f"{key} must be a positive integer, got {value}")
            config = cls._load_for_update(custom_path)
            setattr(config, key, typed_value)
        else:
            allowed = ", ".join([*cls.SETTABLE_KEYS, "agent_commands.<cc|cod|gmi>"])
            raise ConfigError(f"Unknown config key: {key}\nAllowed keys: {allowed}")

        cls.save_config(config, custom_path)
        return config


__all__ = ["ConfigError", "ConfigManager", "NtmConfig", "default_projects_base"]
