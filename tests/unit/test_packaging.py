"""Test packaging and entry point configuration."""

import tomllib
from pathlib import Path

REPO_ROOT = Path(__file__).parents[2]


class TestPackaging:
    """Test pyproject.toml and package layout."""

    def test_entry_point(self):
        """The ntm console script points at cli:main."""
        with open(REPO_ROOT / "pyproject.toml", "rb") as f:
            pyproject = tomllib.load(f)

        assert pyproject["project"]["scripts"]["ntm"] == "ntm.cli:main"

    def test_dependencies_listed(self):
        with open(REPO_ROOT / "pyproject.toml", "rb") as f:
            pyproject = tomllib.load(f)

        names = {dep.split(">=")[0] for dep in pyproject["project"]["dependencies"]}
        assert {"click", "rich", "tomlkit"} <= names

    def test_package_structure(self):
        package_dir = REPO_ROOT / "src" / "ntm"
        assert (package_dir / "__init__.py").exists()
        assert (package_dir / "cli.py").exists()

    def test_cli_entry_point_callable(self):
        from ntm.cli import main

        assert callable(main)
