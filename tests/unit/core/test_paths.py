"""Unit tests for XDG path management."""

import os
from pathlib import Path
from unittest.mock import patch

from filequarantine.core.paths import (
    APP_NAME,
    CONFIG_ENV_VAR,
    get_config_dir,
    get_config_path,
    get_user_theme_path,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {"HOME": "/home/ops"}, clear=True):
            result = get_config_dir()

        assert result == Path("/home/ops/.config") / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME


class TestGetConfigPath:
    """Tests for get_config_path function."""

    def test_default_location(self, tmp_path: Path) -> None:
        """The config file lives in the config directory."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}, clear=True):
            result = get_config_path()

        assert result == tmp_path / APP_NAME / "config.toml"

    def test_env_override_wins(self, tmp_path: Path) -> None:
        """FILE_QUARANTINE_CONFIG takes precedence over XDG."""
        explicit = tmp_path / "elsewhere.toml"
        env = {"XDG_CONFIG_HOME": str(tmp_path), CONFIG_ENV_VAR: str(explicit)}

        with patch.dict(os.environ, env):
            result = get_config_path()

        assert result == explicit

    def test_empty_env_override_ignored(self, tmp_path: Path) -> None:
        """An empty FILE_QUARANTINE_CONFIG falls back to XDG."""
        env = {"XDG_CONFIG_HOME": str(tmp_path), CONFIG_ENV_VAR: ""}

        with patch.dict(os.environ, env):
            result = get_config_path()

        assert result == tmp_path / APP_NAME / "config.toml"


class TestGetUserThemePath:
    """Tests for get_user_theme_path function."""

    def test_theme_next_to_config(self, tmp_path: Path) -> None:
        """The theme file sits beside config.toml."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_user_theme_path()

        assert result == tmp_path / APP_NAME / "theme.toml"
