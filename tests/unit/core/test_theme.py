"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path
from unittest.mock import patch

import filequarantine.core.theme as theme_module
import pytest
from filequarantine.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_rich_theme,
    get_theme,
    load_theme,
)
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.text == "#ffffff"
        assert colors.success == "#03b971"
        assert colors.quarantined == "#faf870"

    def test_short_hex_accepted(self) -> None:
        """Three-digit hex codes are valid."""
        assert ThemeColors(deleted="#abc").deleted == "#abc"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValueError, match="must start with '#'"):
            ThemeColors(text="ffffff")

    def test_invalid_hex_wrong_length(self) -> None:
        """ThemeColors rejects colors with wrong length."""
        with pytest.raises(ValueError, match="must be #RGB or #RRGGBB"):
            ThemeColors(truncated="#ff")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValueError, match="invalid hex color"):
            ThemeColors(text="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValueError):
            ThemeColors(package_manual="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors internal function."""

    def test_loads_valid_toml(self, tmp_path: Path) -> None:
        """Loads colors from valid TOML file."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\nquarantined = "#000000"\n')

        assert _load_toml_colors(theme_file) == {"quarantined": "#000000"}

    def test_returns_none_for_missing_file(self, tmp_path: Path) -> None:
        """Returns None when file doesn't exist."""
        assert _load_toml_colors(tmp_path / "nonexistent.toml") is None

    def test_returns_none_for_invalid_toml(self, tmp_path: Path) -> None:
        """Returns None for malformed TOML."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("not valid [ toml syntax")

        assert _load_toml_colors(theme_file) is None

    def test_non_string_values_dropped(self, tmp_path: Path) -> None:
        """Only string values are returned."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntext = "#000000"\nmuted = 3\n')

        assert _load_toml_colors(theme_file) == {"text": "#000000"}


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_defaults_without_user_file(self, tmp_path: Path) -> None:
        """Defaults are used when no user theme exists."""
        with patch(
            "filequarantine.core.theme.get_user_theme_path",
            return_value=tmp_path / "theme.toml",
        ):
            assert load_theme() == ThemeColors()

    def test_partial_user_override(self, tmp_path: Path) -> None:
        """User colors replace only the keys they set."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\ndeleted = "#ff0000"\n')

        with patch(
            "filequarantine.core.theme.get_user_theme_path",
            return_value=user_theme,
        ):
            colors = load_theme()

        assert colors.deleted == "#ff0000"
        assert colors.success == "#03b971"

    def test_invalid_user_colors_fall_back(self, tmp_path: Path) -> None:
        """An invalid user color makes the whole theme fall back to defaults."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\ndeleted = "red"\n')

        with patch(
            "filequarantine.core.theme.get_user_theme_path",
            return_value=user_theme,
        ):
            assert load_theme() == ThemeColors()


class TestGetRichTheme:
    """Tests for get_rich_theme function."""

    def test_includes_action_styles(self) -> None:
        """Theme includes a style for every action."""
        theme = get_rich_theme(ThemeColors())

        assert isinstance(theme, Theme)
        for name in ("quarantined", "deleted", "truncated", "bold_header", "border"):
            assert name in theme.styles

    def test_get_theme_is_cached(self) -> None:
        """get_theme returns the same instance on repeated calls."""
        with patch.object(theme_module, "_cached_theme", None):
            first = get_theme()
            second = get_theme()

        assert first is second
