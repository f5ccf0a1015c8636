"""Tests for marketplace root resolution and validator configuration."""

from pathlib import Path

import pytest

from marketplace.config import (
    CONFIG_FILE,
    DEFAULT_CATEGORIES,
    DEFAULT_RESERVED_NAMES,
    ValidatorConfig,
    get_marketplace_root,
    load_config,
)
from marketplace.errors import ConfigError


class TestGetMarketplaceRoot:
    """Tests for marketplace root resolution."""

    @pytest.fixture(autouse=True)
    def clear_root_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Clear MARKETPLACE_ROOT env var before each test."""
        monkeypatch.delenv("MARKETPLACE_ROOT", raising=False)

    def test_override_wins(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Verify an explicit --root takes precedence over the env var."""
        # Given
        monkeypatch.setenv("MARKETPLACE_ROOT", "/from/env")

        # When
        result = get_marketplace_root(tmp_path)

        # Then
        assert result == tmp_path

    def test_env_var_used_when_set(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify MARKETPLACE_ROOT is used when no override is given."""
        # Given
        monkeypatch.setenv("MARKETPLACE_ROOT", "~/market")

        # When
        result = get_marketplace_root()

        # Then
        assert result == Path.home() / "market"

    def test_defaults_to_cwd(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Verify the current directory is the fallback."""
        # Given
        monkeypatch.chdir(tmp_path)

        # When
        result = get_marketplace_root()

        # Then
        assert result == tmp_path


class TestValidatorConfig:
    """Tests for the configuration object."""

    def test_defaults(self) -> None:
        """Verify the built-in lists are used by default."""
        # When
        config = ValidatorConfig()

        # Then
        assert len(config.categories) == 27
        assert tuple(config.categories) == DEFAULT_CATEGORIES
        assert tuple(config.reserved_names) == DEFAULT_RESERVED_NAMES
        assert config.content_dirs == ["skills", "agents", "commands"]
        assert len(config.secret_patterns) == 8

    @pytest.mark.parametrize("name", ["core", "Core", "CORE", "Claude-Code"])
    def test_reserved_names_ignore_case(self, name: str) -> None:
        """Verify reserved-name matching is case-insensitive."""
        # Then
        assert ValidatorConfig().is_reserved(name)

    def test_unreserved_name(self) -> None:
        """Verify ordinary names are not reserved."""
        # Then
        assert not ValidatorConfig().is_reserved("core-utils")


class TestLoadConfig:
    """Tests for loading validator.yaml."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """Verify defaults when no config file exists."""
        # When
        config = load_config(tmp_path)

        # Then
        assert config == ValidatorConfig()

    def test_overrides_are_read(self, tmp_path: Path) -> None:
        """Verify values from validator.yaml replace the defaults."""
        # Given
        path = tmp_path / CONFIG_FILE
        path.parent.mkdir(parents=True)
        path.write_text(
            "reserved_names: [acme]\n"
            "author:\n"
            "  name: Jane Doe\n"
            "  github: janedoe\n"
            "secret_patterns:\n"
            "  - label: internal id\n"
            "    pattern: 'INT-\\d+'\n"
        )

        # When
        config = load_config(tmp_path)

        # Then
        assert config.reserved_names == ["acme"]
        assert config.author.github == "janedoe"
        assert [m.label for m in config.secret_patterns] == ["internal id"]
        assert config.categories == list(DEFAULT_CATEGORIES)

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """Verify an empty validator.yaml is treated as no overrides."""
        # Given
        path = tmp_path / CONFIG_FILE
        path.parent.mkdir(parents=True)
        path.write_text("")

        # When
        config = load_config(tmp_path)

        # Then
        assert config == ValidatorConfig()

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        """Verify malformed YAML raises ConfigError."""
        # Given
        path = tmp_path / CONFIG_FILE
        path.parent.mkdir(parents=True)
        path.write_text("reserved_names: [unclosed\n")

        # When/Then
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(tmp_path)

    def test_invalid_schema_raises(self, tmp_path: Path) -> None:
        """Verify wrongly typed values raise ConfigError."""
        # Given
        path = tmp_path / CONFIG_FILE
        path.parent.mkdir(parents=True)
        path.write_text("categories: development\n")

        # When/Then
        with pytest.raises(ConfigError, match="categories"):
            load_config(tmp_path)

    def test_invalid_secret_pattern_raises(self, tmp_path: Path) -> None:
        """Verify a secret pattern that does not compile raises ConfigError."""
        # Given
        path = tmp_path / CONFIG_FILE
        path.parent.mkdir(parents=True)
        path.write_text("secret_patterns:\n  - label: bad\n    pattern: '([a-z'\n")

        # When/Then
        with pytest.raises(ConfigError, match="invalid regular expression"):
            load_config(tmp_path)
