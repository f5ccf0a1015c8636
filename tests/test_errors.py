"""Tests for error formatting utilities."""

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from marketplace import exit_codes
from marketplace.errors import (
    PluginsRootNotFoundError,
    format_validation_errors,
    handle_cli_error,
    schema_issues,
)
from marketplace.plugin_schema import ItemDescriptor
from marketplace.registry_schema import RegistryDescriptor


def capture_error(model, data) -> ValidationError:
    """Validate data and return the ValidationError it raises."""
    try:
        model.model_validate(data)
    except ValidationError as e:
        return e
    pytest.fail("Expected ValidationError")


class TestSchemaIssues:
    """Tests for schema_issues."""

    def test_paths_are_json_pointers(self) -> None:
        """Verify nested locations render as /a/0/b."""
        # Given
        error = capture_error(
            RegistryDescriptor,
            {
                "name": "m",
                "description": "Long enough description",
                "owner": {"name": "o"},
                "plugins": [{"name": "ok", "description": "short", "source": "./x"}],
            },
        )

        # When
        issues = list(schema_issues(error))

        # Then
        assert issues == [("/plugins/0/description", "must be at least 10 characters")]

    def test_union_member_names_dropped_from_path(self) -> None:
        """Verify union tags like AuthorInfo do not appear in the path."""
        # Given
        error = capture_error(ItemDescriptor, {"name": "foo", "author": {}})

        # When
        paths = [path for path, _ in schema_issues(error)]

        # Then
        assert "/author/name" in paths
        assert all("AuthorInfo" not in path for path in paths)


class TestFormatValidationErrors:
    """Tests for format_validation_errors function."""

    def test_single_missing_field(self) -> None:
        """Verify a single missing field produces a clean message."""
        # Given
        error = capture_error(ItemDescriptor, {})

        # When
        result = format_validation_errors(error)

        # Then
        assert result == "'/name': field is required"
        assert "pydantic.dev" not in result

    def test_multiple_errors_joined(self) -> None:
        """Verify several errors are listed on one line."""
        # Given
        error = capture_error(RegistryDescriptor, {"name": "m"})

        # When
        result = format_validation_errors(error)

        # Then
        assert "'/description': field is required" in result
        assert "'/owner': field is required" in result
        assert "; " in result


class TestHandleCliError:
    """Tests for handle_cli_error."""

    def test_validation_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Verify ValidationError maps to GENERAL_ERROR with a clean message."""
        # Given
        error = capture_error(ItemDescriptor, {})

        # When
        code = handle_cli_error(error)

        # Then
        assert code == exit_codes.GENERAL_ERROR
        assert "Invalid configuration" in capsys.readouterr().out

    def test_json_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Verify JSONDecodeError maps to GENERAL_ERROR."""
        # Given
        try:
            json.loads("{")
        except json.JSONDecodeError as e:
            error = e

        # When
        code = handle_cli_error(error)

        # Then
        assert code == exit_codes.GENERAL_ERROR
        assert "Invalid JSON" in capsys.readouterr().out

    def test_os_error_with_filename(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Verify OSError shows strerror and filename."""
        # Given
        error = FileNotFoundError(2, "No such file or directory", "/missing.json")

        # When
        code = handle_cli_error(error)

        # Then
        assert code == exit_codes.GENERAL_ERROR
        assert "/missing.json" in capsys.readouterr().out

    def test_yaml_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Verify YAMLError maps to GENERAL_ERROR."""
        # When
        code = handle_cli_error(yaml.YAMLError("bad"))

        # Then
        assert code == exit_codes.GENERAL_ERROR
        assert "Invalid YAML" in capsys.readouterr().out

    def test_unexpected_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Verify other exceptions are reported without a traceback."""
        # When
        code = handle_cli_error(RuntimeError("boom"))

        # Then
        assert code == exit_codes.GENERAL_ERROR
        output = capsys.readouterr().out
        assert "Unexpected error: boom" in output
        assert "Traceback" not in output


class TestDomainErrors:
    """Tests for domain exception messages."""

    def test_plugins_root_not_found_message(self, tmp_path: Path) -> None:
        """Verify the message names the missing directory."""
        # When
        error = PluginsRootNotFoundError(tmp_path / "plugins")

        # Then
        assert str(error) == f"Plugins directory not found: {tmp_path / 'plugins'}"
        assert error.path == tmp_path / "plugins"
