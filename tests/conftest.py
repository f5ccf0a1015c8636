"""Shared test fixtures for marketplace tests."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from marketplace.config import MANIFEST_FILE, PLUGINS_DIR, REGISTRY_FILE

DEFAULT_DESCRIPTION = "A plugin used in tests"


def write_json(path: Path, data: Any) -> Path:
    """Write data as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    return path


def registry_entry(name: str, **overrides: Any) -> dict[str, Any]:
    """Build a valid marketplace.json plugin entry for name."""
    entry = {
        "name": name,
        "description": DEFAULT_DESCRIPTION,
        "category": "development",
        "source": f"./plugins/{name}",
    }
    entry.update(overrides)
    return entry


def write_registry(
    root: Path,
    plugins: list[dict[str, Any]] | None = None,
    collections: list[dict[str, Any]] | None = None,
    **overrides: Any,
) -> Path:
    """Write a valid marketplace.json under root and return its path."""
    data = {
        "name": "test-marketplace",
        "version": "1.0.0",
        "description": "Marketplace used by the test suite",
        "owner": {"name": "Test Owner"},
        "plugins": plugins or [],
        "collections": collections or [],
    }
    data.update(overrides)
    return write_json(root / REGISTRY_FILE, data)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def marketplace_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an empty marketplace root with a plugins/ directory.

    Sets MARKETPLACE_ROOT so CLI commands resolve to it.
    """
    root = tmp_path / "marketplace"
    (root / PLUGINS_DIR).mkdir(parents=True)
    monkeypatch.setenv("MARKETPLACE_ROOT", str(root))
    return root


# Type alias for the plugin factory function
PluginFactory = Callable[..., Path]


@pytest.fixture
def create_plugin(marketplace_root: Path) -> PluginFactory:
    """Factory fixture that returns a function to create plugin directories.

    By default the plugin is complete: its manifest name matches the
    directory, and it has a README.md and a skills/ directory.

        plugin_dir = create_plugin("my-plugin")
        plugin_dir = create_plugin("bar", manifest={"name": "baz"}, readme=False)
    """

    def _create(
        directory: str,
        *,
        manifest: dict[str, Any] | None = None,
        readme: bool = True,
        content_dir: str | None = "skills",
    ) -> Path:
        plugin_dir = marketplace_root / PLUGINS_DIR / directory
        data = manifest if manifest is not None else {"name": directory, "version": "1.0.0"}
        write_json(plugin_dir / MANIFEST_FILE, data)
        if readme:
            (plugin_dir / "README.md").write_text(f"# {directory}\n")
        if content_dir is not None:
            (plugin_dir / content_dir).mkdir(parents=True, exist_ok=True)
        return plugin_dir

    return _create
