"""Loading of the registry descriptor and discovery of plugin manifests.

Problems with individual files are recorded as findings; one broken
manifest never stops discovery of the others.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from marketplace.config import MANIFEST_FILE, PLUGINS_DIR, REGISTRY_FILE, ValidatorConfig
from marketplace.errors import PluginsRootNotFoundError
from marketplace.plugin_schema import ItemDescriptor, ItemRef
from marketplace.registry_schema import RegistryDescriptor, RegistryRefs
from marketplace.schema import validate_contract
from marketplace.validation import ValidationResult


class _Unreadable:
    """Sentinel for files that exist but do not hold valid JSON."""


UNREADABLE = _Unreadable()


@dataclass(frozen=True)
class LoadedRegistry:
    """A parsed marketplace.json.

    Attributes:
        path: Location of the file.
        refs: Names referenced by the file, read leniently.
        descriptor: The validated descriptor, or None if it broke the contract.
    """

    path: Path
    refs: RegistryRefs
    descriptor: RegistryDescriptor | None


@dataclass(frozen=True)
class DiscoveredItem:
    """A plugin directory found under plugins/.

    Attributes:
        directory: The plugin directory.
        manifest_path: Location of its plugin.json.
        ref: Identity read leniently, or None if the manifest has no name.
        descriptor: The validated manifest, or None if it broke the contract.
    """

    directory: Path
    manifest_path: Path
    ref: ItemRef | None
    descriptor: ItemDescriptor | None

    @property
    def label(self) -> str:
        """Name used in messages: the declared name, else the directory name."""
        return self.ref.name if self.ref is not None else self.directory.name


def read_json(path: Path) -> Any:
    """Read a JSON file, returning UNREADABLE if it cannot be read or parsed."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return UNREADABLE


def _report_schema_issues(result: ValidationResult, issues: list[tuple[str, str]], path: Path) -> None:
    for field_path, reason in issues:
        result.error(f"Schema error: {field_path} {reason}", path)


def load_registry(root: Path, result: ValidationResult, config: ValidatorConfig) -> LoadedRegistry | None:
    """Load and schema-validate marketplace.json.

    Args:
        root: Marketplace root.
        result: Accumulator for findings.
        config: Validator configuration (supplies the category set).

    Returns:
        LoadedRegistry, or None if the file is missing or not JSON.
    """
    path = root / REGISTRY_FILE
    if not path.exists():
        result.error("marketplace.json not found", path)
        return None

    data = read_json(path)
    if data is UNREADABLE:
        result.error("marketplace.json is not valid JSON", path)
        return None

    descriptor, issues = validate_contract(RegistryDescriptor, data, config.categories)
    _report_schema_issues(result, issues, path)

    try:
        refs = RegistryRefs.model_validate(data)
    except ValidationError:
        refs = RegistryRefs()

    result.note(f"Found {len(refs.plugins)} plugins in marketplace.json")
    result.note(f"Found {len(refs.collections)} collections in marketplace.json")
    return LoadedRegistry(path=path, refs=refs, descriptor=descriptor)


def load_item(manifest_path: Path, result: ValidationResult, config: ValidatorConfig) -> DiscoveredItem | None:
    """Load and schema-validate one plugin.json.

    Returns:
        DiscoveredItem, or None if the manifest is not JSON.
    """
    directory = manifest_path.parent.parent
    data = read_json(manifest_path)
    if data is UNREADABLE:
        result.error("plugin.json is not valid JSON", manifest_path)
        return None

    descriptor, issues = validate_contract(ItemDescriptor, data, config.categories)
    _report_schema_issues(result, issues, manifest_path)

    try:
        ref = ItemRef.model_validate(data)
    except ValidationError:
        ref = None

    return DiscoveredItem(
        directory=directory,
        manifest_path=manifest_path,
        ref=ref,
        descriptor=descriptor,
    )


def discover_items(root: Path, result: ValidationResult, config: ValidatorConfig) -> list[DiscoveredItem]:
    """Find and load every plugins/*/.claude-plugin/plugin.json.

    Directories are visited in sorted order. Manifests that are not JSON
    are reported and skipped.

    Raises:
        PluginsRootNotFoundError: If the plugins/ directory does not exist.
    """
    plugins_root = root / PLUGINS_DIR
    if not plugins_root.is_dir():
        raise PluginsRootNotFoundError(plugins_root)

    manifest_paths = sorted(
        directory / MANIFEST_FILE
        for directory in plugins_root.iterdir()
        if directory.is_dir() and (directory / MANIFEST_FILE).is_file()
    )

    if not manifest_paths:
        result.warning("No plugins found in plugins/ directory")
        return []

    result.note(f"Found {len(manifest_paths)} plugin directories")

    items = []
    for manifest_path in manifest_paths:
        item = load_item(manifest_path, result, config)
        if item is not None:
            items.append(item)
    return items
