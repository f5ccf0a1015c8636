"""Cross-reference checks between marketplace.json and the plugin directories.

Existence and uniqueness problems are errors: the registry is broken and
validation fails. Completeness problems (missing README, name mismatch,
unlisted plugin, unknown collection member) are warnings and never affect
the outcome.
"""

from pathlib import Path

from marketplace.config import README_FILE, ValidatorConfig
from marketplace.loader import DiscoveredItem, LoadedRegistry
from marketplace.validation import ValidationResult


def find_duplicates(names: list[str]) -> list[str]:
    """Return every repeat occurrence in names, in order.

    The first occurrence of a name is not a duplicate; each later one is,
    so a name listed three times appears twice in the result.
    """
    seen: set[str] = set()
    duplicates = []
    for name in names:
        if name in seen:
            duplicates.append(name)
        seen.add(name)
    return duplicates


class CrossReferenceChecker:
    """Validates relationships between the registry and the plugins on disk."""

    def __init__(self, root: Path, config: ValidatorConfig) -> None:
        """Initialize with the marketplace root and validator configuration."""
        self.root = root
        self.config = config

    def check(
        self,
        registry: LoadedRegistry | None,
        items: list[DiscoveredItem],
        result: ValidationResult,
    ) -> None:
        """Run every cross-reference check, recording findings in result.

        Args:
            registry: Parsed marketplace.json, or None when unavailable or skipped.
            items: Plugin directories discovered on disk.
            result: Accumulator for findings.
        """
        registry_names = registry.refs.plugin_names if registry is not None else []

        if registry is not None:
            self.check_registry_duplicates(registry, result)
        self.check_reserved_names(registry, items, result)
        self.check_items(items, set(registry_names), result)
        if registry is not None:
            self.check_sources(registry, result)
            self.check_collections(registry, items, result)
        self.check_dependencies(items, set(registry_names), result)

    def check_registry_duplicates(self, registry: LoadedRegistry, result: ValidationResult) -> None:
        """Report each repeated plugin name in marketplace.json."""
        for name in find_duplicates(registry.refs.plugin_names):
            result.error(f"Duplicate plugin name in marketplace: {name}", registry.path)

    def check_reserved_names(
        self,
        registry: LoadedRegistry | None,
        items: list[DiscoveredItem],
        result: ValidationResult,
    ) -> None:
        """Report registry entries and manifests that use a reserved name."""
        if registry is not None:
            for name in registry.refs.plugin_names:
                if self.config.is_reserved(name):
                    result.error(f"Reserved plugin name: {name}", registry.path)

        for item in items:
            if item.ref is not None and self.config.is_reserved(item.ref.name):
                result.error(f"Reserved plugin name: {item.ref.name}", item.manifest_path)

    def check_items(self, items: list[DiscoveredItem], listed: set[str], result: ValidationResult) -> None:
        """Run the per-directory checks for each discovered plugin."""
        seen: set[str] = set()

        for item in items:
            if item.ref is not None:
                name = item.ref.name

                if name != item.directory.name:
                    result.warning(
                        f'Plugin name "{name}" doesn\'t match directory "{item.directory.name}"',
                        item.manifest_path,
                    )

                if name in seen:
                    result.error(f"Duplicate plugin name: {name}", item.manifest_path)
                seen.add(name)

                if name not in listed:
                    result.warning(f'Plugin "{name}" not listed in marketplace.json', item.manifest_path)

            if not (item.directory / README_FILE).exists():
                result.warning(f'Missing README.md for plugin "{item.label}"', item.directory)

            if not any((item.directory / sub).exists() for sub in self.config.content_dirs):
                result.warning(
                    f'Plugin "{item.label}" has no {_or_list(self.config.content_dirs)} directory',
                    item.directory,
                )

    def check_sources(self, registry: LoadedRegistry, result: ValidationResult) -> None:
        """Report registry entries whose source directory does not exist."""
        for plugin in registry.refs.plugins:
            if plugin.source is None:
                continue
            source_dir = self.root / plugin.source
            if not source_dir.exists():
                result.error(f"Marketplace plugin source not found: {plugin.source}", source_dir)

    def check_collections(
        self,
        registry: LoadedRegistry,
        items: list[DiscoveredItem],
        result: ValidationResult,
    ) -> None:
        """Report collection members that match neither a plugin nor a registry entry."""
        known = _item_names(items) | set(registry.refs.plugin_names)
        for collection in registry.refs.collections:
            for name in collection.plugins:
                if name not in known:
                    result.warning(f'Collection "{collection.name}" references unknown plugin: {name}')

    def check_dependencies(self, items: list[DiscoveredItem], listed: set[str], result: ValidationResult) -> None:
        """Report declared dependencies that match no known plugin."""
        known = _item_names(items) | listed
        for item in items:
            if item.ref is None:
                continue
            for dep in dict.fromkeys(item.ref.dependencies):
                if dep in known:
                    continue
                result.warning(f'Plugin "{item.ref.name}" depends on unknown plugin: {dep}', item.manifest_path)


def _item_names(items: list[DiscoveredItem]) -> set[str]:
    return {item.ref.name for item in items if item.ref is not None}


def _or_list(dirs: list[str]) -> str:
    """Render ["a", "b", "c"] as "a/, b/, or c/"."""
    labels = [f"{d}/" for d in dirs]
    if len(labels) <= 2:
        return " or ".join(labels)
    return ", ".join(labels[:-1]) + ", or " + labels[-1]
