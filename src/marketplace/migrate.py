"""Migration of legacy skill and agent records into marketplace plugins.

A legacy source tree holds skills/<name>/SKILL.md and agents/<name>/AGENT.md,
each with an optional metadata.json. Every record becomes a plugin directory
under plugins/, and marketplace.json is rewritten to list them.
"""

import json
import re
import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from marketplace.config import (
    MANIFEST_FILE,
    PLUGINS_DIR,
    README_FILE,
    REGISTRY_FILE,
    ValidatorConfig,
)
from marketplace.errors import MigrationSourceNotFoundError, format_validation_errors
from marketplace.loader import UNREADABLE, read_json
from marketplace.plugin_schema import AuthorInfo, ItemDescriptor
from marketplace.registry_schema import PluginEntry
from marketplace.sanitize import sanitize_plugin_name
from marketplace.schema import VERSION_PATTERN

LEGACY_METADATA_FILE = "metadata.json"
DEFAULT_VERSION = "1.0.0"
DEFAULT_CATEGORY = "development"
DEFAULT_LICENSE = "MIT"
MAX_KEYWORDS = 6
MIN_DESCRIPTION_LENGTH = 10

# Legacy category labels that do not lower-case into a valid category
CATEGORY_MAP = {
    "Debugging": "debugging",
    "Development": "development",
    "Testing": "testing",
    "CI/CD": "cicd",
    "GitOps": "gitops",
    "Security": "security",
    "Documentation": "documentation",
    "Architecture": "architecture",
    "Database": "database",
    "Performance": "monitoring",
    "Code Review": "code-review",
    "Learning": "learning",
    "Productivity": "productivity",
}

# (name, description, members); members missing from a migration are dropped
COLLECTIONS = (
    (
        "essential",
        "Core development workflow plugins for everyday use",
        (
            "developer",
            "systematic-debugging",
            "test-driven-development",
            "requesting-code-review",
            "architect",
        ),
    ),
    (
        "devops",
        "CI/CD, GitOps, and infrastructure automation plugins",
        (
            "cicd-pipelines",
            "cicd-deployments",
            "cicd-release",
            "gitops-branching",
            "gitops-worktrees",
            "gitops-completion",
            "gitops-engineer",
        ),
    ),
    (
        "testing",
        "Test-driven development and quality assurance plugins",
        (
            "test-driven-development",
            "testing-anti-patterns",
            "test-analyst-expert",
            "verification-before-completion",
            "verification-runner",
        ),
    ),
    (
        "debugging",
        "Debugging, troubleshooting, and root cause analysis plugins",
        (
            "systematic-debugging",
            "debugger",
            "root-cause-tracing",
            "condition-based-waiting",
            "defense-in-depth",
        ),
    ),
)


class RecordKind(str, Enum):
    """Kinds of legacy records."""

    SKILL = "skill"
    AGENT = "agent"

    @property
    def directory(self) -> str:
        """Directory holding this kind, both in the legacy tree and in a plugin."""
        return f"{self.value}s"

    @property
    def primary_file(self) -> str:
        """Name of the record's content file in the legacy tree."""
        return f"{self.value.upper()}.md"


class LegacyDependencies(BaseModel):
    """Dependency lists of a legacy record."""

    skills: list[str] = Field(default_factory=list)
    agents: list[str] = Field(default_factory=list)


class LegacyMetadata(BaseModel):
    """Legacy metadata.json; every field is optional."""

    version: str | None = None
    description: str | None = None
    category: str | None = None
    dependencies: LegacyDependencies = Field(default_factory=LegacyDependencies)


@dataclass
class MigrationReport:
    """Outcome of a migration run.

    Attributes:
        migrated: Registry entries for the records that were migrated.
        skipped: One message per record that was not migrated.
        warnings: Non-fatal problems with migrated records.
        planned: Writes that a dry run would have performed.
        collections: Collection name to member names, as written.
    """

    migrated: list[PluginEntry] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    planned: list[str] = field(default_factory=list)
    collections: dict[str, list[str]] = field(default_factory=dict)


def map_category(legacy_category: str | None) -> str:
    """Map a legacy category label to a marketplace category."""
    if not legacy_category:
        return DEFAULT_CATEGORY
    if legacy_category in CATEGORY_MAP:
        return CATEGORY_MAP[legacy_category]
    return "-".join(legacy_category.lower().split())


def generate_keywords(name: str, legacy_category: str | None) -> list[str]:
    """Derive up to MAX_KEYWORDS search keywords from a name and category."""
    keywords = [part for part in name.split("-") if len(part) > 2]

    if legacy_category:
        keywords.append(legacy_category.lower())

    if "test" in name:
        keywords.append("testing")
    if "debug" in name:
        keywords.append("debugging")
    if "git" in name:
        keywords.append("git")
    if "cicd" in name or "ci-cd" in name:
        keywords.append("automation")
    if "review" in name:
        keywords.append("code-review")

    return list(dict.fromkeys(keywords))[:MAX_KEYWORDS]


def _author_line(author: AuthorInfo) -> str:
    if author.github:
        return f"{author.name} ([@{author.github}](https://github.com/{author.github}))"
    return author.name


def generate_readme(kind: RecordKind, manifest: ItemDescriptor, author: AuthorInfo) -> str:
    """Render the README.md for a migrated plugin."""
    if kind is RecordKind.SKILL:
        usage = "This skill is automatically activated when relevant contexts are detected."
    else:
        usage = f'Invoke this agent using the Task tool with `subagent_type="{manifest.name}"`.'

    return f"""# {manifest.name}

{manifest.description}

## Installation

```bash
/plugin install {manifest.name}
```

## Usage

{usage}

## Category

{manifest.category}

## Author

{_author_line(author)}

## License

{manifest.license}
"""


class Migrator:
    """Converts a legacy source tree into plugins under a marketplace root."""

    def __init__(
        self,
        source: Path,
        root: Path,
        config: ValidatorConfig | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        """Initialize with the legacy source, the marketplace root and options."""
        self.source = source
        self.root = root
        self.config = config or ValidatorConfig()
        self.dry_run = dry_run
        self.author = AuthorInfo(name=self.config.author.name, github=self.config.author.github)

    @property
    def plugins_dir(self) -> Path:
        """Directory the plugins are written to."""
        return self.root / PLUGINS_DIR

    @property
    def fallback_category(self) -> str:
        """Category given to records whose own category is not allowed."""
        if DEFAULT_CATEGORY in self.config.categories or not self.config.categories:
            return DEFAULT_CATEGORY
        return self.config.categories[0]

    def find_records(self, kind: RecordKind) -> list[str]:
        """List legacy record directories of a kind that have their primary file."""
        kind_dir = self.source / kind.directory
        if not kind_dir.is_dir():
            return []
        return sorted(
            entry.name
            for entry in kind_dir.iterdir()
            if not entry.name.startswith(".") and (entry / kind.primary_file).is_file()
        )

    def run(self, kinds: Iterable[RecordKind] = (RecordKind.SKILL, RecordKind.AGENT)) -> MigrationReport:
        """Migrate every record of the given kinds and rewrite marketplace.json.

        Raises:
            MigrationSourceNotFoundError: If the source directory does not exist.
        """
        if not self.source.is_dir():
            raise MigrationSourceNotFoundError(self.source)

        report = MigrationReport()
        for kind in kinds:
            for legacy_name in self.find_records(kind):
                entry = self.migrate_record(kind, legacy_name, report)
                if entry is not None:
                    report.migrated.append(entry)

        self.write_registry(report)
        return report

    def load_metadata(self, record_dir: Path, report: MigrationReport) -> LegacyMetadata:
        """Read a record's metadata.json; unreadable metadata counts as empty."""
        metadata_path = record_dir / LEGACY_METADATA_FILE
        if not metadata_path.exists():
            return LegacyMetadata()

        data = read_json(metadata_path)
        if data is UNREADABLE:
            report.warnings.append(f"Ignoring unreadable metadata: {metadata_path}")
            return LegacyMetadata()

        try:
            return LegacyMetadata.model_validate(data)
        except ValidationError as e:
            report.warnings.append(
                f"Ignoring invalid metadata {metadata_path}: {format_validation_errors(e)}"
            )
            return LegacyMetadata()

    def build_manifest(
        self, kind: RecordKind, name: str, metadata: LegacyMetadata, report: MigrationReport
    ) -> ItemDescriptor:
        """Build the plugin.json contents for a record.

        Raises:
            ValidationError: If the legacy values break the manifest contract.
        """
        category = map_category(metadata.category)
        if category not in self.config.categories:
            report.warnings.append(
                f"Unknown category '{metadata.category or category}' for '{name}', "
                f"using '{self.fallback_category}'"
            )
            category = self.fallback_category

        version = metadata.version or DEFAULT_VERSION
        if not re.match(VERSION_PATTERN, version):
            report.warnings.append(f"Invalid version '{version}' for '{name}', using '{DEFAULT_VERSION}'")
            version = DEFAULT_VERSION

        description = metadata.description
        if description and len(description) < MIN_DESCRIPTION_LENGTH:
            report.warnings.append(
                f"Description of '{name}' is shorter than {MIN_DESCRIPTION_LENGTH} characters, "
                "using the default"
            )
            description = None

        legacy_dependencies = (
            metadata.dependencies.skills if kind is RecordKind.SKILL else metadata.dependencies.agents
        )

        return ItemDescriptor.model_validate(
            {
                "name": name,
                "version": version,
                "description": description or f"Claude Code {kind.value}: {name}",
                "author": self.author.model_dump(mode="json", exclude_none=True),
                "category": category,
                "license": DEFAULT_LICENSE,
                "keywords": generate_keywords(name, metadata.category),
                "dependencies": self.map_dependencies(name, legacy_dependencies, report),
            },
            context={"categories": self.config.categories},
        )

    def map_dependencies(self, name: str, legacy_names: list[str], report: MigrationReport) -> list[str]:
        """Rename legacy dependency names the same way record names are renamed."""
        dependencies = []
        for legacy_name in legacy_names:
            try:
                dependencies.append(sanitize_plugin_name(legacy_name))
            except ValueError as e:
                report.warnings.append(f"Dropped dependency '{legacy_name}' of '{name}': {e}")
        return list(dict.fromkeys(dependencies))

    def migrate_record(
        self, kind: RecordKind, legacy_name: str, report: MigrationReport
    ) -> PluginEntry | None:
        """Migrate one legacy record.

        Returns:
            The registry entry for the new plugin, or None if it was skipped.
        """
        record_dir = self.source / kind.directory / legacy_name

        try:
            name = sanitize_plugin_name(legacy_name)
        except ValueError as e:
            report.skipped.append(f"Skipped {kind.value} '{legacy_name}': {e}")
            return None

        if any(entry.name == name for entry in report.migrated):
            report.skipped.append(f"Skipped {kind.value} '{legacy_name}': plugin '{name}' already migrated")
            return None

        metadata = self.load_metadata(record_dir, report)

        try:
            manifest = self.build_manifest(kind, name, metadata, report)
            entry = PluginEntry.model_validate(
                {
                    "name": name,
                    "description": manifest.description,
                    "category": manifest.category,
                    "source": f"./{PLUGINS_DIR}/{name}",
                    "tags": manifest.keywords,
                },
                context={"categories": self.config.categories},
            )
        except ValidationError as e:
            report.skipped.append(f"Skipped {kind.value} '{legacy_name}': {format_validation_errors(e)}")
            return None

        plugin_dir = self.plugins_dir / name
        self._write_json(plugin_dir / MANIFEST_FILE, _dump(manifest), report)
        self._copy(record_dir / kind.primary_file, plugin_dir / kind.directory / f"{name}.md", report)
        self._write_text(plugin_dir / README_FILE, generate_readme(kind, manifest, self.author), report)
        return entry

    def build_registry(self, report: MigrationReport) -> dict[str, Any]:
        """Build marketplace.json contents, keeping fields of an existing file."""
        existing = read_json(self.root / REGISTRY_FILE) if (self.root / REGISTRY_FILE).exists() else None
        if isinstance(existing, dict):
            registry = dict(existing)
        else:
            registry = {
                "name": "claude-plugins",
                "version": "1.0.0",
                "description": "Curated collection of Claude Code skills and agents",
                "owner": self.author.model_dump(mode="json", exclude_none=True),
            }

        names = {entry.name for entry in report.migrated}
        report.collections = {
            name: [member for member in members if member in names] for name, _, members in COLLECTIONS
        }

        registry["plugins"] = [_dump(entry) for entry in report.migrated]
        registry["collections"] = [
            {"name": name, "description": description, "plugins": report.collections[name]}
            for name, description, _ in COLLECTIONS
        ]
        return registry

    def write_registry(self, report: MigrationReport) -> None:
        """Rewrite marketplace.json to list the migrated plugins."""
        self._write_json(self.root / REGISTRY_FILE, self.build_registry(report), report)

    def _write_json(self, path: Path, data: Any, report: MigrationReport) -> None:
        self._write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n", report)

    def _write_text(self, path: Path, content: str, report: MigrationReport) -> None:
        if self.dry_run:
            report.planned.append(f"Would write: {path}")
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def _copy(self, src: Path, dest: Path, report: MigrationReport) -> None:
        if self.dry_run:
            report.planned.append(f"Would copy: {src} -> {dest}")
            return
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)


def _dump(model: BaseModel) -> dict[str, Any]:
    """Serialize a model for JSON output, leaving out unset optional fields."""
    return model.model_dump(mode="json", exclude_none=True, exclude_defaults=True)
