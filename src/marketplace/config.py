"""Marketplace root resolution and validator configuration.

The fixed lists the validator works from (categories, reserved names,
secret detectors, ...) live in a ValidatorConfig that is passed to each
component. A repository can override them in .claude-plugin/validator.yaml.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from marketplace.errors import ConfigError, format_validation_errors
from marketplace.secret_scan import DEFAULT_SECRET_MATCHERS, SecretMatcher

# Environment variable for a custom marketplace root
MARKETPLACE_ROOT_ENV_VAR = "MARKETPLACE_ROOT"

# Repository layout, relative to the marketplace root
METADATA_DIR = ".claude-plugin"
REGISTRY_FILE = Path(METADATA_DIR) / "marketplace.json"
CONFIG_FILE = Path(METADATA_DIR) / "validator.yaml"
PLUGINS_DIR = "plugins"

# Layout inside each plugin directory
MANIFEST_FILE = Path(METADATA_DIR) / "plugin.json"
README_FILE = "README.md"

DEFAULT_CATEGORIES = (
    "development",
    "productivity",
    "testing",
    "debugging",
    "database",
    "deployment",
    "monitoring",
    "design",
    "security",
    "learning",
    "cicd",
    "gitops",
    "documentation",
    "code-review",
    "architecture",
    "operations",
    "quality-gates",
    "core-workflow",
    "task-management",
    "verification",
    "foundation",
    "memory",
    "code-quality",
    "data",
    "ai-ml",
    "infrastructure",
    "integration",
)

# Names implying first-party or system ownership
DEFAULT_RESERVED_NAMES = (
    "claude",
    "anthropic",
    "claude-code",
    "official",
    "core",
    "system",
    "built-in",
    "internal",
)


class AuthorConfig(BaseModel):
    """Author written into migrated plugin manifests."""

    name: str = Field(default="Plugin Maintainers", description="Author display name")
    github: str | None = Field(default=None, description="GitHub handle")


class ValidatorConfig(BaseModel):
    """Configuration shared by the validator and the migrator."""

    categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES),
        description="Allowed plugin categories",
    )
    reserved_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RESERVED_NAMES),
        description="Plugin names that may not be used (case-insensitive)",
    )
    content_dirs: list[str] = Field(
        default_factory=lambda: ["skills", "agents", "commands"],
        description="Subdirectories of which a plugin should have at least one",
    )
    scan_extensions: list[str] = Field(
        default_factory=lambda: [".md", ".json", ".js", ".ts"],
        description="File extensions the secret scanner reads",
    )
    scan_exclude_dirs: list[str] = Field(
        default_factory=lambda: ["node_modules"],
        description="Directory names the secret scanner skips",
    )
    secret_patterns: list[SecretMatcher] = Field(
        default_factory=lambda: list(DEFAULT_SECRET_MATCHERS),
        description="Secret detectors, applied in order",
    )
    author: AuthorConfig = Field(
        default_factory=AuthorConfig,
        description="Author for migrated plugins",
    )

    def is_reserved(self, name: str) -> bool:
        """Return True if name matches a reserved name, ignoring case."""
        return name.lower() in {reserved.lower() for reserved in self.reserved_names}


def get_marketplace_root(override: Path | None = None) -> Path:
    """Get the marketplace root directory.

    Resolution order:
    1. Explicit override (the --root option)
    2. MARKETPLACE_ROOT environment variable (if set)
    3. Current working directory

    Returns:
        Path to the marketplace root.
    """
    if override is not None:
        return override.expanduser()
    env_value = os.environ.get(MARKETPLACE_ROOT_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    return Path.cwd()


def load_config(root: Path) -> ValidatorConfig:
    """Load validator.yaml from the marketplace root.

    Args:
        root: Path to the marketplace root.

    Returns:
        Validated ValidatorConfig; defaults when the file does not exist.

    Raises:
        ConfigError: If YAML is invalid or schema validation fails.
    """
    config_path = root / CONFIG_FILE
    if not config_path.exists():
        return ValidatorConfig()

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in '{config_path}': {e}"
        raise ConfigError(msg) from e

    if data is None:
        return ValidatorConfig()

    try:
        return ValidatorConfig.model_validate(data)
    except ValidationError as e:
        clean_errors = format_validation_errors(e)
        msg = f"Invalid config '{config_path}': {clean_errors}"
        raise ConfigError(msg) from e
