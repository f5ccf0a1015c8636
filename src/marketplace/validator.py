"""Validation pipeline for a marketplace repository.

Runs, in order: registry load and schema check, plugin discovery and
schema checks, cross-reference checks, then a secret scan of every
discovered plugin directory.
"""

from enum import Enum
from pathlib import Path

from marketplace.config import ValidatorConfig
from marketplace.crossref import CrossReferenceChecker
from marketplace.errors import PluginsRootNotFoundError
from marketplace.loader import DiscoveredItem, LoadedRegistry, discover_items, load_registry
from marketplace.secret_scan import SecretScanner
from marketplace.validation import ValidationResult


class ValidationScope(str, Enum):
    """Which halves of the pipeline to run."""

    ALL = "all"
    MARKETPLACE = "marketplace"
    PLUGINS = "plugins"


class MarketplaceValidator:
    """Validates a marketplace repository in a single synchronous pass."""

    def __init__(self, root: Path, config: ValidatorConfig | None = None) -> None:
        """Initialize with the marketplace root and optional configuration."""
        self.root = root
        self.config = config or ValidatorConfig()
        self.checker = CrossReferenceChecker(root, self.config)
        self.scanner = SecretScanner(
            matchers=self.config.secret_patterns,
            extensions=self.config.scan_extensions,
            exclude_dirs=self.config.scan_exclude_dirs,
        )

    def validate(self, scope: ValidationScope = ValidationScope.ALL) -> ValidationResult:
        """Run the pipeline and return a fresh result.

        A missing plugins/ directory aborts the run: the result is marked
        aborted and carries a single error for it on top of what the
        registry phase already reported.
        """
        result = ValidationResult()

        registry: LoadedRegistry | None = None
        if scope is not ValidationScope.PLUGINS:
            registry = load_registry(self.root, result, self.config)

        items: list[DiscoveredItem] = []
        if scope is not ValidationScope.MARKETPLACE:
            try:
                items = discover_items(self.root, result, self.config)
            except PluginsRootNotFoundError as e:
                result.abort(str(e), e.path)
                return result

        self.checker.check(registry, items, result)

        for item in items:
            self.scanner.scan(item.directory, result)

        return result


def validate_marketplace(
    root: Path,
    config: ValidatorConfig | None = None,
    scope: ValidationScope = ValidationScope.ALL,
) -> ValidationResult:
    """Validate the marketplace at root. Convenience wrapper around MarketplaceValidator."""
    return MarketplaceValidator(root, config).validate(scope)
