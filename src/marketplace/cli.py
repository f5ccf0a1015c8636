"""Marketplace CLI entry point."""

import sys
from pathlib import Path
from typing import Annotated

import typer

from marketplace import __version__, cli_logger, exit_codes
from marketplace.config import PLUGINS_DIR, ValidatorConfig, get_marketplace_root, load_config
from marketplace.errors import ConfigError, MigrationSourceNotFoundError, handle_cli_error
from marketplace.migrate import Migrator, RecordKind
from marketplace.report import print_report
from marketplace.validation import ValidationResult
from marketplace.validator import MarketplaceValidator, ValidationScope

app = typer.Typer(
    name="marketplace",
    help="Plugin marketplace tools - migrate legacy skills and agents, validate the registry.",
    no_args_is_help=True,
)

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        help="Marketplace root. Defaults to MARKETPLACE_ROOT or the current directory.",
    ),
]


def require_config(root: Path) -> ValidatorConfig:
    """Load validator.yaml from the marketplace root.

    Raises:
        typer.Exit: With GENERAL_ERROR if the configuration is invalid.
    """
    try:
        return load_config(root)
    except ConfigError as e:
        cli_logger.error(str(e))
        raise typer.Exit(exit_codes.GENERAL_ERROR) from e


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        cli_logger.info(f"marketplace v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Plugin marketplace tools - migrate legacy skills and agents, validate the registry."""


@app.command()
def validate(
    root: RootOption = None,
    marketplace_only: Annotated[
        bool,
        typer.Option("--marketplace-only", help="Only validate marketplace.json."),
    ] = False,
    plugins_only: Annotated[
        bool,
        typer.Option("--plugins-only", help="Only validate the plugin directories."),
    ] = False,
) -> None:
    """Validate marketplace.json and every plugin under plugins/.

    Checks schemas, duplicate and reserved names, cross references between
    the registry and the plugin directories, and scans plugin files for
    secrets. Exits 1 if any error was found; warnings never fail the run.
    """
    if marketplace_only and plugins_only:
        cli_logger.error("Cannot specify both --marketplace-only and --plugins-only")
        raise typer.Exit(exit_codes.INVALID_ARGS)

    marketplace_root = get_marketplace_root(root)
    config = require_config(marketplace_root)

    if marketplace_only:
        scope = ValidationScope.MARKETPLACE
    elif plugins_only:
        scope = ValidationScope.PLUGINS
    else:
        scope = ValidationScope.ALL

    cli_logger.heading("Claude Plugins Marketplace Validator")
    if scope is not ValidationScope.PLUGINS:
        cli_logger.info("Validating marketplace.json...")
    if scope is not ValidationScope.MARKETPLACE:
        cli_logger.info("Validating plugins...")

    try:
        result = MarketplaceValidator(marketplace_root, config).validate(scope)
    except OSError as e:
        result = ValidationResult()
        result.abort(f"Validation failed with error: {e}", e.filename)

    print_report(result)

    if result.has_errors:
        raise typer.Exit(exit_codes.GENERAL_ERROR)
    raise typer.Exit(exit_codes.SUCCESS)


@app.command()
def migrate(
    source: Annotated[
        Path,
        typer.Option(
            "--source",
            help="Legacy directory containing skills/ and agents/.",
        ),
    ],
    root: RootOption = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be written without writing anything."),
    ] = False,
    skills_only: Annotated[
        bool,
        typer.Option("--skills-only", help="Only migrate skills."),
    ] = False,
    agents_only: Annotated[
        bool,
        typer.Option("--agents-only", help="Only migrate agents."),
    ] = False,
) -> None:
    """Migrate legacy skills and agents into plugins and rewrite marketplace.json.

    Each record gets a plugin.json, a copy of its SKILL.md or AGENT.md and a
    generated README.md.
    """
    if skills_only and agents_only:
        cli_logger.error("Cannot specify both --skills-only and --agents-only")
        raise typer.Exit(exit_codes.INVALID_ARGS)

    marketplace_root = get_marketplace_root(root)
    config = require_config(marketplace_root)

    kinds = [
        kind
        for kind, excluded in ((RecordKind.SKILL, agents_only), (RecordKind.AGENT, skills_only))
        if not excluded
    ]

    cli_logger.heading("Claude Plugins Migration")
    cli_logger.rule()
    cli_logger.info(f"Source: {source}")
    cli_logger.info(f"Destination: {marketplace_root / PLUGINS_DIR}")
    if dry_run:
        cli_logger.warning("Mode: DRY RUN (no files will be modified)")

    migrator = Migrator(source.expanduser(), marketplace_root, config, dry_run=dry_run)
    try:
        report = migrator.run(kinds)
    except MigrationSourceNotFoundError as e:
        cli_logger.error(str(e))
        raise typer.Exit(exit_codes.GENERAL_ERROR) from e

    for entry in report.migrated:
        cli_logger.success(f"Migrated {entry.name}")
    for message in report.skipped:
        cli_logger.warning(message)
    for message in report.warnings:
        cli_logger.warning(message)
    for message in report.planned:
        cli_logger.dim(f"  [DRY RUN] {message}")

    cli_logger.success(f"Updated marketplace.json with {len(report.migrated)} plugins")
    cli_logger.rule()
    cli_logger.success("Migration complete!")
    cli_logger.info(f"Total plugins: {len(report.migrated)}")
    raise typer.Exit(exit_codes.SUCCESS)


def main_cli() -> None:
    """CLI entry point with top-level exception handling.

    Wraps the Typer app to catch any unhandled exceptions and format them
    as clean error messages instead of raw tracebacks.
    """
    try:
        app()
    except Exception as e:
        sys.exit(handle_cli_error(e))


if __name__ == "__main__":
    main_cli()
