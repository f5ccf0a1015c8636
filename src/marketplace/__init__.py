"""Plugin marketplace tooling: legacy migration and registry validation."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("marketplace-tools")
except PackageNotFoundError:
    __version__ = "0.0.0"
