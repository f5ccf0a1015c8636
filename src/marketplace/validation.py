"""Validation result types for the marketplace validator.

Findings are collected per severity in the order they are reported. Only
error-severity findings decide whether a run passes.
"""

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Severity of a single validation finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Finding:
    """One reported validation outcome.

    Attributes:
        severity: How serious the finding is.
        message: Human-readable description.
        file: Optional path of the file or directory the finding refers to.
    """

    severity: Severity
    message: str
    file: str | None = None


@dataclass
class ValidationResult:
    """Append-only accumulator of findings for one validation run.

    Attributes:
        errors: Error findings, in report order.
        warnings: Warning findings, in report order.
        info: Informational findings, in report order.
        aborted: True when the run stopped on a fatal fault.
    """

    errors: list[Finding] = field(default_factory=list)
    warnings: list[Finding] = field(default_factory=list)
    info: list[Finding] = field(default_factory=list)
    aborted: bool = False

    def add(self, severity: Severity, message: str, file: object | None = None) -> None:
        """Record a finding under the given severity."""
        severity = Severity(severity)
        finding = Finding(severity, message, str(file) if file is not None else None)
        if severity is Severity.ERROR:
            self.errors.append(finding)
        elif severity is Severity.WARNING:
            self.warnings.append(finding)
        else:
            self.info.append(finding)

    def error(self, message: str, file: object | None = None) -> None:
        """Record an error finding."""
        self.add(Severity.ERROR, message, file)

    def warning(self, message: str, file: object | None = None) -> None:
        """Record a warning finding."""
        self.add(Severity.WARNING, message, file)

    def note(self, message: str, file: object | None = None) -> None:
        """Record an info finding."""
        self.add(Severity.INFO, message, file)

    def abort(self, message: str, file: object | None = None) -> None:
        """Record a fatal fault; the run is reported as aborted."""
        self.error(message, file)
        self.aborted = True

    @property
    def has_errors(self) -> bool:
        """True iff at least one error finding was recorded."""
        return len(self.errors) > 0

    @property
    def is_valid(self) -> bool:
        """True iff no error finding was recorded."""
        return not self.has_errors
