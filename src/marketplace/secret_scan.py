"""Pattern-based detection of credential-like strings in plugin files.

Scanning is best-effort: files that cannot be read or decoded are skipped,
and nothing here ever aborts a validation run.
"""

import re
from collections.abc import Iterable, Iterator
from functools import cached_property
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from marketplace.validation import ValidationResult

# Reported pattern sources are cut to this many characters
PREVIEW_LENGTH = 30


class SecretMatcher(BaseModel):
    """A named regular-expression detector."""

    label: str = Field(description="Human-readable name of the secret kind")
    pattern: str = Field(description="Regular expression source")
    ignore_case: bool = Field(default=False, description="Match case-insensitively")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile."""
        try:
            re.compile(v)
        except re.error as e:
            msg = f"invalid regular expression: {e}"
            raise ValueError(msg) from e
        return v

    @cached_property
    def regex(self) -> re.Pattern[str]:
        """Compiled pattern."""
        return re.compile(self.pattern, re.IGNORECASE if self.ignore_case else 0)

    def matches(self, text: str) -> bool:
        """Return True if the pattern occurs anywhere in text."""
        return self.regex.search(text) is not None

    @property
    def preview(self) -> str:
        """Pattern source truncated for reporting."""
        return f"{self.pattern[:PREVIEW_LENGTH]}..."


DEFAULT_SECRET_MATCHERS: tuple[SecretMatcher, ...] = (
    SecretMatcher(
        label="API key assignment",
        pattern=r"""api[_-]?key\s*[:=]\s*['"][^'"]+['"]""",
        ignore_case=True,
    ),
    SecretMatcher(
        label="secret key assignment",
        pattern=r"""secret[_-]?key\s*[:=]\s*['"][^'"]+['"]""",
        ignore_case=True,
    ),
    SecretMatcher(
        label="password assignment",
        pattern=r"""password\s*[:=]\s*['"][^'"]+['"]""",
        ignore_case=True,
    ),
    SecretMatcher(
        label="token assignment",
        pattern=r"""token\s*[:=]\s*['"][^'"]+['"]""",
        ignore_case=True,
    ),
    SecretMatcher(label="OpenAI-style key", pattern=r"sk-[a-zA-Z0-9]{20,}"),
    SecretMatcher(label="GitHub personal access token", pattern=r"ghp_[a-zA-Z0-9]{36}"),
    SecretMatcher(label="GitHub refresh token", pattern=r"ghr_[a-zA-Z0-9]{36}"),
    SecretMatcher(label="GitHub fine-grained token", pattern=r"github_pat_[a-zA-Z0-9_]{22,}"),
)


class SecretScanner:
    """Scans a directory tree for text matching any configured matcher."""

    def __init__(
        self,
        matchers: Iterable[SecretMatcher] = DEFAULT_SECRET_MATCHERS,
        extensions: Iterable[str] = (".md", ".json", ".js", ".ts"),
        exclude_dirs: Iterable[str] = ("node_modules",),
    ) -> None:
        """Initialize with the detectors and the file selection rules."""
        self.matchers = tuple(matchers)
        self.extensions = frozenset(ext.lower() for ext in extensions)
        self.exclude_dirs = frozenset(exclude_dirs)

    def iter_files(self, directory: Path) -> Iterator[Path]:
        """Yield scannable files under directory in sorted order."""
        for path in sorted(directory.rglob("*")):
            relative = path.relative_to(directory)
            if any(part in self.exclude_dirs for part in relative.parts[:-1]):
                continue
            if path.suffix.lower() in self.extensions and path.is_file():
                yield path

    def find(self, text: str) -> list[SecretMatcher]:
        """Return the matchers that fire on text, in matcher order."""
        return [matcher for matcher in self.matchers if matcher.matches(text)]

    def scan(self, directory: Path, result: ValidationResult) -> int:
        """Scan directory, adding one error per (matcher, file) hit.

        Returns:
            Number of findings added.
        """
        count = 0
        for path in self.iter_files(directory):
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            for matcher in self.find(content):
                result.error(f"Potential secret detected ({matcher.label}): {matcher.preview}", path)
                count += 1
        return count
