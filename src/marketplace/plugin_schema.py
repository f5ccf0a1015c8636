"""Plugin manifest schema definitions using Pydantic.

This module defines the contract for .claude-plugin/plugin.json, the
manifest every plugin directory carries.
"""

from pydantic import AnyUrl, BaseModel, Field, ValidationInfo, field_validator

from marketplace.schema import EMAIL_PATTERN, NAME_PATTERN, VERSION_PATTERN, check_category


class AuthorInfo(BaseModel):
    """Structured author information."""

    name: str = Field(description="Author name")
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN, description="Author email")
    url: AnyUrl | None = Field(default=None, description="Author website")
    github: str | None = Field(default=None, description="GitHub handle")


class RepositoryInfo(BaseModel):
    """Structured source repository information."""

    type: str | None = Field(default=None, description="VCS type, e.g. git")
    url: str | None = Field(default=None, description="Repository URL")
    directory: str | None = Field(default=None, description="Subdirectory within the repository")


class ItemDescriptor(BaseModel):
    """Root schema for plugin.json files.

    Only name is required; every other field is type-checked when present.
    """

    name: str = Field(min_length=1, pattern=NAME_PATTERN, description="Plugin name")
    version: str | None = Field(default=None, pattern=VERSION_PATTERN, description="Semantic version")
    description: str | None = Field(default=None, description="Plugin description")
    author: str | AuthorInfo | None = Field(default=None, description="Author name or details")
    homepage: AnyUrl | None = Field(default=None, description="Plugin homepage")
    repository: str | RepositoryInfo | None = Field(default=None, description="Source repository")
    license: str | None = Field(default=None, description="SPDX license identifier")
    keywords: list[str] = Field(default_factory=list, description="Search keywords")
    category: str | None = Field(default=None, description="Category tag")
    dependencies: list[str] = Field(
        default_factory=list,
        description="Names of plugins this plugin builds on",
    )

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Validate category against the allowed set."""
        return check_category(v, info)


class ItemRef(BaseModel):
    """Identity of a plugin manifest as used for cross-reference checks.

    Parsed independently of ItemDescriptor so that a manifest breaking the
    contract still takes part in naming checks.
    """

    name: str
    dependencies: list[str] = Field(default_factory=list)

    @field_validator("dependencies", mode="before")
    @classmethod
    def keep_string_names(cls, v: object) -> list[str]:
        """Ignore dependency entries that are not names."""
        if not isinstance(v, list):
            return []
        return [name for name in v if isinstance(name, str)]
