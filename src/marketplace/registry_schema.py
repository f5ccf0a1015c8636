"""Registry descriptor schema definitions using Pydantic.

This module defines the contract for marketplace.json, the single file that
lists every plugin in the marketplace and groups them into collections.
"""

from pydantic import AnyUrl, BaseModel, Field, ValidationInfo, field_validator

from marketplace.schema import EMAIL_PATTERN, NAME_PATTERN, VERSION_PATTERN, check_category


class OwnerInfo(BaseModel):
    """Owner of the marketplace."""

    name: str = Field(description="Owner display name")
    github: str | None = Field(default=None, description="GitHub handle")
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN, description="Contact email")


class PluginEntry(BaseModel):
    """Entry for a plugin in the registry."""

    name: str = Field(min_length=1, pattern=NAME_PATTERN, description="Plugin identifier")
    description: str = Field(min_length=10, description="One-line description")
    category: str | None = Field(default=None, description="Category tag")
    source: str = Field(description="Path of the plugin directory, relative to the root")
    homepage: AnyUrl | None = Field(default=None, description="Plugin homepage")
    tags: list[str] = Field(default_factory=list, description="Search tags")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Validate category against the allowed set."""
        return check_category(v, info)


class Collection(BaseModel):
    """A curated group of plugins."""

    name: str = Field(min_length=1, pattern=NAME_PATTERN, description="Collection identifier")
    description: str = Field(min_length=10, description="What the collection is for")
    plugins: list[str] = Field(description="Names of the plugins in the collection")


class RegistryDescriptor(BaseModel):
    """Root schema for marketplace.json."""

    name: str = Field(min_length=1, description="Marketplace name")
    version: str | None = Field(default=None, pattern=VERSION_PATTERN, description="Semantic version")
    description: str = Field(min_length=10, description="Marketplace description")
    owner: OwnerInfo = Field(description="Marketplace owner")
    plugins: list[PluginEntry] = Field(description="Available plugins, in listing order")
    collections: list[Collection] = Field(
        default_factory=list,
        description="Named plugin groupings",
    )


def _dicts(value: object) -> list[dict]:
    """Return the dict members of value if it is a list, else nothing."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _str_or_none(value: object) -> str | None:
    return value if isinstance(value, str) else None


class PluginRef(BaseModel):
    """Identity of a registry entry as used for cross-reference checks."""

    name: str
    source: str | None = None


class CollectionRef(BaseModel):
    """Membership of a collection as used for cross-reference checks."""

    name: str = ""
    plugins: list[str] = Field(default_factory=list)


class RegistryRefs(BaseModel):
    """Lenient view of marketplace.json holding only the referenced names.

    Parsed independently of RegistryDescriptor so that an entry breaking the
    contract (e.g. an upper-case name) still takes part in duplicate and
    reserved-name checks. Entries without a string name are left out.
    """

    plugins: list[PluginRef] = Field(default_factory=list)
    collections: list[CollectionRef] = Field(default_factory=list)

    @field_validator("plugins", mode="before")
    @classmethod
    def keep_named_entries(cls, v: object) -> list[dict]:
        """Drop entries that carry no usable name."""
        entries = []
        for entry in _dicts(v):
            if isinstance(entry.get("name"), str):
                entries.append({"name": entry["name"], "source": _str_or_none(entry.get("source"))})
        return entries

    @field_validator("collections", mode="before")
    @classmethod
    def keep_readable_members(cls, v: object) -> list[dict]:
        """Keep only the string members of each collection."""
        collections = []
        for entry in _dicts(v):
            members = entry.get("plugins")
            collections.append({
                "name": _str_or_none(entry.get("name")) or "",
                "plugins": [m for m in members if isinstance(m, str)] if isinstance(members, list) else [],
            })
        return collections

    @property
    def plugin_names(self) -> list[str]:
        """Plugin names in listing order, duplicates included."""
        return [plugin.name for plugin in self.plugins]
