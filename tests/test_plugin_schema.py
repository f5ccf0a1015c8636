"""Tests for the plugin.json contract."""

import pytest

from marketplace.plugin_schema import AuthorInfo, ItemDescriptor, ItemRef
from marketplace.schema import validate_contract


class TestItemDescriptorMinimal:
    """Tests for the minimal plugin manifest."""

    def test_name_only_is_valid(self) -> None:
        """Verify name is the only required field."""
        # When
        manifest = ItemDescriptor.model_validate({"name": "foo"})

        # Then
        assert manifest.name == "foo"
        assert manifest.keywords == []
        assert manifest.dependencies == []

    def test_name_is_required(self) -> None:
        """Verify a manifest without name is rejected."""
        # When
        manifest, issues = validate_contract(ItemDescriptor, {"description": "x"})

        # Then
        assert manifest is None
        assert issues == [("/name", "field is required")]

    @pytest.mark.parametrize("name", ["Foo", "foo_bar", "foo bar", ""])
    def test_invalid_names(self, name: str) -> None:
        """Verify names outside [a-z0-9-] are rejected."""
        # When
        _, issues = validate_contract(ItemDescriptor, {"name": name})

        # Then
        assert issues
        assert issues[0][0] == "/name"


class TestItemDescriptorOptionalFields:
    """Tests for optional plugin manifest fields."""

    def test_author_as_string(self) -> None:
        """Verify author may be a plain string."""
        # When
        manifest = ItemDescriptor.model_validate({"name": "foo", "author": "Jane"})

        # Then
        assert manifest.author == "Jane"

    def test_author_as_object(self) -> None:
        """Verify author may be an object with a name."""
        # When
        manifest = ItemDescriptor.model_validate(
            {"name": "foo", "author": {"name": "Jane", "github": "jane"}}
        )

        # Then
        assert isinstance(manifest.author, AuthorInfo)
        assert manifest.author.github == "jane"

    def test_author_object_requires_name(self) -> None:
        """Verify an author object without name is rejected."""
        # When
        _, issues = validate_contract(ItemDescriptor, {"name": "foo", "author": {"email": "a@b.io"}})

        # Then
        assert ("/author/name", "field is required") in issues

    def test_repository_as_string_or_object(self) -> None:
        """Verify repository accepts both shapes."""
        # When
        _, string_issues = validate_contract(
            ItemDescriptor, {"name": "foo", "repository": "https://github.com/x/y"}
        )
        _, object_issues = validate_contract(
            ItemDescriptor, {"name": "foo", "repository": {"type": "git", "url": "https://github.com/x/y"}}
        )

        # Then
        assert string_issues == []
        assert object_issues == []

    def test_keywords_must_be_list(self) -> None:
        """Verify keywords must be a list of strings."""
        # When
        _, issues = validate_contract(ItemDescriptor, {"name": "foo", "keywords": "a,b"})

        # Then
        assert issues == [("/keywords", "expected list")]

    def test_homepage_must_be_url(self) -> None:
        """Verify homepage must be a URL."""
        # When
        _, issues = validate_contract(ItemDescriptor, {"name": "foo", "homepage": "not a url"})

        # Then
        assert issues[0][0] == "/homepage"

    def test_category_checked_when_present(self) -> None:
        """Verify category is checked against the allowed set."""
        # When
        _, issues = validate_contract(ItemDescriptor, {"name": "foo", "category": "games"})

        # Then
        assert issues[0][0] == "/category"


class TestItemRef:
    """Tests for the lenient identity view of plugin.json."""

    def test_reads_name_and_dependencies(self) -> None:
        """Verify name and string dependencies are read."""
        # When
        ref = ItemRef.model_validate({"name": "Foo", "dependencies": ["a", 3, "b"], "version": "x"})

        # Then
        assert ref.name == "Foo"
        assert ref.dependencies == ["a", "b"]

    def test_non_list_dependencies_ignored(self) -> None:
        """Verify a malformed dependencies value is treated as empty."""
        # When
        ref = ItemRef.model_validate({"name": "foo", "dependencies": "a"})

        # Then
        assert ref.dependencies == []
