"""Shared pieces of the registry and plugin manifest contracts."""

from collections.abc import Iterable
from typing import TypeVar

from pydantic import BaseModel, ValidationError, ValidationInfo

from marketplace.config import DEFAULT_CATEGORIES
from marketplace.errors import schema_issues

# Plugin and collection names: lowercase letters, digits and hyphens
NAME_PATTERN = r"^[a-z0-9-]+$"

# Semantic version prefix, e.g. "1.2.3" or "1.2.3-beta"
VERSION_PATTERN = r"^\d+\.\d+\.\d+"

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

ModelT = TypeVar("ModelT", bound=BaseModel)


def check_category(value: str | None, info: ValidationInfo) -> str | None:
    """Validate a category against the set passed in the validation context.

    Without a context the built-in category list applies.
    """
    if value is None:
        return value
    context = info.context or {}
    allowed: Iterable[str] = context.get("categories", DEFAULT_CATEGORIES)
    if value not in allowed:
        msg = f"must be one of the allowed categories, got '{value}'"
        raise ValueError(msg)
    return value


def validate_contract(
    model: type[ModelT], data: object, categories: Iterable[str] | None = None
) -> tuple[ModelT | None, list[tuple[str, str]]]:
    """Validate data against a contract model without raising.

    Returns:
        Tuple of (model instance or None, list of (field path, reason)).
    """
    context = {"categories": list(categories)} if categories is not None else None
    try:
        return model.model_validate(data, context=context), []
    except ValidationError as e:
        return None, list(schema_issues(e))
