"""Plugin name sanitization for migrated records.

Converts legacy directory names like "Systematic_Debugging" to valid plugin
names like "systematic-debugging".
"""

import re


def sanitize_plugin_name(legacy_name: str) -> str:
    """Convert a legacy directory name to a valid plugin name.

    Rules:
    - Lowercase
    - Replace spaces, underscores and dots with hyphens
    - Strip all characters except alphanumeric and hyphens
    - Collapse consecutive hyphens and trim them from both ends

    Names that already follow the rules come back unchanged.

    Args:
        legacy_name: Directory name from the legacy layout.

    Returns:
        A plugin name matching ^[a-z0-9-]+$

    Raises:
        ValueError: If nothing usable is left after sanitizing.
    """
    name = legacy_name.strip().lower()

    # Replace separators with hyphens
    name = re.sub(r"[ _.]+", "-", name)

    # Strip all characters except alphanumeric and hyphens
    name = re.sub(r"[^a-z0-9-]", "", name)

    # Collapse consecutive hyphens
    name = re.sub(r"-+", "-", name).strip("-")

    if not name:
        msg = f"Legacy name '{legacy_name}' cannot be sanitized: empty after processing"
        raise ValueError(msg)

    return name
