"""Utility functions for the SQLite adapter."""

from __future__ import annotations

import json
import uuid
from typing import Any


def generate_uuid() -> str:
    """Generate a new local identifier.

    Returns:
        UUID4 string (e.g., "123e4567-e89b-12d3-a456-426614174000")
    """
    return str(uuid.uuid4())


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary.

    Args:
        row: sqlite3.Row object

    Returns:
        Dictionary with column names as keys
    """
    if row is None:
        return {}
    return dict(row)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally (ESCAPE '\\')."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def placeholders(count: int) -> str:
    """Return a comma-separated list of ``?`` placeholders."""
    return ", ".join("?" for _ in range(count))


def dump_json(value: dict[str, Any] | None) -> str:
    return json.dumps(value or {}, sort_keys=True)


def load_json(value: str | None) -> dict[str, Any]:
    if not value:
        return {}
    return json.loads(value)
