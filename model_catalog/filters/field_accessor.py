"""Dotted-path lookup into model records."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


class _Missing:
    """Marker for a path that does not resolve, distinct from a JSON null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def as_model_record(model: Any) -> Any:
    """Convert a pydantic model to its camelCase JSON record; pass anything else through."""
    if isinstance(model, BaseModel):
        return model.model_dump(mode="json", by_alias=True)
    return model


def get_field_value(record: Any, path: str) -> Any:
    """Resolve a dotted path such as 'limits.context' against a record.

    Args:
        record: Mapping (or pydantic model) to read from.
        path: Dot-separated key path.

    Returns:
        The nested value, or MISSING if any segment is absent or a
        non-mapping is reached before the path ends.
    """
    current = as_model_record(record)
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current
