"""Base source transformer defining the raw record -> CatalogModel contract."""

import contextlib
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from model_catalog.consts import NEW_MODEL_DAYS, UNKNOWN_PROVIDER
from model_catalog.models.model_catalog import CatalogModel, SourceType, TransformerDefaults
from model_catalog.normalization.coercion import to_non_negative

_EMPTY: Mapping[str, Any] = {}
_YEAR_MONTH_PATTERN = re.compile(r"\d{4}(-\d{2})?")


def as_record(value: Any) -> Mapping[str, Any]:
    """Return value if it is a mapping, else an empty mapping."""
    return value if isinstance(value, Mapping) else _EMPTY


def first_present(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key that is present and not None.

    Callers pass the snake_case spelling first so it wins when a payload
    carries both spellings.
    """
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def first_string(record: Mapping[str, Any], *keys: str) -> str:
    """Return the first string value among keys, or ""."""
    for key in keys:
        value = record.get(key)
        if isinstance(value, str):
            return value
    return ""


def is_valid_string(value: Any) -> bool:
    """Return True for a string with non-whitespace content."""
    return isinstance(value, str) and value.strip() != ""


def unique(values: Iterable[str]) -> list[str]:
    """Remove duplicates, keeping first occurrence."""
    return list(dict.fromkeys(values))


def parse_date(value: str) -> datetime | None:
    """Parse an ISO date or datetime string into an aware UTC datetime.

    Reduced precision dates ("2024-05", "2024") mean the start of that month
    or year.
    """
    if not value:
        return None
    text = value.strip()
    if _YEAR_MONTH_PATTERN.fullmatch(text):
        text = f"{text}-01" if len(text) == 7 else f"{text}-01-01"
    parsed = None
    with contextlib.suppress(ValueError, TypeError):
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def is_new_release(release_date: str, now: datetime | None = None) -> bool:
    """Check whether a release date falls within the new-model window.

    Args:
        release_date: ISO date string (may be empty or malformed).
        now: Evaluation time, defaults to the current UTC time.

    Returns:
        True if the date parses and is no older than NEW_MODEL_DAYS.
    """
    released = parse_date(release_date)
    if released is None:
        return False
    current_time = now or datetime.now(UTC)
    if current_time.tzinfo is None:
        current_time = current_time.replace(tzinfo=UTC)
    return released >= current_time - timedelta(days=NEW_MODEL_DAYS)


def number_or_default(value: Any, default: int | float) -> int | float:
    """Coerce value to a non-negative number, using default when it is missing or 0."""
    number = to_non_negative(value)
    return number if number else default


def resolve_provider(model_id: Any, name: Any, provider: str) -> str:
    """Apply the unreliable-record rule to a provider name.

    A record without both a usable id and a usable name keeps its place in
    the catalog but is tagged with the Unknown provider.
    """
    if is_valid_string(model_id) and is_valid_string(name):
        return provider
    return UNKNOWN_PROVIDER


class SourceTransformer(ABC):
    """Abstract base class for provider-family transformers.

    Each transformer maps one raw provider record to a CatalogModel and never
    raises: structurally invalid input still yields a model built from the
    transformer's default table.
    """

    source: SourceType
    defaults: TransformerDefaults = TransformerDefaults()

    def __init__(self, defaults: TransformerDefaults | None = None):
        """Initialize transformer.

        Args:
            defaults: Optional replacement for the class-level default table.
        """
        if defaults is not None:
            self.defaults = defaults

    @abstractmethod
    def transform(
        self,
        raw: Any,
        provider: str | None = None,
        *,
        now: datetime | None = None,
    ) -> CatalogModel:
        """Transform one raw record.

        Args:
            raw: Raw record as decoded from the provider payload.
            provider: Provider name hint (the payload key it was found under).
            now: Evaluation time used for the ``new`` flag.

        Returns:
            Canonical CatalogModel.
        """
        ...

    def __call__(
        self, raw: Any, provider: str | None = None, *, now: datetime | None = None
    ) -> CatalogModel:
        return self.transform(raw, provider, now=now)
