"""Normalization of raw provider payloads into canonical CatalogModels."""

from model_catalog.normalization.coercion import (
    is_record,
    to_boolean,
    to_number,
    to_string_array,
)
from model_catalog.normalization.normalizer import (
    filter_by_provider,
    normalize_payload,
    normalize_records,
    normalize_source_response,
)
from model_catalog.normalization.transformers import TRANSFORMERS, get_transformer

__all__ = [
    # Coercion
    "is_record",
    "to_number",
    "to_string_array",
    "to_boolean",
    # Pipeline
    "normalize_payload",
    "normalize_records",
    "normalize_source_response",
    "filter_by_provider",
    # Registry
    "TRANSFORMERS",
    "get_transformer",
]
