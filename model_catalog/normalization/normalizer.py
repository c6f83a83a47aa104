"""Normalization pipeline folding raw provider payloads into CatalogModels.

Every function here is total: malformed payloads produce an empty (or
shorter) list, never an exception.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from model_catalog.models.model_catalog import CatalogModel, SourceType
from model_catalog.normalization.coercion import is_record
from model_catalog.normalization.transformers.registry import TRANSFORMERS, get_transformer

logger = logging.getLogger(__name__)


def _provider_records(provider_data: Any) -> list[Any]:
    """Return the raw records nested under one provider entry of a payload."""
    if not is_record(provider_data):
        return []
    models = provider_data.get("models")
    if is_record(models):
        return list(models.values())
    if isinstance(models, list):
        return models
    return []


def normalize_payload(payload: Any, *, now: datetime | None = None) -> list[CatalogModel]:
    """Normalize a provider-keyed payload into a flat list of models.

    The payload has the models.dev shape: ``{provider: {"models": {id: record}}}``.
    Every record goes through the models.dev transformer, including those under
    keys that name another source (models.dev lists "openrouter" and
    "huggingface" as providers). The key is only the provider hint. Output
    order is provider order, then record order within each provider.

    Args:
        payload: Decoded JSON payload.
        now: Evaluation time for the ``new`` flag.

    Returns:
        Fresh list of CatalogModel, empty for malformed input.
    """
    if not is_record(payload):
        logger.debug(f"Skipping non-mapping payload of type {type(payload).__name__}")
        return []

    grouped = {
        provider: _provider_records(provider_data)
        for provider, provider_data in payload.items()
    }
    transformer = TRANSFORMERS[SourceType.MODELS_DEV]
    models = [
        transformer.transform(record, str(provider), now=now)
        for provider, records in grouped.items()
        for record in records
    ]

    for provider, records in grouped.items():
        if records:
            logger.debug(f"Normalized {len(records)} models for provider {provider}")
    logger.info(f"Normalized {len(models)} models from {len(grouped)} providers")
    return models


def normalize_records(
    source: SourceType | str,
    records: Iterable[Any],
    *,
    provider: str | None = None,
    now: datetime | None = None,
) -> list[CatalogModel]:
    """Transform a flat sequence of raw records with one source's transformer."""
    transformer = get_transformer(source)
    return [transformer.transform(record, provider, now=now) for record in records]


def _unwrap_records(source: SourceType, payload: Any) -> list[Any]:
    """Extract the record list from a flat source response envelope."""
    if source == SourceType.OPENROUTER:
        data = payload.get("data") if is_record(payload) else None
        return data if isinstance(data, list) else []
    if isinstance(payload, list):
        return payload
    return []


def normalize_source_response(
    source: SourceType | str,
    payload: Any,
    *,
    now: datetime | None = None,
) -> list[CatalogModel]:
    """Normalize a raw response as returned by one source's endpoint.

    Envelopes per source:
        models.dev: provider map (see normalize_payload)
        openrouter: ``{"data": [record, ...]}``
        huggingface: ``[record, ...]``
        artificialanalysis: ``[csv_row, ...]``

    Args:
        source: Source that produced the payload.
        payload: Decoded response body.
        now: Evaluation time for the ``new`` flag.

    Returns:
        Fresh list of CatalogModel, empty for malformed input.
    """
    try:
        source_type = SourceType(source)
    except ValueError:
        logger.warning(f"Unknown source {source!r}, treating payload as models.dev")
        source_type = SourceType.MODELS_DEV

    if source_type == SourceType.MODELS_DEV:
        return normalize_payload(payload, now=now)

    records = _unwrap_records(source_type, payload)
    models = normalize_records(source_type, records, now=now)
    logger.info(f"Normalized {len(models)} models from {source_type.value}")
    return models


def filter_by_provider(models: Iterable[CatalogModel], provider: str | None) -> list[CatalogModel]:
    """Keep models whose provider matches (case-insensitive); None keeps all."""
    if not provider:
        return list(models)
    wanted = provider.lower()
    return [model for model in models if model.provider.lower() == wanted]
