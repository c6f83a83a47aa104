"""Transformer for models.dev provider records."""

from datetime import datetime
from typing import Any

from model_catalog.models.model_catalog import CatalogModel, SourceType, TransformerDefaults
from model_catalog.normalization.coercion import to_boolean, to_string_array
from model_catalog.normalization.transformers.base import (
    SourceTransformer,
    as_record,
    first_present,
    first_string,
    is_new_release,
    number_or_default,
    resolve_provider,
    unique,
)

# Boolean flag on the raw record -> capability name
CAPABILITY_FLAGS = {
    "tool_call": "tools",
    "reasoning": "reasoning",
    "knowledge": "knowledge",
}


class ModelsDevTransformer(SourceTransformer):
    """Transform models.dev records.

    models.dev groups models under provider keys, so the provider name comes
    from the payload key rather than the record itself.
    """

    source = SourceType.MODELS_DEV
    defaults = TransformerDefaults()

    def transform(
        self,
        raw: Any,
        provider: str | None = None,
        *,
        now: datetime | None = None,
    ) -> CatalogModel:
        defaults = self.defaults
        record = as_record(raw)
        cost = as_record(record.get("cost"))
        limit = as_record(record.get("limit"))
        modalities = as_record(record.get("modalities"))

        raw_id = record.get("id")
        raw_name = record.get("name")
        raw_provider = record.get("provider")
        hinted = provider or (raw_provider if isinstance(raw_provider, str) else None)

        # Flags must be literal booleans; the "knowledge" key doubles as a cutoff string
        capabilities = [
            capability
            for flag, capability in CAPABILITY_FLAGS.items()
            if record.get(flag) is True
        ]

        release_date = first_string(record, "release_date", "releaseDate")
        knowledge = record.get("knowledge")

        return CatalogModel(
            id=raw_id if isinstance(raw_id, str) else "",
            name=raw_name if isinstance(raw_name, str) else defaults.name,
            provider=resolve_provider(raw_id, raw_name, hinted or defaults.provider),
            context_window=number_or_default(limit.get("context"), defaults.context_window),
            max_output_tokens=number_or_default(limit.get("output"), defaults.max_output_tokens),
            input_cost=number_or_default(cost.get("input"), defaults.input_cost),
            output_cost=number_or_default(cost.get("output"), defaults.output_cost),
            cache_read_cost=number_or_default(
                first_present(cost, "cache_read", "cacheRead"), defaults.cache_read_cost
            ),
            cache_write_cost=number_or_default(
                first_present(cost, "cache_write", "cacheWrite"), defaults.cache_write_cost
            ),
            modalities=unique(
                to_string_array(modalities.get("input")) + to_string_array(modalities.get("output"))
            ),
            capabilities=capabilities,
            release_date=release_date,
            last_updated=first_string(record, "last_updated", "lastUpdated"),
            knowledge=knowledge if isinstance(knowledge, str) else "",
            open_weights=to_boolean(record.get("open_weights", defaults.open_weights)),
            supports_temperature=to_boolean(
                record.get("temperature", defaults.supports_temperature)
            ),
            supports_attachments=to_boolean(record.get("attachment", False)),
            is_new=is_new_release(release_date, now),
        )
