"""Transformer for OpenRouter /api/v1/models records."""

from datetime import datetime
from typing import Any

from model_catalog.models.model_catalog import CatalogModel, SourceType, TransformerDefaults
from model_catalog.normalization.coercion import to_string_array
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

# Supported request parameter -> capability name
CAPABILITY_PARAMETERS = {
    "tools": "tools",
}


def provider_from_id(model_id: Any) -> str:
    """Extract the vendor prefix of a 'vendor/model' id, or ""."""
    if not isinstance(model_id, str):
        return ""
    return model_id.split("/")[0]


class OpenRouterTransformer(SourceTransformer):
    """Transform OpenRouter records.

    OpenRouter ids carry the vendor ("openai/gpt-4o"), which takes precedence
    over the provider hint. Prices arrive as decimal strings.
    """

    source = SourceType.OPENROUTER
    defaults = TransformerDefaults(provider="unknown", max_output_tokens=4096)

    def transform(
        self,
        raw: Any,
        provider: str | None = None,
        *,
        now: datetime | None = None,
    ) -> CatalogModel:
        defaults = self.defaults
        record = as_record(raw)
        architecture = as_record(record.get("architecture"))
        pricing = as_record(record.get("pricing"))
        top_provider = as_record(record.get("top_provider") or record.get("topProvider"))

        raw_id = record.get("id")
        raw_name = record.get("name")
        parameters = to_string_array(
            first_present(record, "supported_parameters", "supportedParameters")
        )

        modalities = unique(
            to_string_array(architecture.get("input_modalities"))
            + to_string_array(architecture.get("output_modalities"))
        )
        capabilities = [
            capability
            for parameter, capability in CAPABILITY_PARAMETERS.items()
            if parameter in parameters
        ]

        vendor = provider_from_id(raw_id) or provider or defaults.provider
        release_date = first_string(record, "release_date", "releaseDate")
        description = record.get("description")

        return CatalogModel(
            id=raw_id if isinstance(raw_id, str) else "",
            name=raw_name if isinstance(raw_name, str) else defaults.name,
            provider=resolve_provider(raw_id, raw_name, vendor),
            context_window=number_or_default(
                first_present(record, "context_length", "contextLength"),
                defaults.context_window,
            ),
            max_output_tokens=number_or_default(
                top_provider.get("max_completion_tokens"), defaults.max_output_tokens
            ),
            input_cost=number_or_default(pricing.get("prompt"), defaults.input_cost),
            output_cost=number_or_default(pricing.get("completion"), defaults.output_cost),
            cache_read_cost=defaults.cache_read_cost,
            cache_write_cost=defaults.cache_write_cost,
            modalities=modalities,
            capabilities=capabilities,
            release_date=release_date,
            last_updated=first_string(record, "last_updated", "lastUpdated"),
            knowledge=description if isinstance(description, str) else "",
            open_weights=defaults.open_weights,
            supports_temperature="temperature" in parameters,
            supports_attachments="image" in modalities,
            is_new=is_new_release(release_date, now),
        )
