"""Transformer for Artificial Analysis CSV dataset rows."""

import re
from datetime import datetime
from typing import Any

from model_catalog.models.model_catalog import CatalogModel, SourceType, TransformerDefaults
from model_catalog.normalization.coercion import to_number
from model_catalog.normalization.transformers.base import (
    SourceTransformer,
    as_record,
    first_string,
    is_new_release,
    is_valid_string,
    resolve_provider,
)

# Name substrings -> provider, first match wins
PROVIDER_PATTERNS = [
    (("gpt", "codex"), "openai"),
    (("claude",), "anthropic"),
    (("grok",), "xai"),
    (("o3", "o1"), "openai"),
    (("gemini", "bard"), "google"),
    (("llama",), "meta"),
    (("qwen",), "alibaba"),
    (("deepseek",), "deepseek"),
]

# Name substrings -> capability, all matches apply
CAPABILITY_PATTERNS = [
    (("reasoning", "thinking"), "reasoning"),
    (("vision", "image"), "vision"),
    (("tool", "function"), "tools"),
    (("code", "codex"), "coding"),
]

DEFAULT_CAPABILITY = "text-generation"

# Name substrings -> (context window, input cost, output cost), first match wins
PRICING_PATTERNS = [
    (("gpt-5", "o3"), (128000, 0.01, 0.03)),
    (("claude", "grok"), (200000, 0.015, 0.075)),
    (("gemini",), (1000000, 0.01, 0.02)),
]

MAX_OUTPUT_CAP = 4096


def _matches(name: str, needles: tuple[str, ...]) -> bool:
    return any(needle in name for needle in needles)


def _format_index(value: Any) -> str:
    number = to_number(value)
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def slugify(name: str) -> str:
    """Collapse whitespace runs to '-' and lowercase."""
    return re.sub(r"\s+", "-", name).lower()


class ArtificialAnalysisTransformer(SourceTransformer):
    """Transform Artificial Analysis leaderboard rows.

    The dataset only carries a model name and an intelligence index, so the
    provider, capabilities, limits and prices are all inferred from the name.
    """

    source = SourceType.ARTIFICIAL_ANALYSIS
    defaults = TransformerDefaults(
        provider="unknown",
        context_window=4096,
        modalities=("text",),
        supports_temperature=True,
    )

    def transform(
        self,
        raw: Any,
        provider: str | None = None,
        *,
        now: datetime | None = None,
    ) -> CatalogModel:
        defaults = self.defaults
        record = as_record(raw)

        model_name = first_string(record, "model_name", "modelName")
        lowered = model_name.lower()

        vendor = next(
            (name for needles, name in PROVIDER_PATTERNS if _matches(lowered, needles)),
            defaults.provider,
        )
        capabilities = [
            capability
            for needles, capability in CAPABILITY_PATTERNS
            if _matches(lowered, needles)
        ] or [DEFAULT_CAPABILITY]
        context_window, input_cost, output_cost = next(
            (pricing for needles, pricing in PRICING_PATTERNS if _matches(lowered, needles)),
            (defaults.context_window, defaults.input_cost, defaults.output_cost),
        )

        model_id = f"artificialanalysis/{slugify(model_name)}" if is_valid_string(model_name) else ""
        release_date = first_string(record, "release_date", "releaseDate")
        index = record.get("intelligence_index", record.get("intelligenceIndex"))

        return CatalogModel(
            id=model_id,
            name=model_name or defaults.name,
            provider=resolve_provider(model_id, model_name, vendor),
            context_window=context_window,
            max_output_tokens=min(context_window, MAX_OUTPUT_CAP),
            input_cost=input_cost,
            output_cost=output_cost,
            cache_read_cost=defaults.cache_read_cost,
            cache_write_cost=defaults.cache_write_cost,
            modalities=list(defaults.modalities),
            capabilities=capabilities,
            release_date=release_date,
            last_updated=first_string(record, "last_updated", "lastUpdated"),
            knowledge=f"Intelligence Index: {_format_index(index)}",
            open_weights=defaults.open_weights,
            supports_temperature=defaults.supports_temperature,
            supports_attachments=_matches(lowered, ("vision", "image")),
            is_new=is_new_release(release_date, now),
        )
