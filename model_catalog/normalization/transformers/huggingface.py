"""Transformer for HuggingFace Hub /api/models records."""

import re
from datetime import datetime
from typing import Any

from model_catalog.models.model_catalog import CatalogModel, SourceType, TransformerDefaults
from model_catalog.normalization.coercion import to_boolean, to_string_array
from model_catalog.normalization.transformers.base import (
    SourceTransformer,
    as_record,
    first_string,
    is_new_release,
    is_valid_string,
    resolve_provider,
)

# Tag or pipeline tag -> capability name
PIPELINE_CAPABILITIES = {
    "text-generation": "text-generation",
    "text-classification": "classification",
    "question-answering": "qa",
    "token-classification": "ner",
}

MODALITY_TAGS = ["text", "image", "audio", "video"]

# Minimum parameter count (billions) -> context window estimate, checked in order
SIZE_CONTEXT_WINDOWS = [
    (70, 4096),
    (30, 8192),
    (7, 4096),
]

MAX_OUTPUT_CAP = 4096

_SIZE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)(b|k|m|g|t)", re.IGNORECASE)


def estimate_context_window(model_id: str, default: int | float) -> int | float:
    """Estimate a context window from a size hint such as '7b' in the model id.

    Args:
        model_id: HuggingFace repository id, e.g. 'meta-llama/Llama-2-70b-hf'.
        default: Window used when no size hint matches a bucket.

    Returns:
        Estimated context window in tokens.
    """
    match = _SIZE_PATTERN.search(model_id)
    if not match or match.group(2).lower() != "b":
        return default

    size = float(match.group(1))
    for min_size, window in SIZE_CONTEXT_WINDOWS:
        if size >= min_size:
            return window
    return default


class HuggingFaceTransformer(SourceTransformer):
    """Transform HuggingFace Hub records.

    The Hub exposes no pricing or limits, so those come from the default
    table and a size heuristic. Capabilities and modalities are inferred from
    tags and the pipeline tag.
    """

    source = SourceType.HUGGINGFACE
    defaults = TransformerDefaults(
        provider="huggingface",
        context_window=2048,
        modalities=("text",),
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

        raw_id = record.get("id")
        if not isinstance(raw_id, str):
            raw_id = record.get("modelId")
        repo_id = raw_id if isinstance(raw_id, str) else ""

        tags = to_string_array(record.get("tags"))
        pipeline_tag = first_string(record, "pipeline_tag", "pipelineTag")

        capabilities = [
            capability
            for signal, capability in PIPELINE_CAPABILITIES.items()
            if signal in tags or pipeline_tag == signal
        ]
        modalities = [
            modality
            for modality in MODALITY_TAGS
            if modality in tags or modality in pipeline_tag
        ] or list(defaults.modalities)

        context_window = estimate_context_window(repo_id, defaults.context_window)
        vendor = repo_id.split("/")[0] or provider or defaults.provider
        release_date = first_string(record, "created_at", "createdAt")

        return CatalogModel(
            id=f"huggingface/{repo_id}" if is_valid_string(repo_id) else "",
            name=repo_id or defaults.name,
            provider=resolve_provider(repo_id, repo_id, vendor),
            context_window=context_window,
            max_output_tokens=min(context_window, MAX_OUTPUT_CAP),
            input_cost=defaults.input_cost,
            output_cost=defaults.output_cost,
            cache_read_cost=defaults.cache_read_cost,
            cache_write_cost=defaults.cache_write_cost,
            modalities=modalities,
            capabilities=capabilities,
            release_date=release_date,
            last_updated=first_string(record, "last_modified", "lastModified"),
            knowledge=pipeline_tag,
            open_weights=not to_boolean(record.get("private", False))
            and not to_boolean(record.get("gated", False)),
            supports_temperature="text-generation" in capabilities,
            supports_attachments="image" in modalities,
            is_new=is_new_release(release_date, now),
        )
