"""Source lookup and selection."""

import logging
import os

import httpx

from model_catalog.consts import SOURCE_PRESETS
from model_catalog.models.model_catalog import SourceType
from model_catalog.sources.artificial_analysis import ArtificialAnalysisSource
from model_catalog.sources.base_source import BaseSource
from model_catalog.sources.huggingface import HuggingFaceSource
from model_catalog.sources.models_dev import ModelsDevSource
from model_catalog.sources.openrouter import OpenRouterSource

logger = logging.getLogger(__name__)

SOURCES: dict[SourceType, type[BaseSource]] = {
    SourceType.MODELS_DEV: ModelsDevSource,
    SourceType.OPENROUTER: OpenRouterSource,
    SourceType.HUGGINGFACE: HuggingFaceSource,
    SourceType.ARTIFICIAL_ANALYSIS: ArtificialAnalysisSource,
}


def resolve_source_names(names: list[str] | None = None) -> list[SourceType]:
    """Resolve source names or presets to source types.

    Resolution order: explicit names > MODEL_CATALOG_SOURCES env var > all
    sources. Each entry may be a preset name ('all', 'default',
    'registries') or a source name; duplicates are dropped.

    Args:
        names: Source or preset names.

    Returns:
        Source types in first-mention order.

    Raises:
        ValueError: If a name is neither a preset nor a known source.
    """
    if not names:
        env_sources = os.getenv("MODEL_CATALOG_SOURCES", "").strip()
        if env_sources:
            names = [name.strip() for name in env_sources.split(",") if name.strip()]
        else:
            names = ["all"]

    expanded: list[str] = []
    for name in names:
        expanded.extend(SOURCE_PRESETS.get(name.lower(), [name]))

    resolved: list[SourceType] = []
    for name in expanded:
        try:
            source_type = SourceType(name.lower())
        except ValueError:
            valid = ", ".join([*SOURCE_PRESETS, *(s.value for s in SourceType)])
            raise ValueError(f"Unknown source '{name}'. Valid: {valid}") from None
        if source_type not in resolved:
            resolved.append(source_type)
    return resolved


def build_sources(
    names: list[str] | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[BaseSource]:
    """Instantiate the selected sources.

    Args:
        names: Source or preset names (see resolve_source_names).
        client: Optional HTTP client shared by all sources.

    Returns:
        One source instance per resolved source type.
    """
    source_types = resolve_source_names(names)
    logger.info(f"Sources: {[s.value for s in source_types]}")
    return [SOURCES[source_type](client=client) for source_type in source_types]
