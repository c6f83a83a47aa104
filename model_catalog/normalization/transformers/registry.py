"""Registry of source transformers keyed by source type."""

from model_catalog.models.model_catalog import SourceType
from model_catalog.normalization.transformers.artificial_analysis import (
    ArtificialAnalysisTransformer,
)
from model_catalog.normalization.transformers.base import SourceTransformer
from model_catalog.normalization.transformers.huggingface import HuggingFaceTransformer
from model_catalog.normalization.transformers.models_dev import ModelsDevTransformer
from model_catalog.normalization.transformers.openrouter import OpenRouterTransformer

TRANSFORMERS: dict[SourceType, SourceTransformer] = {
    SourceType.MODELS_DEV: ModelsDevTransformer(),
    SourceType.OPENROUTER: OpenRouterTransformer(),
    SourceType.HUGGINGFACE: HuggingFaceTransformer(),
    SourceType.ARTIFICIAL_ANALYSIS: ArtificialAnalysisTransformer(),
}

DEFAULT_SOURCE = SourceType.MODELS_DEV


def get_transformer(key: SourceType | str | None) -> SourceTransformer:
    """Look up the transformer for a source type or payload provider key.

    Payload keys that are not a known source type (e.g. "openai" in a
    models.dev payload) resolve to the models.dev transformer.

    Args:
        key: Source type, its string value, or an arbitrary provider key.

    Returns:
        The registered transformer instance.
    """
    try:
        return TRANSFORMERS[SourceType(key)]
    except ValueError:
        return TRANSFORMERS[DEFAULT_SOURCE]
