"""Source transformers mapping raw provider records to CatalogModel."""

from model_catalog.normalization.transformers.artificial_analysis import (
    ArtificialAnalysisTransformer,
)
from model_catalog.normalization.transformers.base import SourceTransformer, is_new_release
from model_catalog.normalization.transformers.huggingface import HuggingFaceTransformer
from model_catalog.normalization.transformers.models_dev import ModelsDevTransformer
from model_catalog.normalization.transformers.openrouter import OpenRouterTransformer
from model_catalog.normalization.transformers.registry import TRANSFORMERS, get_transformer

__all__ = [
    # Base
    "SourceTransformer",
    "is_new_release",
    # Transformers
    "ModelsDevTransformer",
    "OpenRouterTransformer",
    "HuggingFaceTransformer",
    "ArtificialAnalysisTransformer",
    # Registry
    "TRANSFORMERS",
    "get_transformer",
]
