"""Fetchers for external model metadata sources."""

from model_catalog.sources.artificial_analysis import (
    ArtificialAnalysisSource,
    parse_leaderboard_csv,
)
from model_catalog.sources.base_source import BaseSource
from model_catalog.sources.huggingface import HuggingFaceSource
from model_catalog.sources.models_dev import ModelsDevSource
from model_catalog.sources.openrouter import OpenRouterSource
from model_catalog.sources.rate_limiter import RateLimiter
from model_catalog.sources.registry import SOURCES, build_sources, resolve_source_names

__all__ = [
    # Base
    "BaseSource",
    "RateLimiter",
    # Sources
    "ModelsDevSource",
    "OpenRouterSource",
    "HuggingFaceSource",
    "ArtificialAnalysisSource",
    "parse_leaderboard_csv",
    # Selection
    "SOURCES",
    "build_sources",
    "resolve_source_names",
]
