"""Pytest configuration and fixtures."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from model_catalog.models.model_catalog import CatalogModel
from model_catalog.models.model_filter import Filter, RuleClause
from model_catalog.storage.file_manager import FileManager

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time."""
    return NOW


@pytest.fixture
def models_dev_payload() -> dict:
    """Raw models.dev payload with two providers."""
    return {
        "openai": {
            "id": "openai",
            "name": "OpenAI",
            "models": {
                "gpt-4o": {
                    "id": "gpt-4o",
                    "name": "GPT-4o",
                    "tool_call": True,
                    "reasoning": False,
                    "attachment": True,
                    "temperature": True,
                    "knowledge": "2023-10",
                    "release_date": (NOW - timedelta(days=15)).date().isoformat(),
                    "last_updated": "2024-08-06",
                    "modalities": {"input": ["text", "image"], "output": ["text"]},
                    "open_weights": False,
                    "cost": {"input": 2.5, "output": 10, "cache_read": 1.25},
                    "limit": {"context": 128000, "output": 16384},
                },
                "o1": {
                    "id": "o1",
                    "name": "o1",
                    "reasoning": True,
                    "release_date": "2024-12-05",
                    "modalities": {"input": ["text"], "output": ["text"]},
                    "cost": {"input": "15", "output": "60"},
                    "limit": {"context": 200000, "output": 100000},
                },
            },
        },
        "anthropic": {
            "models": {
                "claude-sonnet": {
                    "id": "claude-sonnet",
                    "name": "Claude Sonnet",
                    "tool_call": True,
                    "releaseDate": (NOW - timedelta(days=40)).date().isoformat(),
                    "modalities": {"input": ["text", "image", "text"], "output": ["text"]},
                    "cost": {"input": 3, "output": 15, "cacheRead": 0.3, "cacheWrite": 3.75},
                    "limit": {"context": 200000, "output": 64000},
                },
            },
        },
    }


@pytest.fixture
def sample_models() -> list[CatalogModel]:
    """Canonical models for filter tests."""
    return [
        CatalogModel(
            id="gpt-4o",
            name="GPT-4o",
            provider="OpenAI",
            context_window=128000,
            max_output_tokens=16384,
            input_cost=2.5,
            output_cost=10,
            modalities=["text", "image"],
            capabilities=["tools"],
            supports_temperature=True,
            supports_attachments=True,
        ),
        CatalogModel(
            id="claude-sonnet",
            name="Claude Sonnet",
            provider="Anthropic",
            context_window=200000,
            max_output_tokens=64000,
            input_cost=3,
            output_cost=15,
            modalities=["text", "image"],
            capabilities=["tools", "reasoning"],
            supports_temperature=True,
        ),
        CatalogModel(
            id="llama-3-8b",
            name="Llama 3 8B",
            provider="meta",
            context_window=8192,
            max_output_tokens=4096,
            modalities=["text"],
            open_weights=True,
        ),
    ]


@pytest.fixture
def openai_model(sample_models: list[CatalogModel]) -> CatalogModel:
    """The OpenAI model from sample_models."""
    return sample_models[0]


@pytest.fixture
def sample_filter() -> Filter:
    """Filter requiring a 100k+ context window, preferring cheap tool-capable models."""
    return Filter(
        id="filter-1",
        owner_id="user-1",
        name="Long context",
        rules=[
            RuleClause(field="contextWindow", operator="gte", value=100000, type="hard"),
            RuleClause(field="capabilities", operator="contains", value="tools", type="soft", weight=0.8),
            RuleClause(field="inputCost", operator="lt", value=3, type="soft", weight=0.6),
        ],
    )


@pytest.fixture
def file_manager(tmp_path: Path) -> FileManager:
    """FileManager rooted in a temporary directory."""
    return FileManager(tmp_path)
