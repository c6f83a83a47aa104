"""Tests for the normalization pipeline."""

from datetime import datetime

import pytest

from model_catalog.models.model_catalog import SourceType
from model_catalog.normalization.normalizer import (
    filter_by_provider,
    normalize_payload,
    normalize_records,
    normalize_source_response,
)


class TestNormalizePayload:
    """Tests for normalize_payload."""

    def test_flattens_in_provider_then_key_order(self, models_dev_payload: dict, now: datetime) -> None:
        models = normalize_payload(models_dev_payload, now=now)
        assert [m.id for m in models] == ["gpt-4o", "o1", "claude-sonnet"]
        assert [m.provider for m in models] == ["openai", "openai", "anthropic"]

    def test_new_flag_uses_evaluation_time(self, models_dev_payload: dict, now: datetime) -> None:
        models = {m.id: m for m in normalize_payload(models_dev_payload, now=now)}
        assert models["gpt-4o"].is_new is True
        assert models["claude-sonnet"].is_new is False

    @pytest.mark.parametrize("payload", [None, [], "text", 42, {}])
    def test_malformed_payload_is_empty(self, payload: object) -> None:
        assert normalize_payload(payload) == []

    def test_providers_without_models_are_skipped(self) -> None:
        payload = {
            "empty": {"name": "No models"},
            "broken": "not a mapping",
            "listed": {"models": [{"id": "a", "name": "A"}]},
        }
        models = normalize_payload(payload)
        assert [m.id for m in models] == ["a"]
        assert models[0].provider == "listed"

    def test_no_cross_provider_dedup(self) -> None:
        record = {"id": "shared", "name": "Shared"}
        payload = {"a": {"models": {"shared": record}}, "b": {"models": {"shared": record}}}
        models = normalize_payload(payload)
        assert [m.provider for m in models] == ["a", "b"]

    def test_source_named_provider_keys_use_models_dev_fields(self) -> None:
        payload = {
            "openrouter": {
                "models": {
                    "openai/gpt-4o": {
                        "id": "openai/gpt-4o",
                        "name": "GPT-4o",
                        "cost": {"input": 2.5, "output": 10},
                        "limit": {"context": 128000, "output": 16384},
                    }
                }
            },
            "huggingface": {
                "models": {
                    "moonshotai/Kimi-K2": {
                        "id": "moonshotai/Kimi-K2",
                        "name": "Kimi K2",
                        "cost": {"input": 1},
                        "limit": {"context": 131072},
                    }
                }
            },
        }
        models = normalize_payload(payload)

        assert [m.id for m in models] == ["openai/gpt-4o", "moonshotai/Kimi-K2"]
        assert [m.provider for m in models] == ["openrouter", "huggingface"]
        assert [m.input_cost for m in models] == [2.5, 1]
        assert [m.context_window for m in models] == [128000, 131072]

    def test_returns_fresh_list(self, models_dev_payload: dict) -> None:
        first = normalize_payload(models_dev_payload)
        second = normalize_payload(models_dev_payload)
        assert first == second
        assert first is not second

    def test_well_formed_record_round_trips(self, models_dev_payload: dict, now: datetime) -> None:
        raw = models_dev_payload["openai"]["models"]["gpt-4o"]
        record = normalize_payload(models_dev_payload, now=now)[0].to_record()

        assert record["id"] == raw["id"]
        assert record["name"] == raw["name"]
        assert record["contextWindow"] == raw["limit"]["context"]
        assert record["maxOutputTokens"] == raw["limit"]["output"]
        assert record["inputCost"] == raw["cost"]["input"]
        assert record["outputCost"] == raw["cost"]["output"]
        assert record["releaseDate"] == raw["release_date"]
        assert record["lastUpdated"] == raw["last_updated"]
        assert record["new"] is True


class TestNormalizeSourceResponse:
    """Tests for per-source envelope unwrapping."""

    def test_openrouter_envelope(self) -> None:
        payload = {"data": [{"id": "openai/gpt-4o", "name": "GPT-4o"}]}
        models = normalize_source_response(SourceType.OPENROUTER, payload)
        assert [m.id for m in models] == ["openai/gpt-4o"]

    def test_huggingface_list(self) -> None:
        models = normalize_source_response("huggingface", [{"id": "org/model-7b"}])
        assert [m.id for m in models] == ["huggingface/org/model-7b"]

    def test_artificial_analysis_rows(self) -> None:
        rows = [{"modelName": "Claude 4", "intelligenceIndex": 60}]
        models = normalize_source_response("artificialanalysis", rows)
        assert models[0].provider == "anthropic"

    def test_models_dev_map(self, models_dev_payload: dict) -> None:
        assert len(normalize_source_response("models.dev", models_dev_payload)) == 3

    @pytest.mark.parametrize(
        ("source", "payload"),
        [
            ("openrouter", [{"id": "x"}]),
            ("openrouter", {"data": "nope"}),
            ("huggingface", {"data": []}),
            ("artificialanalysis", None),
        ],
    )
    def test_wrong_envelope_is_empty(self, source: str, payload: object) -> None:
        assert normalize_source_response(source, payload) == []

    def test_unknown_source_treated_as_models_dev(self, models_dev_payload: dict) -> None:
        assert len(normalize_source_response("somewhere", models_dev_payload)) == 3


def test_normalize_records_uses_hint() -> None:
    models = normalize_records("models.dev", [{"id": "m", "name": "M"}], provider="acme")
    assert models[0].provider == "acme"


def test_filter_by_provider(sample_models: list) -> None:
    assert [m.id for m in filter_by_provider(sample_models, "openai")] == ["gpt-4o"]
    assert len(filter_by_provider(sample_models, None)) == len(sample_models)
