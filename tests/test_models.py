"""Tests for catalog, filter and storage models."""

import pytest
from pydantic import ValidationError

from model_catalog.models.model_catalog import CatalogModel, SourceType
from model_catalog.models.model_filter import ClauseType, Filter, Operator, RuleClause, Visibility
from model_catalog.models.model_storage import ModelSync, SyncStatus


class TestCatalogModel:
    """Tests for CatalogModel."""

    def test_defaults(self) -> None:
        model = CatalogModel()
        assert model.id == ""
        assert model.name == "Unknown"
        assert model.provider == "Unknown"
        assert model.modalities == []
        assert model.is_new is False

    def test_record_is_camel_case(self, openai_model: CatalogModel) -> None:
        record = openai_model.to_record()
        assert record["contextWindow"] == 128000
        assert record["supportsAttachments"] is True
        assert record["new"] is False
        assert "context_window" not in record

    def test_accepts_aliases(self) -> None:
        model = CatalogModel.model_validate({"id": "x", "contextWindow": 10, "new": True})
        assert model.context_window == 10
        assert model.is_new is True

    def test_frozen(self, openai_model: CatalogModel) -> None:
        with pytest.raises(ValidationError):
            openai_model.input_cost = 0

    def test_rejects_negative_values(self) -> None:
        with pytest.raises(ValidationError):
            CatalogModel(id="x", input_cost=-1)

    def test_source_type_values(self) -> None:
        assert SourceType("artificialanalysis") is SourceType.ARTIFICIAL_ANALYSIS


class TestFilter:
    """Tests for Filter and RuleClause."""

    def test_defaults(self) -> None:
        filter_ = Filter(owner_id="u", name="f", rules=[{"field": "id", "operator": "eq", "value": "x"}])
        assert filter_.version == 1
        assert filter_.usage_count == 0
        assert filter_.visibility == Visibility.PRIVATE
        assert filter_.rules[0].type == ClauseType.HARD
        assert filter_.rules[0].operator == Operator.EQ
        assert filter_.id

    def test_requires_rules(self) -> None:
        with pytest.raises(ValidationError):
            Filter(owner_id="u", name="f", rules=[])

    def test_requires_name(self) -> None:
        with pytest.raises(ValidationError):
            Filter(owner_id="u", name="", rules=[{"field": "id", "operator": "eq"}])

    def test_unknown_operator_is_kept(self) -> None:
        clause = RuleClause(field="id", operator="matches", value="x")
        assert clause.operator == "matches"

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RuleClause(field="id", operator="eq", type="soft", weight=-1)

    def test_serializes_camel_case(self, sample_filter: Filter) -> None:
        data = sample_filter.model_dump(mode="json", by_alias=True)
        assert data["ownerId"] == "user-1"
        assert data["usageCount"] == 0
        assert Filter.model_validate(data) == sample_filter


def test_model_sync_defaults() -> None:
    sync = ModelSync()
    assert sync.status == SyncStatus.RUNNING
    assert sync.sources == {}
    assert sync.completed_at is None
