"""Tests for the sync and filter evaluation pipelines."""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from model_catalog.errors import FilterNotFoundError, SourceFetchError, SyncError
from model_catalog.models.model_catalog import CatalogModel, SourceType
from model_catalog.models.model_filter import Filter
from model_catalog.models.model_storage import SyncStatus
from model_catalog.pipeline import (
    load_latest_models,
    resolve_data_dir,
    run_filter_evaluation,
    run_sync_pipeline,
)
from model_catalog.sources.base_source import BaseSource
from model_catalog.storage.file_manager import FileManager


class FakeSource(BaseSource):
    """Source returning canned models instead of fetching."""

    url = "https://example.invalid"

    def __init__(self, source_type: SourceType, models: list[CatalogModel] | None = None):
        super().__init__(retry_delay_ms=0)
        self.source_type = source_type
        self.models = models
        self.closed = False

    def parse_response(self, response):
        return None

    async def fetch_models(self, now: datetime | None = None) -> list[CatalogModel]:
        if self.models is None:
            raise SourceFetchError(self.name, "HTTP 503 after 3 retries")
        return self.models

    async def close(self) -> None:
        self.closed = True


class TestRunSyncPipeline:
    """Tests for run_sync_pipeline."""

    def test_stores_each_source(
        self, tmp_path: Path, sample_models: list[CatalogModel], now: datetime
    ) -> None:
        sources = [
            FakeSource(SourceType.MODELS_DEV, sample_models[:2]),
            FakeSource(SourceType.HUGGINGFACE, sample_models[2:]),
        ]
        sync, models = run_sync_pipeline(sources, data_dir=tmp_path, now=now)

        assert sync.status == SyncStatus.COMPLETED
        assert sync.sources == {"models.dev": 2, "huggingface": 1}
        assert sync.total_fetched == 3
        assert models == sample_models
        assert all(source.closed for source in sources)
        assert FileManager(tmp_path).get_latest_models() == sample_models

    def test_partial_failure(self, tmp_path: Path, sample_models: list[CatalogModel]) -> None:
        sources = [
            FakeSource(SourceType.MODELS_DEV, sample_models),
            FakeSource(SourceType.OPENROUTER, None),
        ]
        sync, models = run_sync_pipeline(sources, data_dir=tmp_path)

        assert sync.status == SyncStatus.COMPLETED
        assert sync.sources == {"models.dev": 3}
        assert len(models) == 3

    def test_all_sources_fail(self, tmp_path: Path) -> None:
        sources = [FakeSource(SourceType.MODELS_DEV), FakeSource(SourceType.OPENROUTER)]

        with pytest.raises(SyncError, match="All sources failed"):
            run_sync_pipeline(sources, data_dir=tmp_path)

        history = FileManager(tmp_path).get_sync_history()
        assert history[0].status == SyncStatus.FAILED
        assert "openrouter" in history[0].error_message

    def test_storage_error_marks_sync_failed(
        self, tmp_path: Path, sample_models: list[CatalogModel]
    ) -> None:
        sources = [FakeSource(SourceType.MODELS_DEV, sample_models)]

        with patch.object(FileManager, "store_model_batch", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                run_sync_pipeline(sources, data_dir=tmp_path)

        history = FileManager(tmp_path).get_sync_history()
        assert history[0].status == SyncStatus.FAILED
        assert history[0].error_message == "disk full"

    def test_unknown_source_name(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            run_sync_pipeline(["nope"], data_dir=tmp_path)


def test_resolve_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MODEL_CATALOG_DATA_DIR", str(tmp_path / "env"))
    assert resolve_data_dir() == tmp_path / "env"
    assert resolve_data_dir(tmp_path / "explicit") == tmp_path / "explicit"


def test_load_latest_models_by_provider(
    tmp_path: Path, sample_models: list[CatalogModel]
) -> None:
    run_sync_pipeline([FakeSource(SourceType.MODELS_DEV, sample_models)], data_dir=tmp_path)
    models = load_latest_models(provider="META", data_dir=tmp_path)
    assert [m.id for m in models] == ["llama-3-8b"]


class TestRunFilterEvaluation:
    """Tests for run_filter_evaluation."""

    @pytest.fixture
    def synced_dir(
        self, tmp_path: Path, sample_models: list[CatalogModel], sample_filter: Filter
    ) -> Path:
        run_sync_pipeline([FakeSource(SourceType.MODELS_DEV, sample_models)], data_dir=tmp_path)
        FileManager(tmp_path).create_filter(sample_filter)
        return tmp_path

    def test_records_run_and_usage(self, synced_dir: Path, now: datetime) -> None:
        evaluation, run = run_filter_evaluation(
            "filter-1", "user-2", limit=2, data_dir=synced_dir, now=now
        )

        assert evaluation.match_count == 2
        assert len(evaluation.results) == 2
        assert run.model_list == ["gpt-4o", "claude-sonnet", "llama-3-8b"]
        assert run.limit_used == 2

        file_manager = FileManager(synced_dir)
        assert file_manager.load_filter_run("filter-1", run.id).executed_by == "user-2"
        filter_ = file_manager.load_filter("filter-1")
        assert filter_.usage_count == 1
        assert filter_.last_used_at == now
        assert filter_.version == 1

    def test_model_subset(self, synced_dir: Path) -> None:
        evaluation, run = run_filter_evaluation(
            "filter-1", "user-1", model_ids=["llama-3-8b"], data_dir=synced_dir
        )
        assert evaluation.total_evaluated == 1
        assert run.model_ids_filter == ["llama-3-8b"]
        assert run.model_list == ["llama-3-8b"]

    def test_missing_filter(self, tmp_path: Path) -> None:
        with pytest.raises(FilterNotFoundError):
            run_filter_evaluation("missing", "user-1", data_dir=tmp_path)
