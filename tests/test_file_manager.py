"""Tests for the file-based catalog storage."""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from model_catalog.errors import (
    CatalogError,
    FilterNotFoundError,
    FilterRunNotFoundError,
    SyncError,
)
from model_catalog.filters.service import build_filter_run, evaluate_filter
from model_catalog.models.model_catalog import CatalogModel
from model_catalog.models.model_filter import Filter
from model_catalog.models.model_storage import SyncStatus
from model_catalog.storage.file_manager import FileManager


class TestSyncOperations:
    """Tests for sync history and model snapshots."""

    def test_full_sync_cycle(
        self, file_manager: FileManager, sample_models: list[CatalogModel], now: datetime
    ) -> None:
        sync = file_manager.start_sync(now=now)
        assert sync.status == SyncStatus.RUNNING

        path = file_manager.store_model_batch(sync.id, "models.dev", sample_models[:2], now=now)
        file_manager.store_model_batch(sync.id, "openrouter", sample_models[2:], now=now)
        assert path == file_manager.data_dir / "syncs" / sync.id / "models.dev.json"

        completed = file_manager.complete_sync(sync.id, total_fetched=3, now=now)
        assert completed.status == SyncStatus.COMPLETED
        assert completed.sources == {"models.dev": 2, "openrouter": 1}
        assert completed.total_stored == 3
        assert completed.completed_at == now

        assert file_manager.get_latest_models() == sample_models
        assert file_manager.get_latest_models("openrouter") == sample_models[2:]
        assert file_manager.get_latest_models("huggingface") == []

    def test_snapshot_uses_camel_case(
        self, file_manager: FileManager, sample_models: list[CatalogModel]
    ) -> None:
        sync = file_manager.start_sync()
        path = file_manager.store_model_batch(sync.id, "models.dev", sample_models)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["syncId"] == sync.id
        assert data["models"][0]["contextWindow"] == 128000
        assert "new" in data["models"][0]

    def test_latest_models_ignore_running_and_failed(
        self, file_manager: FileManager, sample_models: list[CatalogModel], now: datetime
    ) -> None:
        first = file_manager.start_sync(now=now - timedelta(hours=2))
        file_manager.store_model_batch(first.id, "models.dev", sample_models[:1])
        file_manager.complete_sync(first.id, total_fetched=1)

        running = file_manager.start_sync(now=now - timedelta(hours=1))
        file_manager.store_model_batch(running.id, "models.dev", sample_models)

        failed = file_manager.start_sync(now=now)
        file_manager.fail_sync(failed.id, "boom")

        assert file_manager.get_latest_models() == sample_models[:1]

    def test_no_completed_sync(self, file_manager: FileManager) -> None:
        assert file_manager.get_latest_models() == []

    def test_fail_sync(self, file_manager: FileManager) -> None:
        sync = file_manager.start_sync()
        failed = file_manager.fail_sync(sync.id, "All sources failed")
        assert failed.status == SyncStatus.FAILED
        assert failed.error_message == "All sources failed"
        assert failed.completed_at is not None

    def test_sync_history_newest_first(self, file_manager: FileManager, now: datetime) -> None:
        ids = [file_manager.start_sync(now=now + timedelta(minutes=i)).id for i in range(3)]
        history = file_manager.get_sync_history()
        assert [s.id for s in history] == list(reversed(ids))
        assert len(file_manager.get_sync_history(limit=2)) == 2

    def test_unknown_sync(self, file_manager: FileManager) -> None:
        with pytest.raises(SyncError):
            file_manager.complete_sync("missing", total_fetched=0)
        with pytest.raises(SyncError):
            file_manager.store_model_batch("missing", "models.dev", [])

    def test_rejects_path_like_keys(self, file_manager: FileManager) -> None:
        sync = file_manager.start_sync()
        with pytest.raises(CatalogError):
            file_manager.store_model_batch(sync.id, "../escape", [])


class TestFilterOperations:
    """Tests for saved filter storage."""

    def test_create_and_load(self, file_manager: FileManager, sample_filter: Filter) -> None:
        file_manager.create_filter(sample_filter)
        loaded = file_manager.load_filter("filter-1")
        assert loaded == sample_filter

        data = json.loads((file_manager.data_dir / "filters" / "filter-1.json").read_text())
        assert data["ownerId"] == "user-1"
        assert data["rules"][0]["operator"] == "gte"

    def test_create_duplicate(self, file_manager: FileManager, sample_filter: Filter) -> None:
        file_manager.create_filter(sample_filter)
        with pytest.raises(CatalogError):
            file_manager.create_filter(sample_filter)

    def test_load_missing(self, file_manager: FileManager) -> None:
        with pytest.raises(FilterNotFoundError):
            file_manager.load_filter("missing")

    def test_update_bumps_version(
        self, file_manager: FileManager, sample_filter: Filter, now: datetime
    ) -> None:
        file_manager.create_filter(sample_filter)
        updated = file_manager.update_filter(
            "filter-1",
            {"name": "Renamed", "rules": [{"field": "provider", "operator": "eq", "value": "x"}]},
            now=now,
        )
        assert updated.version == 2
        assert updated.name == "Renamed"
        assert updated.updated_at == now
        assert len(updated.rules) == 1
        assert file_manager.load_filter("filter-1").version == 2

    def test_update_ignores_immutable_fields(
        self, file_manager: FileManager, sample_filter: Filter
    ) -> None:
        file_manager.create_filter(sample_filter)
        updated = file_manager.update_filter("filter-1", {"owner_id": "thief", "version": 10})
        assert updated.owner_id == "user-1"
        assert updated.version == 2

    def test_update_ignores_camel_case_immutable_fields(
        self, file_manager: FileManager, sample_filter: Filter
    ) -> None:
        file_manager.create_filter(sample_filter)
        updated = file_manager.update_filter(
            "filter-1",
            {
                "ownerId": "mallory",
                "usageCount": 500,
                "createdAt": "2000-01-01T00:00:00Z",
                "description": "Updated",
            },
        )
        assert updated.owner_id == "user-1"
        assert updated.usage_count == 0
        assert updated.created_at == sample_filter.created_at
        assert updated.description == "Updated"

    def test_update_accepts_camel_case_fields(
        self, file_manager: FileManager, sample_filter: Filter
    ) -> None:
        file_manager.create_filter(sample_filter)
        updated = file_manager.update_filter("filter-1", {"teamId": "team-a"})
        assert updated.team_id == "team-a"

    def test_update_rejects_empty_rules(
        self, file_manager: FileManager, sample_filter: Filter
    ) -> None:
        file_manager.create_filter(sample_filter)
        with pytest.raises(ValidationError):
            file_manager.update_filter("filter-1", {"rules": []})
        assert file_manager.load_filter("filter-1").version == 1

    def test_list_filters_by_owner(self, file_manager: FileManager, sample_filter: Filter) -> None:
        file_manager.create_filter(sample_filter)
        other = sample_filter.model_copy(update={"id": "filter-2", "owner_id": "user-2"})
        file_manager.create_filter(other)

        assert len(file_manager.list_filters()) == 2
        assert [f.id for f in file_manager.list_filters(owner_id="user-2")] == ["filter-2"]

    def test_list_filters_empty(self, tmp_path: Path) -> None:
        assert FileManager(tmp_path / "nothing").list_filters() == []

    def test_delete(self, file_manager: FileManager, sample_filter: Filter) -> None:
        file_manager.create_filter(sample_filter)
        assert file_manager.delete_filter("filter-1") is True
        assert file_manager.delete_filter("filter-1") is False

    def test_record_usage(self, file_manager: FileManager, sample_filter: Filter, now: datetime) -> None:
        file_manager.create_filter(sample_filter)
        file_manager.record_usage("filter-1", now=now)
        used = file_manager.record_usage("filter-1", now=now + timedelta(minutes=1))

        assert used.usage_count == 2
        assert used.last_used_at == now + timedelta(minutes=1)
        assert used.version == 1


class TestFilterRunOperations:
    """Tests for filter run history."""

    def test_save_load_and_list(
        self,
        file_manager: FileManager,
        sample_filter: Filter,
        sample_models: list[CatalogModel],
        now: datetime,
    ) -> None:
        runs = []
        for minutes in (0, 5):
            evaluation = evaluate_filter(
                sample_filter, sample_models, now=now + timedelta(minutes=minutes)
            )
            run = build_filter_run(sample_filter, evaluation, executed_by="user-1")
            file_manager.save_filter_run(run)
            runs.append(run)

        loaded = file_manager.load_filter_run("filter-1", runs[0].id)
        assert loaded == runs[0]
        assert loaded.filter_snapshot.name == "Long context"

        history = file_manager.list_filter_runs("filter-1")
        assert [r.id for r in history] == [runs[1].id, runs[0].id]
        assert len(file_manager.list_filter_runs("filter-1", limit=1)) == 1

    def test_missing_run(self, file_manager: FileManager) -> None:
        with pytest.raises(FilterRunNotFoundError):
            file_manager.load_filter_run("filter-1", "missing")
        assert file_manager.list_filter_runs("filter-1") == []


def test_history_file_layout(file_manager: FileManager) -> None:
    sync = file_manager.start_sync(now=datetime(2025, 1, 1, tzinfo=UTC))
    data = json.loads((file_manager.data_dir / "syncs" / "history.json").read_text())
    assert data["syncs"][0]["id"] == sync.id
    assert data["syncs"][0]["status"] == "running"
    assert data["syncs"][0]["startedAt"].startswith("2025-01-01")
