"""File-based storage layer for the model catalog.

Provides operations for:
- Sync history and per-source model snapshots
- Saved filters (create, update, usage tracking)
- Filter run history
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from model_catalog.consts import DEFAULT_DATA_DIR
from model_catalog.errors import (
    CatalogError,
    FilterNotFoundError,
    FilterRunNotFoundError,
    SyncError,
)
from model_catalog.models.model_catalog import CatalogModel
from model_catalog.models.model_filter import Filter, FilterRun
from model_catalog.models.model_storage import ModelSnapshotFile, ModelSync, SyncStatus
from model_catalog.storage.base import PermanentStorage

logger = logging.getLogger(__name__)

# Fields a filter update may not change
_IMMUTABLE_FILTER_FIELDS = {
    "id",
    "owner_id",
    "created_at",
    "updated_at",
    "version",
    "usage_count",
    "last_used_at",
}


def _filter_field_name(key: str) -> str:
    """Map a camelCase alias or snake_case key to the Filter field name."""
    for name, field in Filter.model_fields.items():
        if key in (name, field.alias, to_camel(name)):
            return name
    return key


class FileManager(PermanentStorage):
    """File-based storage manager for catalog data.

    Directory structure:
        data/
        ├── syncs/history.json               # ModelSync records, oldest first
        ├── syncs/{sync_id}/{source}.json    # Models stored by one sync
        ├── filters/{filter_id}.json         # Saved filters
        └── runs/{filter_id}/{run_id}.json   # Filter run snapshots
    """

    def __init__(self, data_dir: Path | str = DEFAULT_DATA_DIR):
        """Initialize FileManager with data directory.

        Args:
            data_dir: Root directory for all data files.
        """
        self.data_dir = Path(data_dir)
        self._syncs_dir = self.data_dir / "syncs"
        self._filters_dir = self.data_dir / "filters"
        self._runs_dir = self.data_dir / "runs"
        self._history_path = self._syncs_dir / "history.json"

    def _ensure_dirs(self, *dirs: Path) -> None:
        """Create directories if they don't exist."""
        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _check_key(key: str) -> str:
        """Reject keys that would escape their directory."""
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise CatalogError(f"Invalid storage key: {key!r}")
        return key

    def _write_model(self, path: Path, document: BaseModel) -> Path:
        self._ensure_dirs(path.parent)
        path.write_text(document.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        return path

    def _read_json(self, path: Path) -> Any | None:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to read {path}: {e}")
            return None

    # === SYNC OPERATIONS ===

    def _load_history(self) -> list[ModelSync]:
        data = self._read_json(self._history_path) or {}
        return [ModelSync.model_validate(s) for s in data.get("syncs", [])]

    def _save_history(self, syncs: list[ModelSync]) -> None:
        self._ensure_dirs(self._syncs_dir)
        data = {
            "version": "1.0",
            "updated_at": datetime.now(UTC).isoformat(),
            "syncs": [s.model_dump(mode="json", by_alias=True) for s in syncs],
        }
        self._history_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _get_sync(self, sync_id: str) -> ModelSync:
        sync = next((s for s in self._load_history() if s.id == sync_id), None)
        if sync is None:
            raise SyncError(f"Sync not found: {sync_id}")
        return sync

    def _update_sync(self, sync_id: str, **changes: Any) -> ModelSync:
        """Apply changes to one sync record and persist the history."""
        syncs = self._load_history()
        for index, sync in enumerate(syncs):
            if sync.id == sync_id:
                updated = sync.model_copy(update=changes)
                syncs[index] = updated
                self._save_history(syncs)
                return updated
        raise SyncError(f"Sync not found: {sync_id}")

    def start_sync(self, now: datetime | None = None) -> ModelSync:
        """Record a new running sync.

        Args:
            now: Start time, defaults to the current UTC time.

        Returns:
            The new ModelSync with status running.
        """
        sync = ModelSync(started_at=now or datetime.now(UTC))
        self._save_history([*self._load_history(), sync])
        logger.info(f"Started sync {sync.id}")
        return sync

    def store_model_batch(
        self,
        sync_id: str,
        source: str,
        models: list[CatalogModel],
        now: datetime | None = None,
    ) -> Path:
        """Write one source's models for a sync and record the count.

        Args:
            sync_id: Running sync the batch belongs to.
            source: Source name (becomes the file name).
            models: Normalized models to store.
            now: Snapshot timestamp.

        Returns:
            Path to the snapshot file.
        """
        sync = self._get_sync(sync_id)
        snapshot = ModelSnapshotFile(
            sync_id=sync_id,
            source=source,
            synced_at=now or datetime.now(UTC),
            models=models,
        )
        path = self._syncs_dir / self._check_key(sync_id) / f"{self._check_key(source)}.json"
        self._write_model(path, snapshot)
        self._update_sync(sync_id, sources={**sync.sources, source: len(models)})

        logger.info(f"Stored {len(models)} models from {source}: {path}")
        return path

    def complete_sync(
        self, sync_id: str, total_fetched: int, now: datetime | None = None
    ) -> ModelSync:
        """Mark a sync completed; stored total is the sum of its batches."""
        stored = sum(self._get_sync(sync_id).sources.values())
        sync = self._update_sync(
            sync_id,
            status=SyncStatus.COMPLETED,
            completed_at=now or datetime.now(UTC),
            total_fetched=total_fetched,
            total_stored=stored,
        )
        logger.info(f"Completed sync {sync_id}: {sync.total_stored}/{total_fetched} stored")
        return sync

    def fail_sync(self, sync_id: str, error_message: str, now: datetime | None = None) -> ModelSync:
        """Mark a sync failed."""
        sync = self._update_sync(
            sync_id,
            status=SyncStatus.FAILED,
            completed_at=now or datetime.now(UTC),
            error_message=error_message,
        )
        logger.error(f"Sync {sync_id} failed: {error_message}")
        return sync

    def get_latest_models(self, source: str | None = None) -> list[CatalogModel]:
        """Load the models of the most recent completed sync.

        Args:
            source: Only return models stored from this source.

        Returns:
            Models in source order, empty if no sync has completed.
        """
        completed = [s for s in self._load_history() if s.status == SyncStatus.COMPLETED]
        if not completed:
            logger.warning("No completed sync found")
            return []

        latest = max(completed, key=lambda s: s.started_at)
        sources = [source] if source else list(latest.sources)

        models: list[CatalogModel] = []
        for name in sources:
            path = self._syncs_dir / latest.id / f"{self._check_key(name)}.json"
            data = self._read_json(path)
            if data is None:
                logger.debug(f"No snapshot for {name} in sync {latest.id}")
                continue
            models.extend(ModelSnapshotFile.model_validate(data).models)
        return models

    def get_sync_history(self, limit: int | None = None) -> list[ModelSync]:
        """Return syncs newest first, at most ``limit`` of them."""
        syncs = sorted(self._load_history(), key=lambda s: s.started_at, reverse=True)
        return syncs[:limit] if limit is not None else syncs

    # === FILTER OPERATIONS ===

    def _filter_path(self, filter_id: str) -> Path:
        return self._filters_dir / f"{self._check_key(filter_id)}.json"

    def create_filter(self, filter_: Filter) -> Filter:
        """Persist a new filter.

        Raises:
            CatalogError: If a filter with the same id already exists.
        """
        path = self._filter_path(filter_.id)
        if path.exists():
            raise CatalogError(f"Filter already exists: {filter_.id}")
        self._write_model(path, filter_)
        logger.info(f"Created filter {filter_.id} ({filter_.name})")
        return filter_

    def load_filter(self, filter_id: str) -> Filter:
        """Load a filter by id.

        Raises:
            FilterNotFoundError: If the filter does not exist.
        """
        data = self._read_json(self._filter_path(filter_id))
        if data is None:
            raise FilterNotFoundError(filter_id)
        return Filter.model_validate(data)

    def update_filter(
        self, filter_id: str, updates: dict, now: datetime | None = None
    ) -> Filter:
        """Apply updates to a saved filter.

        The result is validated as a whole, so an update that empties the
        rule list or blanks the name is rejected.

        Args:
            filter_id: Filter to update.
            updates: Field values keyed by snake_case name or camelCase
                alias. id, owner, timestamps, version and usage count are
                ignored.
            now: Update timestamp.

        Returns:
            The updated filter with version incremented.

        Raises:
            FilterNotFoundError: If the filter does not exist.
            pydantic.ValidationError: If the updated filter is invalid.
        """
        current = self.load_filter(filter_id)
        normalized = {_filter_field_name(key): value for key, value in updates.items()}
        allowed = {
            key: value
            for key, value in normalized.items()
            if key not in _IMMUTABLE_FILTER_FIELDS
        }
        updated = Filter.model_validate(
            {
                **current.model_dump(),
                **allowed,
                "version": current.version + 1,
                "updated_at": now or datetime.now(UTC),
            }
        )
        self._write_model(self._filter_path(filter_id), updated)
        logger.info(f"Updated filter {filter_id} to version {updated.version}")
        return updated

    def list_filters(self, owner_id: str | None = None) -> list[Filter]:
        """List saved filters, most recently updated first."""
        if not self._filters_dir.exists():
            return []

        filters = []
        for path in self._filters_dir.glob("*.json"):
            data = self._read_json(path)
            if data is None:
                continue
            filter_ = Filter.model_validate(data)
            if owner_id is None or filter_.owner_id == owner_id:
                filters.append(filter_)
        return sorted(filters, key=lambda f: f.updated_at, reverse=True)

    def delete_filter(self, filter_id: str) -> bool:
        """Delete a filter; its run history is kept."""
        path = self._filter_path(filter_id)
        if path.exists():
            path.unlink()
            logger.info(f"Deleted filter {filter_id}")
            return True
        return False

    def record_usage(self, filter_id: str, now: datetime | None = None) -> Filter:
        """Increment usage count and set last-used time. Does not bump the version."""
        current = self.load_filter(filter_id)
        updated = current.model_copy(
            update={
                "usage_count": current.usage_count + 1,
                "last_used_at": now or datetime.now(UTC),
            }
        )
        self._write_model(self._filter_path(filter_id), updated)
        logger.debug(f"Filter {filter_id} used {updated.usage_count} times")
        return updated

    # === FILTER RUN OPERATIONS ===

    def _run_path(self, filter_id: str, run_id: str) -> Path:
        return self._runs_dir / self._check_key(filter_id) / f"{self._check_key(run_id)}.json"

    def save_filter_run(self, run: FilterRun) -> Path:
        """Persist a filter run snapshot."""
        path = self._write_model(self._run_path(run.filter_id, run.id), run)
        logger.info(f"Saved filter run {run.id}: {run.match_count}/{run.total_evaluated} matched")
        return path

    def load_filter_run(self, filter_id: str, run_id: str) -> FilterRun:
        """Load one filter run.

        Raises:
            FilterRunNotFoundError: If the run does not exist.
        """
        data = self._read_json(self._run_path(filter_id, run_id))
        if data is None:
            raise FilterRunNotFoundError(run_id)
        return FilterRun.model_validate(data)

    def list_filter_runs(self, filter_id: str, limit: int | None = None) -> list[FilterRun]:
        """Return a filter's runs newest first, at most ``limit`` of them."""
        run_dir = self._runs_dir / self._check_key(filter_id)
        if not run_dir.exists():
            return []

        runs = []
        for path in run_dir.glob("*.json"):
            data = self._read_json(path)
            if data is not None:
                runs.append(FilterRun.model_validate(data))
        runs.sort(key=lambda r: r.executed_at, reverse=True)
        return runs[:limit] if limit is not None else runs
