"""Abstract base class for catalog storage backends.

Storage holds three kinds of documents: sync snapshots of normalized models,
saved filters and filter run history. Documents are opaque to the backend;
it only persists and retrieves them.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from model_catalog.models.model_catalog import CatalogModel
from model_catalog.models.model_filter import Filter, FilterRun
from model_catalog.models.model_storage import ModelSync


class PermanentStorage(ABC):
    """Abstract base class for catalog storage implementations."""

    # === SYNC OPERATIONS ===

    @abstractmethod
    def start_sync(self, now: datetime | None = None) -> ModelSync:
        """Record a new running sync and return it."""
        ...

    @abstractmethod
    def store_model_batch(
        self,
        sync_id: str,
        source: str,
        models: list[CatalogModel],
        now: datetime | None = None,
    ) -> Path:
        """Persist the normalized models of one source for a running sync.

        Args:
            sync_id: Sync the batch belongs to.
            source: Source name the models came from.
            models: Normalized models.
            now: Snapshot timestamp.

        Returns:
            Location of the stored batch.
        """
        ...

    @abstractmethod
    def complete_sync(
        self, sync_id: str, total_fetched: int, now: datetime | None = None
    ) -> ModelSync:
        """Mark a sync completed."""
        ...

    @abstractmethod
    def fail_sync(self, sync_id: str, error_message: str, now: datetime | None = None) -> ModelSync:
        """Mark a sync failed with an error message."""
        ...

    @abstractmethod
    def get_latest_models(self, source: str | None = None) -> list[CatalogModel]:
        """Return the models of the most recent completed sync, optionally for one source."""
        ...

    @abstractmethod
    def get_sync_history(self, limit: int | None = None) -> list[ModelSync]:
        """Return syncs newest first."""
        ...

    # === FILTER OPERATIONS ===

    @abstractmethod
    def create_filter(self, filter_: Filter) -> Filter:
        """Persist a new filter."""
        ...

    @abstractmethod
    def load_filter(self, filter_id: str) -> Filter:
        """Load a filter.

        Raises:
            FilterNotFoundError: If no filter has this id.
        """
        ...

    @abstractmethod
    def update_filter(
        self, filter_id: str, updates: dict, now: datetime | None = None
    ) -> Filter:
        """Apply field updates to a filter, bumping its version.

        Raises:
            FilterNotFoundError: If no filter has this id.
        """
        ...

    @abstractmethod
    def list_filters(self, owner_id: str | None = None) -> list[Filter]:
        """List filters, optionally only those owned by one user."""
        ...

    @abstractmethod
    def delete_filter(self, filter_id: str) -> bool:
        """Delete a filter. Returns False if it did not exist."""
        ...

    @abstractmethod
    def record_usage(self, filter_id: str, now: datetime | None = None) -> Filter:
        """Increment a filter's usage count and set its last-used time."""
        ...

    # === FILTER RUN OPERATIONS ===

    @abstractmethod
    def save_filter_run(self, run: FilterRun) -> Path:
        """Persist a filter run snapshot."""
        ...

    @abstractmethod
    def load_filter_run(self, filter_id: str, run_id: str) -> FilterRun:
        """Load one filter run.

        Raises:
            FilterRunNotFoundError: If the run does not exist.
        """
        ...

    @abstractmethod
    def list_filter_runs(self, filter_id: str, limit: int | None = None) -> list[FilterRun]:
        """Return a filter's runs newest first."""
        ...
