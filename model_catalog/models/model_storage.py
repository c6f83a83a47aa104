"""Storage file models for sync history and model snapshots."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import Field

from model_catalog.models.common import _utc_now
from model_catalog.models.model_catalog import CatalogModel
from model_catalog.models.model_filter import CamelModel


class SyncStatus(str, Enum):
    """Lifecycle of a sync operation."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ModelSync(CamelModel):
    """One sync operation across all configured sources."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    started_at: datetime = Field(default_factory=_utc_now)
    completed_at: datetime | None = None
    status: SyncStatus = SyncStatus.RUNNING
    total_fetched: int | None = None
    total_stored: int | None = None
    error_message: str | None = None
    sources: dict[str, int] = Field(
        default_factory=dict, description="Key: source name, value: models stored"
    )


class ModelSnapshotFile(CamelModel):
    """Models stored for one source during one sync.

    Stored in data/syncs/{sync_id}/{source}.json. Immutable once written.
    """

    sync_id: str
    source: str
    synced_at: datetime = Field(default_factory=_utc_now)
    version: str = Field(default="1.0", description="Schema version for migrations")
    models: list[CatalogModel] = Field(default_factory=list)
