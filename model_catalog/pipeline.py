"""Pipeline orchestration for syncing the catalog and running filters.

Sync workflow:
1. Start a sync record
2. Fetch every source concurrently
3. Normalize each source's payload
4. Store one batch per source
5. Complete (or fail) the sync

Filter evaluation workflow:
1. Load the filter and the latest synced models
2. Evaluate the filter rules against every model
3. Persist the run snapshot, then record the filter usage
"""

import asyncio
import logging
import os
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from model_catalog.consts import DEFAULT_DATA_DIR
from model_catalog.errors import SyncError
from model_catalog.filters.service import build_filter_run, evaluate_filter
from model_catalog.models.model_catalog import CatalogModel
from model_catalog.models.model_filter import FilterEvaluation, FilterRun
from model_catalog.models.model_storage import ModelSync
from model_catalog.normalization.normalizer import filter_by_provider
from model_catalog.sources.base_source import BaseSource
from model_catalog.sources.registry import build_sources
from model_catalog.storage.file_manager import FileManager

logger = logging.getLogger(__name__)


def resolve_data_dir(data_dir: Path | str | None = None) -> Path:
    """Resolve the data directory: explicit param > MODEL_CATALOG_DATA_DIR > default."""
    if data_dir:
        return Path(data_dir)
    env_dir = os.getenv("MODEL_CATALOG_DATA_DIR", "").strip()
    if env_dir:
        return Path(env_dir).expanduser()
    return DEFAULT_DATA_DIR


async def _fetch_source(
    source: BaseSource, now: datetime
) -> tuple[str, list[CatalogModel] | None, str | None]:
    """Fetch one source, returning (name, models, error) instead of raising."""
    try:
        models = await source.fetch_models(now=now)
        return source.name, models, None
    except Exception as e:
        logger.error(f"Source {source.name} failed: {e}")
        return source.name, None, str(e)
    finally:
        await source.close()


async def _fetch_all(
    sources: Sequence[BaseSource], now: datetime
) -> list[tuple[str, list[CatalogModel] | None, str | None]]:
    return await asyncio.gather(*(_fetch_source(source, now) for source in sources))


def run_sync_pipeline(
    sources: Sequence[BaseSource] | Sequence[str] | None = None,
    data_dir: Path | str | None = None,
    now: datetime | None = None,
) -> tuple[ModelSync, list[CatalogModel]]:
    """Run a full sync: fetch → normalize → store.

    A failing source is logged and skipped; the sync only fails when no
    source succeeds. Any error raised while storing marks the sync failed
    before it propagates.

    Args:
        sources: Source instances, or source/preset names. None = read from
            env (MODEL_CATALOG_SOURCES) or use all sources.
        data_dir: Data directory path. Uses env or default if None.
        now: Sync time, also used for the ``new`` flag.

    Returns:
        Tuple of (completed ModelSync, all models stored by this sync).

    Raises:
        SyncError: If every source failed.
    """
    now = now or datetime.now(UTC)
    file_manager = FileManager(resolve_data_dir(data_dir))

    if sources is None or all(isinstance(s, str) for s in sources):
        source_list = build_sources(list(sources) if sources else None)
    else:
        source_list = list(sources)

    # Step 1: Start sync
    sync = file_manager.start_sync(now=now)
    logger.info(f"Step 1/3: Started sync {sync.id}")

    try:
        # Step 2: Fetch and normalize all sources concurrently
        logger.info(f"Step 2/3: Fetching {len(source_list)} sources...")
        results = asyncio.run(_fetch_all(source_list, now))

        # Step 3: Store one batch per successful source
        logger.info("Step 3/3: Storing model batches...")
        all_models: list[CatalogModel] = []
        errors: list[str] = []
        for name, models, error in results:
            if models is None:
                errors.append(f"{name}: {error}")
                continue
            file_manager.store_model_batch(sync.id, name, models, now=now)
            all_models.extend(models)

        if len(errors) == len(results):
            raise SyncError(f"All sources failed: {'; '.join(errors) or 'No sources configured'}")

        if errors:
            logger.warning(f"Sync {sync.id} skipped {len(errors)} failed sources")

        sync = file_manager.complete_sync(
            sync.id, total_fetched=len(all_models), now=datetime.now(UTC)
        )
    except Exception as e:
        # Never leave a sync running in the history
        file_manager.fail_sync(sync.id, str(e), now=datetime.now(UTC))
        raise

    logger.info(f"Sync complete: {len(all_models)} models from {len(sync.sources)} sources")
    return sync, all_models


def load_latest_models(
    source: str | None = None,
    provider: str | None = None,
    data_dir: Path | str | None = None,
) -> list[CatalogModel]:
    """Load models from the most recent completed sync.

    Args:
        source: Only models fetched from this source.
        provider: Only models of this provider (case-insensitive).
        data_dir: Data directory path. Uses env or default if None.

    Returns:
        Models in stored order.
    """
    file_manager = FileManager(resolve_data_dir(data_dir))
    return filter_by_provider(file_manager.get_latest_models(source), provider)


def run_filter_evaluation(
    filter_id: str,
    executed_by: str,
    *,
    model_ids: Sequence[str] | None = None,
    limit: int | None = None,
    data_dir: Path | str | None = None,
    now: datetime | None = None,
) -> tuple[FilterEvaluation, FilterRun]:
    """Evaluate a saved filter against the latest models and record the run.

    Args:
        filter_id: Saved filter to evaluate.
        executed_by: User id recorded on the run.
        model_ids: Optional subset of model ids to evaluate.
        limit: Maximum number of results kept.
        data_dir: Data directory path. Uses env or default if None.
        now: Evaluation time.

    Returns:
        Tuple of (evaluation, persisted run).

    Raises:
        FilterNotFoundError: If the filter does not exist.
    """
    file_manager = FileManager(resolve_data_dir(data_dir))
    filter_ = file_manager.load_filter(filter_id)
    models = file_manager.get_latest_models()
    model_ids = list(model_ids) if model_ids is not None else None

    evaluation = evaluate_filter(filter_, models, model_ids=model_ids, limit=limit, now=now)
    run = build_filter_run(
        filter_, evaluation, executed_by=executed_by, model_ids=model_ids, limit=limit
    )

    file_manager.save_filter_run(run)
    file_manager.record_usage(filter_id, now=evaluation.evaluated_at)
    return evaluation, run
