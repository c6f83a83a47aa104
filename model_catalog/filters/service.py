"""Batch filter evaluation, ranking and run snapshots."""

import logging
import time
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from model_catalog.filters.engine import evaluate_filter_against_model
from model_catalog.models.model_catalog import CatalogModel
from model_catalog.models.model_filter import (
    Filter,
    FilterEvaluation,
    FilterRun,
    ModelEvaluation,
)

logger = logging.getLogger(__name__)


def evaluate_model(filter_: Filter, model: CatalogModel) -> ModelEvaluation:
    """Evaluate one model and tag the result with its id and name."""
    result = evaluate_filter_against_model(filter_.rules, model)
    return ModelEvaluation(model_id=model.id, model_name=model.name, **result.model_dump())


def evaluate_filter(
    filter_: Filter,
    models: Sequence[CatalogModel],
    *,
    model_ids: Iterable[str] | None = None,
    limit: int | None = None,
    now: datetime | None = None,
) -> FilterEvaluation:
    """Evaluate a saved filter against a batch of models.

    Args:
        filter_: Filter whose rules are applied.
        models: Candidate models, evaluated in input order.
        model_ids: Optional subset of model ids to evaluate.
        limit: Maximum number of results kept (match count covers all).
        now: Evaluation timestamp recorded on the result.

    Returns:
        FilterEvaluation with per-model results in input order.
    """
    start = time.perf_counter()

    if model_ids is not None:
        wanted = set(model_ids)
        models = [model for model in models if model.id in wanted]

    results = [evaluate_model(filter_, model) for model in models]
    match_count = sum(1 for result in results if result.match)
    if limit is not None:
        results = results[: max(limit, 0)]

    duration_ms = int((time.perf_counter() - start) * 1000)
    logger.info(
        f"Filter '{filter_.name}' matched {match_count}/{len(models)} models in {duration_ms}ms"
    )

    return FilterEvaluation(
        filter_id=filter_.id,
        filter_name=filter_.name,
        evaluated_at=now or datetime.now(UTC),
        duration_ms=duration_ms,
        results=results,
        evaluated_model_ids=[model.id for model in models],
        total_evaluated=len(models),
        match_count=match_count,
    )


def rank_evaluations(results: Iterable[ModelEvaluation]) -> list[ModelEvaluation]:
    """Order results matches first, then by score descending; ties keep input order."""
    return sorted(results, key=lambda result: (not result.match, -result.score))


def build_filter_run(
    filter_: Filter,
    evaluation: FilterEvaluation,
    *,
    executed_by: str,
    model_ids: Iterable[str] | None = None,
    limit: int | None = None,
) -> FilterRun:
    """Snapshot an evaluation, with a copy of the filter as it was run."""
    return FilterRun(
        filter_id=filter_.id,
        executed_by=executed_by,
        executed_at=evaluation.evaluated_at,
        duration_ms=evaluation.duration_ms,
        filter_snapshot=filter_.model_copy(deep=True),
        model_list=list(evaluation.evaluated_model_ids),
        limit_used=limit,
        model_ids_filter=list(model_ids) if model_ids is not None else None,
        total_evaluated=evaluation.total_evaluated,
        match_count=evaluation.match_count,
        results=evaluation.results,
    )
