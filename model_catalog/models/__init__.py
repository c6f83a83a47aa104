"""Pydantic models for the model catalog."""

from model_catalog.models.model_catalog import (
    CatalogModel,
    SourceType,
    TransformerDefaults,
)
from model_catalog.models.model_filter import (
    ClauseType,
    EvaluationResult,
    Filter,
    FilterEvaluation,
    FilterRun,
    ModelEvaluation,
    Operator,
    RuleClause,
    Visibility,
)
from model_catalog.models.model_storage import (
    ModelSnapshotFile,
    ModelSync,
    SyncStatus,
)

__all__ = [
    # Catalog models
    "CatalogModel",
    "SourceType",
    "TransformerDefaults",
    # Filter models
    "ClauseType",
    "EvaluationResult",
    "Filter",
    "FilterEvaluation",
    "FilterRun",
    "ModelEvaluation",
    "Operator",
    "RuleClause",
    "Visibility",
    # Storage models
    "ModelSnapshotFile",
    "ModelSync",
    "SyncStatus",
]
