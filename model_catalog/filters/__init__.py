"""Rule-based filter evaluation over catalog models."""

from model_catalog.filters.clause_evaluator import evaluate_clause, strict_equals
from model_catalog.filters.engine import evaluate_filter_against_model, format_evaluation_result
from model_catalog.filters.field_accessor import MISSING, get_field_value
from model_catalog.filters.service import (
    build_filter_run,
    evaluate_filter,
    evaluate_model,
    rank_evaluations,
)

__all__ = [
    # Field access
    "MISSING",
    "get_field_value",
    # Clause and filter evaluation
    "evaluate_clause",
    "strict_equals",
    "evaluate_filter_against_model",
    "format_evaluation_result",
    # Batch service
    "evaluate_filter",
    "evaluate_model",
    "rank_evaluations",
    "build_filter_run",
]
