"""Filter evaluation engine: hard/soft clause aggregation and scoring."""

import json
from collections.abc import Sequence
from typing import Any

from model_catalog.consts import (
    ALL_CRITERIA_PASSED,
    CLAUSE_RATIONALE_SEPARATOR,
    NO_MATCHING_CRITERIA,
)
from model_catalog.filters.clause_evaluator import evaluate_clause
from model_catalog.filters.field_accessor import as_model_record
from model_catalog.models.model_filter import ClauseType, EvaluationResult, Operator, RuleClause

DEFAULT_SOFT_WEIGHT = 1.0


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _describe(clause: RuleClause) -> str:
    operator = clause.operator.value if isinstance(clause.operator, Operator) else clause.operator
    value = json.dumps(clause.value, ensure_ascii=False, separators=(",", ":"), default=str)
    return f"{clause.field} {operator} {value}"


def _clause_type(clause: RuleClause) -> str:
    return clause.type.value if isinstance(clause.type, ClauseType) else str(clause.type)


def evaluate_filter_against_model(
    rules: Sequence[RuleClause], model: Any
) -> EvaluationResult:
    """Evaluate an ordered rule list against one model.

    Hard clauses gate the match: any failing hard clause rejects the model.
    Soft clauses never reject; each passing soft clause adds its weight
    (default 1) to the score, normalized by the total soft weight. Clauses
    with any other type are skipped.

    Args:
        rules: Ordered clauses of a filter. May be empty.
        model: CatalogModel or JSON record.

    Returns:
        EvaluationResult with score in [0, 1] and a rationale trace.
    """
    record = as_model_record(model)

    failed_hard = 0
    passed_soft = 0
    total_soft = 0
    soft_score = 0.0
    total_weight = 0.0
    reasons: list[str] = []

    for clause in rules:
        clause_type = _clause_type(clause)
        if clause_type == ClauseType.HARD.value:
            if not evaluate_clause(clause, record):
                failed_hard += 1
                reasons.append(f"Hard clause failed: {_describe(clause)}")
        elif clause_type == ClauseType.SOFT.value:
            weight = DEFAULT_SOFT_WEIGHT if clause.weight is None else clause.weight
            total_soft += 1
            total_weight += weight
            if evaluate_clause(clause, record):
                passed_soft += 1
                soft_score += weight
                reasons.append(
                    f"Soft clause passed: {_describe(clause)} (+{_format_number(weight)})"
                )

    match = failed_hard == 0
    score = soft_score / total_weight if total_weight > 0 else 0.0

    if reasons:
        rationale = CLAUSE_RATIONALE_SEPARATOR.join(reasons)
    else:
        rationale = ALL_CRITERIA_PASSED if match else NO_MATCHING_CRITERIA

    return EvaluationResult(
        match=match,
        score=score,
        failed_hard_clauses=failed_hard,
        passed_soft_clauses=passed_soft,
        total_soft_clauses=total_soft,
        rationale=rationale,
    )


def format_evaluation_result(result: EvaluationResult) -> str:
    """Render a one-line human-readable summary of an evaluation."""
    if not result.match:
        return f"❌ Filter rejected ({result.failed_hard_clauses} hard clause(s) failed)"
    if result.total_soft_clauses == 0:
        return "✓ Filter passed (hard clauses only)"
    return (
        f"✓ Filter passed with score {result.score * 100:.1f}% "
        f"({result.passed_soft_clauses}/{result.total_soft_clauses} soft clauses)"
    )
