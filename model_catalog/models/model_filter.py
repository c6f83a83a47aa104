"""Filter, rule clause and evaluation result models."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from model_catalog.models.common import _utc_now


def _new_id() -> str:
    return str(uuid4())


class CamelModel(BaseModel):
    """Base model serializing to camelCase while accepting snake_case input."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        protected_namespaces=(),
    )


class ClauseType(str, Enum):
    """Whether a clause gates the match or only contributes to the score."""

    HARD = "hard"
    SOFT = "soft"


class Operator(str, Enum):
    """Comparison operators understood by the clause evaluator."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    CONTAINS = "contains"


class Visibility(str, Enum):
    """Who may see and run a saved filter."""

    PRIVATE = "private"
    TEAM = "team"
    PUBLIC = "public"


class RuleClause(CamelModel):
    """One comparison rule of a filter.

    ``operator`` and ``type`` accept unknown strings: an unrecognized operator
    evaluates to false and an unrecognized type is ignored by the engine.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    field: str = Field(description="Dotted path into the model record, e.g. 'inputCost'")
    operator: Operator | str
    value: Any = None
    type: ClauseType | str = ClauseType.HARD
    weight: float | None = Field(
        default=None, ge=0.0, description="Soft clause weight, 1 when absent"
    )


class Filter(CamelModel):
    """Saved, reusable filter owned by a user."""

    id: str = Field(default_factory=_new_id)
    owner_id: str
    team_id: str | None = None
    name: str = Field(min_length=1)
    description: str | None = None
    visibility: Visibility = Visibility.PRIVATE
    rules: list[RuleClause] = Field(min_length=1, description="Ordered rule clauses")
    version: int = Field(default=1, ge=1)
    usage_count: int = Field(default=0, ge=0)
    last_used_at: datetime | None = None
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class EvaluationResult(CamelModel):
    """Verdict of one filter against one model."""

    match: bool
    score: float = 0.0
    failed_hard_clauses: int = 0
    passed_soft_clauses: int = 0
    total_soft_clauses: int = 0
    rationale: str = ""


class ModelEvaluation(EvaluationResult):
    """Evaluation result tagged with the model it was computed for."""

    model_id: str
    model_name: str


class FilterEvaluation(CamelModel):
    """Result of running one filter against a batch of models."""

    filter_id: str
    filter_name: str
    evaluated_at: datetime = Field(default_factory=_utc_now)
    duration_ms: int = Field(default=0, ge=0)
    evaluated_model_ids: list[str] = Field(default_factory=list)
    results: list[ModelEvaluation] = Field(default_factory=list)
    total_evaluated: int = Field(default=0, ge=0)
    match_count: int = Field(default=0, ge=0)


class FilterRun(CamelModel):
    """Audit snapshot of a filter evaluation, denormalized for history."""

    id: str = Field(default_factory=_new_id)
    filter_id: str
    executed_by: str
    executed_at: datetime = Field(default_factory=_utc_now)
    duration_ms: int = Field(default=0, ge=0)
    filter_snapshot: Filter
    model_list: list[str] = Field(default_factory=list)
    limit_used: int | None = None
    model_ids_filter: list[str] | None = None
    total_evaluated: int = Field(default=0, ge=0)
    match_count: int = Field(default=0, ge=0)
    results: list[ModelEvaluation] = Field(default_factory=list)
