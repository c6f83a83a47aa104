"""Evaluation of a single rule clause against a model record."""

import operator as op
from collections.abc import Callable, Mapping
from typing import Any

from model_catalog.filters.field_accessor import MISSING, as_model_record, get_field_value
from model_catalog.models.model_filter import Operator, RuleClause


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two JSON values without cross-type coercion.

    Numbers compare numerically (1 == 1.0), booleans only equal booleans,
    lists and mappings compare element by element, and MISSING equals nothing.
    """
    if left is MISSING or right is MISSING:
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right, strict=True)
        )
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(
            strict_equals(left[key], right[key]) for key in left
        )
    return type(left) is type(right) and left == right


_NUMERIC_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    Operator.GT.value: op.gt,
    Operator.GTE.value: op.ge,
    Operator.LT.value: op.lt,
    Operator.LTE.value: op.le,
}


def _operator_name(value: Operator | str) -> str:
    return value.value if isinstance(value, Operator) else str(value)


def evaluate_clause(clause: RuleClause, model: Any) -> bool:
    """Check whether a model satisfies one clause.

    Ordering operators require both sides to be numbers; 'in' requires the
    clause value to be a list; 'contains' requires the field value to be a
    list. Unknown operators never match.

    Args:
        clause: Rule clause to evaluate.
        model: CatalogModel or JSON record.

    Returns:
        True if the clause holds.
    """
    actual = get_field_value(as_model_record(model), clause.field)
    expected = clause.value
    name = _operator_name(clause.operator)

    if name == Operator.EQ.value:
        return strict_equals(actual, expected)
    if name == Operator.NE.value:
        return not strict_equals(actual, expected)
    if name in _NUMERIC_OPERATORS:
        return (
            _is_number(actual)
            and _is_number(expected)
            and _NUMERIC_OPERATORS[name](actual, expected)
        )
    if name == Operator.IN.value:
        return isinstance(expected, list) and any(strict_equals(actual, item) for item in expected)
    if name == Operator.CONTAINS.value:
        return isinstance(actual, list) and any(strict_equals(item, expected) for item in actual)
    return False
