# Copyright (c) Nex-AGI. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""In-memory evaluation of filter trees against plain records.

Field paths are dotted (``"address.city"``) and resolved through nested
mappings. A record that lacks the field never matches a field filter.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from .dsl import CompositeFilter, FieldFilter, Filter, FilterOperator, freeze_value

_MISSING = object()


def evaluate(
    filter_: Filter,
    record: Mapping[str, Any] | BaseModel,
) -> bool:
    """Evaluate a filter against a record.

    Args:
        filter_: Filter instance
        record: Record to evaluate, either a mapping or a Pydantic model

    Returns:
        True if the record matches the filter

    Raises:
        ValueError: If a list operator (``in``, ``not-in``,
            ``array-contains-any``) is given a non-tuple value

    Examples:
        >>> filter_ = FieldFilter.eq("name", "alice")
        >>> evaluate(filter_, {"name": "alice", "age": 25})
        True
        >>> evaluate(filter_, {"name": "bob", "age": 30})
        False
    """
    record_dict: Mapping[str, Any]
    if isinstance(record, BaseModel):
        record_dict = record.model_dump()
    else:
        record_dict = record

    if isinstance(filter_, FieldFilter):
        return _evaluate_field_filter(filter_, record_dict)
    return _evaluate_composite_filter(filter_, record_dict)


def _get_field_value(
    record: Mapping[str, Any],
    field_path: str,
) -> Any:
    """Resolve a dotted field path, returning ``_MISSING`` when absent."""
    value: Any = record
    for segment in field_path.split("."):
        if not isinstance(value, Mapping) or segment not in value:
            return _MISSING
        value = value[segment]
    return value


def _safe_compare(a: object, b: object, op: FilterOperator) -> bool:
    """Compare two values, returning False for incomparable types."""
    try:
        if op == FilterOperator.GT:
            return a > b  # type: ignore[operator]
        elif op == FilterOperator.GTE:
            return a >= b  # type: ignore[operator]
        elif op == FilterOperator.LT:
            return a < b  # type: ignore[operator]
        elif op == FilterOperator.LTE:
            return a <= b  # type: ignore[operator]
        return False
    except TypeError:
        return False


def _require_tuple(filter_: FieldFilter) -> tuple[Any, ...]:
    if not isinstance(filter_.value, tuple):
        raise ValueError(
            f"Invalid value type for operator {filter_.op.value}: expected list, got {type(filter_.value).__name__}"
        )
    return filter_.value


def _evaluate_field_filter(
    filter_: FieldFilter,
    record: Mapping[str, Any],
) -> bool:
    field_value = freeze_value(_get_field_value(record, filter_.field))
    op = filter_.op
    filter_value = filter_.value

    # Validate list operators before looking at the record
    if op in (FilterOperator.IN, FilterOperator.NOT_IN, FilterOperator.ARRAY_CONTAINS_ANY):
        filter_value = _require_tuple(filter_)

    if field_value is _MISSING:
        return False

    if op == FilterOperator.EQ:
        return field_value == filter_value

    elif op == FilterOperator.NEQ:
        # null never matches !=
        return field_value is not None and field_value != filter_value

    elif op in (FilterOperator.GT, FilterOperator.GTE, FilterOperator.LT, FilterOperator.LTE):
        if field_value is None or filter_value is None:
            return False
        return _safe_compare(field_value, filter_value, op)

    elif op == FilterOperator.IN:
        return field_value in filter_value

    elif op == FilterOperator.NOT_IN:
        return field_value is not None and field_value not in filter_value

    elif op == FilterOperator.ARRAY_CONTAINS:
        return isinstance(field_value, (list, tuple)) and filter_value in field_value

    elif op == FilterOperator.ARRAY_CONTAINS_ANY:
        if not isinstance(field_value, (list, tuple)):
            return False
        return any(candidate in field_value for candidate in filter_value)

    else:
        raise ValueError(f"Unsupported operator: {op}")


def _evaluate_composite_filter(
    filter_: CompositeFilter,
    record: Mapping[str, Any],
) -> bool:
    if filter_.is_conjunction:
        # Empty AND is True (identity of AND)
        return all(evaluate(sub_filter, record) for sub_filter in filter_.filters)
    # Empty OR is False (identity of OR)
    return any(evaluate(sub_filter, record) for sub_filter in filter_.filters)
