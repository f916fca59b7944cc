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


"""Filter model definitions.

Immutable filter trees: leaves are single-field comparisons (FieldFilter),
inner nodes are AND / OR combinations (CompositeFilter). Equality and hashing
are structural, and the order of a composite's children is significant.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def freeze_value(value: Any) -> Any:
    """Return a read-only copy of a comparison value.

    Lists become tuples and mappings become read-only mapping proxies,
    recursively. Every other value is returned as-is.
    """
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(item) for item in value)
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_value(item) for key, item in value.items()})
    return value


def _value_key(value: Any) -> Any:
    # Type-tagged so that 1, 1.0 and True stay distinct
    if isinstance(value, tuple):
        return (tuple, tuple(_value_key(item) for item in value))
    if isinstance(value, Mapping):
        return (Mapping, frozenset((key, _value_key(item)) for key, item in value.items()))
    return (type(value), value)


class FilterOperator(str, Enum):
    """Field comparison operators"""

    LT = "<"  # less than
    LTE = "<="  # less than or equal
    EQ = "=="  # equal
    NEQ = "!="  # not equal
    GT = ">"  # greater than
    GTE = ">="  # greater than or equal
    ARRAY_CONTAINS = "array-contains"  # array contains value
    ARRAY_CONTAINS_ANY = "array-contains-any"  # array contains any of values
    IN = "in"  # value in list
    NOT_IN = "not-in"  # value not in list


INEQUALITY_OPERATORS = frozenset(
    {
        FilterOperator.LT,
        FilterOperator.LTE,
        FilterOperator.GT,
        FilterOperator.GTE,
        FilterOperator.NEQ,
        FilterOperator.NOT_IN,
    }
)


class LogicalOperator(str, Enum):
    """Logical combinators"""

    AND = "and"
    OR = "or"


class FilterBase(BaseModel, ABC):
    """Base class for filters; only FieldFilter and CompositeFilter are instantiated."""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.canonical_id

    @property
    @abstractmethod
    def canonical_id(self) -> str:
        """Deterministic string form of the filter"""

    @abstractmethod
    def get_flattened_filters(self) -> list["FieldFilter"]:
        """Every FieldFilter in the tree, depth-first and left to right"""

    def get_first_inequality_field(self) -> str | None:
        """Return the field path of the first inequality filter, if any."""
        for flat_filter in self.get_flattened_filters():
            if flat_filter.is_inequality:
                return flat_filter.field
        return None


class FieldFilter(FilterBase):
    """Single-field comparison filter

    ``value`` is opaque: any value is accepted. Lists and mappings are frozen
    so the filter stays hashable, and equality tells ``1``, ``1.0`` and
    ``True`` apart.
    """

    field: str
    op: FilterOperator
    value: Any

    @field_validator("value", mode="before")
    @classmethod
    def _freeze_value(cls, value: Any) -> Any:
        return freeze_value(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldFilter):
            return NotImplemented
        return (
            self.field == other.field
            and self.op == other.op
            and _value_key(self.value) == _value_key(other.value)
        )

    def __hash__(self) -> int:
        return hash((self.field, self.op, _value_key(self.value)))

    @property
    def is_inequality(self) -> bool:
        return self.op in INEQUALITY_OPERATORS

    @property
    def canonical_id(self) -> str:
        value = dict(self.value) if isinstance(self.value, Mapping) else self.value
        return f"{self.field}{self.op.value}{value!r}"

    def get_flattened_filters(self) -> list["FieldFilter"]:
        return [self]

    @classmethod
    def eq(cls, field: str, value: Any) -> "FieldFilter":
        """Convenience constructor for an equality filter"""
        return cls(field=field, op=FilterOperator.EQ, value=value)

    @classmethod
    def neq(cls, field: str, value: Any) -> "FieldFilter":
        """Convenience constructor for a not-equal filter"""
        return cls(field=field, op=FilterOperator.NEQ, value=value)

    @classmethod
    def gt(cls, field: str, value: Any) -> "FieldFilter":
        """Convenience constructor for a greater-than filter"""
        return cls(field=field, op=FilterOperator.GT, value=value)

    @classmethod
    def gte(cls, field: str, value: Any) -> "FieldFilter":
        """Convenience constructor for a greater-than-or-equal filter"""
        return cls(field=field, op=FilterOperator.GTE, value=value)

    @classmethod
    def lt(cls, field: str, value: Any) -> "FieldFilter":
        """Convenience constructor for a less-than filter"""
        return cls(field=field, op=FilterOperator.LT, value=value)

    @classmethod
    def lte(cls, field: str, value: Any) -> "FieldFilter":
        """Convenience constructor for a less-than-or-equal filter"""
        return cls(field=field, op=FilterOperator.LTE, value=value)

    @classmethod
    def in_(cls, field: str, value: Sequence[Any]) -> "FieldFilter":
        """Convenience constructor for an in-list filter"""
        return cls(field=field, op=FilterOperator.IN, value=tuple(value))

    @classmethod
    def not_in(cls, field: str, value: Sequence[Any]) -> "FieldFilter":
        """Convenience constructor for a not-in-list filter"""
        return cls(field=field, op=FilterOperator.NOT_IN, value=tuple(value))

    @classmethod
    def array_contains(cls, field: str, value: Any) -> "FieldFilter":
        """Convenience constructor for an array-contains filter"""
        return cls(field=field, op=FilterOperator.ARRAY_CONTAINS, value=value)

    @classmethod
    def array_contains_any(cls, field: str, value: Sequence[Any]) -> "FieldFilter":
        """Convenience constructor for an array-contains-any filter"""
        return cls(field=field, op=FilterOperator.ARRAY_CONTAINS_ANY, value=tuple(value))


class CompositeFilter(FilterBase):
    """AND / OR combination of filters

    Children should not be empty; an empty composite is a caller contract
    violation and normalization gives it no defined meaning.
    """

    filters: tuple["FieldFilter | CompositeFilter", ...]
    op: LogicalOperator

    @property
    def is_conjunction(self) -> bool:
        return self.op == LogicalOperator.AND

    @property
    def is_disjunction(self) -> bool:
        return self.op == LogicalOperator.OR

    @property
    def is_flat(self) -> bool:
        """Every child is a FieldFilter (no nested composites)"""
        return all(isinstance(sub_filter, FieldFilter) for sub_filter in self.filters)

    @property
    def is_flat_conjunction(self) -> bool:
        return self.is_flat and self.is_conjunction

    @property
    def is_flat_disjunction(self) -> bool:
        return self.is_flat and self.is_disjunction

    @property
    def canonical_id(self) -> str:
        return f"{self.op.value}({','.join(sub_filter.canonical_id for sub_filter in self.filters)})"

    def get_flattened_filters(self) -> list[FieldFilter]:
        result: list[FieldFilter] = []
        for sub_filter in self.filters:
            result.extend(sub_filter.get_flattened_filters())
        return result

    def with_added_filters(self, new_filters: Sequence["Filter"]) -> "CompositeFilter":
        """Return a new composite of the same kind with the filters appended."""
        return CompositeFilter(filters=(*self.filters, *new_filters), op=self.op)


# Union of both filter variants
Filter = FieldFilter | CompositeFilter

# Resolve the forward reference so pydantic can validate nested filters
CompositeFilter.model_rebuild()


def field_filter(field: str, op: FilterOperator | str, value: Any) -> FieldFilter:
    """Build a FieldFilter from (field, op, value); ``op`` may be its string form, e.g. ``"=="``."""
    return FieldFilter(field=field, op=op, value=value)


def and_filters(*filters: Filter) -> CompositeFilter:
    """Build a conjunction"""
    return CompositeFilter(filters=filters, op=LogicalOperator.AND)


def or_filters(*filters: Filter) -> CompositeFilter:
    """Build a disjunction"""
    return CompositeFilter(filters=filters, op=LogicalOperator.OR)
