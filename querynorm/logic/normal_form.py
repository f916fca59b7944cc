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

"""Disjunctive normal form for filter trees.

All functions are pure: they build new filter trees and never mutate their
input. Child order is significant for equality, so every rewrite below
keeps a fixed, reproducible ordering of children.
"""

from __future__ import annotations

import logging

from querynorm.filters.dsl import (
    CompositeFilter,
    FieldFilter,
    Filter,
    FilterOperator,
    LogicalOperator,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Association
# ============================================================================


def apply_association(filter_: Filter) -> Filter:
    """Flatten nested composites of the same kind and collapse single children.

    Examples:
        ``(A | ((B)) | (C | D) | (E & (F & G)))`` becomes
        ``(A | B | C | D | (E & F & G))``.

    Args:
        filter_: Filter to associate

    Returns:
        An equivalent filter in which no composite has a direct child of the
        same kind and no composite has exactly one child.
    """
    if isinstance(filter_, FieldFilter):
        return filter_

    if len(filter_.filters) == 1:
        return apply_association(filter_.filters[0])

    if filter_.is_flat:
        return filter_

    new_filters: list[Filter] = []
    for sub_filter in filter_.filters:
        associated = apply_association(sub_filter)
        if isinstance(associated, CompositeFilter) and associated.op == filter_.op:
            # Already associated, so one level of hoisting is enough
            new_filters.extend(associated.filters)
        else:
            new_filters.append(associated)

    if len(new_filters) == 1:
        return new_filters[0]

    return CompositeFilter(filters=new_filters, op=filter_.op)


# ============================================================================
# Distribution
# ============================================================================


def _conjuncts(filter_: Filter) -> tuple[Filter, ...]:
    if isinstance(filter_, CompositeFilter) and filter_.is_conjunction:
        return filter_.filters
    return (filter_,)


def apply_distribution(lhs: Filter, rhs: Filter) -> Filter:
    """Combine two filters with AND, distributing over any OR operand.

    There are three cases:

    - ``(A | B) & X`` --> ``(A & X) | (B & X)``
    - ``X & (A | B)`` --> ``(X & A) | (X & B)``
    - otherwise the conjuncts of both sides are merged into one conjunction,
      e.g. ``(A & B) & (C & D)`` --> ``(A & B & C & D)``

    When both sides are disjunctions the left side is expanded first, so
    ``(A | B) & (C | D)`` --> ``(A & C) | (A & D) | (B & C) | (B & D)``.

    Args:
        lhs: Left operand
        rhs: Right operand

    Returns:
        A filter equivalent to ``lhs AND rhs``; children keep operand order.
    """
    if isinstance(lhs, CompositeFilter) and lhs.is_disjunction:
        result: Filter = CompositeFilter(
            filters=[apply_distribution(sub_filter, rhs) for sub_filter in lhs.filters],
            op=LogicalOperator.OR,
        )
    elif isinstance(rhs, CompositeFilter) and rhs.is_disjunction:
        result = CompositeFilter(
            filters=[apply_distribution(lhs, sub_filter) for sub_filter in rhs.filters],
            op=LogicalOperator.OR,
        )
    else:
        result = CompositeFilter(
            filters=(*_conjuncts(lhs), *_conjuncts(rhs)),
            op=LogicalOperator.AND,
        )

    return apply_association(result)


# ============================================================================
# DNF computation
# ============================================================================


def is_disjunctive_normal_form(filter_: Filter) -> bool:
    """Check whether a filter already has the shape ``compute_dnf`` produces.

    A filter is in DNF when it is a single field filter, a flat conjunction,
    or a disjunction whose children are field filters or flat conjunctions.
    """
    if isinstance(filter_, FieldFilter):
        return True
    if filter_.is_flat_conjunction:
        return True
    if not filter_.is_disjunction:
        return False
    return all(
        isinstance(sub_filter, FieldFilter) or sub_filter.is_flat_conjunction for sub_filter in filter_.filters
    )


def compute_dnf(filter_: Filter) -> Filter:
    """Rewrite a filter tree into disjunctive normal form.

    The result is a field filter, a flat conjunction, or a disjunction whose
    children are field filters or flat conjunctions. Output size can grow
    exponentially with the number of disjunctions nested under conjunctions.

    Examples:
        ``A & (B | C)`` --> ``(A & B) | (A & C)``

    Args:
        filter_: Filter to normalize; composites must not be empty

    Returns:
        An equivalent filter in DNF
    """
    if isinstance(filter_, FieldFilter):
        return filter_

    result = apply_association(filter_)
    if isinstance(result, FieldFilter) or result.is_flat:
        return result

    new_filters = [compute_dnf(sub_filter) for sub_filter in result.filters]

    if result.is_disjunction:
        return apply_association(CompositeFilter(filters=new_filters, op=LogicalOperator.OR))

    running_result = new_filters[0]
    for sub_filter in new_filters[1:]:
        running_result = apply_distribution(running_result, sub_filter)
    return apply_association(running_result)


def dnf_transform(filter_: Filter) -> list[Filter]:
    """Compute the DNF of a filter and return its terms in order.

    Each term is a field filter or a flat conjunction of field filters and
    can be planned independently.

    Args:
        filter_: Filter to normalize

    Returns:
        The children of the DNF disjunction, or a single-element list when
        the DNF is not a disjunction.
    """
    result = compute_dnf(filter_)
    if isinstance(result, CompositeFilter) and result.is_disjunction:
        terms = list(result.filters)
    else:
        terms = [result]

    logger.debug("DNF of %s has %d term(s)", filter_, len(terms))
    return terms


# ============================================================================
# IN expansion
# ============================================================================


def _expand_in_filter(filter_: FieldFilter) -> Filter:
    values = filter_.value
    if not isinstance(values, tuple) or not values:
        return filter_

    equalities = [FieldFilter(field=filter_.field, op=FilterOperator.EQ, value=value) for value in values]
    if len(equalities) == 1:
        return equalities[0]
    return CompositeFilter(filters=equalities, op=LogicalOperator.OR)


def compute_in_expansion(filter_: Filter) -> Filter:
    """Replace every ``in`` filter with a disjunction of equality filters.

    ``a in (1, 2, 3)`` becomes ``(a == 1) | (a == 2) | (a == 3)``, which lets
    each value be planned as its own DNF term. Composites keep their kind
    and child order; an ``in`` filter with no values is left unchanged.

    Args:
        filter_: Filter to expand

    Returns:
        An equivalent filter without ``in`` field filters
    """
    if isinstance(filter_, FieldFilter):
        if filter_.op == FilterOperator.IN:
            expanded = _expand_in_filter(filter_)
            if expanded is not filter_:
                logger.debug("Expanded %s into %s", filter_, expanded)
            return expanded
        return filter_

    return CompositeFilter(
        filters=[compute_in_expansion(sub_filter) for sub_filter in filter_.filters],
        op=filter_.op,
    )
