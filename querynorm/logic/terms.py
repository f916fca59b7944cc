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

"""DNF term extraction for query planners.

``compute_dnf`` never stops early, so a planner that cannot afford an
exponential expansion checks the term count here first.
"""

from __future__ import annotations

import logging
import math

from querynorm.config import NormalizationConfig
from querynorm.filters.dsl import FieldFilter, Filter

from .normal_form import compute_in_expansion, dnf_transform

logger = logging.getLogger(__name__)


class DnfTermLimitError(ValueError):
    """Raised when a filter's DNF would exceed the configured term budget."""

    def __init__(self, term_count: int, max_terms: int) -> None:
        super().__init__(f"DNF would produce {term_count} terms, exceeding the limit of {max_terms}")
        self.term_count = term_count
        self.max_terms = max_terms


def count_dnf_terms(filter_: Filter) -> int:
    """Count the terms ``dnf_transform`` would return, without expanding.

    A field filter is one term, a disjunction has the sum of its children's
    terms and a conjunction the product.
    """
    if isinstance(filter_, FieldFilter):
        return 1
    counts = [count_dnf_terms(sub_filter) for sub_filter in filter_.filters]
    if filter_.is_disjunction:
        return sum(counts)
    return math.prod(counts)


def get_dnf_terms(
    filter_: Filter,
    config: NormalizationConfig | None = None,
) -> list[Filter]:
    """Return the DNF terms of a filter, honoring the normalization config.

    Args:
        filter_: Filter to normalize
        config: Normalization options (default: unlimited, no IN expansion)

    Returns:
        Ordered DNF terms, each a field filter or a flat conjunction

    Raises:
        DnfTermLimitError: If the DNF would have more than
            ``config.max_dnf_terms`` terms
    """
    config = config or NormalizationConfig()

    if config.expand_in_filters:
        filter_ = compute_in_expansion(filter_)

    if config.max_dnf_terms is not None:
        term_count = count_dnf_terms(filter_)
        if term_count > config.max_dnf_terms:
            logger.warning(
                "Refusing to normalize %s: %d DNF terms exceeds limit %d",
                filter_,
                term_count,
                config.max_dnf_terms,
            )
            raise DnfTermLimitError(term_count, config.max_dnf_terms)

    return dnf_transform(filter_)
