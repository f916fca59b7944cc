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

"""Filter trees and their disjunctive normal form for query planning."""

from .config import ConfigError, NormalizationConfig
from .filters import (
    CompositeFilter,
    FieldFilter,
    Filter,
    FilterOperator,
    LogicalOperator,
    and_filters,
    evaluate,
    field_filter,
    or_filters,
)
from .logic import (
    DnfTermLimitError,
    apply_association,
    apply_distribution,
    compute_dnf,
    compute_in_expansion,
    count_dnf_terms,
    dnf_transform,
    get_dnf_terms,
    is_disjunctive_normal_form,
)

__all__ = [
    "ConfigError",
    "NormalizationConfig",
    "CompositeFilter",
    "FieldFilter",
    "Filter",
    "FilterOperator",
    "LogicalOperator",
    "and_filters",
    "evaluate",
    "field_filter",
    "or_filters",
    "DnfTermLimitError",
    "apply_association",
    "apply_distribution",
    "compute_dnf",
    "compute_in_expansion",
    "count_dnf_terms",
    "dnf_transform",
    "get_dnf_terms",
    "is_disjunctive_normal_form",
]
