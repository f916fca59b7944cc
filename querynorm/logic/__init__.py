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

"""Boolean normalization of filter trees."""

from .normal_form import (
    apply_association,
    apply_distribution,
    compute_dnf,
    compute_in_expansion,
    dnf_transform,
    is_disjunctive_normal_form,
)
from .terms import DnfTermLimitError, count_dnf_terms, get_dnf_terms

__all__ = [
    "apply_association",
    "apply_distribution",
    "compute_dnf",
    "compute_in_expansion",
    "dnf_transform",
    "is_disjunctive_normal_form",
    "count_dnf_terms",
    "get_dnf_terms",
    "DnfTermLimitError",
]
