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

"""Tests for the in-memory evaluate() function."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from querynorm import FieldFilter, and_filters, evaluate, field_filter, or_filters

# ============================================================================
# Test Data
# ============================================================================

ALICE = {"name": "alice", "age": 25, "tags": ["admin", "ops"], "address": {"city": "Paris"}, "role": "admin"}
BOB = {"name": "bob", "age": 30, "tags": ["user"], "address": {"city": "Berlin"}, "role": None}
CHARLIE = {"name": "charlie", "age": 35}


class PydanticUser(BaseModel):
    name: str
    age: int


class TestFieldFilterEvaluate:
    """Tests for field filter evaluation."""

    def test_eq(self) -> None:
        filter_ = FieldFilter.eq("name", "alice")
        assert evaluate(filter_, ALICE) is True
        assert evaluate(filter_, BOB) is False

    def test_eq_none_matches_null_field(self) -> None:
        filter_ = FieldFilter.eq("role", None)
        assert evaluate(filter_, BOB) is True
        assert evaluate(filter_, ALICE) is False
        # Missing is not null
        assert evaluate(filter_, CHARLIE) is False

    def test_neq(self) -> None:
        filter_ = FieldFilter.neq("role", "admin")
        assert evaluate(filter_, ALICE) is False
        # null and missing fields never match !=
        assert evaluate(filter_, BOB) is False
        assert evaluate(filter_, CHARLIE) is False

    def test_ordering_operators(self) -> None:
        assert evaluate(FieldFilter.gt("age", 28), BOB) is True
        assert evaluate(FieldFilter.gt("age", 30), BOB) is False
        assert evaluate(FieldFilter.gte("age", 30), BOB) is True
        assert evaluate(FieldFilter.lt("age", 30), ALICE) is True
        assert evaluate(FieldFilter.lte("age", 24), ALICE) is False

    def test_ordering_with_incomparable_types(self) -> None:
        assert evaluate(FieldFilter.gt("name", 3), ALICE) is False

    def test_in_and_not_in(self) -> None:
        assert evaluate(FieldFilter.in_("age", [25, 35]), ALICE) is True
        assert evaluate(FieldFilter.in_("age", [25, 35]), BOB) is False
        assert evaluate(FieldFilter.not_in("age", [25, 35]), BOB) is True
        assert evaluate(FieldFilter.not_in("role", ["admin"]), BOB) is False

    def test_array_contains(self) -> None:
        assert evaluate(FieldFilter.array_contains("tags", "ops"), ALICE) is True
        assert evaluate(FieldFilter.array_contains("tags", "ops"), BOB) is False
        assert evaluate(FieldFilter.array_contains("name", "a"), ALICE) is False

    def test_array_contains_any(self) -> None:
        filter_ = FieldFilter.array_contains_any("tags", ["user", "guest"])
        assert evaluate(filter_, BOB) is True
        assert evaluate(filter_, ALICE) is False
        assert evaluate(filter_, CHARLIE) is False

    def test_dotted_field_path(self) -> None:
        filter_ = FieldFilter.eq("address.city", "Paris")
        assert evaluate(filter_, ALICE) is True
        assert evaluate(filter_, BOB) is False
        assert evaluate(filter_, CHARLIE) is False

    def test_map_and_list_values(self) -> None:
        assert evaluate(FieldFilter.eq("address", {"city": "Paris"}), ALICE) is True
        assert evaluate(FieldFilter.eq("address", {"city": "Rome"}), ALICE) is False
        assert evaluate(FieldFilter.eq("tags", ["admin", "ops"]), ALICE) is True
        assert evaluate(FieldFilter.neq("tags", ["user"]), ALICE) is True

    def test_list_operator_requires_list_value(self) -> None:
        with pytest.raises(ValueError, match="expected list"):
            evaluate(field_filter("age", "in", 25), ALICE)

    def test_pydantic_record(self) -> None:
        assert evaluate(FieldFilter.eq("name", "alice"), PydanticUser(name="alice", age=25)) is True


class TestCompositeFilterEvaluate:
    """Tests for AND / OR evaluation."""

    def test_and(self) -> None:
        filter_ = and_filters(FieldFilter.eq("name", "alice"), FieldFilter.lt("age", 30))
        assert evaluate(filter_, ALICE) is True
        assert evaluate(filter_, BOB) is False

    def test_or(self) -> None:
        filter_ = or_filters(FieldFilter.eq("name", "alice"), FieldFilter.gt("age", 32))
        assert evaluate(filter_, ALICE) is True
        assert evaluate(filter_, BOB) is False
        assert evaluate(filter_, CHARLIE) is True

    def test_empty_composites(self) -> None:
        assert evaluate(and_filters(), ALICE) is True
        assert evaluate(or_filters(), ALICE) is False
