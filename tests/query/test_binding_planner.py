# Copyright 2026 Firefly Software Solutions Inc.
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
"""Tests for parameter analysis and binding plans."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated

import pytest

from sqlgen.kernel.exceptions import ParameterCountMismatch, ParameterNameMismatch
from sqlgen.query.params import Param, ParameterBindingPlanner, ParameterInfo, is_collection_type
from sqlgen.query.parser import MethodIntentParser


class SampleRepository:
    def search(
        self,
        name: str,
        ids: list[int],
        tags: set[str] | None,
        raw: bytes,
        address: Annotated[str, Param("email")],
        scores: Sequence[float],
        untyped,
        *args,
        **kwargs,
    ): ...


@pytest.fixture
def planner() -> ParameterBindingPlanner:
    return ParameterBindingPlanner()


def params(*names: str) -> list[ParameterInfo]:
    return [ParameterInfo(declared_name=n, binding_name=n) for n in names]


class TestAnalyze:
    def test_declared_parameters_skip_self_and_varargs(self, planner: ParameterBindingPlanner):
        result = planner.analyze(SampleRepository.search)
        assert [p.declared_name for p in result] == ["name", "ids", "tags", "raw", "address", "scores", "untyped"]

    def test_collections(self, planner: ParameterBindingPlanner):
        result = {p.declared_name: p.is_collection for p in planner.analyze(SampleRepository.search)}
        assert result == {
            "name": False,
            "ids": True,
            "tags": True,
            "raw": False,
            "address": False,
            "scores": True,
            "untyped": False,
        }

    def test_param_overrides_binding_name(self, planner: ParameterBindingPlanner):
        address = planner.analyze(SampleRepository.search)[4]
        assert address.binding_name == "email"
        assert address.explicit_name is True

    def test_positional_index_unset(self, planner: ParameterBindingPlanner):
        assert all(p.positional_index is None for p in planner.analyze(SampleRepository.search))

    @pytest.mark.parametrize(
        ("tp", "expected"),
        [(str, False), (tuple[int, ...], True), (frozenset[str], True), (list[int] | None, True), (dict, False)],
    )
    def test_is_collection_type(self, tp, expected: bool):
        assert is_collection_type(tp) is expected


class TestValidation:
    def test_named_all_bound(self, planner: ParameterBindingPlanner):
        assert planner.validate_named(["email"], params("email")) == []

    def test_named_mismatch(self, planner: ParameterBindingPlanner):
        issues = planner.validate_named(["email", "status"], params("email"))
        assert len(issues) == 1
        assert isinstance(issues[0], ParameterNameMismatch)
        assert issues[0].context["parameter"] == "status"

    def test_positional_matches(self, planner: ParameterBindingPlanner):
        assert planner.validate_positional(2, params("a", "b")) == []

    def test_positional_mismatch(self, planner: ParameterBindingPlanner):
        issues = planner.validate_positional(3, params("a", "b"))
        assert len(issues) == 1
        assert isinstance(issues[0], ParameterCountMismatch)
        assert issues[0].context == {"placeholders": 3, "parameters": 2}


class TestPlanDerived:
    def test_between_consumes_two_parameters(self, planner: ParameterBindingPlanner):
        descriptor = MethodIntentParser().parse("findByAgeBetweenAndNameContaining")
        bindings, issues = planner.plan_derived(descriptor, params("low", "high", "fragment"))
        assert [b.declared_name for b in bindings] == ["low", "high", "fragment"]
        assert [b.positional_index for b in bindings] == [0, 1, 2]
        assert [b.like_pattern for b in bindings] == [None, None, "%{}%"]
        assert issues == []

    @pytest.mark.parametrize(
        ("method", "pattern"),
        [
            ("findByNameStartingWith", "{}%"),
            ("findByNameEndingWith", "%{}"),
            ("findByNameNotContaining", "%{}%"),
            ("findByNameLike", None),
        ],
    )
    def test_like_patterns(self, planner: ParameterBindingPlanner, method: str, pattern: str | None):
        bindings, _ = planner.plan_derived(MethodIntentParser().parse(method), params("value"))
        assert bindings[0].like_pattern == pattern

    def test_null_checks_bind_nothing(self, planner: ParameterBindingPlanner):
        bindings, issues = planner.plan_derived(MethodIntentParser().parse("findByEmailIsNull"), [])
        assert bindings == ()
        assert issues == []

    def test_missing_parameters_are_flagged_and_bound_by_field(self, planner: ParameterBindingPlanner):
        bindings, issues = planner.plan_derived(MethodIntentParser().parse("findByEmailAndActive"), params("email"))
        assert [b.binding_name for b in bindings] == ["email", "active"]
        assert [b.positional_index for b in bindings] == [0, 1]
        assert len(issues) == 1
        assert isinstance(issues[0], ParameterCountMismatch)

    def test_collection_flag_is_kept(self, planner: ParameterBindingPlanner):
        ids = ParameterInfo(declared_name="ids", binding_name="ids", is_collection=True)
        bindings, _ = planner.plan_derived(MethodIntentParser().parse("findByIdIn"), [ids])
        assert bindings[0].is_collection is True


class TestEntityAndRawPlans:
    def test_plan_entity(self, planner: ParameterBindingPlanner):
        entity = ParameterInfo(declared_name="user", binding_name="user")
        bindings = planner.plan_entity(("name", "email", "id"), entity)
        assert [b.attribute for b in bindings] == ["name", "email", "id"]
        assert [b.positional_index for b in bindings] == [0, 1, 2]
        assert {b.declared_name for b in bindings} == {"user"}

    def test_plan_entity_without_parameter(self, planner: ParameterBindingPlanner):
        bindings = planner.plan_entity(("name",), None)
        assert bindings[0].declared_name == "entity"

    def test_plan_named(self, planner: ParameterBindingPlanner):
        declared = [
            ParameterInfo(declared_name="address", binding_name="email", explicit_name=True),
            ParameterInfo(declared_name="active", binding_name="active"),
        ]
        bindings = planner.plan_named(["active", "email", "missing"], declared)
        assert [(b.declared_name, b.binding_name) for b in bindings] == [
            ("active", "active"),
            ("address", "email"),
            ("missing", "missing"),
        ]
        assert all(b.positional_index is None for b in bindings)

    def test_plan_positional(self, planner: ParameterBindingPlanner):
        bindings = planner.plan_positional(2, params("active"))
        assert [(b.declared_name, b.positional_index) for b in bindings] == [("active", 0), ("arg1", 1)]
