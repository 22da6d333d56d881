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
"""Tests for result-mapping resolution."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

import pytest

from sqlgen.kernel.exceptions import AmbiguousMappingError
from sqlgen.query.mapping import (
    ResultMappingResolver,
    ResultMappingStrategy,
    RowMapper,
    TypeRef,
    default_value_for,
    normalize_column_mapping,
)
from sqlgen.query.plan import Cardinality, OperationKind


@dataclass
class User:
    id: int
    name: str


@pytest.fixture
def resolver() -> ResultMappingResolver:
    return ResultMappingResolver()


class TestTypeRef:
    def test_sequence(self):
        ref = TypeRef.of(list[User])
        assert ref.is_sequence
        assert ref.element is not None
        assert ref.element.name == "User"

    def test_optional(self):
        ref = TypeRef.of(User | None)
        assert ref.is_optional
        assert ref.target is User
        assert ref.name == "User | None"

    def test_typing_optional(self):
        assert TypeRef.of(Optional[int]).is_optional

    def test_void(self):
        assert TypeRef.of(None).is_void
        assert TypeRef.of(type(None)).is_void

    def test_unresolved(self):
        assert not TypeRef.of(Any).is_resolved
        assert not TypeRef.of(inspect.Signature.empty).is_resolved
        assert not TypeRef.of(int | str).is_resolved

    def test_str_keyed_mapping(self):
        assert TypeRef.of(dict[str, Any]).is_mapping
        assert TypeRef.of(dict).is_mapping
        assert not TypeRef.of(dict[int, str]).is_resolved


class TestAutoStrategy:
    def test_sequence_of_beans(self, resolver: ResultMappingResolver):
        plan, issues = resolver.resolve(list[User])
        assert plan.strategy is ResultMappingStrategy.AUTO
        assert plan.row_mapper is RowMapper.BEAN
        assert not plan.optional
        assert issues == []

    def test_sequence_of_string_keyed_maps(self, resolver: ResultMappingResolver):
        plan, _ = resolver.resolve(list[dict[str, Any]])
        assert plan.row_mapper is RowMapper.COLUMN_MAP

    def test_sequence_of_scalars(self, resolver: ResultMappingResolver):
        plan, _ = resolver.resolve(list[int])
        assert plan.row_mapper is RowMapper.SCALAR

    @pytest.mark.parametrize("tp", [str, int, float, bool, Decimal])
    def test_scalars(self, resolver: ResultMappingResolver, tp: type):
        plan, issues = resolver.resolve(tp)
        assert plan.row_mapper is RowMapper.SCALAR
        assert not plan.optional
        assert issues == []

    def test_optional_bean(self, resolver: ResultMappingResolver):
        plan, _ = resolver.resolve(User | None)
        assert plan.row_mapper is RowMapper.BEAN
        assert plan.optional

    def test_optional_scalar(self, resolver: ResultMappingResolver):
        plan, _ = resolver.resolve(Optional[int])
        assert plan.row_mapper is RowMapper.SCALAR
        assert plan.optional

    def test_single_bean(self, resolver: ResultMappingResolver):
        plan, _ = resolver.resolve(User)
        assert plan.row_mapper is RowMapper.BEAN
        assert plan.target_type.target is User

    def test_single_map(self, resolver: ResultMappingResolver):
        plan, _ = resolver.resolve(dict[str, Any])
        assert plan.row_mapper is RowMapper.COLUMN_MAP

    def test_void(self, resolver: ResultMappingResolver):
        plan, issues = resolver.resolve(None)
        assert plan.row_mapper is RowMapper.NONE
        assert issues == []

    @pytest.mark.parametrize("tp", [Any, inspect.Signature.empty, int | str])
    def test_ambiguous_falls_back_to_column_map(self, resolver: ResultMappingResolver, tp: Any):
        plan, issues = resolver.resolve(tp, method_name="find_things")
        assert plan.row_mapper is RowMapper.COLUMN_MAP
        assert len(issues) == 1
        assert isinstance(issues[0], AmbiguousMappingError)
        assert issues[0].context["method"] == "find_things"


class TestOtherStrategies:
    @pytest.mark.parametrize(
        "strategy",
        [ResultMappingStrategy.MANUAL, ResultMappingStrategy.BEAN_PROPERTY, ResultMappingStrategy.NESTED],
    )
    def test_bypass_uses_caller_mapping(self, resolver: ResultMappingResolver, strategy: ResultMappingStrategy):
        mapping = (("user_name", "name"),)
        plan, issues = resolver.resolve(Any, strategy, mapping)
        assert plan.strategy is strategy
        assert plan.column_mapping == mapping
        assert plan.row_mapper is RowMapper.BEAN
        assert issues == []

    def test_constructor_follows_auto_tree(self, resolver: ResultMappingResolver):
        plan, _ = resolver.resolve(list[dict[str, Any]], ResultMappingStrategy.CONSTRUCTOR)
        assert plan.strategy is ResultMappingStrategy.CONSTRUCTOR
        assert plan.row_mapper is RowMapper.COLUMN_MAP


class TestCardinality:
    @pytest.mark.parametrize(
        ("tp", "kind", "expected"),
        [
            (list[User], OperationKind.SELECT, Cardinality.LIST),
            (bool, OperationKind.SELECT, Cardinality.BOOLEAN),
            (int, OperationKind.SELECT, Cardinality.SCALAR),
            (User, OperationKind.SELECT, Cardinality.SINGLE),
            (User | None, OperationKind.SELECT, Cardinality.SINGLE),
            (None, OperationKind.SELECT, Cardinality.VOID),
            (int, OperationKind.UPDATE, Cardinality.SCALAR),
            (None, OperationKind.DELETE, Cardinality.VOID),
            (bool, OperationKind.DELETE, Cardinality.BOOLEAN),
            (bool, OperationKind.UPDATE, Cardinality.BOOLEAN),
        ],
    )
    def test_cardinality_for(self, resolver: ResultMappingResolver, tp: Any, kind: OperationKind, expected: Cardinality):
        assert resolver.cardinality_for(TypeRef.of(tp), kind) is expected


class TestHelpers:
    def test_normalize_column_mapping(self):
        assert normalize_column_mapping({"user_name": "name"}) == (("user_name", "name"),)
        assert normalize_column_mapping(["user_name : name", ("mail", "email")]) == (
            ("user_name", "name"),
            ("mail", "email"),
        )
        assert normalize_column_mapping(None) == ()

    def test_normalize_rejects_bad_entry(self):
        with pytest.raises(ValueError, match="column:property"):
            normalize_column_mapping(["user_name"])

    @pytest.mark.parametrize(
        ("tp", "expected"),
        [(bool, False), (int, 0), (float, 0.0), (list[User], []), (User | None, None), (User, None), (None, None)],
    )
    def test_default_value_for(self, tp: Any, expected: Any):
        assert default_value_for(TypeRef.of(tp)) == expected
