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
"""Execution plans and per-method generation results.

A :class:`QueryExecutionPlan` is the terminal artifact of generating one
method: SQL text, ordered bindings and a result-mapping plan. The processor
wraps it in one of three tagged results:

* :class:`Generated`: the plan was built without issues.
* :class:`GeneratedWithWarnings`: a best-effort plan plus advisory issues.
* :class:`Unsupported`: no plan; the artifact is a diagnostic body, or
  ``None`` when the original method body is kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlgen.kernel.exceptions import GenerationIssue
    from sqlgen.query.mapping import ResultMappingPlan
    from sqlgen.query.params import ParameterInfo


class OperationKind(StrEnum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class Cardinality(StrEnum):
    """Shape of the value a generated method returns."""

    SINGLE = "single"
    LIST = "list"
    SCALAR = "scalar"
    BOOLEAN = "boolean"
    VOID = "void"


class ParameterStyle(StrEnum):
    """How placeholders in a statement are bound."""

    POSITIONAL = "positional"
    NAMED = "named"


@dataclass(frozen=True)
class QueryExecutionPlan:
    """Everything an emitter needs to render one method body.

    Attributes:
        sql: Statement text with ``?`` or ``:name`` placeholders.
        operation_kind: Statement verb.
        bindings: One entry per placeholder, in placeholder order.
        mapping: How result rows become the declared return value.
        cardinality: Shape of the returned value.
        method_name: Name of the method the plan was generated for.
        parameter_style: Whether ``bindings`` are positional or named.
        count_as_boolean: The statement is a ``COUNT(*)`` whose result the
            emitter must compare ``> 0`` to produce a boolean.
    """

    sql: str
    operation_kind: OperationKind
    bindings: tuple[ParameterInfo, ...]
    mapping: ResultMappingPlan
    cardinality: Cardinality
    method_name: str = ""
    parameter_style: ParameterStyle = ParameterStyle.POSITIONAL
    count_as_boolean: bool = False

    @property
    def placeholder_count(self) -> int:
        """Number of placeholders the bindings account for."""
        return len(self.bindings)

    @property
    def is_mutating(self) -> bool:
        return self.operation_kind is not OperationKind.SELECT


# ---------------------------------------------------------------------------
# Generation results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Generated:
    plan: QueryExecutionPlan
    artifact: Any

    @property
    def method_name(self) -> str:
        return self.plan.method_name

    @property
    def issues(self) -> tuple[GenerationIssue, ...]:
        return ()


@dataclass(frozen=True)
class GeneratedWithWarnings:
    plan: QueryExecutionPlan
    artifact: Any
    issues: tuple[GenerationIssue, ...] = field(default_factory=tuple)

    @property
    def method_name(self) -> str:
        return self.plan.method_name


@dataclass(frozen=True)
class Unsupported:
    method_name: str
    artifact: Any = None
    issues: tuple[GenerationIssue, ...] = field(default_factory=tuple)

    @property
    def plan(self) -> None:
        return None


GenerationResult = Generated | GeneratedWithWarnings | Unsupported
