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
"""Code emitter port: the only seam between plan synthesis and code output."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from sqlgen.query.mapping import ResultMappingPlan, TypeRef
from sqlgen.query.plan import QueryExecutionPlan


@runtime_checkable
class CodeEmitter(Protocol):
    """Turn execution plans into method bodies.

    Implementations raise :class:`~sqlgen.kernel.exceptions.EmissionError`
    when they cannot render a plan. The processor treats that as a failure
    of the one method being generated.
    """

    def emit_select(self, plan: QueryExecutionPlan) -> Any: ...

    def emit_update(self, plan: QueryExecutionPlan) -> Any: ...

    def emit_scalar_cast(self, expression: str, target: TypeRef) -> Any: ...

    def emit_mapping(self, mapping: ResultMappingPlan) -> Any: ...

    def emit_literal(self, value: Any, method_name: str) -> Any: ...

    def emit_diagnostic(self, method_name: str, default: Any = None) -> Any: ...
