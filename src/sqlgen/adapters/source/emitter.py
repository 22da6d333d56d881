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
"""Python source emitter: renders execution plans as method-body source text.

The emitted bodies target a SQLAlchemy-style session::

    result = session.execute(text("SELECT * FROM users WHERE email = :p0"), {"p0": email})
    return [User(**row._mapping) for row in result]

Positional ``?`` markers are rewritten to ``:p0``, ``:p1``, ... so that every
statement binds through a single parameter dict.

Implements :class:`~sqlgen.ports.emitter.CodeEmitter`.
"""

from __future__ import annotations

import re
from typing import Any

from sqlgen.kernel.exceptions import EmissionError
from sqlgen.query.mapping import ResultMappingPlan, RowMapper, TypeRef
from sqlgen.query.params import ParameterInfo
from sqlgen.query.plan import Cardinality, ParameterStyle, QueryExecutionPlan

_POSITIONAL_MARKER = re.compile(r"\?")


class PythonSourceEmitter:
    """Render plans as indented Python source for a repository method body."""

    def __init__(self, session_name: str = "session", indent: str = "    ") -> None:
        self._session = session_name
        self._indent = indent

    # ------------------------------------------------------------------
    # CodeEmitter
    # ------------------------------------------------------------------

    def emit_select(self, plan: QueryExecutionPlan) -> str:
        lines = [self._execute_line(plan)]
        if plan.count_as_boolean:
            lines.append("return result.scalar_one() > 0")
        elif plan.cardinality is Cardinality.BOOLEAN:
            lines.append("return bool(result.scalar_one())")
        else:
            lines.append(self.emit_mapping(plan.mapping))
        return self._block(lines)

    def emit_update(self, plan: QueryExecutionPlan) -> str:
        lines = [self._execute_line(plan)]
        if plan.cardinality is Cardinality.VOID:
            lines.append("return None")
        elif plan.cardinality is Cardinality.BOOLEAN:
            lines.append("return result.rowcount > 0")
        else:
            lines.append("return result.rowcount")
        return self._block(lines)

    def emit_scalar_cast(self, expression: str, target: TypeRef) -> str:
        name = _type_name(target)
        if name in ("str", "int", "float", "bool", "Decimal"):
            return f"{name}({expression})"
        return expression

    def emit_mapping(self, mapping: ResultMappingPlan) -> str:
        """Statements turning ``result`` into the declared return value."""
        target = mapping.target_type
        row_mapper = mapping.row_mapper

        if row_mapper is RowMapper.NONE:
            return "return None"

        if target.is_sequence:
            element = target.element or TypeRef.of(Any)
            if row_mapper is RowMapper.SCALAR:
                return f"return [{self.emit_scalar_cast('value', element)} for value in result.scalars()]"
            return f"return [{self._row_expression('row', element, mapping)} for row in result]"

        if mapping.optional:
            if row_mapper is RowMapper.SCALAR:
                value = self.emit_scalar_cast("row[0]", target)
            else:
                value = self._row_expression("row", target, mapping)
            return self._block(["row = result.first()", f"return None if row is None else {value}"])

        if row_mapper is RowMapper.SCALAR:
            return f"return {self.emit_scalar_cast('result.scalar_one()', target)}"
        return f"return {self._row_expression('result.one()', target, mapping)}"

    def emit_literal(self, value: Any, method_name: str) -> str:
        return f"return {value!r}"

    def emit_diagnostic(self, method_name: str, default: Any = None) -> str:
        return self._block(
            [
                f'warnings.warn("Method {method_name} called (implementation needed)", stacklevel=2)',
                f"return {default!r}",
            ]
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def render_method(self, name: str, params: list[ParameterInfo], body: str) -> str:
        """Wrap *body* in a ``def`` taking the session plus the declared parameters."""
        declared = list(dict.fromkeys(p.declared_name for p in params))
        signature = ", ".join(["self", self._session, *declared])
        indented = "\n".join(self._indent + line if line else line for line in body.splitlines())
        return f"def {name}({signature}):\n{indented}"

    def _execute_line(self, plan: QueryExecutionPlan) -> str:
        sql, params = self._bind(plan)
        return f"result = {self._session}.execute(text({sql!r}), {params})"

    def _bind(self, plan: QueryExecutionPlan) -> tuple[str, str]:
        if plan.parameter_style is ParameterStyle.NAMED:
            entries = [f"{b.binding_name!r}: {_value_expression(b)}" for b in plan.bindings]
            return plan.sql, "{" + ", ".join(entries) + "}"

        markers = plan.sql.count("?")
        if markers != len(plan.bindings):
            raise EmissionError(
                f"Statement for {plan.method_name!r} has {markers} placeholder(s) "
                f"but {len(plan.bindings)} binding(s)",
                context={"method": plan.method_name, "sql": plan.sql},
            )

        counter = iter(range(markers))
        sql = _POSITIONAL_MARKER.sub(lambda _: f":p{next(counter)}", plan.sql)
        entries = [f"'p{index}': {_value_expression(b)}" for index, b in enumerate(plan.bindings)]
        return sql, "{" + ", ".join(entries) + "}"

    def _row_expression(self, row: str, target: TypeRef, mapping: ResultMappingPlan) -> str:
        if mapping.row_mapper is RowMapper.COLUMN_MAP:
            return f"dict({row}._mapping)"
        name = _type_name(target)
        if mapping.column_mapping:
            fields = ", ".join(f"{prop!r}: {row}._mapping[{column!r}]" for column, prop in mapping.column_mapping)
            return f"{name}(**{{{fields}}})"
        return f"{name}(**{row}._mapping)"

    @staticmethod
    def _block(lines: list[str]) -> str:
        return "\n".join(lines)


def _type_name(ref: TypeRef) -> str:
    return getattr(ref.target, "__name__", ref.name)


def _value_expression(binding: ParameterInfo) -> str:
    value = binding.declared_name
    if binding.attribute is not None:
        value = f"{value}.{binding.attribute}"
    if binding.like_pattern is not None:
        value = f"{binding.like_pattern!r}.format({value})"
    return value
