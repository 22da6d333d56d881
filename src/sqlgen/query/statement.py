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
"""SQL statement builder for parsed convention methods.

Renders a :class:`QueryMethodDescriptor` against an :class:`EntitySchema`
into positional (``?``) SQL text:

* ``FIND`` / ``FIND_ALL`` -> ``SELECT * FROM t [WHERE ...]``
* ``COUNT``               -> ``SELECT COUNT(*) FROM t [WHERE ...]``
* ``EXISTS``              -> boolean ``CASE`` form, see :data:`EXISTS_FALLBACK_CHAIN`
* ``DELETE``              -> ``DELETE FROM t [WHERE ...]``
* ``SAVE``                -> ``INSERT INTO t (cols) VALUES (?, ...)``
* ``UPDATE``              -> ``UPDATE t SET col = ?, ... [WHERE pk = ?]``

The naming strategy is an explicit argument of every call.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from sqlgen.query.parser import Condition, Operation, Operator, QueryMethodDescriptor
from sqlgen.schema.entity import EntitySchema
from sqlgen.schema.naming import NamingStrategy, map_column

SQL_TOKENS: dict[Operator, str] = {
    Operator.EQUAL: "=",
    Operator.NOT_EQUAL: "!=",
    Operator.GREATER_THAN: ">",
    Operator.GREATER_THAN_EQUAL: ">=",
    Operator.LESS_THAN: "<",
    Operator.LESS_THAN_EQUAL: "<=",
    Operator.LIKE: "LIKE",
    Operator.NOT_LIKE: "NOT LIKE",
    Operator.CONTAINING: "LIKE",
    Operator.NOT_CONTAINING: "NOT LIKE",
    Operator.STARTING_WITH: "LIKE",
    Operator.ENDING_WITH: "LIKE",
    Operator.IN: "IN",
    Operator.NOT_IN: "NOT IN",
    Operator.IS_NULL: "IS NULL",
    Operator.IS_NOT_NULL: "IS NOT NULL",
    Operator.BETWEEN: "BETWEEN",
    Operator.NOT_BETWEEN: "NOT BETWEEN",
}

_NO_ARGUMENT = frozenset({Operator.IS_NULL, Operator.IS_NOT_NULL})
_RANGE = frozenset({Operator.BETWEEN, Operator.NOT_BETWEEN})
_MEMBERSHIP = frozenset({Operator.IN, Operator.NOT_IN})


class ExistsForm(StrEnum):
    """Ways to answer an ``existsBy`` method, most preferred first."""

    BOOLEAN_CASE = "boolean_case"
    COUNT_COMPARISON = "count_comparison"
    LITERAL_FALSE = "literal_false"


EXISTS_FALLBACK_CHAIN: tuple[ExistsForm, ...] = (
    ExistsForm.BOOLEAN_CASE,
    ExistsForm.COUNT_COMPARISON,
    ExistsForm.LITERAL_FALSE,
)


def placeholder_count(operator: Operator) -> int:
    """Number of ``?`` markers a condition with *operator* contributes."""
    if operator in _NO_ARGUMENT:
        return 0
    if operator in _RANGE:
        return 2
    return 1


class SqlStatementBuilder:
    """Build SQL text for convention methods."""

    def build(self, descriptor: QueryMethodDescriptor, schema: EntitySchema, strategy: NamingStrategy) -> str:
        """Dispatch to the statement for ``descriptor.operation``.

        Raises:
            ValueError: For ``Operation.UNKNOWN``, which has no statement, and for
                SAVE or UPDATE with no columns to write.
        """
        op = descriptor.operation
        table = schema.table_name

        if op in (Operation.FIND, Operation.FIND_ALL):
            return f"SELECT * FROM {table}" + self.where_clause(descriptor.conditions, schema, strategy)
        if op is Operation.COUNT:
            return f"SELECT COUNT(*) FROM {table}" + self.where_clause(descriptor.conditions, schema, strategy)
        if op is Operation.EXISTS:
            return self._boolean_case(schema, self.where_clause(descriptor.conditions, schema, strategy))
        if op is Operation.DELETE:
            return f"DELETE FROM {table}" + self.where_clause(descriptor.conditions, schema, strategy)
        if op is Operation.SAVE:
            return self.build_insert(schema, strategy)
        if op is Operation.UPDATE:
            return self.build_update(schema, strategy)

        raise ValueError(f"No statement for operation '{op}' (method {descriptor.source_name!r})")

    # ------------------------------------------------------------------
    # EXISTS
    # ------------------------------------------------------------------

    def build_exists(
        self,
        descriptor: QueryMethodDescriptor,
        schema: EntitySchema,
        strategy: NamingStrategy,
        form: ExistsForm,
    ) -> str | None:
        """Return the SQL for one EXISTS form, or ``None`` for the literal fallback."""
        where = self.where_clause(descriptor.conditions, schema, strategy)
        if form is ExistsForm.BOOLEAN_CASE:
            return self._boolean_case(schema, where)
        if form is ExistsForm.COUNT_COMPARISON:
            return f"SELECT COUNT(*) FROM {schema.table_name}{where}"
        return None

    @staticmethod
    def _boolean_case(schema: EntitySchema, where: str) -> str:
        return f"SELECT CASE WHEN COUNT(*) > 0 THEN TRUE ELSE FALSE END FROM {schema.table_name}{where}"

    # ------------------------------------------------------------------
    # INSERT / UPDATE
    # ------------------------------------------------------------------

    @staticmethod
    def build_insert(schema: EntitySchema, strategy: NamingStrategy) -> str:
        """``INSERT`` over every schema field in declaration order.

        Raises:
            ValueError: If the schema has no fields.
        """
        if not schema.fields:
            raise ValueError(f"No columns to insert into {schema.table_name!r}")
        columns = ", ".join(map_column(f, strategy) for f in schema.fields)
        markers = ", ".join("?" for _ in schema.fields)
        return f"INSERT INTO {schema.table_name} ({columns}) VALUES ({markers})"

    @staticmethod
    def build_update(schema: EntitySchema, strategy: NamingStrategy) -> str:
        """``UPDATE`` of every non-key field, keyed on the primary key when there is one.

        Raises:
            ValueError: If there is no field besides the primary key.
        """
        set_fields = update_set_fields(schema)
        if not set_fields:
            raise ValueError(f"No columns to update in {schema.table_name!r}")
        assignments = ", ".join(f"{map_column(f, strategy)} = ?" for f in set_fields)
        sql = f"UPDATE {schema.table_name} SET {assignments}"
        if has_key(schema):
            sql += f" WHERE {map_column(schema.primary_key or '', strategy)} = ?"
        return sql

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where_clause(
        self,
        conditions: Sequence[Condition],
        schema: EntitySchema,
        strategy: NamingStrategy,
    ) -> str:
        """Render ``" WHERE ..."`` for *conditions*, or ``""`` when there are none."""
        if not conditions:
            return ""

        parts: list[str] = []
        for index, condition in enumerate(conditions):
            if index > 0:
                parts.append(f" {condition.connector or 'AND'} ")
            parts.append(self._predicate(condition, schema, strategy))
        return " WHERE " + "".join(parts)

    @staticmethod
    def _predicate(condition: Condition, schema: EntitySchema, strategy: NamingStrategy) -> str:
        column = map_column(schema.resolve(condition.field) or condition.field, strategy)
        token = SQL_TOKENS[condition.operator]

        if condition.operator in _NO_ARGUMENT:
            return f"{column} {token}"
        if condition.operator in _RANGE:
            return f"{column} {token} ? AND ?"
        if condition.operator in _MEMBERSHIP:
            # One marker regardless of collection size; expansion is left to the emitter.
            return f"{column} {token} (?)"
        return f"{column} {token} ?"


def has_key(schema: EntitySchema) -> bool:
    return schema.primary_key is not None and schema.primary_key in schema.fields


def update_set_fields(schema: EntitySchema) -> tuple[str, ...]:
    """Fields assigned in an UPDATE's SET clause, in declaration order."""
    return schema.non_key_fields if has_key(schema) else schema.fields
