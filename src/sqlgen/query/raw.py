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
"""Hand-written SQL support: the ``@native_query`` decorator and its analyzer.

Usage::

    from sqlgen.query import native_query

    @sql_generator(entity=User)
    class UserRepository:

        @native_query("SELECT * FROM users WHERE email = :email")
        def find_active(self, email: str) -> list[User]: ...

        @native_query("UPDATE users SET active = ? WHERE id = ?")
        def deactivate(self, active: bool, user_id: int) -> int: ...

Placeholder scanning is textual: a ``?`` or ``:name`` inside a string
literal is counted as a placeholder.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import sqlglot
from sqlglot.errors import ParseError, TokenError

from sqlgen.kernel.exceptions import GenerationIssue, SqlValidationError
from sqlgen.query.mapping import ResultMappingStrategy, normalize_column_mapping
from sqlgen.query.plan import OperationKind, ParameterStyle

_NAMED_PARAMETER = re.compile(r":([a-zA-Z_][a-zA-Z0-9_]*)")
_MUTATING_PREFIXES = ("INSERT", "UPDATE", "DELETE")

NATIVE_QUERY_ATTR = "__sqlgen_native_query__"


@dataclass(frozen=True)
class NativeQuery:
    """Raw-query contract attached to a method by :func:`native_query`.

    ``is_update`` and ``parameter_type`` are detected from the SQL text when
    left as ``None``.
    """

    sql: str
    result_type: Any = None
    mapping_type: ResultMappingStrategy = ResultMappingStrategy.AUTO
    column_mapping: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    is_update: bool | None = None
    parameter_type: ParameterStyle | None = None
    validate_sql: bool = False


def native_query(
    sql: str,
    *,
    result_type: Any = None,
    mapping_type: ResultMappingStrategy | str = ResultMappingStrategy.AUTO,
    column_mapping: Mapping[str, str] | Iterable[str | tuple[str, str]] | None = None,
    is_update: bool | None = None,
    parameter_type: ParameterStyle | str | None = None,
    validate_sql: bool = False,
) -> Callable:
    """Attach hand-written SQL to a repository method.

    Args:
        sql: Statement text with ``?`` or ``:name`` placeholders.
        result_type: Overrides the method's return annotation for mapping.
        mapping_type: Result mapping strategy.
        column_mapping: ``(column, property)`` pairs, a dict, or
            ``"column:property"`` strings.
        is_update: Force (or suppress) mutating-statement handling.
        parameter_type: Force positional or named binding.
        validate_sql: Parse the statement at generation time and report
            syntax errors as warnings.

    Returns:
        A decorator storing a :class:`NativeQuery` on the function under
        ``__sqlgen_native_query__``.
    """
    contract = NativeQuery(
        sql=sql,
        result_type=result_type,
        mapping_type=ResultMappingStrategy(mapping_type),
        column_mapping=normalize_column_mapping(column_mapping),
        is_update=is_update,
        parameter_type=ParameterStyle(parameter_type) if parameter_type is not None else None,
        validate_sql=validate_sql,
    )

    def decorator(func: Callable) -> Callable:
        setattr(func, NATIVE_QUERY_ATTR, contract)
        return func

    return decorator


def get_native_query(func: Any) -> NativeQuery | None:
    return getattr(func, NATIVE_QUERY_ATTR, None)


class RawQueryAnalyzer:
    """Inspect hand-written SQL text."""

    @staticmethod
    def is_update_statement(sql: str) -> bool:
        """``True`` when *sql* starts with ``INSERT``, ``UPDATE`` or ``DELETE`` (any case)."""
        return sql.strip().upper().startswith(_MUTATING_PREFIXES)

    @staticmethod
    def extract_named_parameters(sql: str) -> list[str]:
        """Unique ``:name`` placeholders in first-seen order."""
        return list(dict.fromkeys(_NAMED_PARAMETER.findall(sql)))

    @staticmethod
    def count_positional_parameters(sql: str) -> int:
        return sql.count("?")

    @staticmethod
    def operation_kind(sql: str) -> OperationKind:
        """Statement verb from the leading keyword; anything else reads as SELECT."""
        head = sql.strip().upper()
        for kind in (OperationKind.INSERT, OperationKind.UPDATE, OperationKind.DELETE):
            if head.startswith(kind.value):
                return kind
        return OperationKind.SELECT

    @staticmethod
    def validate(sql: str, dialect: str | None = None) -> list[GenerationIssue]:
        """Parse *sql* with sqlglot and report syntax errors as advisory issues."""
        try:
            sqlglot.parse_one(sql, dialect=dialect or None)
        except (ParseError, TokenError) as exc:
            return [
                SqlValidationError(
                    f"SQL does not parse: {exc}",
                    context={"sql": sql, "dialect": dialect or "default"},
                )
            ]
        return []
