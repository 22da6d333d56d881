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
"""Convention method-name parser.

Parses method names like ``findByNameAndAgeGreaterThan`` into a
:class:`QueryMethodDescriptor` that the statement builder renders as SQL.

Grammar
-------
**Prefixes:** ``findBy``, ``findAll``, ``countBy``, ``deleteBy``, ``existsBy``,
``save``, ``update``. Anything else parses to ``Operation.UNKNOWN``.

**Connectors:** ``And``, ``Or`` (only where they start a capitalized token, so
``findByOrderId`` is a single ``orderId`` condition).

**Operators (suffix on field name):**
    - *(none)* / ``Equal`` = ``=``
    - ``NotEqual`` = ``!=``
    - ``GreaterThan`` / ``GreaterThanEqual`` = ``>`` / ``>=``
    - ``LessThan`` / ``LessThanEqual`` = ``<`` / ``<=``
    - ``Like`` / ``NotLike``, ``Containing`` / ``NotContaining``,
      ``StartingWith``, ``EndingWith`` = ``LIKE`` / ``NOT LIKE``
    - ``In`` / ``NotIn`` = ``IN`` / ``NOT IN``
    - ``IsNull`` / ``IsNotNull`` (no argument)
    - ``Between`` / ``NotBetween`` (two arguments)

Snake-case names (``find_by_name_and_age_greater_than``) are camelized first
and follow the same grammar.

Example::

    parser = MethodIntentParser()
    descriptor = parser.parse("findByNameAndAgeGreaterThan")
    descriptor.fields     -> ("name", "age")
    descriptor.operators  -> (Operator.EQUAL, Operator.GREATER_THAN)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum

from sqlgen.schema.entity import camelize


class Operation(StrEnum):
    """What a convention method does."""

    FIND = "find"
    FIND_ALL = "find_all"
    COUNT = "count"
    DELETE = "delete"
    EXISTS = "exists"
    SAVE = "save"
    UPDATE = "update"
    UNKNOWN = "unknown"


class Operator(StrEnum):
    """Comparison operator keyword as written in a method name."""

    EQUAL = "Equal"
    NOT_EQUAL = "NotEqual"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_EQUAL = "GreaterThanEqual"
    LESS_THAN = "LessThan"
    LESS_THAN_EQUAL = "LessThanEqual"
    LIKE = "Like"
    NOT_LIKE = "NotLike"
    IN = "In"
    NOT_IN = "NotIn"
    IS_NULL = "IsNull"
    IS_NOT_NULL = "IsNotNull"
    BETWEEN = "Between"
    NOT_BETWEEN = "NotBetween"
    CONTAINING = "Containing"
    NOT_CONTAINING = "NotContaining"
    STARTING_WITH = "StartingWith"
    ENDING_WITH = "EndingWith"


class Connector(StrEnum):
    AND = "AND"
    OR = "OR"


# Operator keywords ordered longest-first to prevent partial matches.
# E.g., ``GreaterThanEqual`` must be checked before ``GreaterThan``.
OPERATOR_KEYWORDS: tuple[Operator, ...] = tuple(sorted(Operator, key=lambda op: len(op.value), reverse=True))

# (prefix, operation, takes a condition suffix). Checked in order.
PREFIXES: tuple[tuple[str, Operation, bool], ...] = (
    ("findAllBy", Operation.FIND, True),
    ("findAll", Operation.FIND_ALL, False),
    ("findBy", Operation.FIND, True),
    ("countBy", Operation.COUNT, True),
    ("deleteBy", Operation.DELETE, True),
    ("existsBy", Operation.EXISTS, True),
    ("save", Operation.SAVE, False),
    ("update", Operation.UPDATE, False),
)

# Split before a connector that starts a capitalized token.
_CONNECTOR_SPLIT = re.compile(r"(?=(?:And|Or)[A-Z])")

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Condition:
    """A single field/operator/connector triple parsed from a method name.

    ``connector`` links the *previous* condition to this one and is ``None``
    for the first condition.
    """

    field: str
    operator: Operator = Operator.EQUAL
    connector: Connector | None = None


@dataclass(frozen=True)
class QueryMethodDescriptor:
    """Result of parsing a convention method name."""

    operation: Operation
    conditions: tuple[Condition, ...] = field(default_factory=tuple)
    source_name: str = ""

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(c.field for c in self.conditions)

    @property
    def operators(self) -> tuple[Operator, ...]:
        return tuple(c.operator for c in self.conditions)

    @property
    def connectors(self) -> tuple[Connector, ...]:
        """Connectors between consecutive conditions (one fewer than conditions)."""
        return tuple(c.connector or Connector.AND for c in self.conditions[1:])


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class MethodIntentParser:
    """Parse convention method names into :class:`QueryMethodDescriptor` objects.

    Examples::

        parse("findByEmail")                  -> FIND where email = ?
        parse("findByStatusOrRole")           -> FIND where status = ? OR role = ?
        parse("countByAgeGreaterThanEqual")   -> COUNT where age >= ?
        parse("existsByEmailIsNotNull")       -> EXISTS where email IS NOT NULL
        parse("findAll")                      -> FIND_ALL
        parse("saveUser")                     -> SAVE
        parse("refresh")                      -> UNKNOWN

    Parsing never raises: unmatched names produce ``Operation.UNKNOWN``.
    """

    def parse(self, method_name: str) -> QueryMethodDescriptor:
        """Parse a method name into a :class:`QueryMethodDescriptor`."""
        name = camelize(method_name)

        for prefix, operation, takes_conditions in PREFIXES:
            if name.startswith(prefix):
                conditions = self._parse_conditions(name[len(prefix) :]) if takes_conditions else ()
                return QueryMethodDescriptor(operation=operation, conditions=conditions, source_name=method_name)

        return QueryMethodDescriptor(operation=Operation.UNKNOWN, source_name=method_name)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_conditions(body: str) -> tuple[Condition, ...]:
        """Split the condition body at ``And`` / ``Or`` and parse each segment."""
        if not body:
            return ()

        segments = [s for s in _CONNECTOR_SPLIT.split(body) if s]
        conditions: list[Condition] = []

        for index, segment in enumerate(segments):
            connector: Connector | None = None
            if index > 0:
                if segment.startswith("And"):
                    connector, segment = Connector.AND, segment[3:]
                elif segment.startswith("Or"):
                    connector, segment = Connector.OR, segment[2:]
            field_name, operator = MethodIntentParser._split_operator(segment)
            conditions.append(Condition(field=field_name, operator=operator, connector=connector))

        return tuple(conditions)

    @staticmethod
    def _split_operator(segment: str) -> tuple[str, Operator]:
        """Split ``AgeGreaterThan`` into ``("age", Operator.GREATER_THAN)``."""
        field_name, operator = segment, Operator.EQUAL
        for keyword in OPERATOR_KEYWORDS:
            if segment.endswith(keyword.value) and len(segment) > len(keyword.value):
                field_name, operator = segment[: -len(keyword.value)], keyword
                break
        if field_name:
            field_name = field_name[0].lower() + field_name[1:]
        return field_name, operator
