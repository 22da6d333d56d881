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
"""Result-mapping resolution.

Decides how result rows become the declared return value of a method.

Decision order for :attr:`ResultMappingStrategy.AUTO`:

1. A sequence return (``list[User]``) maps every row to a bean, or to a
   plain dict when the element is a ``str``-keyed mapping.
2. A scalar return (``int``, ``str``, ``float``, ``bool``, ``Decimal``)
   extracts the first column with an explicit cast.
3. An optional return (``User | None``) fetches one row and collapses
   absence to ``None``.
4. Anything else maps a single row to a bean with an explicit cast.

``MANUAL``, ``BEAN_PROPERTY`` and ``NESTED`` skip the tree and rely on the
caller's column mapping. ``CONSTRUCTOR`` follows the tree but keeps its tag.
"""

from __future__ import annotations

import collections.abc
import inspect
import types
import typing
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Annotated, Any, Union

from sqlgen.kernel.exceptions import AmbiguousMappingError, GenerationIssue
from sqlgen.query.plan import Cardinality, OperationKind

SCALAR_TYPES: tuple[type, ...] = (str, int, float, bool, Decimal)

_SEQUENCE_ORIGINS = frozenset(
    {
        list,
        tuple,
        set,
        frozenset,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Collection,
        collections.abc.Set,
        collections.abc.Iterable,
    }
)
_MAPPING_ORIGINS = frozenset({dict, collections.abc.Mapping, collections.abc.MutableMapping})


class ResultMappingStrategy(StrEnum):
    AUTO = "auto"
    MANUAL = "manual"
    BEAN_PROPERTY = "bean_property"
    CONSTRUCTOR = "constructor"
    NESTED = "nested"


_BYPASS = frozenset(
    {ResultMappingStrategy.MANUAL, ResultMappingStrategy.BEAN_PROPERTY, ResultMappingStrategy.NESTED}
)


class RowMapper(StrEnum):
    """How a single row is turned into a value."""

    BEAN = "bean"
    COLUMN_MAP = "column_map"
    SCALAR = "scalar"
    NONE = "none"


# ---------------------------------------------------------------------------
# TypeRef
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeRef:
    """Normalized view of a return annotation.

    Attributes:
        name: Display name, e.g. ``list[User]``.
        target: The annotation with ``Optional`` and ``Annotated`` stripped.
        element: Element type of a sequence, else ``None``.
        is_sequence: ``list``/``tuple``/``set`` and their abstract forms.
        is_optional: The annotation was ``T | None``.
        is_mapping: A ``str``-keyed (or unparameterized) mapping.
        is_void: The annotation is ``None``.
        is_resolved: ``False`` for a missing annotation, ``Any`` or a
            union of several non-``None`` members.
    """

    name: str
    target: Any = None
    element: TypeRef | None = None
    is_sequence: bool = False
    is_optional: bool = False
    is_mapping: bool = False
    is_void: bool = False
    is_resolved: bool = True

    @property
    def is_scalar(self) -> bool:
        return self.target in SCALAR_TYPES

    @property
    def is_bool(self) -> bool:
        return self.target is bool

    @classmethod
    def of(cls, annotation: Any) -> TypeRef:
        """Build a :class:`TypeRef` from a (possibly absent) annotation."""
        if isinstance(annotation, TypeRef):
            return annotation
        if annotation is inspect.Signature.empty or annotation is Any:
            return cls(name="Any", target=Any, is_resolved=False)
        if annotation is None or annotation is type(None):
            return cls(name="None", target=None, is_void=True)

        origin = typing.get_origin(annotation)
        if origin is Annotated:
            return cls.of(typing.get_args(annotation)[0])

        if origin is Union or isinstance(annotation, types.UnionType):
            args = typing.get_args(annotation)
            members = [a for a in args if a is not type(None)]
            if len(members) == 1 and len(members) < len(args):
                inner = cls.of(members[0])
                return cls(
                    name=f"{inner.name} | None",
                    target=inner.target,
                    element=inner.element,
                    is_sequence=inner.is_sequence,
                    is_optional=True,
                    is_mapping=inner.is_mapping,
                    is_resolved=inner.is_resolved,
                )
            return cls(name=_display(annotation), target=annotation, is_resolved=False)

        base = origin if origin is not None else annotation
        args = typing.get_args(annotation)

        if base in _SEQUENCE_ORIGINS:
            element = cls.of(args[0]) if args else cls.of(Any)
            return cls(name=_display(annotation), target=annotation, element=element, is_sequence=True)

        if base in _MAPPING_ORIGINS:
            str_keyed = not args or args[0] is str
            return cls(name=_display(annotation), target=annotation, is_mapping=str_keyed, is_resolved=str_keyed)

        return cls(name=_display(annotation), target=annotation)


def _display(annotation: Any) -> str:
    if isinstance(annotation, type) and not typing.get_args(annotation):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResultMappingPlan:
    """How rows map to a method's declared return shape.

    Attributes:
        strategy: The requested mapping strategy.
        target_type: Normalized return annotation.
        column_mapping: Ordered ``(column, property)`` pairs.
        row_mapper: Per-row conversion chosen for the shape.
        optional: A missing row collapses to ``None``.
    """

    strategy: ResultMappingStrategy
    target_type: TypeRef
    column_mapping: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    row_mapper: RowMapper = RowMapper.BEAN
    optional: bool = False


def normalize_column_mapping(
    mapping: Mapping[str, str] | Iterable[str | tuple[str, str]] | None,
) -> tuple[tuple[str, str], ...]:
    """Normalize a column mapping to ordered ``(column, property)`` pairs.

    Accepts a dict, ``(column, property)`` pairs, or ``"column:property"``
    strings::

        normalize_column_mapping(["user_name:name", ("mail", "email")])
        -> (("user_name", "name"), ("mail", "email"))

    Raises:
        ValueError: If a string entry has no ``:`` separator.
    """
    if not mapping:
        return ()
    if isinstance(mapping, Mapping):
        return tuple((str(c), str(p)) for c, p in mapping.items())

    pairs: list[tuple[str, str]] = []
    for entry in mapping:
        if isinstance(entry, str):
            column, sep, prop = entry.partition(":")
            if not sep:
                raise ValueError(f"Column mapping entry {entry!r} must have the form 'column:property'")
            pairs.append((column.strip(), prop.strip()))
        else:
            column, prop = entry
            pairs.append((column, prop))
    return tuple(pairs)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class ResultMappingResolver:
    """Choose a :class:`ResultMappingPlan` for a return annotation."""

    def resolve(
        self,
        return_type: Any,
        strategy: ResultMappingStrategy = ResultMappingStrategy.AUTO,
        column_mapping: tuple[tuple[str, str], ...] = (),
        *,
        method_name: str = "",
    ) -> tuple[ResultMappingPlan, list[GenerationIssue]]:
        """Resolve the mapping plan and any advisory issues for *return_type*."""
        target = TypeRef.of(return_type)
        issues: list[GenerationIssue] = []

        if strategy in _BYPASS:
            row_mapper = RowMapper.NONE if target.is_void else RowMapper.BEAN
            return self._plan(strategy, target, column_mapping, row_mapper), issues

        if target.is_void:
            return self._plan(strategy, target, column_mapping, RowMapper.NONE), issues

        if not target.is_resolved:
            issues.append(
                AmbiguousMappingError(
                    f"Cannot choose a result mapping for return type '{target.name}'",
                    context={"method": method_name, "return_type": target.name},
                )
            )
            return self._plan(strategy, target, column_mapping, RowMapper.COLUMN_MAP), issues

        if target.is_sequence:
            element = target.element or TypeRef.of(Any)
            return self._plan(strategy, target, column_mapping, _row_mapper_for(element)), issues

        if target.is_scalar and not target.is_optional:
            return self._plan(strategy, target, column_mapping, RowMapper.SCALAR), issues

        if target.is_optional:
            return self._plan(strategy, target, column_mapping, _row_mapper_for(target), optional=True), issues

        return self._plan(strategy, target, column_mapping, _row_mapper_for(target)), issues

    @staticmethod
    def cardinality_for(target: TypeRef, operation_kind: OperationKind) -> Cardinality:
        """Cardinality of a method returning *target* from an *operation_kind* statement."""
        if target.is_void:
            return Cardinality.VOID
        if operation_kind is not OperationKind.SELECT:
            return Cardinality.BOOLEAN if target.is_bool else Cardinality.SCALAR
        if target.is_sequence:
            return Cardinality.LIST
        if target.is_bool:
            return Cardinality.BOOLEAN
        if target.is_scalar:
            return Cardinality.SCALAR
        return Cardinality.SINGLE

    @staticmethod
    def _plan(
        strategy: ResultMappingStrategy,
        target: TypeRef,
        column_mapping: tuple[tuple[str, str], ...],
        row_mapper: RowMapper,
        *,
        optional: bool = False,
    ) -> ResultMappingPlan:
        return ResultMappingPlan(
            strategy=strategy,
            target_type=target,
            column_mapping=tuple(column_mapping),
            row_mapper=row_mapper,
            optional=optional,
        )


def _row_mapper_for(ref: TypeRef) -> RowMapper:
    if ref.is_mapping or not ref.is_resolved:
        return RowMapper.COLUMN_MAP
    if ref.is_scalar:
        return RowMapper.SCALAR
    return RowMapper.BEAN


def default_value_for(target: TypeRef) -> Any:
    """Neutral value a method returning *target* yields when it cannot run."""
    if target.is_optional or target.is_void:
        return None
    if target.is_sequence:
        return []
    if target.is_bool:
        return False
    if target.target is int:
        return 0
    if target.target is float:
        return 0.0
    return None
