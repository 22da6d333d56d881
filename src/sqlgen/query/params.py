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
"""Parameter binding planner.

Reads the declared call signature of a repository method and matches its
parameters to the placeholders of the generated (or hand-written) SQL.

Binding names default to the declared parameter name and can be overridden
with :class:`Param` inside ``Annotated``::

    def find_by_email(self, address: Annotated[str, Param("email")]) -> User: ...

Mismatches never raise: they are returned as advisory issues.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import types
import typing
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_type_hints

from sqlgen.kernel.exceptions import GenerationIssue, ParameterCountMismatch, ParameterNameMismatch
from sqlgen.query.parser import Operator, QueryMethodDescriptor
from sqlgen.query.statement import placeholder_count

_SKIP = frozenset({"self", "cls", "return"})

_COLLECTION_ORIGINS = frozenset(
    {
        list,
        tuple,
        set,
        frozenset,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Collection,
        collections.abc.Set,
        collections.abc.MutableSet,
        collections.abc.Iterable,
    }
)
_TEXT_TYPES = frozenset({str, bytes, bytearray})

# Wildcard templates applied to the bound value of LIKE-style operators.
LIKE_PATTERNS: dict[Operator, str] = {
    Operator.CONTAINING: "%{}%",
    Operator.NOT_CONTAINING: "%{}%",
    Operator.STARTING_WITH: "{}%",
    Operator.ENDING_WITH: "%{}",
}


@dataclass(frozen=True)
class Param:
    """Binding-name override, used as ``Annotated[T, Param("name")]``."""

    name: str


@dataclass(frozen=True)
class ParameterInfo:
    """One declared parameter, or one placeholder binding derived from it.

    Attributes:
        declared_name: Parameter name in the method signature.
        binding_name: Name the value is bound under.
        is_collection: The parameter type is a sequence or set.
        positional_index: 0-based placeholder index for positional binding.
        attribute: Entity attribute read from the parameter (SAVE / UPDATE).
        like_pattern: Wildcard template wrapped around the bound value.
        explicit_name: The binding name came from :class:`Param`.
    """

    declared_name: str
    binding_name: str
    is_collection: bool = False
    positional_index: int | None = None
    attribute: str | None = None
    like_pattern: str | None = None
    explicit_name: bool = False


def _unwrap_optional(tp: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is Union or isinstance(tp, types.UnionType):
        args = typing.get_args(tp)
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and type(None) in args:
            return non_none[0]
    return tp


def is_collection_type(tp: Any) -> bool:
    """``True`` for sequence / set annotations; text types are scalars."""
    tp = _unwrap_optional(tp)
    origin = typing.get_origin(tp) or tp
    if origin in _TEXT_TYPES:
        return False
    if origin in _COLLECTION_ORIGINS:
        return True
    return isinstance(origin, type) and issubclass(origin, (list, tuple, set, frozenset))


class ParameterBindingPlanner:
    """Classify declared parameters and plan their placeholder bindings."""

    # ------------------------------------------------------------------
    # Signature analysis
    # ------------------------------------------------------------------

    def analyze(self, func: Callable[..., Any]) -> list[ParameterInfo]:
        """Return one :class:`ParameterInfo` per declared parameter of *func*."""
        sig = inspect.signature(func)
        try:
            hints = get_type_hints(func, include_extras=True)
        except (NameError, TypeError):
            hints = {}

        params: list[ParameterInfo] = []
        for name, p in sig.parameters.items():
            if name in _SKIP or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            hint = hints.get(name, p.annotation)
            binding_name, explicit = name, False
            if typing.get_origin(hint) is Annotated:
                inner, *metadata = typing.get_args(hint)
                for meta in metadata:
                    if isinstance(meta, Param):
                        binding_name, explicit = meta.name, True
                hint = inner

            params.append(
                ParameterInfo(
                    declared_name=name,
                    binding_name=binding_name,
                    is_collection=is_collection_type(hint),
                    explicit_name=explicit,
                )
            )
        return params

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def validate_named(names: Sequence[str], params: Sequence[ParameterInfo]) -> list[GenerationIssue]:
        """Flag named placeholders with no declared parameter bound under that name."""
        bound = {p.binding_name for p in params}
        return [
            ParameterNameMismatch(
                f"Named parameter ':{name}' has no matching method parameter",
                context={"parameter": name, "declared": sorted(bound)},
            )
            for name in names
            if name not in bound
        ]

    @staticmethod
    def validate_positional(count: int, params: Sequence[ParameterInfo]) -> list[GenerationIssue]:
        """Flag a placeholder count that differs from the declared parameter count."""
        if count == len(params):
            return []
        return [
            ParameterCountMismatch(
                f"Statement has {count} placeholder(s) but the method declares {len(params)} parameter(s)",
                context={"placeholders": count, "parameters": len(params)},
            )
        ]

    # ------------------------------------------------------------------
    # Binding plans
    # ------------------------------------------------------------------

    def plan_derived(
        self,
        descriptor: QueryMethodDescriptor,
        params: Sequence[ParameterInfo],
    ) -> tuple[tuple[ParameterInfo, ...], list[GenerationIssue]]:
        """Bind declared parameters to the WHERE placeholders of a convention method.

        Parameters are consumed in declaration order, one per placeholder, so
        ``find_by_age_between(low, high)`` binds ``low`` then ``high``. When
        the method declares too few parameters, the remaining placeholders are
        bound under the condition's field name.
        """
        bindings: list[ParameterInfo] = []
        remaining = list(params)

        for condition in descriptor.conditions:
            for _ in range(placeholder_count(condition.operator)):
                index = len(bindings)
                source = remaining.pop(0) if remaining else ParameterInfo(condition.field, condition.field)
                bindings.append(
                    dataclasses.replace(
                        source,
                        positional_index=index,
                        like_pattern=LIKE_PATTERNS.get(condition.operator),
                    )
                )

        return tuple(bindings), self.validate_positional(len(bindings), params)

    @staticmethod
    def plan_entity(fields: Sequence[str], entity_param: ParameterInfo | None) -> tuple[ParameterInfo, ...]:
        """Bind each of *fields*, in order, to an attribute of the entity parameter."""
        declared = entity_param.declared_name if entity_param is not None else "entity"
        return tuple(
            ParameterInfo(declared_name=declared, binding_name=name, positional_index=index, attribute=name)
            for index, name in enumerate(fields)
        )

    @staticmethod
    def plan_named(names: Sequence[str], params: Sequence[ParameterInfo]) -> tuple[ParameterInfo, ...]:
        """Order named bindings by first appearance in the statement."""
        by_binding = {p.binding_name: p for p in params}
        bindings: list[ParameterInfo] = []
        for name in names:
            source = by_binding.get(name)
            if source is None:
                bindings.append(ParameterInfo(declared_name=name, binding_name=name))
            else:
                bindings.append(dataclasses.replace(source, positional_index=None))
        return tuple(bindings)

    @staticmethod
    def plan_positional(count: int, params: Sequence[ParameterInfo]) -> tuple[ParameterInfo, ...]:
        """Bind the first *count* declared parameters to ``?`` markers in order."""
        bindings: list[ParameterInfo] = []
        for index in range(count):
            if index < len(params):
                bindings.append(dataclasses.replace(params[index], positional_index=index))
            else:
                bindings.append(ParameterInfo(f"arg{index}", f"arg{index}", positional_index=index))
        return tuple(bindings)
