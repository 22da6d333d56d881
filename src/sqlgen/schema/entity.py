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
"""Entity schema: the ordered field list a generation pass reads from."""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass
from typing import Any, get_type_hints

from sqlgen.schema.naming import NamingStrategy, table_name_for

DEFAULT_PRIMARY_KEY = "id"


def camelize(identifier: str) -> str:
    """``created_at`` -> ``createdAt``. Identifiers without underscores are returned as-is."""
    parts = [part for part in identifier.split("_") if part]
    if "_" not in identifier or not parts:
        return identifier
    head, *rest = parts
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


@dataclass(frozen=True)
class EntitySchema:
    """Ordered field names of an entity plus its table and primary key.

    Attributes:
        table_name: Table the entity is stored in.
        fields: Field names in declaration order. Drives INSERT / UPDATE column order.
        primary_key: Primary-key field, or ``None`` when the entity has none.
    """

    table_name: str
    fields: tuple[str, ...]
    primary_key: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def from_type(
        cls,
        entity: type,
        naming_strategy: NamingStrategy = NamingStrategy.SNAKE_CASE,
        *,
        table_name: str | None = None,
        primary_key: str | None = None,
    ) -> EntitySchema:
        """Build a schema from a dataclass or an annotated class.

        The table name defaults to ``__tablename__`` when the class defines
        one, otherwise it is derived from the class name. The primary key
        defaults to ``id`` when such a field exists.
        """
        fields = _field_names(entity)
        if table_name is None:
            table_name = getattr(entity, "__tablename__", None) or table_name_for(entity.__name__, naming_strategy)
        if primary_key is None and DEFAULT_PRIMARY_KEY in fields:
            primary_key = DEFAULT_PRIMARY_KEY
        return cls(table_name=table_name, fields=tuple(fields), primary_key=primary_key)

    def has_field(self, name: str) -> bool:
        return self.resolve(name) is not None

    def resolve(self, name: str) -> str | None:
        """Return the declared field that a parsed condition field refers to.

        Condition fields are always camel cased, so ``createdAt`` resolves to a
        declared ``created_at`` as well as to a declared ``createdAt``.
        """
        if name in self.fields:
            return name
        for declared in self.fields:
            if camelize(declared) == name:
                return declared
        return None

    @property
    def non_key_fields(self) -> tuple[str, ...]:
        return tuple(f for f in self.fields if f != self.primary_key)


def _field_names(entity: type) -> list[str]:
    if dataclasses.is_dataclass(entity):
        return [f.name for f in dataclasses.fields(entity)]
    hints: dict[str, Any] = get_type_hints(entity)
    return [
        name
        for name, hint in hints.items()
        if not name.startswith("_") and typing.get_origin(hint) is not typing.ClassVar
    ]
