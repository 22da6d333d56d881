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
"""Field-to-column naming strategies.

Every function here is pure: the strategy is always passed in explicitly.

Example::

    map_column("userToken", NamingStrategy.SNAKE_CASE)   -> "user_token"
    map_column("userToken", NamingStrategy.KEBAB_CASE)   -> "user-token"
    map_column("userToken", NamingStrategy.PASCAL_CASE)  -> "UserToken"
    table_name_for("OrderLine", NamingStrategy.SNAKE_CASE) -> "order_line"
"""

from __future__ import annotations

import re
from enum import StrEnum

# A lowercase letter followed by a run of uppercase letters.
_TRANSITION = re.compile(r"([a-z])([A-Z]+)")


class NamingStrategy(StrEnum):
    """How a field identifier becomes a column identifier."""

    SNAKE_CASE = "snake_case"
    CAMEL_CASE = "camel_case"
    PASCAL_CASE = "pascal_case"
    KEBAB_CASE = "kebab_case"
    CUSTOM = "custom"  # reserved; behaves as SNAKE_CASE


def _separate(identifier: str, separator: str) -> str:
    return _TRANSITION.sub(rf"\1{separator}\2", identifier).lower()


def map_column(field: str, strategy: NamingStrategy) -> str:
    """Return the column name for *field* under *strategy*."""
    if not field:
        return field
    if strategy is NamingStrategy.CAMEL_CASE:
        return field
    if strategy is NamingStrategy.PASCAL_CASE:
        return field[0].upper() + field[1:]
    if strategy is NamingStrategy.KEBAB_CASE:
        return _separate(field, "-")
    return _separate(field, "_")


def table_name_for(class_name: str, strategy: NamingStrategy) -> str:
    """Derive a table name from an entity class name.

    The class name is first lowered to camel case, so ``UserAccount`` becomes
    ``user_account`` under snake case and stays ``UserAccount`` under Pascal.
    """
    if not class_name:
        return class_name
    if strategy is NamingStrategy.PASCAL_CASE:
        return class_name
    return map_column(class_name[0].lower() + class_name[1:], strategy)


class NamingStrategyMapper:
    """Callable wrapper binding one strategy, for use as a column-name function."""

    __slots__ = ("strategy",)

    def __init__(self, strategy: NamingStrategy) -> None:
        self.strategy = strategy

    def __call__(self, field: str) -> str:
        return map_column(field, self.strategy)

    def __repr__(self) -> str:
        return f"NamingStrategyMapper({self.strategy.value})"
