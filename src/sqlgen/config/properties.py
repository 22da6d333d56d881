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
"""Typed configuration properties bound from the ``sqlgen.*`` namespace."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from sqlgen.core.config import config_properties
from sqlgen.schema.naming import NamingStrategy


@config_properties(prefix="sqlgen.generation")
class GenerationProperties(BaseModel):
    """Code generation settings (sqlgen.generation.*).

    Attributes:
        naming_strategy: Default strategy for classes that do not choose one.
        strict: Raise the first advisory issue instead of only reporting it.
        validate_sql: Allow ``@native_query(validate_sql=True)`` to parse SQL.
        sql_dialect: sqlglot dialect used for validation; empty for the default.
    """

    model_config = ConfigDict(frozen=True)

    naming_strategy: NamingStrategy = NamingStrategy.SNAKE_CASE
    strict: bool = False
    validate_sql: bool = True
    sql_dialect: str = ""


@config_properties(prefix="sqlgen.logging")
@dataclass
class LoggingProperties:
    """Logging settings (sqlgen.logging.*)."""

    format: str = "console"
    level: dict = field(default_factory=lambda: {"root": "WARNING"})
