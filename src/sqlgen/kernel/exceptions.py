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
"""Unified exception hierarchy for sqlgen.

All exceptions inherit from SqlGenException, which carries a machine-readable
code and a context dict for structured error data.

Categories:
- GenerationIssue: advisory problems found while generating a method. They are
  collected and reported as warnings; generation continues with best-effort SQL.
- EmissionError: raised by a code emitter that cannot render a plan.
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class SqlGenException(Exception):
    """Base exception for all sqlgen errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "FIELD_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    default_code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code
        self.context: dict = context if context is not None else {}

    @property
    def message(self) -> str:
        return str(self)


# =============================================================================
# Advisory Generation Issues
# =============================================================================


class GenerationIssue(SqlGenException):
    """Problem detected while generating a method. Advisory unless strict mode is on."""


class UnknownFieldError(GenerationIssue):
    """A condition references a field absent from the entity schema."""

    default_code = "FIELD_001"


class ParameterCountMismatch(GenerationIssue):
    """Placeholder count differs from the declared parameter count."""

    default_code = "PARAM_001"


class ParameterNameMismatch(GenerationIssue):
    """A named placeholder has no declared parameter with that binding name."""

    default_code = "PARAM_002"


class UnsupportedMethodPattern(GenerationIssue):
    """The method name matches none of the supported prefixes."""

    default_code = "METHOD_001"


class AmbiguousMappingError(GenerationIssue):
    """The declared return shape fits no result-mapping branch."""

    default_code = "MAPPING_001"


class SqlValidationError(GenerationIssue):
    """Hand-written SQL could not be parsed."""

    default_code = "SQL_001"


# =============================================================================
# Emission Errors
# =============================================================================


class EmissionError(SqlGenException):
    """A code emitter could not render a plan."""

    default_code = "EMIT_001"
