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
"""Tests for the sqlgen exception hierarchy."""

import pytest

from sqlgen.kernel.exceptions import (
    AmbiguousMappingError,
    EmissionError,
    GenerationIssue,
    ParameterCountMismatch,
    ParameterNameMismatch,
    SqlGenException,
    SqlValidationError,
    UnknownFieldError,
    UnsupportedMethodPattern,
)


class TestSqlGenException:
    def test_message_and_defaults(self):
        exc = SqlGenException("something failed")
        assert exc.message == "something failed"
        assert str(exc) == "something failed"
        assert exc.code is None
        assert exc.context == {}

    def test_explicit_code_and_context(self):
        exc = SqlGenException("bad", code="CUSTOM_001", context={"method": "find_by_email"})
        assert exc.code == "CUSTOM_001"
        assert exc.context["method"] == "find_by_email"


class TestGenerationIssues:
    @pytest.mark.parametrize(
        ("exc_type", "code"),
        [
            (UnknownFieldError, "FIELD_001"),
            (ParameterCountMismatch, "PARAM_001"),
            (ParameterNameMismatch, "PARAM_002"),
            (UnsupportedMethodPattern, "METHOD_001"),
            (AmbiguousMappingError, "MAPPING_001"),
            (SqlValidationError, "SQL_001"),
        ],
    )
    def test_default_codes(self, exc_type, code):
        exc = exc_type("issue")
        assert exc.code == code
        assert isinstance(exc, GenerationIssue)
        assert isinstance(exc, SqlGenException)

    def test_code_override(self):
        assert UnknownFieldError("issue", code="FIELD_999").code == "FIELD_999"

    def test_issues_are_raisable(self):
        with pytest.raises(GenerationIssue) as exc_info:
            raise UnknownFieldError("Field 'nickname' is not declared on users", context={"field": "nickname"})
        assert exc_info.value.context == {"field": "nickname"}


class TestEmissionError:
    def test_not_a_generation_issue(self):
        exc = EmissionError("cannot render")
        assert exc.code == "EMIT_001"
        assert not isinstance(exc, GenerationIssue)
        assert isinstance(exc, SqlGenException)
