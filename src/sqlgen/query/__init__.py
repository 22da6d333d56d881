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
"""Query intent parsing, SQL synthesis, binding and result mapping."""

from sqlgen.query.mapping import (
    ResultMappingPlan,
    ResultMappingResolver,
    ResultMappingStrategy,
    RowMapper,
    TypeRef,
    normalize_column_mapping,
)
from sqlgen.query.params import Param, ParameterBindingPlanner, ParameterInfo
from sqlgen.query.parser import (
    Condition,
    Connector,
    MethodIntentParser,
    Operation,
    Operator,
    QueryMethodDescriptor,
)
from sqlgen.query.plan import (
    Cardinality,
    Generated,
    GeneratedWithWarnings,
    GenerationResult,
    OperationKind,
    ParameterStyle,
    QueryExecutionPlan,
    Unsupported,
)
from sqlgen.query.raw import NativeQuery, RawQueryAnalyzer, native_query
from sqlgen.query.statement import EXISTS_FALLBACK_CHAIN, ExistsForm, SqlStatementBuilder, placeholder_count

__all__ = [
    "EXISTS_FALLBACK_CHAIN",
    "Cardinality",
    "Condition",
    "Connector",
    "ExistsForm",
    "Generated",
    "GeneratedWithWarnings",
    "GenerationResult",
    "MethodIntentParser",
    "NativeQuery",
    "Operation",
    "OperationKind",
    "Operator",
    "Param",
    "ParameterBindingPlanner",
    "ParameterInfo",
    "ParameterStyle",
    "QueryExecutionPlan",
    "QueryMethodDescriptor",
    "RawQueryAnalyzer",
    "ResultMappingPlan",
    "ResultMappingResolver",
    "ResultMappingStrategy",
    "RowMapper",
    "SqlStatementBuilder",
    "TypeRef",
    "Unsupported",
    "native_query",
    "normalize_column_mapping",
    "placeholder_count",
]
