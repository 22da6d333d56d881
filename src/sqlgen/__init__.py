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
"""sqlgen: convention method names and hand-written SQL to execution plans."""

from sqlgen.processor import GenerationContext, RepositoryProcessor, sql_generator
from sqlgen.query.params import Param
from sqlgen.query.raw import native_query
from sqlgen.schema.naming import NamingStrategy

__version__ = "0.1.0"

__all__ = [
    "GenerationContext",
    "NamingStrategy",
    "Param",
    "RepositoryProcessor",
    "__version__",
    "native_query",
    "sql_generator",
]
