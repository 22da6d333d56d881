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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

SQLGEN_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "sqlgen": "bold magenta",
    "dim": "dim",
})

console = Console(theme=SQLGEN_THEME)


def print_banner() -> None:
    """Print the sqlgen banner."""
    from sqlgen import __version__

    console.print(f"[sqlgen]sqlgen[/sqlgen] [dim](v{__version__})[/dim]")
    console.print("  [dim]Convention methods and native queries to SQL execution plans[/dim]")
    console.print("  [dim]Copyright 2026 Firefly Software Solutions Inc. | Apache 2.0 License[/dim]\n")


def print_code(text: str) -> None:
    """Print SQL or source text verbatim, without markup or wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)
