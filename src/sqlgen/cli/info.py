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
"""'sqlgen info': display version, environment and active generation settings."""

from __future__ import annotations

import platform
import sys

import click
import sqlglot
from rich.table import Table

from sqlgen import __version__
from sqlgen.cli.console import console
from sqlgen.config.properties import GenerationProperties
from sqlgen.core.config import Config


@click.command()
@click.pass_obj
def info_command(config: Config) -> None:
    """Display sqlgen, environment and configuration information."""
    console.print(f"\n[sqlgen]sqlgen[/sqlgen] [dim]v{__version__}[/dim]\n")

    env_table = Table(title="Environment", show_header=False, border_style="dim")
    env_table.add_column("Key", style="info")
    env_table.add_column("Value")
    env_table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    env_table.add_row("Platform", platform.platform())
    env_table.add_row("sqlglot", sqlglot.__version__)
    console.print(env_table)

    properties = config.bind(GenerationProperties)
    gen_table = Table(title="\nGeneration", show_header=False, border_style="dim")
    gen_table.add_column("Key", style="info")
    gen_table.add_column("Value")
    gen_table.add_row("naming-strategy", properties.naming_strategy.value)
    gen_table.add_row("strict", str(properties.strict).lower())
    gen_table.add_row("validate-sql", str(properties.validate_sql).lower())
    gen_table.add_row("sql-dialect", properties.sql_dialect or "default")
    console.print(gen_table)

    console.print("\n[info]Configuration sources[/info]")
    for source in config.loaded_sources or ["(none)"]:
        console.print(f"  {source}", style="dim", markup=False)
    console.print()
