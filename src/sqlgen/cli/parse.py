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
"""'sqlgen parse': show how a method name is parsed and the SQL it yields."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from sqlgen.cli.console import console, print_code
from sqlgen.config.properties import GenerationProperties
from sqlgen.core.config import Config
from sqlgen.query.parser import MethodIntentParser, Operation
from sqlgen.query.statement import SqlStatementBuilder, placeholder_count
from sqlgen.schema.entity import EntitySchema
from sqlgen.schema.naming import NamingStrategy


@click.command()
@click.argument("method_name")
@click.option("--table", default=None, help="Table name; when given, the SQL statement is printed too.")
@click.option("--fields", default="", help="Comma-separated entity fields, in declaration order.")
@click.option("--primary-key", default=None, help="Primary-key field (defaults to 'id' when listed).")
@click.option(
    "--naming-strategy",
    type=click.Choice([s.value for s in NamingStrategy]),
    default=None,
    help="Column naming strategy (defaults to sqlgen.generation.naming-strategy).",
)
@click.pass_obj
def parse_command(
    config: Config,
    method_name: str,
    table: str | None,
    fields: str,
    primary_key: str | None,
    naming_strategy: str | None,
) -> None:
    """Parse METHOD_NAME and print its operation and conditions."""
    descriptor = MethodIntentParser().parse(method_name)
    console.print(f"\n[info]Method[/info]    {method_name}")
    console.print(f"[info]Operation[/info] {descriptor.operation.value}")

    if descriptor.conditions:
        table_view = Table(title="Conditions", border_style="dim")
        table_view.add_column("#", style="dim")
        table_view.add_column("Connector")
        table_view.add_column("Field", style="info")
        table_view.add_column("Operator")
        table_view.add_column("Placeholders")
        for index, condition in enumerate(descriptor.conditions, start=1):
            table_view.add_row(
                str(index),
                condition.connector.value if condition.connector else "",
                condition.field,
                condition.operator.value,
                str(placeholder_count(condition.operator)),
            )
        console.print(table_view)

    if table is None:
        return

    if descriptor.operation is Operation.UNKNOWN:
        console.print("[warning]No statement: the method name matches no supported prefix.[/warning]")
        return

    strategy = (
        NamingStrategy(naming_strategy) if naming_strategy else config.bind(GenerationProperties).naming_strategy
    )
    field_names = tuple(f.strip() for f in fields.split(",") if f.strip())
    if primary_key is None and "id" in field_names:
        primary_key = "id"
    schema = EntitySchema(table_name=table, fields=field_names, primary_key=primary_key)

    try:
        sql = SqlStatementBuilder().build(descriptor, schema, strategy)
    except ValueError as exc:
        console.print(f"[warning]No statement: {escape(str(exc))}[/warning]")
        return

    console.print("[info]SQL[/info]")
    print_code(sql)
