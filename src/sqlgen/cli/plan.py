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
"""'sqlgen plan': generate every method of a repository class and print the result."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

import click
from rich.markup import escape

from sqlgen.adapters.source.emitter import PythonSourceEmitter
from sqlgen.cli.console import console, print_code
from sqlgen.config.properties import GenerationProperties
from sqlgen.core.config import Config
from sqlgen.kernel.exceptions import GenerationIssue
from sqlgen.processor import RepositoryProcessor
from sqlgen.query.plan import GeneratedWithWarnings, Unsupported


def load_class(target: str) -> type:
    """Import ``package.module:ClassName``."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise click.BadParameter(f"expected 'module:ClassName', got {target!r}", param_hint="TARGET")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import module {module_name!r}: {exc}", param_hint="TARGET") from exc
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        raise click.BadParameter(f"{module_name!r} has no class {class_name!r}", param_hint="TARGET")
    return cls


@click.command()
@click.argument("target")
@click.option(
    "--path",
    "search_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Directory prepended to sys.path before importing TARGET.",
)
@click.option("--strict", is_flag=True, default=False, help="Fail on the first generation issue.")
@click.pass_obj
def plan_command(config: Config, target: str, search_path: Path, strict: bool) -> None:
    """Generate TARGET (module:ClassName) and print SQL and emitted bodies."""
    resolved = str(search_path.resolve())
    if resolved not in sys.path:
        sys.path.insert(0, resolved)

    properties = config.bind(GenerationProperties)
    if strict:
        properties = properties.model_copy(update={"strict": True})

    cls = load_class(target)
    emitter = PythonSourceEmitter()
    processor = RepositoryProcessor(emitter=emitter, properties=properties)
    try:
        results = processor.process(cls)
    except GenerationIssue as exc:
        raise click.ClickException(f"{exc.code}: {exc.message}") from exc
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    warnings = 0
    for name, result in results.items():
        if isinstance(result, Unsupported):
            status = "[warning]unsupported[/warning]"
        elif isinstance(result, GeneratedWithWarnings):
            status = "[warning]generated with warnings[/warning]"
        else:
            status = "[success]generated[/success]"
        console.print(f"\n[sqlgen]{name}[/sqlgen] {status}")

        if result.plan is not None:
            print_code(result.plan.sql)
        if result.artifact is not None:
            params = list(result.plan.bindings) if result.plan is not None else []
            print_code(emitter.render_method(name, params, str(result.artifact)))
        else:
            console.print("  [dim]original body kept[/dim]")

        for issue in result.issues:
            warnings += 1
            console.print(f"  [warning]{issue.code}[/warning] {escape(issue.message)}", highlight=False)

    console.print(f"\n[info]{len(results)} method(s), {warnings} warning(s)[/info]")
