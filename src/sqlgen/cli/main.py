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
"""sqlgen CLI: inspect method-name parsing and generated plans."""

from __future__ import annotations

from pathlib import Path

import click

from sqlgen.cli.console import print_banner
from sqlgen.core.config import Config
from sqlgen.logging.structlog_adapter import StructlogAdapter


class SqlGenCLI(click.Group):
    """Custom Click group that shows the sqlgen banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


def load_config(config_path: Path | None, profiles: tuple[str, ...]) -> Config:
    """Load configuration from *config_path*, or from the working directory."""
    if config_path is not None:
        return Config.from_file(config_path, active_profiles=list(profiles))
    return Config.from_sources(Path.cwd(), active_profiles=list(profiles))


@click.group(cls=SqlGenCLI)
@click.version_option(package_name="sqlgen")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (YAML or TOML). Defaults to sqlgen.yaml in the working directory.",
)
@click.option("--profile", "profiles", multiple=True, help="Active configuration profile (repeatable).")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, profiles: tuple[str, ...]) -> None:
    """sqlgen: SQL and execution plans from repository method signatures."""
    config = load_config(config_path, profiles)
    StructlogAdapter().configure(config)
    ctx.obj = config


# Import and register commands
from sqlgen.cli.info import info_command  # noqa: E402
from sqlgen.cli.parse import parse_command  # noqa: E402
from sqlgen.cli.plan import plan_command  # noqa: E402

cli.add_command(parse_command, name="parse")
cli.add_command(plan_command, name="plan")
cli.add_command(info_command, name="info")
