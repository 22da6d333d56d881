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
"""Tests for the sqlgen CLI commands."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from sqlgen.cli.main import cli

REPOSITORY_MODULE = '''
from dataclasses import dataclass

from sqlgen import native_query, sql_generator


@dataclass
class Account:
    id: int
    email: str


@sql_generator(entity=Account, table_name="accounts")
class AccountRepository:
    def find_by_email(self, email: str) -> list[Account]: ...

    def find_by_nickname(self, nickname: str) -> list[Account]: ...

    def refresh(self) -> None: ...

    @native_query("SELECT COUNT(*) FROM accounts")
    def total(self) -> int: ...


class PlainRepository:
    def find_by_email(self, email: str) -> list[Account]: ...
'''


def write_module(directory: Path, name: str) -> None:
    (directory / f"{name}.py").write_text(REPOSITORY_MODULE)


class TestHelp:
    def test_help_shows_banner(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Copyright 2026 Firefly Software Solutions Inc." in result.output
        assert "Apache 2.0 License" in result.output

    def test_help_lists_commands(self):
        result = CliRunner().invoke(cli, ["--help"])
        for command in ("parse", "plan", "info"):
            assert command in result.output


class TestParseCommand:
    def test_conditions(self):
        result = CliRunner().invoke(cli, ["parse", "findByEmailAndAgeGreaterThan"])
        assert result.exit_code == 0, result.output
        assert "Operation find" in result.output
        assert "Conditions" in result.output
        assert "GreaterThan" in result.output

    def test_sql_with_table(self):
        result = CliRunner().invoke(
            cli, ["parse", "find_by_email_and_age_greater_than", "--table", "users", "--fields", "id,email,age"]
        )
        assert result.exit_code == 0, result.output
        assert "SELECT * FROM users WHERE email = ? AND age > ?" in result.output

    def test_naming_strategy_option(self):
        result = CliRunner().invoke(
            cli, ["parse", "countByEmail", "--table", "users", "--naming-strategy", "pascal_case"]
        )
        assert result.exit_code == 0, result.output
        assert "SELECT COUNT(*) FROM users WHERE Email = ?" in result.output

    def test_unknown_prefix(self):
        result = CliRunner().invoke(cli, ["parse", "refreshCache", "--table", "users"])
        assert result.exit_code == 0, result.output
        assert "Operation unknown" in result.output
        assert "No statement" in result.output

    def test_update_with_only_a_key(self):
        result = CliRunner().invoke(cli, ["parse", "update", "--table", "tag", "--fields", "id"])
        assert result.exit_code == 0, result.output
        assert "No statement" in result.output
        assert "UPDATE" not in result.output

    def test_invalid_naming_strategy(self):
        result = CliRunner().invoke(cli, ["parse", "findByEmail", "--naming-strategy", "upper"])
        assert result.exit_code != 0


class TestPlanCommand:
    def test_plan_repository(self, tmp_path: Path):
        write_module(tmp_path, "cli_plan_accounts")
        result = CliRunner().invoke(cli, ["plan", "cli_plan_accounts:AccountRepository", "--path", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "find_by_email generated" in result.output
        assert "SELECT * FROM accounts WHERE email = ?" in result.output
        assert "def find_by_email(self, session, email):" in result.output
        assert "FIELD_001" in result.output
        assert "METHOD_001" in result.output
        assert "refresh unsupported" in result.output
        assert "4 method(s), 2 warning(s)" in result.output

    def test_strict_fails_on_first_issue(self, tmp_path: Path):
        write_module(tmp_path, "cli_plan_strict")
        result = CliRunner().invoke(
            cli, ["plan", "cli_plan_strict:AccountRepository", "--path", str(tmp_path), "--strict"]
        )
        assert result.exit_code == 1
        assert "FIELD_001" in result.output

    def test_undecorated_class(self, tmp_path: Path):
        write_module(tmp_path, "cli_plan_plain")
        result = CliRunner().invoke(cli, ["plan", "cli_plan_plain:PlainRepository", "--path", str(tmp_path)])
        assert result.exit_code == 1
        assert "not decorated" in result.output

    def test_malformed_target(self):
        result = CliRunner().invoke(cli, ["plan", "no_class_given"])
        assert result.exit_code == 2
        assert "module:ClassName" in result.output

    def test_missing_module(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["plan", "cli_plan_absent:Repo", "--path", str(tmp_path)])
        assert result.exit_code == 2


class TestInfoCommand:
    def test_info_defaults(self):
        result = CliRunner().invoke(cli, ["info"])
        assert result.exit_code == 0, result.output
        assert "Environment" in result.output
        assert "sqlglot" in result.output
        assert "snake_case" in result.output
        assert "sqlgen-defaults.yaml (defaults)" in result.output

    def test_info_with_config_file(self, tmp_path: Path):
        config_file = tmp_path / "sqlgen.yaml"
        config_file.write_text("sqlgen:\n  generation:\n    naming-strategy: kebab_case\n    strict: true\n")
        result = CliRunner().invoke(cli, ["--config", str(config_file), "info"])
        assert result.exit_code == 0, result.output
        assert "kebab_case" in result.output
        assert "true" in result.output
