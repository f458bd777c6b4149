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
"""Tests for CLI commands."""

from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from pywire.cli.main import cli

PROJECT_FILES = {
    "pywire.yaml": """
        pywire:
          environment: prod
          logging:
            level:
              root: WARNING
          autowiring:
            roots:
              shop: src/shop
            fast_checks:
              - "@component"
              - "@repository"
    """,
    "src/shop/__init__.py": "",
    "src/shop/mailer.py": """
        from pywire.container import component


        @component
        class Mailer:
            pass


        @component(env="test")
        class FakeMailer:
            pass
    """,
    "src/shop/repository/__init__.py": "",
    "src/shop/repository/order_repository.py": """
        from pywire.container import repository


        @repository
        class OrderRepository:
            pass
    """,
}


@pytest.fixture(autouse=True)
def isolated_sys_path(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(sys, "path", list(sys.path))


@pytest.fixture
def project(tmp_path: Path):
    for relative, content in PROJECT_FILES.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
    yield tmp_path
    for name in list(sys.modules):
        if name.split(".")[0] == "shop":
            del sys.modules[name]


class TestCLI:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "PyWire" in result.output
        assert "scan" in result.output

    def test_help_shows_copyright(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Copyright 2026 Firefly Software Solutions Inc." in result.output


class TestScanCommand:
    def test_lists_registered_services(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["scan", "--base-dir", str(project), "--path", str(project / "src")])
        assert result.exit_code == 0, result.output
        assert "component.mailer" in result.output
        assert "repository.order" in result.output
        assert "component.fakeMailer" not in result.output
        assert "2 service(s) registered" in result.output

    def test_env_option_overrides_config(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["scan", "--base-dir", str(project), "--path", str(project / "src"), "--env", "test"],
        )
        assert result.exit_code == 0, result.output
        assert "component.fakeMailer" in result.output
        assert "3 service(s) registered" in result.output

    def test_explicit_config_file(self, project: Path, tmp_path: Path):
        config_file = tmp_path / "other.yaml"
        config_file.write_text(
            f"pywire:\n  autowiring:\n    roots:\n      shop: {project / 'src' / 'shop'}\n"
            "    fast_checks: ['@repository']\n"
        )
        runner = CliRunner()
        result = runner.invoke(cli, ["scan", "--config", str(config_file), "--path", str(project / "src")])
        assert result.exit_code == 0, result.output
        assert "repository.order" in result.output
        assert "component.mailer" not in result.output

    def test_discovery_option_keeps_configured_timeout(self, project: Path, monkeypatch: pytest.MonkeyPatch):
        from pywire.cli import scan
        from pywire.container.discovery import GrepDiscoveryProvider

        created: list[GrepDiscoveryProvider] = []

        def create(name: str, timeout: float = 30.0):
            provider = GrepDiscoveryProvider(executable="pywire-no-such-grep", timeout=timeout)
            created.append(provider)
            return provider

        monkeypatch.setattr(scan, "create_discovery_provider", create)
        with (project / "pywire.yaml").open("a") as f:
            f.write("    discovery_timeout: 5\n")

        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["scan", "--base-dir", str(project), "--path", str(project / "src"), "--discovery", "grep"],
        )
        assert result.exit_code == 1
        assert "pywire-no-such-grep" in result.output
        assert [provider._timeout for provider in created] == [5.0]

    def test_missing_root_exits_with_error(self, tmp_path: Path):
        (tmp_path / "pywire.yaml").write_text(
            "pywire:\n  autowiring:\n    roots:\n      shop: src/missing\n    fast_checks: ['@component']\n"
        )
        runner = CliRunner()
        result = runner.invoke(cli, ["scan", "--base-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "AutoscanDirectoryNotFoundError" in result.output

    def test_nothing_configured(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["scan", "--base-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "No services registered" in result.output
