"""
Tests for the CLI — flag parsing, exit codes, and output.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from provisioner.main import cli


@pytest.fixture
def use_host(monkeypatch, tmp_path: Path):
    """Route the CLI's command runner to a simulated host."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    def _install(runner):
        def factory(dry_run: bool = False, timeout: int = 900):
            runner.dry_run = dry_run
            return runner

        monkeypatch.setattr("provisioner.core.use_cases.provision.CommandRunner", factory)
        return runner

    return _install


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Provision a container image" in result.output
        assert "--airnity-ca" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_unknown_flag_exits_1(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--airnity-cert"])
        assert result.exit_code == 1
        assert "No such option" in result.output
        assert apk_host.calls == []

    def test_missing_value_exits_1(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--gh-ci-token"])
        assert result.exit_code == 1


class TestProvisionCommand:
    def test_no_flags(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 0
        assert "Nothing to do" in result.output
        assert apk_host.calls == []

    def test_ca(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--airnity-ca"])
        assert result.exit_code == 0, result.output
        assert "ca-certificate" in result.output
        assert "Removed transient packages: ca-certificates, curl" in result.output
        assert apk_host.installed == set()

    def test_ca_on_bare_apt_host(self, use_host, bare_apt_host):
        use_host(bare_apt_host)
        result = CliRunner().invoke(cli, ["--airnity-ca"])
        assert result.exit_code == 0, result.output
        assert "provision — apt" in result.output
        assert "Removed transient packages: ca-certificates, curl" in result.output
        assert bare_apt_host.installed == set()

    def test_auth_key_only(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--airnity-elixir-repo-auth-key=K"])
        assert result.exit_code == 1
        assert "--airnity-elixir-repo-api-key" in result.output
        assert "--airnity-elixir-repo-url" in result.output
        assert apk_host.calls == []

    def test_empty_token(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--gh-ci-token="])
        assert result.exit_code == 1
        assert "token is empty" in result.output
        assert apk_host.calls == []

    def test_unsupported_environment(self, use_host, make_runner):
        use_host(make_runner(executables={"yum"}))
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 1
        assert "no package manager" in result.output

    def test_json_output(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--airnity-ca", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["removed_packages"] == ["ca-certificates", "curl"]
        assert data["tasks"][0]["status"] == "ok"

    def test_json_error(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--json", "--airnity-elixir-repo-api-key=A"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["kind"] == "MissingArgument"

    def test_dry_run(self, use_host, apk_host):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--airnity-ca", "--dry-run"])
        assert result.exit_code == 0
        assert "[dry-run]" in result.output
        assert apk_host.installed == set()
        assert not apk_host.ran("apk", "add")

    def test_repo_url_from_settings_file(self, use_host, make_runner, tmp_path: Path):
        runner = use_host(make_runner(executables={"apk", "curl", "mix"}))
        config = tmp_path / "custom.yml"
        config.write_text(textwrap.dedent("""\
            elixir_repo:
              url: https://hex.example.com
              config_dir: {dir}
        """).format(dir=tmp_path / "airnity"))
        result = CliRunner().invoke(
            cli,
            [
                "--config", str(config),
                "--airnity-elixir-repo-auth-key=K",
                "--airnity-elixir-repo-api-key=A",
            ],
        )
        assert result.exit_code == 0, result.output
        assert runner.ran("/usr/bin/mix", "hex.repo", "add", "airnity", "https://hex.example.com")
        assert (tmp_path / "airnity" / "elixir_repo_api_key").read_text() == "A\n"

    def test_bad_settings_file(self, use_host, apk_host, tmp_path: Path):
        use_host(apk_host)
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "missing.yml")])
        assert result.exit_code == 1
        assert "Settings file not found" in result.output
