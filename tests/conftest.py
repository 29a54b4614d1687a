"""
Shared test fixtures and configuration.

``FakeRunner`` stands in for the host: it answers package-database
queries from an in-memory package set, "installs" packages by adding to
it, writes a stub file for downloads, and records every command.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pytest

from provisioner.adapters.shell.command import CommandResult, CommandRunner
from provisioner.core.models.settings import Settings

QUERY_PROGRAMS = ("dpkg-query",)

DEFAULT_DOWNLOAD = b"#!/bin/sh\necho installer\n"


def strip_prefix(cmd: list[str]) -> list[str]:
    """Drop a ``sudo [env K=V ...]`` escalation prefix."""
    argv = list(cmd)
    if argv and argv[0] == "sudo":
        argv = argv[1:]
        if argv and argv[0] == "env":
            argv = argv[1:]
            while argv and "=" in argv[0]:
                argv = argv[1:]
    return argv


class FakeRunner(CommandRunner):
    """Recording command runner over a simulated host."""

    def __init__(
        self,
        executables: Iterable[str] = (),
        installed: Iterable[str] = (),
        fail_on: Iterable[str] = (),
        privileged: bool = True,
        dry_run: bool = False,
        download_content: bytes = DEFAULT_DOWNLOAD,
    ):
        super().__init__(dry_run=dry_run, privileged=privileged)
        self.executables = set(executables)
        self.installed = set(installed)
        self.fail_on = set(fail_on)
        self.download_content = download_content
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []
        self.downloads: list[Path] = []

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.executables else None

    # ── Inspection helpers ──────────────────────────────────────

    @property
    def commands(self) -> list[list[str]]:
        """Executed commands without escalation prefix or package queries."""
        return [
            strip_prefix(c)
            for c in self.calls
            if not _is_query(strip_prefix(c))
        ]

    def ran(self, *prefix: str) -> bool:
        return any(c[: len(prefix)] == list(prefix) for c in self.commands)

    # ── Simulation ──────────────────────────────────────────────

    def _execute(self, cmd, env_overrides, timeout, secrets):
        self.calls.append(list(cmd))
        self.envs.append(dict(env_overrides) if env_overrides else None)
        argv = strip_prefix(cmd)

        if argv[0] in self.fail_on:
            return CommandResult(argv=list(cmd), returncode=1, stderr=f"{argv[0]}: failed")

        if argv[:3] == ["apk", "info", "-e"]:
            return CommandResult(argv=list(cmd), returncode=0 if argv[3] in self.installed else 1)
        if argv[0] == "dpkg-query":
            pkg = argv[-1]
            if pkg in self.installed:
                return CommandResult(argv=list(cmd), returncode=0, stdout="install ok installed")
            return CommandResult(argv=list(cmd), returncode=1, stderr=f"no packages found matching {pkg}")

        if argv[:2] == ["apk", "add"] or argv[:2] == ["apt-get", "install"]:
            pkg = argv[-1]
            self.installed.add(pkg)
            self.executables.add(pkg)
        elif argv[:2] == ["apk", "del"] or argv[:2] == ["apt-get", "remove"]:
            pkg = argv[-1]
            self.installed.discard(pkg)
            self.executables.discard(pkg)
        elif argv[0] == "curl":
            dest = Path(argv[argv.index("-o") + 1])
            dest.write_bytes(self.download_content)
            self.downloads.append(dest)
        elif argv[0] == "wget":
            dest = Path(argv[argv.index("-O") + 1])
            dest.write_bytes(self.download_content)
            self.downloads.append(dest)

        return CommandResult(argv=list(cmd), returncode=0)


def _is_query(argv: list[str]) -> bool:
    return argv[:3] == ["apk", "info", "-e"] or (bool(argv) and argv[0] in QUERY_PROGRAMS)


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """The FakeRunner class, for tests that need a custom host."""
    return FakeRunner


@pytest.fixture
def apk_host() -> FakeRunner:
    """A bare Alpine host: apk only, nothing else installed."""
    return FakeRunner(executables={"apk"})


@pytest.fixture
def apt_host() -> FakeRunner:
    """A Debian host with curl and ca-certificates already present."""
    return FakeRunner(
        executables={"apt-get", "dpkg", "curl"},
        installed={"curl", "ca-certificates"},
    )


@pytest.fixture
def bare_apt_host() -> FakeRunner:
    """A slim Debian host: apt only, no downloader, no root certificates."""
    return FakeRunner(executables={"apt-get", "dpkg"})


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Built-in settings with the Hex config dir redirected to a temp dir."""
    s = Settings()
    s.elixir_repo.config_dir = str(tmp_path / "home" / ".airnity")
    s.elixir_repo.url = ""
    return s


@pytest.fixture(autouse=True)
def _no_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PROVISION_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers():
    """Detach handlers installed by setup_logging() once a test is done."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(logging.WARNING)
