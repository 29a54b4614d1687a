"""Debian/Ubuntu ``apt-get`` + ``dpkg`` package manager."""

from __future__ import annotations

from provisioner.adapters.packages.base import PackageManager
from provisioner.adapters.shell.command import CommandRunner

_NONINTERACTIVE = {"DEBIAN_FRONTEND": "noninteractive"}


class AptPackageManager(PackageManager):
    name = "apt"
    executables = ("apt-get", "dpkg")

    def __init__(self, runner: CommandRunner):
        super().__init__(runner)
        self._index_fresh = False

    def is_installed(self, package: str) -> bool:
        r = self.runner.query(["dpkg-query", "-W", "-f=${Status}", package])
        return r.ok and "install ok installed" in r.stdout

    def install(self, package: str) -> None:
        if not self._index_fresh:
            self.runner.run(["apt-get", "update"], privileged=True, env_overrides=_NONINTERACTIVE)
            self._index_fresh = True
        self.runner.run(
            ["apt-get", "install", "-y", "--no-install-recommends", package],
            privileged=True,
            env_overrides=_NONINTERACTIVE,
        )

    def remove(self, package: str) -> None:
        self.runner.run(["apt-get", "remove", "-y", package], privileged=True, env_overrides=_NONINTERACTIVE)
        self.runner.run(["apt-get", "autoremove", "-y"], privileged=True, env_overrides=_NONINTERACTIVE)
