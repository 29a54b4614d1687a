"""Alpine ``apk`` package manager."""

from __future__ import annotations

from provisioner.adapters.packages.base import PackageManager


class ApkPackageManager(PackageManager):
    name = "apk"
    executables = ("apk",)

    def is_installed(self, package: str) -> bool:
        return self.runner.query(["apk", "info", "-e", package]).ok

    def install(self, package: str) -> None:
        self.runner.run(["apk", "add", "--no-cache", package], privileged=True)

    def remove(self, package: str) -> None:
        # apk del also drops dependencies nothing else needs.
        self.runner.run(["apk", "del", package], privileged=True)
