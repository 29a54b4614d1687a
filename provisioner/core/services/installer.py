"""
Package installer — idempotent installs with transient-package tracking.

Wraps the active ``PackageManager``. Every install that the cleanup
stage should later undo goes through ``install(name, transient=True)``,
which records the package only when this run actually installed it.
Packages that were already present are never recorded, so cleanup can
never remove something the image had before we started.
"""

from __future__ import annotations

import logging
from typing import Iterator

from provisioner.adapters.packages.base import PackageManager

logger = logging.getLogger(__name__)


class InstalledPackageRecord:
    """Ordered set of packages installed transiently by this run.

    Grows only through ``PackageInstaller.install``. Consumed once by
    the cleanup stage via ``drain``.
    """

    def __init__(self) -> None:
        self._packages: dict[str, None] = {}

    def add(self, package: str) -> None:
        self._packages.setdefault(package, None)

    def drain(self) -> list[str]:
        """Return the recorded packages in install order and empty the record."""
        packages = list(self._packages)
        self._packages.clear()
        return packages

    def __contains__(self, package: object) -> bool:
        return package in self._packages

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._packages))

    def __len__(self) -> int:
        return len(self._packages)

    def __repr__(self) -> str:
        return f"InstalledPackageRecord({list(self._packages)!r})"


class PackageInstaller:
    """Idempotent installer over one package manager."""

    def __init__(self, manager: PackageManager, record: InstalledPackageRecord | None = None):
        self.manager = manager
        self.record = record if record is not None else InstalledPackageRecord()

    def is_installed(self, package: str) -> bool:
        return self.manager.is_installed(package)

    def install(self, package: str, transient: bool = False) -> bool:
        """Install ``package`` unless already present.

        Args:
            package: Package name in the active manager's naming.
            transient: Record the package for removal by cleanup.

        Returns:
            True if this call installed the package.
        """
        if self.manager.is_installed(package):
            logger.info("Package %s already installed", package)
            return False

        logger.info("Installing %s%s", package, " (transient)" if transient else "")
        self.manager.install(package)
        if transient:
            self.record.add(package)
        return True

    def remove(self, package: str) -> None:
        logger.info("Removing %s", package)
        self.manager.remove(package)
