"""Cleanup stage — remove every package recorded as transient."""

from __future__ import annotations

import logging

from provisioner.core.services.installer import PackageInstaller

logger = logging.getLogger(__name__)


def cleanup_transient_packages(installer: PackageInstaller) -> list[str]:
    """Drain the installed-package record and remove each entry.

    Removal runs in reverse install order. Returns the removed packages.
    """
    packages = installer.record.drain()
    if not packages:
        logger.debug("No transient packages to remove")
        return []

    removed: list[str] = []
    for package in reversed(packages):
        installer.remove(package)
        removed.append(package)
    logger.info("Removed transient packages: %s", ", ".join(removed))
    return removed
