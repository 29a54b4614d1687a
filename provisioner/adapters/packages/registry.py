"""
Package manager registry — which managers exist and how one is picked.

Order matters: the first available manager wins.
"""

from __future__ import annotations

import logging

from provisioner.adapters.packages.apk import ApkPackageManager
from provisioner.adapters.packages.apt import AptPackageManager
from provisioner.adapters.packages.base import PackageManager
from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.errors import UnsupportedEnvironment

logger = logging.getLogger(__name__)

PACKAGE_MANAGERS: tuple[type[PackageManager], ...] = (
    ApkPackageManager,
    AptPackageManager,
)


def detect_package_manager(runner: CommandRunner) -> PackageManager:
    """Return a handle for the first package manager found on PATH.

    Raises:
        UnsupportedEnvironment: none of the registered managers is available.
    """
    for cls in PACKAGE_MANAGERS:
        if cls.is_available(runner):
            logger.debug("Package manager: %s", cls.name)
            return cls(runner)

    wanted = ", ".join("/".join(cls.executables) for cls in PACKAGE_MANAGERS)
    raise UnsupportedEnvironment(f"Unsupported environment: no package manager found (looked for {wanted})")
