"""
Environment probe — what kind of host are we provisioning?

Read-only. Resolves the package manager handle once, and records
whether privileged calls will need escalation. No side effects, so a
failure here leaves the host untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from provisioner.adapters.packages import PackageManager, detect_package_manager
from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.errors import MissingDependency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostEnvironment:
    package_manager: PackageManager
    privileged: bool

    def to_dict(self) -> dict:
        return {
            "package_manager": self.package_manager.name,
            "privileged": self.privileged,
        }


def probe_environment(runner: CommandRunner) -> HostEnvironment:
    """Detect the package manager and the privilege level.

    Raises:
        UnsupportedEnvironment: no supported package manager on PATH.
    """
    pm = detect_package_manager(runner)
    env = HostEnvironment(package_manager=pm, privileged=runner.privileged)
    logger.info(
        "Host: package manager=%s, %s",
        pm.name,
        "root" if env.privileged else f"escalating via {' '.join(runner.escalation)}",
    )
    return env


def require_executable(runner: CommandRunner, name: str, hint: str = "ensure it is installed") -> str:
    """Return the path of an executable that must already be on the host.

    Raises:
        MissingDependency: it is not on PATH.
    """
    path = runner.which(name)
    if path is None:
        raise MissingDependency(name, hint)
    return path
