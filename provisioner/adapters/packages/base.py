"""
Package manager base — the contract every OS package manager implements.

The installer only talks to package managers through this interface,
never to ``apk`` or ``apt-get`` directly. Supporting a new distribution
means adding a subclass and listing it in the registry.

To create a new package manager:
    1. Subclass PackageManager
    2. Set ``name`` and ``executables``
    3. Implement is_installed, install, remove
    4. Register it in PACKAGE_MANAGERS
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from provisioner.adapters.shell.command import CommandRunner


class PackageManager(ABC):
    """Abstract base class for OS package managers.

    Mutating calls go through the runner as privileged commands, so
    escalation and dry-run apply uniformly. Failures raise
    ``ExternalCommandFailure`` from the runner.
    """

    #: Identifier used in logs and reports (e.g. ``"apk"``).
    name: str = ""

    #: Executables that must all be on PATH for this manager to be usable.
    executables: tuple[str, ...] = ()

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    @classmethod
    def is_available(cls, runner: CommandRunner) -> bool:
        """Check if every executable this manager needs is on PATH."""
        return all(runner.which(exe) for exe in cls.executables)

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """Query the package database for an installed package.

        Must not use "an executable of that name is on PATH" as a proxy.
        """

    @abstractmethod
    def install(self, package: str) -> None:
        """Install a package unconditionally."""

    @abstractmethod
    def remove(self, package: str) -> None:
        """Remove a package and any dependencies it pulled in."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
