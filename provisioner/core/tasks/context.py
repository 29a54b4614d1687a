"""Shared state handed to every task."""

from __future__ import annotations

from dataclasses import dataclass, field

from provisioner.adapters.shell.command import CommandRunner
from provisioner.adapters.shell.download import Downloader
from provisioner.core.models.config import ProvisionConfig
from provisioner.core.models.settings import Settings
from provisioner.core.services.installer import PackageInstaller

# Package providing a downloader when the host has none.
DOWNLOADER_PACKAGE = "curl"


@dataclass
class ProvisionContext:
    config: ProvisionConfig
    settings: Settings
    runner: CommandRunner
    installer: PackageInstaller
    _downloader: Downloader | None = field(default=None, repr=False)

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    def downloader(self) -> Downloader:
        """Return a downloader, installing curl as a transient package if needed.

        A freshly installed curl also gets the system root certificates,
        which apt treats as a mere recommendation of curl.
        """
        if self._downloader is None:
            tool = Downloader.available_tool(self.runner)
            if tool is None:
                self.installer.install(DOWNLOADER_PACKAGE, transient=True)
                self.installer.install(self.settings.ca.package, transient=True)
                tool = "curl"
            self._downloader = Downloader(
                self.runner, tool, timeout=self.settings.timeouts.download
            )
        return self._downloader
