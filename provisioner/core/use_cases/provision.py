"""
Provision use case — run the whole workflow once.

This is the top-level orchestrator: probe the host, check hard
prerequisites, run each requested task in order, then remove the
transient packages. Any ``ProvisionError`` propagates to the caller
immediately, in which case cleanup does not run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from provisioner.adapters.shell.command import CommandRunner
from provisioner.core.models.config import ProvisionConfig
from provisioner.core.models.receipt import Receipt, now_iso
from provisioner.core.models.settings import Settings
from provisioner.core.services.environment import (
    HostEnvironment,
    probe_environment,
    require_executable,
)
from provisioner.core.services.installer import PackageInstaller
from provisioner.core.tasks import (
    ProvisionContext,
    cleanup_transient_packages,
    configure_elixir_repo,
    configure_git_credentials,
    install_ca_certificate,
    install_cloud_sdk,
)

logger = logging.getLogger(__name__)

TaskFn = Callable[[ProvisionContext], Receipt]

# Execution order. The CA must be trusted before the Hex repo is registered.
TASKS: tuple[tuple[str, Callable[[ProvisionConfig], bool], TaskFn], ...] = (
    ("ca-certificate", lambda c: c.install_ca, install_ca_certificate),
    ("elixir-repo", lambda c: c.install_repo, configure_elixir_repo),
    ("cloud-sdk", lambda c: c.install_cloud_sdk, install_cloud_sdk),
    ("git-credentials", lambda c: c.setup_git_credentials, configure_git_credentials),
)


@dataclass
class ProvisionResult:
    """Result of a completed provisioning run."""

    environment: HostEnvironment
    receipts: list[Receipt] = field(default_factory=list)
    removed_packages: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def completed(self) -> list[Receipt]:
        return [r for r in self.receipts if r.ok]

    def to_dict(self) -> dict:
        return {
            "environment": self.environment.to_dict(),
            "dry_run": self.dry_run,
            "tasks": [r.model_dump() for r in self.receipts],
            "removed_packages": list(self.removed_packages),
        }


def preflight(config: ProvisionConfig, settings: Settings, runner: CommandRunner) -> None:
    """Check external tools the run cannot install itself, before any side effect.

    Raises:
        MissingDependency: a required tool is absent.
    """
    if config.install_repo:
        require_executable(runner, settings.elixir_repo.client, "ensure Elixir is installed")


def run_provision(
    config: ProvisionConfig,
    settings: Settings | None = None,
    runner: CommandRunner | None = None,
    dry_run: bool = False,
) -> ProvisionResult:
    """Provision the host according to ``config``.

    Args:
        config: Resolved run configuration.
        settings: URLs, paths and timeouts (default: built-in).
        runner: Command runner to use (default: a real one).
        dry_run: Only used when ``runner`` is not given.

    Raises:
        ProvisionError: on the first failure. Nothing is rolled back.
    """
    settings = settings or Settings()
    if runner is None:
        runner = CommandRunner(dry_run=dry_run, timeout=settings.timeouts.command)

    env = probe_environment(runner)
    result = ProvisionResult(environment=env, dry_run=runner.dry_run)

    if not config.any_task:
        logger.info("No provisioning steps requested")
        result.receipts = [Receipt.skip(name, "not requested") for name, _, _ in TASKS]
        return result

    preflight(config, settings, runner)

    installer = PackageInstaller(env.package_manager)
    ctx = ProvisionContext(config=config, settings=settings, runner=runner, installer=installer)

    for name, enabled, task in TASKS:
        if not enabled(config):
            result.receipts.append(Receipt.skip(name, "not requested"))
            continue
        result.receipts.append(_run_task(name, task, ctx))

    result.removed_packages = cleanup_transient_packages(installer)
    return result


def _run_task(name: str, task: TaskFn, ctx: ProvisionContext) -> Receipt:
    logger.info("▶ %s", name)
    started_at = now_iso()
    start = time.monotonic()
    receipt = task(ctx)
    receipt.started_at = started_at
    receipt.duration_ms = int((time.monotonic() - start) * 1000)
    return receipt
