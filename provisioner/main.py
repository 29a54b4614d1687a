"""
Airnity provisioner — CLI entrypoint.

Usage:
    provision --help
    provision --airnity-ca
    provision --airnity-elixir-repo-auth-key=K --airnity-elixir-repo-api-key=A \\
              --airnity-elixir-repo-url=https://hex.example.com
    provision --gcloud --gh-ci-token=TOKEN
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

import click

from provisioner import __version__
from provisioner.core.config.loader import load_settings
from provisioner.core.config.options import build_config
from provisioner.core.errors import ProvisionError
from provisioner.core.observability.logging_config import (
    FILE_ENV,
    FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)

logger = logging.getLogger(__name__)


class ProvisionCommand(click.Command):
    """Command whose usage errors (unknown flags, bad values) exit with 1.

    Every fatal condition shares one exit status, so callers in image
    builds only need to check for non-zero.
    """

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(cls=ProvisionCommand)
@click.version_option(version=__version__, prog_name="provision")
@click.option("--airnity-ca", is_flag=True, help="Install the Airnity CA certificate.")
@click.option(
    "--airnity-elixir-repo-auth-key",
    "repo_auth_key",
    default=None,
    metavar="KEY",
    help="Hex repository auth key (enables repo setup and CA install).",
)
@click.option(
    "--airnity-elixir-repo-api-key",
    "repo_api_key",
    default=None,
    metavar="KEY",
    help="Hex repository API key (enables repo setup and CA install).",
)
@click.option(
    "--airnity-elixir-repo-url",
    "repo_url",
    default=None,
    metavar="URL",
    help="Hex repository URL (default: elixir_repo.url from provision.yml).",
)
@click.option("--gcloud", is_flag=True, help="Install the Google Cloud SDK.")
@click.option(
    "--gh-ci-token",
    "gh_ci_token",
    default=None,
    metavar="TOKEN",
    help="Rewrite GitHub HTTPS URLs to authenticate with this token.",
)
@click.option("--dry-run", is_flag=True, help="Log commands without executing them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to provision.yml (default: auto-detect).",
)
def cli(
    airnity_ca: bool,
    repo_auth_key: str | None,
    repo_api_key: str | None,
    repo_url: str | None,
    gcloud: bool,
    gh_ci_token: str | None,
    dry_run: bool,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Provision a container image or CI runner.

    Installs the private CA, registers the private Hex repository,
    installs the Cloud SDK and configures GitHub credentials, then
    removes any package that was only needed along the way.

    Examples:

        provision --airnity-ca

        provision --gcloud --gh-ci-token=$GITHUB_TOKEN

        provision --airnity-ca --dry-run -v
    """
    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(FILE_ENV),
        log_file_level=os.environ.get(FILE_LEVEL_ENV),
    )

    from provisioner.core.use_cases.provision import run_provision

    try:
        settings = load_settings(Path(config_path) if config_path else None)
        config = build_config(
            airnity_ca=airnity_ca,
            repo_auth_key=repo_auth_key,
            repo_api_key=repo_api_key,
            repo_url=repo_url,
            gcloud=gcloud,
            gh_ci_token=gh_ci_token,
            settings=settings,
        )
        result = run_provision(config, settings=settings, dry_run=dry_run)
    except ProvisionError as e:
        logger.debug("Aborted", exc_info=True)
        if as_json:
            click.echo(json.dumps({"error": str(e), "kind": type(e).__name__}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if quiet:
        return

    mode_label = "[dry-run] " if result.dry_run else ""
    pm_name = result.environment.package_manager.name
    click.secho(f"\n⚡ {mode_label}provision — {pm_name}", fg="cyan", bold=True)
    click.echo()

    for receipt in result.receipts:
        if receipt.ok:
            click.secho(f"   ✓ {receipt.task}", fg="green", nl=False)
            click.echo(f" ({receipt.duration_ms}ms)  → {receipt.output}")
        elif verbose:
            click.secho(f"   ⊘ {receipt.task} ", fg="yellow", nl=False)
            click.echo(f"({receipt.output})")

    if result.removed_packages:
        click.echo()
        click.echo(f"   🧹 Removed transient packages: {', '.join(result.removed_packages)}")

    if not result.completed:
        click.echo("   Nothing to do.")

    click.echo()


if __name__ == "__main__":
    cli()
