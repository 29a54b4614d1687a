"""
Elixir repository task — register the private Hex repository with mix.

``mix`` is a hard prerequisite of the image; this task never installs
it. The auth key is passed on the command line and is redacted from
every log line and error message.
"""

from __future__ import annotations

import logging
from pathlib import Path

from provisioner.adapters.shell.download import scratch_file
from provisioner.core.models.receipt import Receipt
from provisioner.core.services.environment import require_executable
from provisioner.core.tasks.context import ProvisionContext

logger = logging.getLogger(__name__)

TASK_NAME = "elixir-repo"


def write_api_key(config_dir: Path, filename: str, api_key: str) -> Path:
    """Write the API key file, replacing any previous content."""
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / filename
    path.write_text(api_key + "\n", encoding="utf-8")
    path.chmod(0o600)
    return path


def configure_elixir_repo(ctx: ProvisionContext) -> Receipt:
    repo = ctx.settings.elixir_repo
    cfg = ctx.config
    client = require_executable(ctx.runner, repo.client, "ensure Elixir is installed")
    secrets = cfg.secrets()

    config_dir = Path(repo.config_dir).expanduser()
    if ctx.dry_run:
        logger.info("[dry-run] write API key to %s", config_dir / repo.api_key_file)
        key_path = config_dir / repo.api_key_file
    else:
        key_path = write_api_key(config_dir, repo.api_key_file, cfg.repo_api_key)

    public_key_url = f"{cfg.repo_url.rstrip('/')}/{repo.public_key_path}"

    with scratch_file(prefix="hex_public_key_", suffix=".pem") as public_key:
        ctx.downloader().fetch(public_key_url, public_key)

        ctx.runner.run([client, "local.hex", "--force"])
        ctx.runner.run([client, "local.rebar", "--force"])
        ctx.runner.run(
            [
                client, "hex.repo", "add", repo.name, cfg.repo_url,
                "--public-key", str(public_key),
                "--auth-key", cfg.repo_auth_key,
            ],
            secrets=secrets,
        )

    ctx.runner.run([client, "hex.config", "cacerts_path", ctx.settings.ca.cert_path])

    logger.info("Registered Hex repository %s (%s)", repo.name, cfg.repo_url)
    return Receipt.success(
        TASK_NAME,
        output=f"{repo.name} → {cfg.repo_url}",
        metadata={"api_key_file": str(key_path)},
    )
