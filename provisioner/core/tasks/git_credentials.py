"""Git credentials task — rewrite GitHub HTTPS URLs to carry a CI token."""

from __future__ import annotations

import logging

from provisioner.core.config.options import FLAG_GH_CI_TOKEN
from provisioner.core.errors import MissingArgument
from provisioner.core.models.receipt import Receipt
from provisioner.core.tasks.context import ProvisionContext

logger = logging.getLogger(__name__)

TASK_NAME = "git-credentials"


def configure_git_credentials(ctx: ProvisionContext) -> Receipt:
    git = ctx.settings.git
    token = ctx.config.gh_ci_token
    if not token:
        raise MissingArgument(f"GitHub token is empty: {FLAG_GH_CI_TOKEN} requires a value", [FLAG_GH_CI_TOKEN])

    ctx.installer.install(git.package)

    plain = f"https://{git.host}/"
    ctx.runner.run(
        ["git", "config", "--global", f"url.https://{git.token_user}:{token}@{git.host}/.insteadOf", plain],
        secrets=[token],
    )

    logger.info("Configured token rewrite for %s", plain)
    return Receipt.success(TASK_NAME, output=plain)
