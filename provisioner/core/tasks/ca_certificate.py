"""
CA certificate task — add the private CA bundle to the OS trust store.

The trust-store change is permanent. Only the packages pulled in to
perform it (downloader, ca-certificates) are transient.
"""

from __future__ import annotations

import logging

from provisioner.adapters.shell.download import scratch_file
from provisioner.core.models.receipt import Receipt
from provisioner.core.tasks.context import ProvisionContext

logger = logging.getLogger(__name__)

TASK_NAME = "ca-certificate"


def install_ca_certificate(ctx: ProvisionContext) -> Receipt:
    ca = ctx.settings.ca
    downloader = ctx.downloader()
    # Root certificates must be present before the HTTPS fetch.
    ctx.installer.install(ca.package, transient=True)

    with scratch_file(prefix="ca_bundle_", suffix=".crt") as tmp:
        downloader.fetch(ca.url, tmp)

        ctx.runner.run(["mkdir", "-p", ca.trust_dir], privileged=True)
        ctx.runner.run(["cp", str(tmp), ca.cert_path], privileged=True)
        ctx.runner.run(["chmod", "644", ca.cert_path], privileged=True)
        ctx.runner.run(list(ca.refresh_command), privileged=True)

    logger.info("Installed CA certificate at %s", ca.cert_path)
    return Receipt.success(TASK_NAME, output=ca.cert_path, metadata={"url": ca.url})
