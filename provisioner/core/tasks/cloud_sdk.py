"""
Cloud SDK task — install the Google Cloud SDK with its vendor installer.

The installer script is downloaded to a scratch file and verified
before it runs (see ``services.script_verify``). The CLOUDSDK_*
variables are only set for the commands of this task.
"""

from __future__ import annotations

import logging

from provisioner.adapters.shell.download import scratch_file
from provisioner.core.models.receipt import Receipt
from provisioner.core.services.script_verify import verify_script
from provisioner.core.tasks.context import ProvisionContext

logger = logging.getLogger(__name__)

TASK_NAME = "cloud-sdk"


def install_cloud_sdk(ctx: ProvisionContext) -> Receipt:
    sdk = ctx.settings.cloud_sdk
    env = {
        "CLOUDSDK_INSTALL_DIR": sdk.install_dir,
        "CLOUDSDK_CORE_DISABLE_PROMPTS": "1",
    }

    # Runtime requirements of the SDK, so never transient.
    for package in sdk.prerequisites:
        ctx.installer.install(package)

    digest = None
    with scratch_file(prefix="gcloud_install_", suffix=".sh") as script:
        ctx.downloader().fetch(sdk.installer_url, script)
        if not ctx.dry_run:
            digest = verify_script(script, sdk.installer_sha256, sdk.installer_url)

        ctx.runner.run(["mkdir", "-p", sdk.install_dir], privileged=True)
        ctx.runner.run(
            ["bash", str(script), "--disable-prompts", f"--install-dir={sdk.install_dir}"],
            privileged=True,
            env_overrides=env,
        )

    bin_src = f"{sdk.sdk_root}/bin"
    if sdk.components:
        ctx.runner.run(
            [f"{bin_src}/gcloud", "components", "install", *sdk.components, "--quiet"],
            privileged=True,
            env_overrides=env,
        )

    ctx.runner.run(["mkdir", "-p", sdk.bin_dir], privileged=True)
    for binary in sdk.binaries:
        ctx.runner.run(
            ["ln", "-sf", f"{bin_src}/{binary}", f"{sdk.bin_dir.rstrip('/')}/{binary}"],
            privileged=True,
        )
    ctx.runner.run(["chmod", "-R", "a+rX", sdk.sdk_root], privileged=True)

    logger.info("Installed Cloud SDK in %s", sdk.sdk_root)
    return Receipt.success(
        TASK_NAME,
        output=sdk.sdk_root,
        metadata={"installer_sha256": digest, "binaries": list(sdk.binaries)},
    )
