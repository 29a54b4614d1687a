"""
Provisioning tasks — one module per optional step.

Each task takes a ``ProvisionContext`` and returns a ``Receipt``.
Failures raise and abort the run.
"""

from provisioner.core.tasks.ca_certificate import install_ca_certificate
from provisioner.core.tasks.cleanup import cleanup_transient_packages
from provisioner.core.tasks.cloud_sdk import install_cloud_sdk
from provisioner.core.tasks.context import ProvisionContext
from provisioner.core.tasks.elixir_repo import configure_elixir_repo
from provisioner.core.tasks.git_credentials import configure_git_credentials

__all__ = [
    "ProvisionContext",
    "cleanup_transient_packages",
    "configure_elixir_repo",
    "configure_git_credentials",
    "install_ca_certificate",
    "install_cloud_sdk",
]
