"""
Provision configuration — what this run has been asked to do.

Built from CLI options by ``core.config.options.build_config``. Once
constructed it is already consistent: dependent flags are enabled and
every required string is present.
"""

from __future__ import annotations

from pydantic import BaseModel


class ProvisionConfig(BaseModel):
    install_ca: bool = False
    install_repo: bool = False
    install_cloud_sdk: bool = False
    setup_git_credentials: bool = False

    repo_auth_key: str = ""
    repo_api_key: str = ""
    repo_url: str = ""
    gh_ci_token: str = ""

    @property
    def any_task(self) -> bool:
        return (
            self.install_ca
            or self.install_repo
            or self.install_cloud_sdk
            or self.setup_git_credentials
        )

    def secrets(self) -> list[str]:
        """Values that must never reach logs or error output."""
        return [s for s in (self.repo_auth_key, self.repo_api_key, self.gh_ci_token) if s]
