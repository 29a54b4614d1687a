"""
Settings model — fixed locations, URLs and limits used by the tasks.

Every field has a built-in default. An optional ``provision.yml``
overrides any subset of them (see ``core.config.loader``).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CaSettings(BaseModel):
    """Private CA certificate bundle and where it lands in the trust store."""

    url: str = "https://raw.githubusercontent.com/airnity/public/main/ca_bundle.crt"
    trust_dir: str = "/usr/local/share/ca-certificates"
    filename: str = "ca_bundle.crt"
    package: str = "ca-certificates"
    refresh_command: list[str] = Field(default_factory=lambda: ["update-ca-certificates"])

    @property
    def cert_path(self) -> str:
        return f"{self.trust_dir.rstrip('/')}/{self.filename}"


class ElixirRepoSettings(BaseModel):
    """Private Hex repository registered through ``mix``."""

    name: str = "airnity"
    url: str = ""
    client: str = "mix"
    config_dir: str = "~/.airnity"
    api_key_file: str = "elixir_repo_api_key"
    public_key_path: str = "public_key"


class CloudSdkSettings(BaseModel):
    """Google Cloud SDK vendor installer."""

    installer_url: str = "https://sdk.cloud.google.com"
    installer_sha256: str | None = None
    install_dir: str = "/usr/local/lib"
    bin_dir: str = "/usr/local/bin"
    prerequisites: list[str] = Field(default_factory=lambda: ["bash", "python3"])
    components: list[str] = Field(default_factory=lambda: ["gke-gcloud-auth-plugin"])
    binaries: list[str] = Field(
        default_factory=lambda: ["gcloud", "gsutil", "bq", "gke-gcloud-auth-plugin"]
    )

    @property
    def sdk_root(self) -> str:
        return f"{self.install_dir.rstrip('/')}/google-cloud-sdk"


class GitSettings(BaseModel):
    """Source-control credential rewrite."""

    host: str = "github.com"
    token_user: str = "x-access-token"
    package: str = "git"


class TimeoutSettings(BaseModel):
    """Limits, in seconds, for external calls."""

    command: int = Field(default=900, gt=0)
    download: int = Field(default=120, gt=0)


class Settings(BaseModel):
    """Root settings object — the merged view of defaults and provision.yml."""

    version: int = 1

    ca: CaSettings = Field(default_factory=CaSettings)
    elixir_repo: ElixirRepoSettings = Field(default_factory=ElixirRepoSettings)
    cloud_sdk: CloudSdkSettings = Field(default_factory=CloudSdkSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    timeouts: TimeoutSettings = Field(default_factory=TimeoutSettings)
