"""
CLI options → ProvisionConfig.

Pure transformation, no side effects. All argument validation happens
here so that a bad flag combination fails before anything touches
the host.

Value options arrive as ``None`` when the flag was not given and as a
string (possibly empty) when it was.
"""

from __future__ import annotations

from provisioner.core.errors import ConfigError, MissingArgument
from provisioner.core.models.config import ProvisionConfig
from provisioner.core.models.settings import Settings

FLAG_CA = "--airnity-ca"
FLAG_REPO_AUTH_KEY = "--airnity-elixir-repo-auth-key"
FLAG_REPO_API_KEY = "--airnity-elixir-repo-api-key"
FLAG_REPO_URL = "--airnity-elixir-repo-url"
FLAG_GCLOUD = "--gcloud"
FLAG_GH_CI_TOKEN = "--gh-ci-token"


def _require_value(flag: str, value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ConfigError(f"{flag} requires a non-empty value")
    return value


def build_config(
    *,
    airnity_ca: bool = False,
    repo_auth_key: str | None = None,
    repo_api_key: str | None = None,
    repo_url: str | None = None,
    gcloud: bool = False,
    gh_ci_token: str | None = None,
    settings: Settings | None = None,
) -> ProvisionConfig:
    """Resolve CLI options into a consistent configuration.

    Rules:
        - Any repo option enables repo configuration, and repo
          configuration enables the CA install.
        - Once enabled, auth key, API key and URL must all be present.
          The URL may come from settings instead of the flag.
        - ``--gh-ci-token`` given with an empty value is an error.

    Raises:
        MissingArgument: partial repo credentials, or an empty token.
        ConfigError: any other flag given with an empty value.
    """
    settings = settings or Settings()

    if gh_ci_token is not None and not gh_ci_token.strip():
        raise MissingArgument(f"GitHub token is empty: {FLAG_GH_CI_TOKEN} requires a value", [FLAG_GH_CI_TOKEN])

    repo_auth_key = _require_value(FLAG_REPO_AUTH_KEY, repo_auth_key)
    repo_api_key = _require_value(FLAG_REPO_API_KEY, repo_api_key)
    repo_url = _require_value(FLAG_REPO_URL, repo_url)

    install_repo = any(v is not None for v in (repo_auth_key, repo_api_key, repo_url))
    resolved_url = repo_url or settings.elixir_repo.url

    if install_repo:
        missing = [
            flag
            for flag, value in (
                (FLAG_REPO_AUTH_KEY, repo_auth_key),
                (FLAG_REPO_API_KEY, repo_api_key),
                (FLAG_REPO_URL, resolved_url),
            )
            if not value
        ]
        if missing:
            raise MissingArgument(
                "Missing required argument(s) for Elixir repository setup: " + ", ".join(missing),
                missing,
            )

    return ProvisionConfig(
        install_ca=airnity_ca or install_repo,
        install_repo=install_repo,
        install_cloud_sdk=gcloud,
        setup_git_credentials=gh_ci_token is not None,
        repo_auth_key=repo_auth_key or "",
        repo_api_key=repo_api_key or "",
        repo_url=resolved_url if install_repo else "",
        gh_ci_token=gh_ci_token or "",
    )
