"""Configuration settings for the GitHub client and the repository sync check."""

from __future__ import annotations

from loguru import logger
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_git_sync.meta_consts import (
    DEFAULT_API_ROOT_URL,
    DEFAULT_GITDATA_URL,
    DEFAULT_TOLERATED_UNTRACKED_PATH,
    DEFAULT_USER_AGENT,
)


class GitHubClientSettings(BaseSettings):
    """Settings for a `GitHubClient`. Read once when the client is created."""

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_GIT_SYNC_",
        use_attribute_docstrings=True,
    )

    api_root_url: str = DEFAULT_API_ROOT_URL
    """The root of the GitHub API, e.g. `https://api.github.com/` or `http://git.example.com/api/v3/`."""

    username: str | None = None
    """GitHub username sent with basic authentication on write requests."""

    password: str | None = None
    """GitHub password or personal access token sent with basic authentication on write requests."""

    use_gitdata_api: bool = False
    """Look up the latest commit of a branch through the gitdata cache service instead of the GitHub API. \
Intended for tools which poll frequently (every ~5 seconds)."""

    gitdata_url: str = DEFAULT_GITDATA_URL
    """The root of the gitdata cache service."""

    user_agent: str = DEFAULT_USER_AGENT
    """The User-Agent sent with every request."""

    timeout_seconds: float = 5.0
    """Timeout in seconds for HTTP requests."""

    @model_validator(mode="after")
    def validate_client_configuration(self) -> GitHubClientSettings:
        """Normalize URLs and warn about partial credentials."""
        if not self.api_root_url.endswith("/"):
            self.api_root_url += "/"

        if not self.gitdata_url.endswith("/"):
            self.gitdata_url += "/"

        if (self.username is None) != (self.password is None):
            logger.warning(
                "Only one of username and password is configured. "
                "Write requests will be sent without authentication. "
                "Set both GITHUB_GIT_SYNC_USERNAME and GITHUB_GIT_SYNC_PASSWORD."
            )

        return self

    @property
    def has_credentials(self) -> bool:
        """Return True if both username and password are configured."""
        return self.username is not None and self.password is not None


class SyncCheckSettings(BaseSettings):
    """Settings for checking whether a local repository is synchronized to its remote."""

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_GIT_SYNC_CHECK_",
        use_attribute_docstrings=True,
    )

    tolerated_untracked_path: str | None = DEFAULT_TOLERATED_UNTRACKED_PATH
    """A path which, when it is the only change and is untracked, does not make the working copy dirty. \
Submodule checkouts whose `.git` file points into the parent repository report it this way. \
Set to an empty value to disable."""

    @model_validator(mode="after")
    def validate_tolerated_path(self) -> SyncCheckSettings:
        """Treat an empty tolerated path as disabled."""
        if not self.tolerated_untracked_path:
            self.tolerated_untracked_path = None

        return self
