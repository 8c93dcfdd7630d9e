import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
from loguru import logger
from pytest import LogCaptureFixture

# Settings are read from the environment when a client or checker is created; none may be set during tests.
_ENV_PREFIX = "GITHUB_GIT_SYNC_"


def _clear_test_environment_variables() -> dict[str, str]:
    """Clear environment variables that could interfere with tests.

    Returns a dictionary of the cleared variables for potential restoration.
    """
    cleared_vars = {}
    for var_name in list(os.environ):
        if var_name.startswith(_ENV_PREFIX):
            cleared_vars[var_name] = os.environ.pop(var_name)
    return cleared_vars


_CLEARED_ENV_VARS = _clear_test_environment_variables()

from github_git_sync import GitHubClient, GitHubClientSettings  # noqa: E402

API_ROOT = "https://api.github.test/"
GITDATA_ROOT = "http://gitdata.test/"


@pytest.fixture(autouse=True)
def ensure_test_environment() -> None:
    """Fail loudly if a test or fixture left settings in the environment."""
    leaked = [var_name for var_name in os.environ if var_name.startswith(_ENV_PREFIX)]
    if leaked:
        pytest.fail(f"Environment variables leaked into the test run: {leaked}")


@pytest.fixture
def caplog(caplog: LogCaptureFixture) -> Generator[LogCaptureFixture, None, None]:
    """Fixture to capture log messages during tests.

    See https://loguru.readthedocs.io/en/stable/resources/migration.html#migration-caplog for more information.
    """
    handler_id = logger.add(caplog.handler, format="{message}", level=0)
    yield caplog
    logger.remove(handler_id)


@pytest.fixture(scope="session", autouse=True)
def setup_logging(tmp_path_factory: pytest.TempPathFactory) -> None:
    """Set up logging for tests."""
    log_path: Path = tmp_path_factory.mktemp("logs").joinpath("test_log.txt")
    logger.remove()
    logger.configure(
        handlers=[
            {
                "sink": log_path,
                "format": "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            },
            {
                "sink": sys.stderr,
                "format": "{time:YYYY-MM-DD HH:mm:ss} | {name}:{function}:{line} | {level} | {message}",
            },
        ],
    )


@pytest.fixture
def client_settings() -> GitHubClientSettings:
    """Settings pointing at fake hosts, with credentials for write requests."""
    return GitHubClientSettings(
        api_root_url=API_ROOT,
        gitdata_url=GITDATA_ROOT,
        username="octocat",
        password="hunter2",
    )


@pytest.fixture
def github_client(client_settings: GitHubClientSettings) -> Generator[GitHubClient, None, None]:
    """A client talking to the fake API root."""
    with GitHubClient(client_settings) as client:
        yield client


@pytest.fixture
def gitdata_client(client_settings: GitHubClientSettings) -> Generator[GitHubClient, None, None]:
    """A client which looks up latest commits through the fake gitdata service."""
    settings = client_settings.model_copy(update={"use_gitdata_api": True})
    with GitHubClient(settings) as client:
        yield client
