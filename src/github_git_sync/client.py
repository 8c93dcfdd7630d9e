"""Client for the GitHub git data API (https://docs.github.com/en/rest/git).

Every typed operation returns `None` when the request does not succeed. The failure is logged with the request
method and URL where the response is consumed, in `GitHubClient.get_result`. Callers which need to tell a missing
object from a network problem can call `get_result` directly and inspect the `ApiResult`.
"""

from __future__ import annotations

from types import TracebackType
from typing import TypeVar
from urllib.parse import urljoin

import httpx
from loguru import logger
from pydantic import ValidationError

from github_git_sync.config import GitHubClientSettings
from github_git_sync.meta_consts import ACCEPTED_ENCODINGS, JSON_CONTENT_TYPE
from github_git_sync.models import (
    Blob,
    Commit,
    CommitComparison,
    CreateCommit,
    CreateReference,
    CreateTree,
    GitCommit,
    GitHubModel,
    Reference,
    Tree,
    TreeItem,
    UpdateReference,
)
from github_git_sync.results import ApiFailure, ApiFailureKind, ApiResult

ModelT = TypeVar("ModelT", bound=GitHubModel)


class GitHubClient:
    """Synchronous client for references, commits, trees and blobs on GitHub.

    The configuration is read once, when the client is created, and never changes afterwards, so one client can be
    shared by several threads.
    """

    def __init__(
        self,
        settings: GitHubClientSettings | None = None,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: The client settings. If None, they are loaded from the environment.
            http_client: The httpx client to send requests with. If None, the client creates and owns one.
        """
        self.settings = settings if settings is not None else GitHubClientSettings()

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=self.settings.timeout_seconds)

        self._headers = {
            "User-Agent": self.settings.user_agent,
            "Accept-Encoding": ACCEPTED_ENCODINGS,
        }
        self._auth: httpx.BasicAuth | None = None
        if self.settings.has_credentials:
            assert self.settings.username is not None
            assert self.settings.password is not None
            self._auth = httpx.BasicAuth(self.settings.username, self.settings.password)

        logger.debug(
            f"GitHubClient initialized for {self.settings.api_root_url} "
            f"(gitdata: {self.settings.use_gitdata_api}, authenticated writes: {self._auth is not None})"
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client, if this client created it."""
        if self._owns_http_client:
            self._http_client.close()

    @property
    def use_gitdata_api(self) -> bool:
        """Whether the latest commit of a branch is looked up through the gitdata service."""
        return self.settings.use_gitdata_api

    def get_latest_commit_id(self, owner: str, repo: str, branch: str) -> str | None:
        """Return the SHA-1 of the most recent commit on a branch.

        Args:
            owner: The GitHub user or organization which owns the repository.
            repo: The repository name.
            branch: The branch name, e.g. `main`.

        Returns:
            The commit SHA-1, or None if it could not be determined.
        """
        if self.use_gitdata_api:
            commit_id = self._get_text(self._gitdata_latest_commit_url(owner, repo, branch)).value
            return commit_id.strip() if commit_id and commit_id.strip() else None

        reference = self.get_reference(owner, repo, branch)
        return reference.object.sha if reference is not None else None

    def get_reference(self, owner: str, repo: str, branch: str) -> Reference | None:
        """Return the reference for the head of a branch."""
        return self._get(f"repos/{owner}/{repo}/git/refs/heads/{branch}", Reference)

    def get_commit(self, owner: str, repo: str, sha: str) -> Commit | None:
        """Return detailed information for a commit, including the files it changed."""
        return self._get(f"repos/{owner}/{repo}/commits/{sha}", Commit)

    def get_git_commit(self, owner: str, repo: str, sha: str) -> GitCommit | None:
        """Return a commit as stored in git. This is a subset of what `get_commit` returns."""
        return self._get(f"repos/{owner}/{repo}/git/commits/{sha}", GitCommit)

    def compare_commits(self, owner: str, repo: str, first_sha: str, second_sha: str) -> CommitComparison | None:
        """Return the commits between two revisions."""
        return self._get(f"repos/{owner}/{repo}/compare/{first_sha}...{second_sha}", CommitComparison)

    def create_blob(self, owner: str, repo: str, blob: Blob) -> Blob | None:
        """Create a blob from `blob.content` and `blob.encoding`.

        Returns:
            The new blob, which carries only its `url` and `sha`, or None on failure.
        """
        return self._write("POST", f"repos/{owner}/{repo}/git/blobs", blob, Blob)

    def create_commit(self, owner: str, repo: str, commit: CreateCommit) -> GitCommit | None:
        """Create a commit. No reference is moved to it; see `update_reference`."""
        return self._write("POST", f"repos/{owner}/{repo}/git/commits", commit, GitCommit)

    def create_tree(self, owner: str, repo: str, tree: CreateTree) -> Tree | None:
        """Create a tree, optionally based on an existing one."""
        return self._write("POST", f"repos/{owner}/{repo}/git/trees", tree, Tree)

    def create_reference(self, owner: str, repo: str, reference: CreateReference) -> Reference | None:
        """Create a reference, e.g. a new branch."""
        return self._write("POST", f"repos/{owner}/{repo}/git/refs", reference, Reference)

    def update_reference(self, owner: str, repo: str, branch: str, update: UpdateReference) -> Reference | None:
        """Move the head of a branch to another commit.

        When the gitdata service is in use, it is asked to refresh its cached latest commit for the branch. GitHub
        may take a long time to notify gitdata by itself. The refresh is best effort: its outcome is logged and
        otherwise ignored.

        Args:
            owner: The repository owner.
            repo: The repository name.
            branch: The branch name.
            update: The new SHA-1 and whether to force a non fast-forward update.

        Returns:
            The updated reference, or None on failure.
        """
        reference = self._write("PATCH", f"repos/{owner}/{repo}/git/refs/heads/{branch}", update, Reference)

        if reference is not None and self.use_gitdata_api:
            refresh = self._get_text(self._gitdata_latest_commit_url(owner, repo, branch) + "?refreshCache=true")
            if refresh.ok:
                logger.debug(f"Refreshed gitdata cache for {owner}/{repo}/{branch}")

        return reference

    def get_blob(self, item: TreeItem) -> Blob | None:
        """Return the blob for a tree item, using the URL the item carries."""
        if item.url is None:
            logger.error(f"Tree item {item.path} has no URL; cannot fetch its blob")
            return None

        return self._get(item.url, Blob)

    def get_tree(self, commit: GitCommit) -> Tree | None:
        """Return the tree of a commit, using the URL the commit carries."""
        if commit.tree.url is None:
            logger.error(f"Commit {commit.sha} has no tree URL; cannot fetch its tree")
            return None

        return self._get(commit.tree.url, Tree)

    def get_result(
        self,
        method: str,
        url: str,
        model: type[ModelT],
        payload: GitHubModel | None = None,
    ) -> ApiResult[ModelT]:
        """Send a request and parse the JSON response into `model`.

        Args:
            method: The HTTP method.
            url: The URL, absolute or relative to the API root.
            model: The model to parse the response into.
            payload: The request body. Requests with a body are authenticated when credentials are configured.

        Returns:
            The parsed model, or the reason the request failed. Failures are logged here and never raised.
        """
        url = self._api_url(url)
        try:
            response = self._send(method, url, payload)
            response.raise_for_status()
            return ApiResult.success(model.model_validate_json(response.content))
        except ValidationError as e:
            return ApiResult.fail(self._log_failure(ApiFailureKind.response_shape, method, url, e))
        except httpx.HTTPStatusError as e:
            kind = ApiFailureKind.not_found if e.response.status_code == 404 else ApiFailureKind.http_status
            return ApiResult.fail(self._log_failure(kind, method, url, e, status_code=e.response.status_code))
        except httpx.HTTPError as e:
            return ApiResult.fail(self._log_failure(ApiFailureKind.transport, method, url, e))

    def _get(self, url: str, model: type[ModelT]) -> ModelT | None:
        return self.get_result("GET", url, model).value

    def _write(self, method: str, url: str, payload: GitHubModel, model: type[ModelT]) -> ModelT | None:
        return self.get_result(method, url, model, payload).value

    def _get_text(self, url: str) -> ApiResult[str]:
        try:
            response = self._send("GET", url, None)
            response.raise_for_status()
            return ApiResult.success(response.text)
        except httpx.HTTPStatusError as e:
            kind = ApiFailureKind.not_found if e.response.status_code == 404 else ApiFailureKind.http_status
            return ApiResult.fail(self._log_failure(kind, "GET", url, e, status_code=e.response.status_code))
        except httpx.HTTPError as e:
            return ApiResult.fail(self._log_failure(ApiFailureKind.transport, "GET", url, e))

    def _send(self, method: str, url: str, payload: GitHubModel | None) -> httpx.Response:
        if payload is None:
            return self._http_client.request(method, url, headers=self._headers)

        return self._http_client.request(
            method,
            url,
            content=payload.to_json().encode("utf-8"),
            headers={**self._headers, "Content-Type": JSON_CONTENT_TYPE},
            auth=self._auth if self._auth is not None else httpx.USE_CLIENT_DEFAULT,
        )

    def _api_url(self, url: str) -> str:
        return urljoin(self.settings.api_root_url, url)

    def _gitdata_latest_commit_url(self, owner: str, repo: str, branch: str) -> str:
        return f"{self.settings.gitdata_url}commits/latest/git/{owner}/{repo}/{branch}"

    @staticmethod
    def _log_failure(
        kind: ApiFailureKind,
        method: str,
        url: str,
        error: Exception,
        *,
        status_code: int | None = None,
    ) -> ApiFailure:
        logger.error(f"{type(error).__name__} for {method} {url}: {error}")
        return ApiFailure(kind=kind, method=method, url=url, message=str(error), status_code=status_code)
