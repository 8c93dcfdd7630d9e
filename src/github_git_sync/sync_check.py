"""Check whether a local working copy is clean and caught up with the latest commit of a remote branch."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger

from github_git_sync.client import GitHubClient
from github_git_sync.config import SyncCheckSettings
from github_git_sync.local_repository import LocalRepository, StatusEntry, open_local_repository
from github_git_sync.meta_consts import FILE_STATE

RepositoryOpener = Callable[[str | os.PathLike[str]], LocalRepository]


@dataclass
class SyncReport:
    """The outcome of a sync check, with the state it was decided from."""

    local_path: str
    remote: str
    """The remote branch, as `owner/repo/branch`."""

    latest_commit_id: str | None
    """The latest commit of the remote branch, or None if it could not be fetched."""

    head_sha: str | None = None
    dirty_entries: list[StatusEntry] = field(default_factory=list)
    """Changes which make the working copy dirty. Tolerated entries are not included."""

    remote_branch_tips: dict[str, str] = field(default_factory=dict)

    @property
    def is_clean(self) -> bool:
        """Return True if the working copy has no changes, ignoring tolerated entries."""
        return not self.dirty_entries

    @property
    def head_matches_remote(self) -> bool:
        """Return True if HEAD is at the tip of some remote-tracking branch."""
        return self.head_sha is not None and self.head_sha in self.remote_branch_tips.values()

    @property
    def remote_tip_matches_latest(self) -> bool:
        """Return True if some remote-tracking branch is at the latest remote commit."""
        return self.latest_commit_id is not None and self.latest_commit_id in self.remote_branch_tips.values()

    @property
    def in_sync(self) -> bool:
        """Return True if the working copy is clean and has fetched the latest remote commit.

        HEAD itself may still be behind that commit.
        """
        return self.is_clean and self.remote_tip_matches_latest

    def summary(self) -> str:
        """Return a human-readable summary of the check."""
        lines = [f"{self.local_path} against {self.remote}: {'in sync' if self.in_sync else 'NOT in sync'}"]
        lines.append(f"  Latest remote commit: {self.latest_commit_id or 'unknown'}")
        lines.append(f"  Local HEAD: {self.head_sha or 'none'}")

        if self.is_clean:
            lines.append("  Working copy: clean")
        else:
            lines.append(f"  Working copy: {len(self.dirty_entries)} changes")
            for entry in self.dirty_entries[:5]:
                lines.append(f"    {entry.state}: {entry.path}")
            if len(self.dirty_entries) > 5:
                lines.append(f"    ... and {len(self.dirty_entries) - 5} more")

        matching = sorted(name for name, sha in self.remote_branch_tips.items() if sha == self.latest_commit_id)
        lines.append(f"  Remote-tracking branches at latest commit: {', '.join(matching) or 'none'}")
        if not self.head_matches_remote:
            lines.append("  HEAD is not at the tip of any remote-tracking branch")

        return "\n".join(lines)


class RepositorySyncChecker:
    """Compares a local working copy against the latest commit GitHub reports for a branch."""

    def __init__(
        self,
        client: GitHubClient,
        *,
        settings: SyncCheckSettings | None = None,
        repository_opener: RepositoryOpener | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            client: The client used to look up the latest remote commit.
            settings: The check settings. If None, they are loaded from the environment.
            repository_opener: Opens the local repository at a path. If None, `open_local_repository` is used,
                which pins the work tree to that path.
        """
        self.client = client
        self.settings = settings if settings is not None else SyncCheckSettings()
        self._repository_opener = repository_opener if repository_opener is not None else open_local_repository

    def check(
        self,
        local_path: str | os.PathLike[str],
        remote_owner: str,
        remote_repo: str,
        remote_branch: str,
    ) -> SyncReport:
        """Check a local working copy against a remote branch.

        The working copy is in sync if it has no changes and at least one remote-tracking branch is at the latest
        commit of the remote branch. A HEAD behind that branch only produces a warning.

        Args:
            local_path: The root of the local working copy.
            remote_owner: The owner of the GitHub repository.
            remote_repo: The name of the GitHub repository.
            remote_branch: The branch on GitHub to compare against.

        Returns:
            The report; see `SyncReport.in_sync`.
        """
        latest_commit_id = self.client.get_latest_commit_id(remote_owner, remote_repo, remote_branch)

        report = SyncReport(
            local_path=os.fspath(local_path),
            remote=f"{remote_owner}/{remote_repo}/{remote_branch}",
            latest_commit_id=latest_commit_id,
        )

        with self._repository_opener(local_path) as repository:
            report.dirty_entries = self._dirty_entries(repository.status_entries())
            report.remote_branch_tips = repository.remote_branch_tips()
            report.head_sha = repository.head_sha()

        if report.is_clean:
            logger.info("Git repository is clean.")
        else:
            logger.error("Git repository is dirty!")
            for entry in report.dirty_entries:
                logger.debug(f"{entry.state}: {entry.path}")

        if not report.head_matches_remote:
            logger.warning(
                f"Repository HEAD ({report.head_sha}) does not match tip of any branch; local repository is behind."
            )

        if not report.remote_tip_matches_latest:
            logger.error(f"No remote branch tip is set to latest remote commit '{latest_commit_id}'.")

        return report

    def is_local_repository_synchronized_to_remote(
        self,
        local_path: str | os.PathLike[str],
        remote_owner: str,
        remote_repo: str,
        remote_branch: str,
    ) -> bool:
        """Return True if the working copy is clean and has fetched the latest commit of the remote branch."""
        return self.check(local_path, remote_owner, remote_repo, remote_branch).in_sync

    def _dirty_entries(self, entries: list[StatusEntry]) -> list[StatusEntry]:
        tolerated = self.settings.tolerated_untracked_path
        if (
            tolerated is not None
            and len(entries) == 1
            and entries[0].state == FILE_STATE.untracked
            and entries[0].path == tolerated
        ):
            logger.debug(f"Ignoring untracked {tolerated}, the only change in the working copy")
            return []

        return entries


def is_local_repository_synchronized_to_remote(
    local_path: str | os.PathLike[str],
    remote_owner: str,
    remote_repo: str,
    remote_branch: str,
    *,
    client: GitHubClient | None = None,
) -> bool:
    """Check a local working copy against a remote branch with a default checker.

    Args:
        local_path: The root of the local working copy.
        remote_owner: The owner of the GitHub repository.
        remote_repo: The name of the GitHub repository.
        remote_branch: The branch on GitHub to compare against.
        client: The client to use. If None, one is created from the environment and closed afterwards.

    Returns:
        True if the working copy is clean and some remote-tracking branch is at the latest remote commit.
    """
    if client is not None:
        return RepositorySyncChecker(client).is_local_repository_synchronized_to_remote(
            local_path, remote_owner, remote_repo, remote_branch
        )

    with GitHubClient() as own_client:
        return RepositorySyncChecker(own_client).is_local_repository_synchronized_to_remote(
            local_path, remote_owner, remote_repo, remote_branch
        )
