"""Inspection of a local git working copy, backed by GitPython."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Protocol

from git import RemoteReference, Repo
from loguru import logger

from github_git_sync.meta_consts import FILE_STATE

_CHANGE_TYPE_TO_STATE = {
    "A": FILE_STATE.added,
    "C": FILE_STATE.added,
    "D": FILE_STATE.deleted,
    "M": FILE_STATE.modified,
    "U": FILE_STATE.modified,
    "R": FILE_STATE.renamed,
    "T": FILE_STATE.type_changed,
}


@dataclass(frozen=True)
class StatusEntry:
    """A path which differs between the working copy, the index and HEAD."""

    path: str
    state: FILE_STATE


class LocalRepository(Protocol):
    """The queries the sync check needs from a local repository."""

    def status_entries(self) -> list[StatusEntry]: ...

    def remote_branch_tips(self) -> dict[str, str]: ...

    def head_sha(self) -> str | None: ...

    def close(self) -> None: ...

    def __enter__(self) -> LocalRepository: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...


class GitWorkingCopy:
    """A local repository whose work tree is pinned to the path it was opened at.

    Submodule checkouts keep a `.git` file pointing into the parent repository's `.git/modules` folder, and the
    configuration found there may name a different work tree. The git commands issued here always use the given
    path as the work tree instead.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Open the repository at `path`.

        Raises:
            git.exc.NoSuchPathError: If `path` does not exist.
            git.exc.InvalidGitRepositoryError: If `path` is not the root of a git working copy.
        """
        self.path = Path(path).resolve()
        self._repo = Repo(self.path)
        try:
            self._repo.git.update_environment(
                GIT_DIR=str(self._repo.git_dir),
                GIT_WORK_TREE=str(self.path),
            )
        except BaseException:
            self._repo.close()
            raise
        logger.debug(f"Opened repository at {self.path} (git dir: {self._repo.git_dir})")

    def __enter__(self) -> GitWorkingCopy:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the git processes and file handles GitPython holds for this repository."""
        self._repo.close()

    def status_entries(self) -> list[StatusEntry]:
        """Return staged, unstaged and untracked changes, in that order.

        A path both staged and changed again in the working copy appears twice.
        """
        entries: list[StatusEntry] = []

        if self._repo.head.is_valid():
            for diff in self._repo.index.diff("HEAD", R=True):
                entries.append(self._diff_to_entry(diff.b_path or diff.a_path, diff.change_type))
        else:
            # Nothing is committed yet, so everything in the index is new.
            entries.extend(StatusEntry(str(path), FILE_STATE.added) for path, _stage in self._repo.index.entries)

        for diff in self._repo.index.diff(None):
            entries.append(self._diff_to_entry(diff.a_path or diff.b_path, diff.change_type))

        entries.extend(StatusEntry(path, FILE_STATE.untracked) for path in self._repo.untracked_files)
        return entries

    def remote_branch_tips(self) -> dict[str, str]:
        """Return the tip commit of every remote-tracking branch, keyed by name (e.g. `origin/main`)."""
        tips: dict[str, str] = {}
        for ref in self._repo.refs:
            if not isinstance(ref, RemoteReference):
                continue
            try:
                tips[ref.name] = ref.commit.hexsha
            except ValueError as e:
                logger.debug(f"Skipping remote-tracking branch {ref.name} which does not resolve to a commit: {e}")

        return tips

    def head_sha(self) -> str | None:
        """Return the commit HEAD points to, or None if nothing has been committed yet."""
        if not self._repo.head.is_valid():
            return None

        return self._repo.head.commit.hexsha

    @staticmethod
    def _diff_to_entry(path: str | None, change_type: str | None) -> StatusEntry:
        state = _CHANGE_TYPE_TO_STATE.get(change_type or "", FILE_STATE.modified)
        return StatusEntry(path or "", state)


def open_local_repository(path: str | os.PathLike[str]) -> GitWorkingCopy:
    """Open the working copy at `path`, with the work tree forced to `path`."""
    return GitWorkingCopy(path)
