"""Tests for RepositorySyncChecker using in-memory repositories."""

from __future__ import annotations

import os
from types import TracebackType
from typing import cast

import pytest
from pytest import LogCaptureFixture

from github_git_sync import (
    FILE_STATE,
    GitHubClient,
    RepositorySyncChecker,
    StatusEntry,
    SyncCheckSettings,
    is_local_repository_synchronized_to_remote,
)

LATEST = "abc123"
HEAD = "abc123"


class StubGitHubClient:
    """Answers latest commit lookups from a fixed value and records the calls."""

    def __init__(self, latest_commit_id: str | None) -> None:
        self.latest_commit_id = latest_commit_id
        self.calls: list[tuple[str, str, str]] = []

    def get_latest_commit_id(self, owner: str, repo: str, branch: str) -> str | None:
        self.calls.append((owner, repo, branch))
        return self.latest_commit_id


class FakeRepository:
    """A local repository with a fixed state."""

    def __init__(
        self,
        *,
        entries: list[StatusEntry] | None = None,
        tips: dict[str, str] | None = None,
        head: str | None = HEAD,
        status_error: Exception | None = None,
    ) -> None:
        self.entries = entries or []
        self.tips = tips if tips is not None else {"origin/master": "abc123", "origin/dev": "def456"}
        self.head = head
        self.status_error = status_error
        self.opened_path: str | os.PathLike[str] | None = None
        self.closed = False

    def open(self, path: str | os.PathLike[str]) -> FakeRepository:
        self.opened_path = path
        return self

    def __enter__(self) -> FakeRepository:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def status_entries(self) -> list[StatusEntry]:
        if self.status_error is not None:
            raise self.status_error
        return list(self.entries)

    def remote_branch_tips(self) -> dict[str, str]:
        return dict(self.tips)

    def head_sha(self) -> str | None:
        return self.head


def make_checker(
    repository: FakeRepository,
    latest_commit_id: str | None = LATEST,
    settings: SyncCheckSettings | None = None,
) -> tuple[RepositorySyncChecker, StubGitHubClient]:
    client = StubGitHubClient(latest_commit_id)
    checker = RepositorySyncChecker(
        cast(GitHubClient, client),
        settings=settings or SyncCheckSettings(),
        repository_opener=repository.open,
    )
    return checker, client


class TestSynchronized:
    """Cases where the working copy is in sync."""

    def test_clean_and_remote_tip_at_latest(self) -> None:
        repository = FakeRepository()
        checker, client = make_checker(repository)

        assert checker.is_local_repository_synchronized_to_remote("/work/repo", "owner", "repo", "master")
        assert client.calls == [("owner", "repo", "master")]
        assert repository.opened_path == "/work/repo"
        assert repository.closed

    def test_lone_untracked_git_file_is_tolerated(self) -> None:
        repository = FakeRepository(entries=[StatusEntry(".git", FILE_STATE.untracked)])
        checker, _ = make_checker(repository)

        report = checker.check("/work/repo", "owner", "repo", "master")

        assert report.in_sync
        assert report.is_clean
        assert report.dirty_entries == []

    def test_head_behind_only_warns(self, caplog: LogCaptureFixture) -> None:
        repository = FakeRepository(head="0123abc")
        checker, _ = make_checker(repository)

        report = checker.check("/work/repo", "owner", "repo", "master")

        assert report.in_sync
        assert not report.head_matches_remote
        assert "Repository HEAD (0123abc) does not match tip of any branch" in caplog.text

    def test_clean_repository_is_logged(self, caplog: LogCaptureFixture) -> None:
        checker, _ = make_checker(FakeRepository())

        checker.check("/work/repo", "owner", "repo", "master")

        assert "Git repository is clean." in caplog.text


class TestNotSynchronized:
    """Cases where the working copy is not in sync."""

    def test_tracked_modification(self, caplog: LogCaptureFixture) -> None:
        repository = FakeRepository(entries=[StatusEntry("foo.txt", FILE_STATE.modified)])
        checker, _ = make_checker(repository)

        report = checker.check("/work/repo", "owner", "repo", "master")

        assert not report.in_sync
        assert report.remote_tip_matches_latest
        assert report.dirty_entries == [StatusEntry("foo.txt", FILE_STATE.modified)]
        assert "Git repository is dirty!" in caplog.text
        assert "modified: foo.txt" in caplog.text

    def test_untracked_git_file_with_other_changes(self) -> None:
        entries = [StatusEntry(".git", FILE_STATE.untracked), StatusEntry("notes.txt", FILE_STATE.untracked)]
        checker, _ = make_checker(FakeRepository(entries=entries))

        report = checker.check("/work/repo", "owner", "repo", "master")

        assert not report.in_sync
        assert report.dirty_entries == entries

    @pytest.mark.parametrize(
        "entry",
        [
            StatusEntry("notes.txt", FILE_STATE.untracked),
            StatusEntry(".git", FILE_STATE.modified),
            StatusEntry(".git", FILE_STATE.added),
            StatusEntry("sub/.git", FILE_STATE.untracked),
        ],
    )
    def test_only_the_untracked_marker_is_tolerated(self, entry: StatusEntry) -> None:
        checker, _ = make_checker(FakeRepository(entries=[entry]))

        assert not checker.is_local_repository_synchronized_to_remote("/work/repo", "owner", "repo", "master")

    def test_tolerance_can_be_disabled(self) -> None:
        repository = FakeRepository(entries=[StatusEntry(".git", FILE_STATE.untracked)])
        checker, _ = make_checker(repository, settings=SyncCheckSettings(tolerated_untracked_path=""))

        assert checker.settings.tolerated_untracked_path is None
        assert not checker.is_local_repository_synchronized_to_remote("/work/repo", "owner", "repo", "master")

    def test_no_remote_tip_at_latest(self, caplog: LogCaptureFixture) -> None:
        repository = FakeRepository(tips={"origin/master": "fff000", "origin/dev": "def456"}, head="fff000")
        checker, _ = make_checker(repository)

        report = checker.check("/work/repo", "owner", "repo", "master")

        assert not report.in_sync
        assert report.is_clean
        assert report.head_matches_remote
        assert "No remote branch tip is set to latest remote commit 'abc123'." in caplog.text

    def test_latest_commit_unknown(self) -> None:
        checker, _ = make_checker(FakeRepository(), latest_commit_id=None)

        report = checker.check("/work/repo", "owner", "repo", "master")

        assert not report.in_sync
        assert report.latest_commit_id is None

    def test_no_remote_tracking_branches(self) -> None:
        checker, _ = make_checker(FakeRepository(tips={}))

        report = checker.check("/work/repo", "owner", "repo", "master")

        assert not report.in_sync
        assert not report.head_matches_remote

    def test_dirty_regardless_of_matching_tip(self) -> None:
        entries = [StatusEntry("a.txt", FILE_STATE.deleted), StatusEntry("b.txt", FILE_STATE.added)]
        checker, _ = make_checker(FakeRepository(entries=entries))

        report = checker.check("/work/repo", "owner", "repo", "master")

        assert report.remote_tip_matches_latest
        assert not report.in_sync


def test_repository_is_closed_when_inspection_fails() -> None:
    repository = FakeRepository(status_error=RuntimeError("index is locked"))
    checker, _ = make_checker(repository)

    with pytest.raises(RuntimeError, match="index is locked"):
        checker.check("/work/repo", "owner", "repo", "master")

    assert repository.closed


def test_summary() -> None:
    entries = [StatusEntry(f"file{i}.txt", FILE_STATE.modified) for i in range(7)]
    checker, _ = make_checker(FakeRepository(entries=entries, head="0123abc"))

    summary = checker.check("/work/repo", "owner", "repo", "master").summary()

    assert summary.splitlines()[0] == "/work/repo against owner/repo/master: NOT in sync"
    assert "Working copy: 7 changes" in summary
    assert "modified: file0.txt" in summary
    assert "... and 2 more" in summary
    assert "Remote-tracking branches at latest commit: origin/master" in summary
    assert "HEAD is not at the tip of any remote-tracking branch" in summary


def test_module_level_check_uses_given_client(monkeypatch: pytest.MonkeyPatch) -> None:
    repository = FakeRepository()
    monkeypatch.setattr("github_git_sync.sync_check.open_local_repository", repository.open)
    client = StubGitHubClient(LATEST)

    assert is_local_repository_synchronized_to_remote(
        "/work/repo", "owner", "repo", "master", client=cast(GitHubClient, client)
    )
    assert repository.closed
