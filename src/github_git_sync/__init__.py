"""A typed client for the GitHub git data API and a check that a local working copy is synchronized to GitHub."""

from __future__ import annotations

from .client import GitHubClient
from .config import GitHubClientSettings, SyncCheckSettings
from .local_repository import GitWorkingCopy, LocalRepository, StatusEntry, open_local_repository
from .meta_consts import (
    BLOB_ENCODING,
    COMMIT_FILE_STATUS,
    FILE_STATE,
    GIT_OBJECT_TYPE,
    TREE_ITEM_MODE,
    TREE_ITEM_TYPE,
)
from .models import (
    Blob,
    Commit,
    CommitComparison,
    CommitFile,
    CommitTree,
    CreateCommit,
    CreateReference,
    CreateTree,
    GitCommit,
    GitObject,
    Person,
    Reference,
    Tree,
    TreeItem,
    UnsupportedBlobEncodingError,
    UpdateReference,
)
from .results import ApiFailure, ApiFailureKind, ApiResult
from .sync_check import RepositorySyncChecker, SyncReport, is_local_repository_synchronized_to_remote

__version__ = "0.1.0"

__all__ = [
    "BLOB_ENCODING",
    "COMMIT_FILE_STATUS",
    "FILE_STATE",
    "GIT_OBJECT_TYPE",
    "TREE_ITEM_MODE",
    "TREE_ITEM_TYPE",
    "ApiFailure",
    "ApiFailureKind",
    "ApiResult",
    "Blob",
    "Commit",
    "CommitComparison",
    "CommitFile",
    "CommitTree",
    "CreateCommit",
    "CreateReference",
    "CreateTree",
    "GitCommit",
    "GitHubClient",
    "GitHubClientSettings",
    "GitObject",
    "GitWorkingCopy",
    "LocalRepository",
    "Person",
    "Reference",
    "RepositorySyncChecker",
    "StatusEntry",
    "SyncCheckSettings",
    "SyncReport",
    "Tree",
    "TreeItem",
    "UnsupportedBlobEncodingError",
    "UpdateReference",
    "is_local_repository_synchronized_to_remote",
    "open_local_repository",
]
