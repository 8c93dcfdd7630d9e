"""Pydantic models for the GitHub git data API.

API Documentation: https://docs.github.com/en/rest/git

Response models mirror the JSON GitHub returns; fields GitHub adds which are not modelled here are ignored.
Where the JSON key is not a good python name, the attribute is renamed and the JSON key kept as the alias.
Every model is frozen: a fetched object is a snapshot of remote state and is never updated in place.
"""

from __future__ import annotations

import base64
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from github_git_sync.meta_consts import BLOB_ENCODING, GIT_OBJECT_TYPE, TREE_ITEM_MODE, TREE_ITEM_TYPE

GitSha = Annotated[str, StringConstraints(pattern=r"^[0-9a-fA-F]{40}$")]
"""A 40 character hexadecimal SHA-1 object id."""


class UnsupportedBlobEncodingError(ValueError):
    """Raised when blob content is in an encoding other than `utf-8` or `base64`."""

    def __init__(self, encoding: str | None) -> None:
        """Initialize with the offending encoding."""
        super().__init__(f"'encoding' type '{encoding}' is not supported.")
        self.encoding = encoding


class GitHubModel(BaseModel):
    """Base class for all GitHub API models."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        use_attribute_docstrings=True,
    )

    def to_json(self) -> str:
        """Serialize to the JSON GitHub expects in a request body, omitting unset fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class GitObject(GitHubModel):
    """The git object a reference points to."""

    type: GIT_OBJECT_TYPE
    sha: GitSha
    url: str | None = None


class Reference(GitHubModel):
    """A named pointer to a git object, such as a branch head."""

    ref: str
    """The full name of the reference, e.g. `refs/heads/main`."""

    url: str | None = None
    object: GitObject


class Person(GitHubModel):
    """The author or committer of a commit."""

    name: str | None = None
    email: str | None = None
    date: str | None = None
    """Timestamp as returned by the API; not parsed."""


class CommitTree(GitHubModel):
    """The tree a git commit points to."""

    url: str | None = None
    sha: GitSha


class GitCommit(GitHubModel):
    """A commit as returned by the git data API (`git/commits`)."""

    message: str | None = None
    sha: GitSha | None = None
    """Absent when the commit is embedded in a repository commit or a comparison."""

    tree: CommitTree
    author: Person | None = None
    committer: Person | None = None


class CommitFile(GitHubModel):
    """A file changed by a commit.

    `status` is usually one of `COMMIT_FILE_STATUS`, but GitHub also reports `renamed`, `copied` and others.
    """

    status: str
    filename: str


class Commit(GitHubModel):
    """A commit as returned by the repository commits API, which includes the changed files."""

    sha: GitSha
    git_commit: GitCommit | None = Field(default=None, alias="commit")

    files: list[CommitFile] = Field(default_factory=list)


class CommitComparison(GitHubModel):
    """The commits between two revisions."""

    total_commits: int
    commits: list[Commit] = Field(default_factory=list)


class Blob(GitHubModel):
    """A git blob. Used both as the body to create a blob and as the API's description of one.

    When creating a blob, set `content` and `encoding`. The API replies with only `url` and `sha`.
    """

    encoding: str | None = None
    """Either `utf-8` or `base64`."""

    content: str | None = None
    url: str | None = None
    size: int | None = None
    sha: GitSha | None = None

    def decoded_content(self) -> str:
        """Return the content of the blob as text.

        Returns:
            str: The content, decoded from base64 first if needed.

        Raises:
            UnsupportedBlobEncodingError: If `encoding` is neither `utf-8` nor `base64`.
        """
        content = self.content or ""
        if self.encoding == BLOB_ENCODING.utf_8:
            return content
        if self.encoding == BLOB_ENCODING.base64:
            return base64.b64decode(content).decode("utf-8")

        raise UnsupportedBlobEncodingError(self.encoding)


class TreeItem(GitHubModel):
    """An entry in a git tree."""

    type: TREE_ITEM_TYPE
    url: str | None = None
    size: int | None = None
    """Size in bytes; only present for blobs."""

    sha: GitSha | None = None
    path: str
    mode: TREE_ITEM_MODE
    content: str | None = None
    """Inline content, accepted by the create tree endpoint instead of `sha`."""


class Tree(GitHubModel):
    """A git tree, i.e. a directory listing."""

    url: str | None = None
    sha: GitSha
    items: list[TreeItem] = Field(default_factory=list, alias="tree")
    truncated: bool = False
    """Whether GitHub cut the listing short."""


class CreateCommit(GitHubModel):
    """Body for creating a commit.

    An empty `parents` list creates a root commit; more than one parent creates a merge commit.
    """

    message: str
    parents: list[GitSha] = Field(default_factory=list)
    tree: GitSha


class CreateTree(GitHubModel):
    """Body for creating a tree, optionally on top of an existing one."""

    base_tree: GitSha | None = None
    """The tree to update. If omitted, the new tree contains only `items`."""

    items: list[TreeItem] = Field(alias="tree")


class CreateReference(GitHubModel):
    """Body for creating a reference."""

    ref: str
    """The full name of the new reference, e.g. `refs/heads/feature`."""

    sha: GitSha


class UpdateReference(GitHubModel):
    """Body for moving a reference."""

    sha: GitSha
    force: bool = False
    """Allow updates that are not fast-forwards."""
