from __future__ import annotations

from enum import auto

from strenum import StrEnum

DEFAULT_API_ROOT_URL = "https://api.github.com/"
"""The root of the public GitHub REST API."""

DEFAULT_GITDATA_URL = "http://gitdata/"
"""The root of the gitdata service, which caches the latest commit per branch."""

DEFAULT_USER_AGENT = "GitHubClient"

DEFAULT_TOLERATED_UNTRACKED_PATH = ".git"
"""A submodule checkout can report its own `.git` file as untracked when the work tree is forced."""

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

ACCEPTED_ENCODINGS = "gzip, deflate"


class GIT_OBJECT_TYPE(StrEnum):
    """The type of object a reference points to."""

    commit = auto()
    tree = auto()
    blob = auto()
    tag = auto()
    """Annotated tags; only seen on references under `refs/tags/`."""


class TREE_ITEM_TYPE(StrEnum):
    """The type of an entry in a git tree."""

    blob = auto()
    tree = auto()
    commit = auto()
    """A submodule, i.e. a commit in another repository."""


class TREE_ITEM_MODE(StrEnum):
    """The file mode of an entry in a git tree."""

    file = "100644"
    executable = "100755"
    subdirectory = "040000"
    submodule = "160000"
    symlink = "120000"


class BLOB_ENCODING(StrEnum):
    """Encodings GitHub uses for blob content."""

    utf_8 = "utf-8"
    base64 = auto()


class COMMIT_FILE_STATUS(StrEnum):
    """The documented statuses of a file changed by a commit."""

    modified = auto()
    added = auto()
    removed = auto()


class FILE_STATE(StrEnum):
    """The state of a path in a local working copy."""

    added = auto()
    modified = auto()
    deleted = auto()
    renamed = auto()
    type_changed = auto()
    untracked = auto()
