r"""Command line interface for github-git-sync.

Usage:
    github-git-sync latest OWNER REPO BRANCH
    github-git-sync check PATH OWNER REPO BRANCH

Environment variables:
    GITHUB_GIT_SYNC_API_ROOT_URL - GitHub API root (default: https://api.github.com/)
    GITHUB_GIT_SYNC_USE_GITDATA_API - Set to 'true' to look up latest commits through the gitdata service
    GITHUB_GIT_SYNC_GITDATA_URL - gitdata service root (default: http://gitdata/)
    GITHUB_GIT_SYNC_CHECK_TOLERATED_UNTRACKED_PATH - Untracked path ignored when it is the only change (default: .git)

Examples:
    # Print the latest commit of a branch
    github-git-sync latest octocat Hello-World master

    # Fail a build step when the checkout is dirty or has not fetched the latest commit
    github-git-sync check . octocat Hello-World master

    # Against GitHub Enterprise
    github-git-sync --api-root https://git.example.com/api/v3/ check . owner repo main
"""

from __future__ import annotations

import argparse
import sys

from git.exc import GitError
from loguru import logger

from github_git_sync.client import GitHubClient
from github_git_sync.config import GitHubClientSettings
from github_git_sync.logging_config import configure_logger
from github_git_sync.sync_check import RepositorySyncChecker

CLI_LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="github-git-sync",
        description="Query GitHub branch heads and check local working copies against them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--api-root",
        type=str,
        default=None,
        help="GitHub API root URL (default: from env GITHUB_GIT_SYNC_API_ROOT_URL)",
    )

    parser.add_argument(
        "--gitdata",
        action="store_true",
        default=False,
        help="Look up the latest commit through the gitdata cache service",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    latest_parser = subparsers.add_parser("latest", help="Print the latest commit of a remote branch")
    latest_parser.add_argument("owner", help="Repository owner")
    latest_parser.add_argument("repo", help="Repository name")
    latest_parser.add_argument("branch", help="Branch name")

    check_parser = subparsers.add_parser(
        "check",
        help="Exit 0 if the working copy is clean and has fetched the latest commit of the remote branch",
    )
    check_parser.add_argument("path", help="Root of the local working copy")
    check_parser.add_argument("owner", help="Repository owner")
    check_parser.add_argument("repo", help="Repository name")
    check_parser.add_argument("branch", help="Branch name")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Enter the command line interface.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    args = build_parser().parse_args(argv)

    configure_logger("DEBUG" if args.verbose else "INFO", format_string=CLI_LOG_FORMAT)

    settings = GitHubClientSettings()
    if args.api_root:
        settings = settings.model_copy(update={"api_root_url": args.api_root.rstrip("/") + "/"})
    if args.gitdata:
        settings = settings.model_copy(update={"use_gitdata_api": True})

    with GitHubClient(settings) as client:
        if args.command == "latest":
            commit_id = client.get_latest_commit_id(args.owner, args.repo, args.branch)
            if commit_id is None:
                logger.error(f"Could not determine the latest commit of {args.owner}/{args.repo}/{args.branch}")
                return 1

            print(commit_id)
            return 0

        try:
            report = RepositorySyncChecker(client).check(args.path, args.owner, args.repo, args.branch)
        except GitError as e:
            logger.error(f"Could not inspect the repository at {args.path}: {e!r}")
            return 1

        print(report.summary())
        return 0 if report.in_sync else 1


if __name__ == "__main__":
    sys.exit(main())
