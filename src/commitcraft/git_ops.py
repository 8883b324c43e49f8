"""Read-only git queries used to build a generation prompt."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from commitcraft.errors import RepositoryMissingError, RepositoryReadError
from commitcraft.models import RepositorySnapshot, Scope

logger = logging.getLogger(__name__)

RECENT_LOG_COUNT = 10


def get_repo(path: str | Path = ".") -> Repo:
    """Get the git repository at the given path.

    Args:
        path: Any path inside the repository. Defaults to current directory.

    Returns:
        The git Repo object.

    Raises:
        RepositoryMissingError: If the path is not inside a git repository.
    """
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise RepositoryMissingError(str(path))


def _has_commits(repo: Repo) -> bool:
    return repo.head.is_valid()


def _read_error(query: str, error: GitCommandError) -> RepositoryReadError:
    detail = (error.stderr or str(error)).strip()
    return RepositoryReadError(f"git {query} failed: {detail}")


def has_pending_changes(repo: Repo, scope: Scope = Scope.ALL) -> bool:
    """Fast check for changes to tracked files.

    Args:
        repo: The git Repo object.
        scope: ``Scope.STAGED`` only looks at the index, ``Scope.ALL`` also
            looks at the working tree. Untracked files are never counted.

    Raises:
        RepositoryReadError: If git cannot answer.
    """
    try:
        return repo.is_dirty(
            index=True,
            working_tree=scope is Scope.ALL,
            untracked_files=False,
        )
    except GitCommandError as e:
        raise _read_error("diff", e)


def get_status(repo: Repo) -> str:
    """Return the output of ``git status``."""
    try:
        return repo.git.status()
    except GitCommandError as e:
        raise _read_error("status", e)


def get_current_branch(repo: Repo) -> str:
    """Return the current branch name, ``HEAD`` when detached."""
    try:
        return repo.git.branch("--show-current").strip() or "HEAD"
    except GitCommandError as e:
        raise _read_error("branch", e)


def get_recent_log(repo: Repo, n: int = RECENT_LOG_COUNT) -> str:
    """Return the last ``n`` commits in one-line format.

    A repository without commits has an empty log.
    """
    if not _has_commits(repo):
        return ""
    try:
        return repo.git.log("-n", str(n), "--oneline")
    except GitCommandError as e:
        raise _read_error("log", e)


def get_diff(repo: Repo, scope: Scope = Scope.ALL) -> str:
    """Return the diff of pending changes.

    ``Scope.ALL`` diffs the working tree against HEAD, ``Scope.STAGED`` diffs
    the index. Before the first commit only the index can be diffed.
    """
    try:
        if scope is Scope.STAGED or not _has_commits(repo):
            return repo.git.diff("--staged")
        return repo.git.diff("HEAD")
    except GitCommandError as e:
        raise _read_error("diff", e)


async def collect_snapshot(repo: Repo, scope: Scope = Scope.ALL) -> RepositorySnapshot:
    """Run the four read queries concurrently.

    Any failing query aborts the whole batch; no partial snapshot is built.
    """
    status, branch, recent_log, diff = await asyncio.gather(
        asyncio.to_thread(get_status, repo),
        asyncio.to_thread(get_current_branch, repo),
        asyncio.to_thread(get_recent_log, repo),
        asyncio.to_thread(get_diff, repo, scope),
    )
    logger.debug("Collected snapshot on %s (%d diff chars)", branch, len(diff))
    return RepositorySnapshot(status=status, branch=branch, recent_log=recent_log, diff=diff)
