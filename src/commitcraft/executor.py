"""Side-effecting operations: staging, committing and clipboard copies."""

from __future__ import annotations

import logging
import shlex

import pyperclip
from git import Repo
from git.exc import GitCommandError

from commitcraft.errors import (
    ClipboardError,
    CommitCraftError,
    CommitExecutionError,
    IdentityMissingError,
    NoStagedChangesError,
    RepositoryMissingError,
)
from commitcraft.models import Action, ClipFormat, GeneratedCommit, Style

logger = logging.getLogger(__name__)

_IDENTITY_SIGNATURES = (
    "please tell me who you are",
    "unable to auto-detect email address",
    "empty ident name",
)
_NOTHING_SIGNATURES = ("nothing to commit", "no changes added to commit")


def _git_output(error: GitCommandError) -> str:
    return f"{error.stderr or ''}\n{error.stdout or ''}".strip()


def format_for_clipboard(commit: GeneratedCommit, clip_format: ClipFormat) -> str:
    """Render what the clipboard action copies.

    The command format quotes every message part as its own ``-m`` argument.
    """
    if clip_format is ClipFormat.COMMAND:
        args = " ".join(f"-m {shlex.quote(part)}" for part in commit.parts)
        return f"git commit {args}"
    if clip_format is ClipFormat.MESSAGE:
        return "\n".join(commit.parts)
    raise ValueError(f"Unknown clipboard format: {clip_format}")


def copy_to_clipboard(content: str) -> None:
    """Write text to the system clipboard.

    Raises:
        ClipboardError: If no clipboard mechanism is available.
    """
    try:
        pyperclip.copy(content)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(
            f"Failed to copy to clipboard: {e}",
            hint="On Linux install xclip, xsel or wl-clipboard.",
        )


class CommitExecutor:
    """Runs the write operations against a repository."""

    def __init__(self, repo: Repo, auto_stage: bool = False):
        self.repo = repo
        self.auto_stage = auto_stage

    def _error_for(self, error: GitCommandError) -> CommitCraftError:
        """Map known git failure signatures to actionable errors."""
        output = _git_output(error)
        lowered = output.lower()
        if "not a git repository" in lowered:
            return RepositoryMissingError(self.repo.working_dir)
        if any(sig in lowered for sig in _NOTHING_SIGNATURES):
            return NoStagedChangesError(self.auto_stage)
        if any(sig in lowered for sig in _IDENTITY_SIGNATURES):
            return IdentityMissingError()
        return CommitExecutionError(f"git failed: {output or error}")

    def stage(self) -> None:
        """Stage every change, including untracked files. Safe to repeat."""
        try:
            self.repo.git.add("--all")
        except GitCommandError as e:
            raise self._error_for(e) from e
        logger.debug("Staged all changes in %s", self.repo.working_dir)

    def has_staged_changes(self) -> bool:
        try:
            return self.repo.is_dirty(index=True, working_tree=False, untracked_files=False)
        except GitCommandError as e:
            raise self._error_for(e) from e

    def commit(self, commit: GeneratedCommit, style: Style | None) -> str:
        """Create a commit from a chosen candidate.

        Detailed style records title and description as two paragraphs;
        every other style records one.

        Returns:
            The short hash of the new commit.

        Raises:
            NoStagedChangesError: If the index is empty.
            IdentityMissingError: If git has no user.name/user.email.
            CommitExecutionError: For any other git failure.
        """
        if not self.has_staged_changes():
            raise NoStagedChangesError(self.auto_stage)

        if style is Style.DETAILED:
            parts = commit.parts
        else:
            parts = [commit.message]

        args: list[str] = []
        for part in parts:
            args.extend(["-m", part])

        try:
            self.repo.git.commit(*args)
            commit_hash = self.repo.git.rev_parse("HEAD", short=7)
        except GitCommandError as e:
            raise self._error_for(e) from e
        logger.debug("Created commit %s: %s", commit_hash, commit.flat)
        return commit_hash

    def copy(self, commit: GeneratedCommit, clip_format: ClipFormat) -> str:
        content = format_for_clipboard(commit, clip_format)
        copy_to_clipboard(content)
        return content

    def execute(self, commit: GeneratedCommit, action: Action, style: Style | None, clip_format: ClipFormat) -> str:
        """Run the configured post-generation action.

        Returns:
            The commit hash for ``Action.COMMIT``, the copied text for
            ``Action.CLIPBOARD``.
        """
        if action is Action.COMMIT:
            return self.commit(commit, style)
        if action is Action.CLIPBOARD:
            return self.copy(commit, clip_format)
        raise ValueError(f"Unknown action: {action}")
