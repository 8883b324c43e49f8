"""
Custom exception types used across commitcraft.

Every error carries an optional hint with the command or setting that fixes
it, so the CLI can print actionable remediation next to the message.
"""

from __future__ import annotations


class CommitCraftError(Exception):
    """Base class for all commitcraft specific errors."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class CredentialMissingError(CommitCraftError):
    """Raised when the active provider has no API key."""

    def __init__(self, env_var: str, provider: str) -> None:
        super().__init__(
            f"{env_var} not set. An API key is required for the {provider} provider.",
            hint=f"export {env_var}='your-api-key'  (or run 'commitcraft config')",
        )
        self.env_var = env_var


class ModelUnavailableError(CommitCraftError):
    """Raised when a local model is missing and cannot be pulled."""


class GenerationError(CommitCraftError):
    """Raised when a provider fails or returns unusable content."""


class SchemaViolationError(GenerationError):
    """Raised when structured output does not match {message, analysis}."""


class RepositoryMissingError(CommitCraftError):
    """Raised when the working directory is not inside a git repository."""

    def __init__(self, path: str = ".") -> None:
        super().__init__(
            f"Not a git repository: {path}",
            hint="Initialize one with: git init",
        )


class RepositoryReadError(CommitCraftError):
    """Raised when a read-only git query fails."""


class NoStagedChangesError(CommitCraftError):
    """Raised when a commit is attempted with an empty index."""

    def __init__(self, auto_stage: bool = False) -> None:
        if auto_stage:
            hint = "Nothing was left to stage. Check 'git status' for ignored or unchanged files."
        else:
            hint = "Stage files with 'git add <path>' or rerun with --all to stage everything."
        super().__init__("No staged changes to commit.", hint=hint)
        self.auto_stage = auto_stage


class IdentityMissingError(CommitCraftError):
    """Raised when git has no author identity configured."""

    def __init__(self) -> None:
        super().__init__(
            "Git author identity is not configured.",
            hint=(
                'git config --global user.name "Your Name"\n'
                '  git config --global user.email "you@example.com"'
            ),
        )


class CommitExecutionError(CommitCraftError):
    """Raised when git commit fails for any other reason."""


class ClipboardError(CommitExecutionError):
    """Raised when the clipboard cannot be written."""


class PersistenceError(CommitCraftError):
    """Raised when the configuration file cannot be written."""
