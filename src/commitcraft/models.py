"""Data models for commitcraft."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Provider(str, Enum):
    """Backends able to generate commit messages."""

    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROQ = "groq"
    OLLAMA = "ollama"


class Style(str, Enum):
    """Shape of the generated message."""

    CONVENTIONAL = "conventional"  # fix: add validation
    SIMPLE = "simple"  # add validation
    DETAILED = "detailed"  # title + description


class Action(str, Enum):
    """What happens once a message has been chosen."""

    COMMIT = "commit"
    CLIPBOARD = "clipboard"


class ClipFormat(str, Enum):
    """What ends up on the clipboard for the clipboard action."""

    MESSAGE = "message"  # fix: add validation
    COMMAND = "command"  # git commit -m 'fix: add validation'


class Scope(str, Enum):
    """Which changes a repository query looks at."""

    ALL = "all"
    STAGED = "staged"


class OutputMode(str, Enum):
    """How a provider shapes its response."""

    STRUCTURED = "structured"
    DELIMITED = "delimited"


class CommitSuggestion(BaseModel):
    """Exact response shape requested from schema-constrained providers."""

    message: str = Field(description="The commit message")
    analysis: str = Field(description="Short reasoning behind the message")


class GeneratedCommit(BaseModel):
    """A candidate commit message with its rationale."""

    message: str = Field(description="Single-line commit message (the title for detailed style)")
    analysis: str = Field(default="", description="Free-form explanation, may be empty")
    description: str | None = Field(
        default=None, description="Second logical line, only set for detailed style"
    )

    @property
    def parts(self) -> list[str]:
        """Message parts as recorded by git, one paragraph each."""
        if self.description:
            return [self.message, self.description]
        return [self.message]

    @property
    def flat(self) -> str:
        """The message rejoined into a single flat line."""
        return " ".join(self.parts)


class RepositorySnapshot(BaseModel):
    """Read-only repository signals used to build a prompt."""

    status: str = Field(description="Output of git status")
    branch: str = Field(description="Current branch name")
    recent_log: str = Field(description="Recent commits, one per line")
    diff: str = Field(description="Diff of the pending changes")


class CommitOptions(BaseModel):
    """Per-invocation request assembled from the command line."""

    staged: bool = False
    interactive: bool = False
    auto_stage: bool = False
    quick: bool = False
    provider: Provider | None = None
    model: str | None = None

    @property
    def scope(self) -> Scope:
        # Auto-staging puts everything in the index first
        if self.staged or self.auto_stage or self.quick:
            return Scope.STAGED
        return Scope.ALL
