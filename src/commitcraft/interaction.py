"""Candidate presentation, editing and confirmation."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Protocol, TextIO

from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt

from commitcraft.composer import DEFAULT_MAX_LENGTH, format_message
from commitcraft.errors import CommitCraftError, GenerationError
from commitcraft.models import Action, GeneratedCommit, Style

logger = logging.getLogger(__name__)


class State(str, Enum):
    AWAITING_CANDIDATES = "awaiting_candidates"
    PRESENTING = "presenting"
    EDITING = "editing"
    CONFIRMING = "confirming"
    COMMITTING = "committing"
    CANCELLED = "cancelled"
    FAILED = "failed"


class Outcome(BaseModel):
    """Where the controller stopped, and with which message."""

    state: State
    commit: GeneratedCommit | None = None
    result: str | None = None


class Prompter(Protocol):
    """Terminal questions asked by the controller."""

    def select(self, candidates: list[GeneratedCommit]) -> int: ...

    def wants_edit(self) -> bool: ...

    def edit(self, label: str, current: str) -> str: ...

    def confirm(self, question: str) -> bool: ...


class RichPrompter:
    """Prompter backed by rich prompts."""

    def __init__(self, console: Console, stream: TextIO | None = None):
        self.console = console
        self.stream = stream

    def _show(self, index: int | None, commit: GeneratedCommit) -> None:
        prefix = f"  [bold]{index})[/bold] " if index is not None else "  "
        self.console.print(f"{prefix}[yellow]{escape(commit.message)}[/yellow]")
        if commit.description:
            self.console.print(f"     {escape(commit.description)}")
        if commit.analysis:
            self.console.print(f"     [dim]{escape(commit.analysis)}[/dim]")

    def select(self, candidates: list[GeneratedCommit]) -> int:
        if len(candidates) == 1:
            self.console.print("\n[bold]Generated commit message:[/bold]")
            self._show(None, candidates[0])
            return 0

        self.console.print("\n[bold]Generated commit messages:[/bold]")
        for i, commit in enumerate(candidates, start=1):
            self._show(i, commit)
        choice = IntPrompt.ask(
            f"\nSelect a message (1-{len(candidates)})",
            choices=[str(i) for i in range(1, len(candidates) + 1)],
            default=1,
            console=self.console,
            stream=self.stream,
        )
        return choice - 1

    def wants_edit(self) -> bool:
        return Confirm.ask("Edit this message?", default=False, console=self.console, stream=self.stream)

    def edit(self, label: str, current: str) -> str:
        return Prompt.ask(label, default=current, console=self.console, stream=self.stream)

    def confirm(self, question: str) -> bool:
        return Confirm.ask(question, default=True, console=self.console, stream=self.stream)


class InteractionController:
    """Drives a set of candidates to a commit, a copy, or a cancellation.

    Quick mode never asks anything: the first candidate goes straight to
    ``COMMITTING``.
    """

    def __init__(
        self,
        prompter: Prompter | None,
        *,
        quick: bool = False,
        style: Style | None = Style.CONVENTIONAL,
        action: Action = Action.COMMIT,
        max_length: int = DEFAULT_MAX_LENGTH,
    ):
        if prompter is None and not quick:
            raise ValueError("A prompter is required outside quick mode")
        self.prompter = prompter
        self.quick = quick
        self.style = style
        self.action = action
        self.max_length = max_length
        self.state = State.AWAITING_CANDIDATES
        self.history: list[State] = [self.state]

    def _transition(self, state: State) -> None:
        logger.debug("Interaction %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    @property
    def confirmation_question(self) -> str:
        if self.action is Action.CLIPBOARD:
            return "Copy this message to the clipboard?"
        return "Commit with this message?"

    def _edit(self, commit: GeneratedCommit) -> GeneratedCommit:
        edited = self.prompter.edit("Commit message", commit.message)
        update: dict[str, str] = {}
        if edited.strip():
            update["message"] = format_message(edited, None, self.max_length)[0]
        if commit.description is not None:
            description = self.prompter.edit("Description", commit.description)
            if description.strip():
                update["description"] = " ".join(description.split())
        return commit.model_copy(update=update) if update else commit

    def _commit(self, commit: GeneratedCommit, execute: Callable[[GeneratedCommit], str]) -> Outcome:
        self._transition(State.COMMITTING)
        try:
            result = execute(commit)
        except CommitCraftError:
            self._transition(State.FAILED)
            raise
        return Outcome(state=State.COMMITTING, commit=commit, result=result)

    def run(
        self,
        candidates: list[GeneratedCommit],
        execute: Callable[[GeneratedCommit], str],
    ) -> Outcome:
        """Walk the state machine for one invocation.

        Args:
            candidates: Generated candidates, in generation order.
            execute: Performs the post-generation action for the chosen
                candidate and returns a short result (hash or copied text).

        Raises:
            GenerationError: If there is nothing to present.
            CommitCraftError: Whatever ``execute`` raised.
        """
        if not candidates:
            self._transition(State.FAILED)
            raise GenerationError("No commit message candidates were generated.")

        if self.quick:
            return self._commit(candidates[0], execute)

        self._transition(State.PRESENTING)
        chosen = candidates[self.prompter.select(candidates)]

        if self.prompter.wants_edit():
            self._transition(State.EDITING)
            chosen = self._edit(chosen)

        self._transition(State.CONFIRMING)
        if not self.prompter.confirm(self.confirmation_question):
            self._transition(State.CANCELLED)
            return Outcome(state=State.CANCELLED, commit=chosen)

        return self._commit(chosen, execute)
