"""Unit tests for interaction module."""

import io

import pytest
from rich.console import Console

from commitcraft.errors import GenerationError, NoStagedChangesError
from commitcraft.interaction import InteractionController, RichPrompter, State
from commitcraft.models import Action, GeneratedCommit, Style

CANDIDATES = [
    GeneratedCommit(message="fix(auth): handle null token", analysis="Guards a None token."),
    GeneratedCommit(message="fix(auth): guard missing token", analysis="Same, other words."),
]


class ScriptedPrompter:
    """Prompter answering from fixed values and recording questions."""

    def __init__(self, select=0, edit=False, edits=(), confirm=True):
        self._select = select
        self._edit = edit
        self._edits = list(edits)
        self._confirm = confirm
        self.asked: list[str] = []

    def select(self, candidates):
        self.asked.append("select")
        return self._select

    def wants_edit(self):
        self.asked.append("wants_edit")
        return self._edit

    def edit(self, label, current):
        self.asked.append(f"edit:{label}")
        return self._edits.pop(0)

    def confirm(self, question):
        self.asked.append(question)
        return self._confirm


class Recorder:
    def __init__(self, result="abc1234", error=None):
        self.result = result
        self.error = error
        self.calls: list[GeneratedCommit] = []

    def __call__(self, commit):
        self.calls.append(commit)
        if self.error:
            raise self.error
        return self.result


class TestQuickMode:
    """Tests for quick mode."""

    def test_commits_first_candidate_without_prompts(self):
        execute = Recorder()
        controller = InteractionController(None, quick=True)

        outcome = controller.run(CANDIDATES, execute)

        assert outcome.state == State.COMMITTING
        assert outcome.commit == CANDIDATES[0]
        assert outcome.result == "abc1234"
        assert execute.calls == [CANDIDATES[0]]
        assert controller.history == [State.AWAITING_CANDIDATES, State.COMMITTING]

    def test_prompter_never_consulted(self):
        prompter = ScriptedPrompter()
        InteractionController(prompter, quick=True).run(CANDIDATES, Recorder())
        assert prompter.asked == []

    def test_prompter_required_otherwise(self):
        with pytest.raises(ValueError):
            InteractionController(None)


class TestInteractiveFlow:
    """Tests for the present, edit, confirm flow."""

    def test_select_and_confirm(self):
        prompter = ScriptedPrompter(select=1)
        execute = Recorder()

        outcome = InteractionController(prompter).run(CANDIDATES, execute)

        assert outcome.state == State.COMMITTING
        assert execute.calls == [CANDIDATES[1]]
        assert prompter.asked == ["select", "wants_edit", "Commit with this message?"]

    def test_history(self):
        controller = InteractionController(ScriptedPrompter(edit=True, edits=["fix: edited"]))
        controller.run(CANDIDATES, Recorder())

        assert controller.history == [
            State.AWAITING_CANDIDATES,
            State.PRESENTING,
            State.EDITING,
            State.CONFIRMING,
            State.COMMITTING,
        ]

    def test_edit_replaces_message(self):
        execute = Recorder()
        prompter = ScriptedPrompter(edit=True, edits=['  "fix(auth): reject empty tokens"  '])

        outcome = InteractionController(prompter).run(CANDIDATES, execute)

        assert outcome.commit.message == "fix(auth): reject empty tokens"
        assert outcome.commit.analysis == CANDIDATES[0].analysis
        assert execute.calls[0].message == "fix(auth): reject empty tokens"

    def test_empty_edit_keeps_original(self):
        execute = Recorder()
        prompter = ScriptedPrompter(edit=True, edits=["   "])

        InteractionController(prompter).run(CANDIDATES, execute)

        assert execute.calls == [CANDIDATES[0]]

    def test_edit_detailed_description(self):
        detailed = GeneratedCommit(message="feat: add cache", description="Keep parsed configs")
        prompter = ScriptedPrompter(edit=True, edits=["feat: add config cache", "Reuse parsed configs"])

        outcome = InteractionController(prompter, style=Style.DETAILED).run([detailed], Recorder())

        assert outcome.commit.parts == ["feat: add config cache", "Reuse parsed configs"]
        assert "edit:Description" in prompter.asked

    def test_edit_length_ceiling(self):
        prompter = ScriptedPrompter(edit=True, edits=["fix: " + "very long words " * 10])

        outcome = InteractionController(prompter, max_length=40).run(CANDIDATES, Recorder())

        assert len(outcome.commit.message) <= 40

    def test_decline_cancels(self):
        execute = Recorder()
        controller = InteractionController(ScriptedPrompter(confirm=False))

        outcome = controller.run(CANDIDATES, execute)

        assert outcome.state == State.CANCELLED
        assert outcome.commit == CANDIDATES[0]
        assert execute.calls == []
        assert controller.history[-1] == State.CANCELLED

    def test_clipboard_question(self):
        prompter = ScriptedPrompter()
        InteractionController(prompter, action=Action.CLIPBOARD).run(CANDIDATES, Recorder())
        assert prompter.asked[-1] == "Copy this message to the clipboard?"


class TestFailures:
    """Tests for failure transitions."""

    def test_no_candidates(self):
        controller = InteractionController(ScriptedPrompter())

        with pytest.raises(GenerationError):
            controller.run([], Recorder())
        assert controller.state == State.FAILED

    def test_execute_failure(self):
        controller = InteractionController(ScriptedPrompter())
        execute = Recorder(error=NoStagedChangesError())

        with pytest.raises(NoStagedChangesError):
            controller.run(CANDIDATES, execute)
        assert controller.state == State.FAILED
        assert controller.history[-2:] == [State.COMMITTING, State.FAILED]


class TestRichPrompter:
    """Tests for RichPrompter reading answers from a stream."""

    def _prompter(self, answers: str) -> tuple[RichPrompter, io.StringIO]:
        output = io.StringIO()
        console = Console(file=output, force_terminal=False, width=120)
        return RichPrompter(console, stream=io.StringIO(answers)), output

    def test_single_candidate_not_asked(self):
        prompter, output = self._prompter("")
        assert prompter.select(CANDIDATES[:1]) == 0
        assert "fix(auth): handle null token" in output.getvalue()

    def test_select_by_number(self):
        prompter, output = self._prompter("2\n")
        assert prompter.select(CANDIDATES) == 1
        assert "1)" in output.getvalue()
        assert "fix(auth): guard missing token" in output.getvalue()

    def test_invalid_choice_asks_again(self):
        prompter, _ = self._prompter("7\n1\n")
        assert prompter.select(CANDIDATES) == 0

    def test_confirm(self):
        prompter, _ = self._prompter("n\ny\n")
        assert prompter.wants_edit() is False
        assert prompter.confirm("Commit with this message?") is True

    def test_edit(self):
        prompter, _ = self._prompter("fix(auth): reject empty tokens\n")
        assert prompter.edit("Commit message", "fix: old") == "fix(auth): reject empty tokens"
