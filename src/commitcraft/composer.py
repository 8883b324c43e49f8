"""Prompt construction and response parsing for commit message generation."""

from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError

from commitcraft import COMMIT_TYPES
from commitcraft.errors import GenerationError, SchemaViolationError
from commitcraft.models import (
    CommitSuggestion,
    GeneratedCommit,
    OutputMode,
    RepositorySnapshot,
    Style,
)

logger = logging.getLogger(__name__)

MAX_DIFF_CHARS = 16000
DEFAULT_MAX_LENGTH = 72

SYSTEM_PROMPT = """You are a semantic git commit message generator.
You read git status, branch names, recent history and diffs, and describe the PRIMARY purpose of a change.
The diff shows WHAT changed; the message says what the commit does."""

_BASE_RULES = """Be extremely concise. Sacrifice grammar for the sake of concision.
Use imperative mood ("add" not "added").
Consider the branch context when choosing the message type.
No period at the end of a line."""

_TYPES_LIST = "\n".join(f"  {name}: {desc}" for name, desc in COMMIT_TYPES.items())

STYLE_RULES = {
    Style.CONVENTIONAL: f"""Follow Conventional Commits format: type(scope): subject
Keep the subject under 50 chars.
Types:
{_TYPES_LIST}""",
    Style.SIMPLE: """Do NOT use any prefix like fix:, feat:, etc. Just write the message directly.
Keep it under 50 chars.""",
    Style.DETAILED: f"""Follow Conventional Commits format: type(scope): subject
Write exactly two lines: first line is the short title (under 50 chars),
second line is a brief description (under 100 chars). No blank line between them.
Types:
{_TYPES_LIST}""",
}

EXPLORATORY_RULES = f"""Explore different ways to describe this change.
Each message is a single line in Conventional Commits format: type(scope): subject
Types:
{_TYPES_LIST}"""

# Appended to the prompt of each concurrent request in multi-suggestion mode
PROMPT_VARIANTS = [
    "Focus on the single most important change.",
    "Emphasize the effect of the change for users of the code.",
    "Prefer the shortest precise wording.",
]

_THINK_RE = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
_BLOCK_RE = re.compile(r"<(analysis|message)>(.*?)</\1>", re.DOTALL | re.IGNORECASE)
_FENCE_RE = re.compile(r"^```[\w-]*\n?|\n?```$")


def _format_rules(style: Style | None, mode: OutputMode) -> str:
    if mode is OutputMode.STRUCTURED:
        rules = (
            "Respond with two fields: `message`, the commit message, and `analysis`, "
            "one or two sentences explaining the choice."
        )
        if style is Style.DETAILED:
            rules += " Put the title and the description in `message`, separated by a newline."
        return rules

    if style is None:
        return (
            "First explain your reasoning inside <analysis></analysis> tags.\n"
            "Then write three alternative commit messages, each inside its own "
            "<message></message> tags."
        )
    rules = (
        "First explain your reasoning inside <analysis></analysis> tags.\n"
        "Then write the commit message inside <message></message> tags."
    )
    if style is Style.DETAILED:
        rules += "\nThe message holds the title line followed by the description line."
    return rules


def _truncate_diff(diff: str) -> str:
    if len(diff) <= MAX_DIFF_CHARS:
        return diff
    return diff[:MAX_DIFF_CHARS] + "\n... [truncated]"


def build_prompt(
    snapshot: RepositorySnapshot,
    style: Style | None,
    mode: OutputMode = OutputMode.DELIMITED,
    variant: str | None = None,
) -> str:
    """Interpolate repository signals into the instruction template.

    Args:
        snapshot: Repository status, branch, log and diff.
        style: Message style, or None for the exploratory three-message template.
        mode: Output shape the provider will be asked for.
        variant: Optional extra guidance, used to vary concurrent requests.

    Returns:
        The full user prompt. Identical inputs give identical prompts.
    """
    rules = STYLE_RULES[style] if style is not None else EXPLORATORY_RULES
    sections = [
        _BASE_RULES,
        rules,
        _format_rules(style, mode),
        f"Current branch: {snapshot.branch}",
        f"Git status:\n{snapshot.status}",
        f"Recent commits:\n{snapshot.recent_log or '(no commits yet)'}",
        f"Diff:\n{_truncate_diff(snapshot.diff)}",
    ]
    if variant:
        sections.append(f"Additional guidance: {variant}")
    return "\n\n".join(sections)


def truncate_subject(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Cut a line to ``max_length`` chars on a word boundary."""
    if len(text) <= max_length:
        return text
    cut = text[:max_length]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,;:-")


def _strip_wrapping(text: str) -> str:
    text = _FENCE_RE.sub("", text.strip()).strip()
    while len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        text = text[1:-1].strip()
    return text


def format_message(
    text: str,
    style: Style | None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> tuple[str, str | None]:
    """Apply the single-line rules to raw message text.

    Returns:
        ``(message, description)``. ``description`` is only set for the
        detailed style, where the second logical line is kept apart.

    Raises:
        GenerationError: If nothing usable is left, or a detailed message
            has no description line.
    """
    lines = [line.strip() for line in _strip_wrapping(text).splitlines() if line.strip()]
    if not lines:
        raise GenerationError("Generated commit message is empty.")

    if style is Style.DETAILED:
        if len(lines) < 2:
            raise GenerationError(
                "Detailed style expects a title line and a description line.",
                hint=f"Got: {lines[0][:60]}",
            )
        return truncate_subject(lines[0], max_length), " ".join(lines[1:])
    if style is None:
        return truncate_subject(" ".join(lines), max_length), None
    return truncate_subject(lines[0], max_length), None


def _to_commit(text: str, analysis: str, style: Style | None, max_length: int) -> GeneratedCommit:
    message, description = format_message(text, style, max_length)
    return GeneratedCommit(message=message, analysis=analysis.strip(), description=description)


def _parse_structured(
    raw: object, style: Style | None, max_length: int
) -> list[GeneratedCommit]:
    try:
        if isinstance(raw, CommitSuggestion):
            suggestion = raw
        elif isinstance(raw, (str, bytes)):
            suggestion = CommitSuggestion.model_validate_json(raw)
        else:
            suggestion = CommitSuggestion.model_validate(raw)
    except (ValidationError, json.JSONDecodeError) as e:
        raise SchemaViolationError(f"Response does not match {{message, analysis}}: {e}")

    if not suggestion.message.strip():
        raise GenerationError("Provider returned an empty commit message.")
    return [_to_commit(suggestion.message, suggestion.analysis, style, max_length)]


def _parse_delimited(raw: str, style: Style | None, max_length: int) -> list[GeneratedCommit]:
    text = _THINK_RE.sub("", raw)
    analysis = ""
    commits: list[GeneratedCommit] = []
    for match in _BLOCK_RE.finditer(text):
        tag, body = match.group(1).lower(), match.group(2)
        if tag == "analysis":
            analysis = body
        elif body.strip():
            commits.append(_to_commit(body, analysis, style, max_length))

    if not commits:
        preview = raw.strip()[:200]
        raise GenerationError(
            "No <message> blocks found in the model response.",
            hint=f"Response started with: {preview}" if preview else None,
        )
    return commits


def parse_response(
    raw: object,
    mode: OutputMode,
    style: Style | None = Style.CONVENTIONAL,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> list[GeneratedCommit]:
    """Turn a raw provider response into formatted candidates.

    Structured responses hold one ``{message, analysis}`` object. Delimited
    responses may hold several message blocks; each takes the analysis
    block that precedes it.
    """
    if mode is OutputMode.STRUCTURED:
        commits = _parse_structured(raw, style, max_length)
    else:
        commits = _parse_delimited(str(raw), style, max_length)
    logger.debug("Parsed %d candidate(s) from %s response", len(commits), mode.value)
    return commits
