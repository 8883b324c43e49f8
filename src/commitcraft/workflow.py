"""End-to-end generation pipeline for one invocation.

Inspector -> composer -> provider -> composer -> interaction -> executor.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractContextManager, nullcontext
from enum import Enum
from typing import Callable

from git import Repo
from pydantic import BaseModel

from commitcraft.config import Config, is_first_run, load_config, quick_config, save_config
from commitcraft.executor import CommitExecutor
from commitcraft.gateway import SUGGESTION_COUNT, generate_candidates
from commitcraft.git_ops import collect_snapshot, get_repo, has_pending_changes
from commitcraft.interaction import InteractionController, Prompter, State
from commitcraft.models import Action, CommitOptions, GeneratedCommit
from commitcraft.providers import BaseProvider, get_provider

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    NO_CHANGES = "no_changes"
    NO_DIFF = "no_diff"
    COMMITTED = "committed"
    COPIED = "copied"
    CANCELLED = "cancelled"


class RunResult(BaseModel):
    """What one invocation ended up doing."""

    status: RunStatus
    commit: GeneratedCommit | None = None
    detail: str | None = None
    provider: str | None = None


def resolve_config(
    options: CommitOptions,
    setup: Callable[[Config], Config] | None = None,
) -> Config:
    """Configuration in effect for this invocation.

    Quick mode ignores the stored file. Otherwise a first run goes through
    ``setup`` and the answers are saved before anything else happens.
    """
    if options.quick:
        config = quick_config()
    elif is_first_run() and setup is not None:
        config = setup(load_config())
        save_config(config)
    else:
        config = load_config()
    return config.apply_overrides(options.provider, options.model)


async def _generate(
    repo: Repo,
    options: CommitOptions,
    config: Config,
    provider: BaseProvider,
) -> list[GeneratedCommit] | None:
    await provider.ensure_available()
    snapshot = await collect_snapshot(repo, options.scope)
    if not snapshot.diff.strip():
        return None

    count = SUGGESTION_COUNT if options.interactive and not options.quick else 1
    logger.info("Generating %d suggestion(s) with %s", count, provider.name)
    return await generate_candidates(snapshot, config, provider, count=count)


def run_commit(
    options: CommitOptions,
    prompter: Prompter | None = None,
    setup: Callable[[Config], Config] | None = None,
    repo: Repo | None = None,
    progress: Callable[[str], AbstractContextManager] | None = None,
) -> RunResult:
    """Run the whole pipeline once.

    Args:
        options: Flags for this invocation.
        prompter: Terminal questions; unused in quick mode.
        setup: First-run wizard returning the configuration to save.
        repo: Repository to work on, found from the working directory if None.
        progress: Wraps the remote calls, e.g. a spinner taking a status text.

    Raises:
        CommitCraftError: Any fatal error along the way.
    """
    config = resolve_config(options, setup)
    repo = repo or get_repo()
    auto_stage = options.auto_stage or options.quick
    executor = CommitExecutor(repo, auto_stage=auto_stage)

    if auto_stage:
        executor.stage()

    if not has_pending_changes(repo, options.scope):
        return RunResult(status=RunStatus.NO_CHANGES)

    provider = get_provider(config)
    spinner = progress(f"Generating with {provider.name}...") if progress else nullcontext()
    with spinner:
        candidates = asyncio.run(_generate(repo, options, config, provider))
    if candidates is None:
        return RunResult(status=RunStatus.NO_DIFF)

    controller = InteractionController(
        prompter,
        quick=options.quick,
        style=config.style,
        action=config.action,
        max_length=config.max_length,
    )
    outcome = controller.run(
        candidates,
        lambda commit: executor.execute(commit, config.action, config.style, config.clip_format),
    )

    if outcome.state is State.CANCELLED:
        return RunResult(status=RunStatus.CANCELLED, commit=outcome.commit, provider=provider.name)
    status = RunStatus.COMMITTED if config.action is Action.COMMIT else RunStatus.COPIED
    return RunResult(status=status, commit=outcome.commit, detail=outcome.result, provider=provider.name)
