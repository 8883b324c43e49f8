"""Provider gateway: one generate capability over every backend."""

from __future__ import annotations

import asyncio
import logging
from itertools import cycle, islice

from commitcraft.composer import PROMPT_VARIANTS, build_prompt, parse_response
from commitcraft.config import Config
from commitcraft.errors import CommitCraftError, GenerationError
from commitcraft.models import GeneratedCommit, RepositorySnapshot
from commitcraft.providers import BaseProvider, get_provider

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 3


async def generate(
    prompt: str,
    config: Config,
    provider: BaseProvider | None = None,
    api_key: str | None = None,
) -> list[GeneratedCommit]:
    """Send a prompt to the configured provider and parse the answer.

    Raises:
        CredentialMissingError: Before any request when no key resolves.
        GenerationError: When the call fails or nothing usable comes back.
    """
    provider = provider or get_provider(config, api_key=api_key)
    raw = await provider.generate(prompt)
    return parse_response(raw, provider.output_mode, config.style, config.max_length)


async def generate_for_snapshot(
    snapshot: RepositorySnapshot,
    config: Config,
    provider: BaseProvider,
    variant: str | None = None,
) -> list[GeneratedCommit]:
    prompt = build_prompt(snapshot, config.style, provider.output_mode, variant)
    return await generate(prompt, config, provider)


async def generate_candidates(
    snapshot: RepositorySnapshot,
    config: Config,
    provider: BaseProvider,
    count: int = 1,
) -> list[GeneratedCommit]:
    """Generate candidates, fanning out to ``count`` concurrent requests.

    Each concurrent request gets a differently worded prompt. Failed
    requests are logged and skipped; only when every request fails is the
    whole operation an error. Candidates keep request order.
    """
    if count <= 1:
        return await generate_for_snapshot(snapshot, config, provider)

    variants = list(islice(cycle(PROMPT_VARIANTS), count))
    results = await asyncio.gather(
        *(generate_for_snapshot(snapshot, config, provider, v) for v in variants),
        return_exceptions=True,
    )

    candidates: list[GeneratedCommit] = []
    failures: list[CommitCraftError] = []
    for result in results:
        if isinstance(result, CommitCraftError):
            logger.warning("Suggestion request failed: %s", result.message)
            failures.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            candidates.extend(result)

    if not candidates:
        raise GenerationError(
            f"All {count} generation requests failed.",
            hint=failures[0].message if failures else None,
        )
    return candidates
