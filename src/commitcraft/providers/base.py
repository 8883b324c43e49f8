"""Provider base class and shared behaviour."""

from __future__ import annotations

import asyncio
import logging
import os
from abc import ABC, abstractmethod

from commitcraft.composer import SYSTEM_PROMPT
from commitcraft.config import Config
from commitcraft.errors import CredentialMissingError, GenerationError
from commitcraft.models import OutputMode, Provider

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """One generation backend.

    Subclasses implement ``_complete``, returning either raw text (delimited
    providers) or a ``{message, analysis}`` payload (structured providers).
    """

    kind: Provider
    label: str
    DEFAULT_MODEL: str
    env_var: str | None = None
    output_mode: OutputMode = OutputMode.STRUCTURED
    TEMPERATURE = 0.4
    MAX_TOKENS = 1000

    def __init__(self, config: Config, api_key: str | None = None):
        self.config = config
        self.model = config.model or self.DEFAULT_MODEL
        self.timeout = config.timeout
        self._api_key_override = api_key

    @property
    def name(self) -> str:
        return f"{self.label} ({self.model})"

    def resolve_api_key(self) -> str | None:
        """Per-call override, then the configured key, then the environment."""
        if self._api_key_override:
            return self._api_key_override
        if self.config.api_key:
            return self.config.api_key
        if self.env_var:
            return os.environ.get(self.env_var) or None
        return None

    def require_api_key(self) -> str:
        api_key = self.resolve_api_key()
        if not api_key:
            raise CredentialMissingError(self.env_var or "API key", self.kind.value)
        return api_key

    async def check_availability(self) -> bool:
        """Whether a request could be sent right now."""
        return self.resolve_api_key() is not None

    async def ensure_available(self) -> None:
        """Fail before any network call when the provider cannot be used."""
        self.require_api_key()

    @abstractmethod
    async def _complete(self, system: str, prompt: str) -> object:
        """Send one request and return the raw response payload."""

    async def generate(self, prompt: str, system: str = SYSTEM_PROMPT) -> object:
        """Send one request, bounded by the configured timeout."""
        logger.debug("Requesting %s (%d prompt chars)", self.name, len(prompt))
        try:
            return await asyncio.wait_for(self._complete(system, prompt), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise GenerationError(
                f"{self.name} did not respond within {self.timeout:g}s.",
                hint="Raise 'timeout' in the configuration file or try a smaller model.",
            )
