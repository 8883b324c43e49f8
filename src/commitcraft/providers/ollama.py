"""Ollama provider for local models."""

from __future__ import annotations

import logging

import httpx

from commitcraft.config import Config
from commitcraft.errors import GenerationError, ModelUnavailableError
from commitcraft.models import OutputMode, Provider
from commitcraft.providers.base import BaseProvider

logger = logging.getLogger(__name__)

TAGS_TIMEOUT = 5.0


class OllamaProvider(BaseProvider):
    """Ollama provider. Requires: ollama serve

    Free-text completion, so answers come back as delimited blocks.
    """

    kind = Provider.OLLAMA
    label = "Ollama"
    DEFAULT_MODEL = "deepseek-r1:latest"
    output_mode = OutputMode.DELIMITED

    def __init__(
        self,
        config: Config,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(config, api_key)
        self.base_url = f"{config.host.rstrip('/')}:{config.port}"
        self._transport = transport

    def _http(self, timeout: float | None) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=self._transport)

    async def check_availability(self) -> bool:
        """Check that the server is up and the model is already pulled."""
        try:
            async with self._http(TAGS_TIMEOUT) as client:
                response = await client.get("/api/tags")
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Ollama not reachable at %s: %s", self.base_url, e)
            return False

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            logger.debug("Unexpected /api/tags payload from %s: %r", self.base_url, data)
            return False
        names = {m.get("name", "") for m in models if isinstance(m, dict)}
        return self.model in names or f"{self.model}:latest" in names

    async def ensure_available(self) -> None:
        """Pull the model when the server does not have it yet."""
        if await self.check_availability():
            return

        logger.info("Model %s not found, pulling from %s", self.model, self.base_url)
        hint = f"Check that 'ollama serve' is running at {self.base_url}, or run: ollama pull {self.model}"
        try:
            async with self._http(None) as client:
                response = await client.post(
                    "/api/pull",
                    json={"model": self.model, "name": self.model, "stream": False},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ModelUnavailableError(f"Failed to pull model {self.model}: {e}", hint=hint)

        if isinstance(data, dict) and data.get("error"):
            raise ModelUnavailableError(f"Failed to pull model {self.model}: {data['error']}", hint=hint)
        logger.info("Pulled %s", self.model)

    async def _complete(self, system: str, prompt: str) -> object:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "system": system,
            "stream": False,
            "keep_alive": "10m",
            "options": {
                "temperature": self.TEMPERATURE,
                "num_predict": self.MAX_TOKENS,
            },
        }
        try:
            async with self._http(self.timeout) as client:
                response = await client.post("/api/generate", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise GenerationError(
                    f"Model '{self.model}' not found.", hint=f"Run: ollama pull {self.model}"
                )
            raise GenerationError(f"Ollama error ({e.response.status_code}): {e.response.text[:200]}")
        except httpx.ConnectError:
            raise GenerationError("Ollama not running.", hint="Start it with: ollama serve")
        except httpx.TimeoutException:
            raise GenerationError(
                f"Request timed out after {self.timeout:g}s.",
                hint="Try a smaller model: commitcraft -m llama3.2:3b",
            )
        except httpx.HTTPError as e:
            raise GenerationError(f"Ollama request failed: {e}")
        except ValueError:
            raise GenerationError("Invalid response from Ollama.")

        if not isinstance(data, dict):
            raise GenerationError("Invalid response from Ollama.")
        return data.get("response", "")
