"""Gemini (Google) provider."""

from __future__ import annotations

import google.genai as genai
import httpx
from google.genai import errors as genai_errors
from google.genai import types

from commitcraft.errors import GenerationError, SchemaViolationError
from commitcraft.models import CommitSuggestion, OutputMode, Provider
from commitcraft.providers.base import BaseProvider


class GeminiProvider(BaseProvider):
    """Gemini provider using response schemas for structured output."""

    kind = Provider.GOOGLE
    label = "Gemini"
    DEFAULT_MODEL = "gemini-2.0-flash"
    env_var = "GOOGLE_API_KEY"
    output_mode = OutputMode.STRUCTURED

    def _client(self) -> genai.Client:
        return genai.Client(api_key=self.require_api_key())

    async def _complete(self, system: str, prompt: str) -> object:
        try:
            async with self._client().aio as client:
                response = await client.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=types.GenerateContentConfig(
                        system_instruction=system,
                        temperature=self.TEMPERATURE,
                        max_output_tokens=self.MAX_TOKENS,
                        response_mime_type="application/json",
                        response_schema=CommitSuggestion,
                    ),
                )
        except genai_errors.APIError as e:
            raise GenerationError(f"Gemini API error: {e}")
        # The SDK lets transport failures through unwrapped
        except httpx.HTTPError as e:
            raise GenerationError(
                f"Gemini request failed: {e}",
                hint="Check your network connection and try again.",
            )

        if isinstance(response.parsed, CommitSuggestion):
            return response.parsed
        # Let the composer report what is wrong with the payload
        if response.text:
            return response.text
        raise SchemaViolationError("Gemini returned an empty response.")
