"""Groq provider, reached through its OpenAI-compatible endpoint."""

from __future__ import annotations

from openai import APIError, AsyncOpenAI, AuthenticationError

from commitcraft.errors import GenerationError, SchemaViolationError
from commitcraft.models import OutputMode, Provider
from commitcraft.providers.base import BaseProvider

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

# JSON mode requires the word "JSON" somewhere in the conversation
JSON_INSTRUCTION = 'Respond with a JSON object with exactly the keys "message" and "analysis".'


class GroqProvider(BaseProvider):
    """Groq provider. Fast hosted models, JSON-object output."""

    kind = Provider.GROQ
    label = "Groq"
    DEFAULT_MODEL = "llama-3.1-8b-instant"
    env_var = "GROQ_API_KEY"
    output_mode = OutputMode.STRUCTURED

    def _client(self) -> AsyncOpenAI:
        return AsyncOpenAI(api_key=self.require_api_key(), base_url=GROQ_BASE_URL)

    async def _complete(self, system: str, prompt: str) -> object:
        try:
            async with self._client() as client:
                response = await client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": f"{system}\n{JSON_INSTRUCTION}"},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.TEMPERATURE,
                    max_tokens=self.MAX_TOKENS,
                    response_format={"type": "json_object"},
                )
        except AuthenticationError:
            raise GenerationError(
                "Invalid API key for Groq.",
                hint=f"Check {self.env_var} or the key stored with 'commitcraft config'.",
            )
        except APIError as e:
            raise GenerationError(f"Groq API error: {e.message}")

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise SchemaViolationError("Groq returned an empty response.")
        return content
