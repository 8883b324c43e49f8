"""Claude (Anthropic) provider."""

from __future__ import annotations

from anthropic import APIError, AsyncAnthropic, AuthenticationError

from commitcraft.errors import GenerationError, SchemaViolationError
from commitcraft.models import CommitSuggestion, OutputMode, Provider
from commitcraft.providers.base import BaseProvider

TOOL_NAME = "record_commit_message"


class ClaudeProvider(BaseProvider):
    """Claude API provider. Structured output through a forced tool call."""

    kind = Provider.ANTHROPIC
    label = "Claude"
    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    env_var = "ANTHROPIC_API_KEY"
    output_mode = OutputMode.STRUCTURED

    def _client(self) -> AsyncAnthropic:
        return AsyncAnthropic(api_key=self.require_api_key())

    async def _complete(self, system: str, prompt: str) -> object:
        try:
            async with self._client() as client:
                response = await client.messages.create(
                    model=self.model,
                    max_tokens=self.MAX_TOKENS,
                    temperature=self.TEMPERATURE,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                    tools=[
                        {
                            "name": TOOL_NAME,
                            "description": "Record the proposed commit message and the reasoning behind it.",
                            "input_schema": CommitSuggestion.model_json_schema(),
                        }
                    ],
                    tool_choice={"type": "tool", "name": TOOL_NAME},
                )
        except AuthenticationError:
            raise GenerationError(
                "Invalid API key for Claude.",
                hint=f"Check {self.env_var} or the key stored with 'commitcraft config'.",
            )
        except APIError as e:
            raise GenerationError(f"Claude API error: {e.message}")

        for block in response.content:
            if block.type == "tool_use" and block.name == TOOL_NAME:
                return block.input
        raise SchemaViolationError("Claude did not return a structured commit message.")
