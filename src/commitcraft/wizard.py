"""Interactive setup of the stored preferences."""

from __future__ import annotations

from typing import TextIO, TypeVar

from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from commitcraft.config import Config
from commitcraft.models import Action, ClipFormat, Provider, Style
from commitcraft.providers import PROVIDERS, default_model

T = TypeVar("T")

PROVIDER_LABELS = {
    Provider.ANTHROPIC: "Anthropic (Claude)",
    Provider.GOOGLE: "Google (Gemini)",
    Provider.GROQ: "Groq (fast hosted models)",
    Provider.OLLAMA: "Ollama (local)",
}

MODEL_CHOICES = {
    Provider.ANTHROPIC: ["claude-sonnet-4-20250514", "claude-opus-4-20250514", "claude-3-5-haiku-latest"],
    Provider.GOOGLE: ["gemini-2.0-flash", "gemini-2.5-flash", "gemini-2.5-pro"],
    Provider.GROQ: ["llama-3.1-8b-instant", "llama-3.3-70b-versatile"],
}

STYLE_LABELS: dict[Style | None, str] = {
    Style.CONVENTIONAL: "Conventional  (fix: add validation)",
    Style.SIMPLE: "Simple        (add validation)",
    Style.DETAILED: "Detailed      (title + description)",
    # No fixed style, three different messages to pick from
    None: "Exploratory   (three different options)",
}

ACTION_LABELS = {
    Action.COMMIT: "Run commit  (git commit after confirmation)",
    Action.CLIPBOARD: "Copy only   (copy to clipboard)",
}

CLIP_FORMAT_LABELS = {
    ClipFormat.MESSAGE: "Message only  (fix: add validation)",
    ClipFormat.COMMAND: "Command       (git commit -m 'fix: add validation')",
}


class SetupWizard:
    """Asks for provider, model, style and action, one numbered menu at a time."""

    def __init__(self, console: Console, stream: TextIO | None = None):
        self.console = console
        self.stream = stream

    def _choose(self, title: str, options: list[tuple[T, str]], current: T | None = None) -> T:
        self.console.print(f"\n[bold]{title}[/bold]")
        for i, (_, label) in enumerate(options, start=1):
            self.console.print(f"  {i}) {label}")
        values = [value for value, _ in options]
        default = values.index(current) + 1 if current in values else 1
        choice = IntPrompt.ask(
            f"Choose (1-{len(options)})",
            choices=[str(i) for i in range(1, len(options) + 1)],
            default=default,
            console=self.console,
            stream=self.stream,
        )
        return values[choice - 1]

    def _ask(self, question: str, default: str = "", show_default: bool = True) -> str:
        answer = Prompt.ask(
            question,
            default=default,
            show_default=show_default,
            console=self.console,
            stream=self.stream,
        )
        return answer.strip()

    def ask_provider(self, current: Provider | None = None) -> Provider:
        return self._choose("Provider:", list(PROVIDER_LABELS.items()), current)

    def ask_model(self, provider: Provider, current: str | None = None) -> str:
        if provider is Provider.OLLAMA:
            return self._ask("Ollama model name", current or default_model(provider))
        choices = MODEL_CHOICES[provider]
        if current and current not in choices:
            choices = [current, *choices]
        return self._choose("Model:", [(m, m) for m in choices], current or default_model(provider))

    def ask_api_key(self, provider: Provider, current: str | None = None) -> str | None:
        env_var = PROVIDERS[provider].env_var
        answer = self._ask(
            f"API key (leave empty to use {env_var})",
            default=current or "",
            show_default=False,
        )
        return answer or None

    def ask_ollama_server(self, config: Config) -> tuple[str, int]:
        host = self._ask("Ollama host", config.host)
        while True:
            port = IntPrompt.ask("Ollama port", default=config.port, console=self.console, stream=self.stream)
            if 1 <= port <= 65535:
                return host, port
            self.console.print("[red]Please enter a valid port number (1-65535)[/red]")

    def ask_style(self, current: Style | None = None) -> Style | None:
        return self._choose("Commit message style:", list(STYLE_LABELS.items()), current)

    def ask_action(self, current: Action | None = None) -> Action:
        return self._choose("After generating the commit message:", list(ACTION_LABELS.items()), current)

    def ask_clip_format(self, current: ClipFormat | None = None) -> ClipFormat:
        return self._choose("Clipboard copy format:", list(CLIP_FORMAT_LABELS.items()), current)

    def run(self, current: Config) -> Config:
        """Walk through every setting and return the new configuration."""
        provider = self.ask_provider(current.provider)
        same_provider = provider == current.provider
        answers: dict[str, object] = {
            "provider": provider,
            "model": self.ask_model(provider, current.model if same_provider else None),
        }

        if provider is Provider.OLLAMA:
            answers["host"], answers["port"] = self.ask_ollama_server(current)
            answers["api_key"] = None
        else:
            answers["api_key"] = self.ask_api_key(provider, current.api_key if same_provider else None)

        answers["style"] = self.ask_style(current.style)
        answers["action"] = self.ask_action(current.action)
        if answers["action"] is Action.CLIPBOARD:
            answers["clip_format"] = self.ask_clip_format(current.clip_format)

        return current.model_copy(update=answers)
