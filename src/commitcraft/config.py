"""Configuration management for commitcraft."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError, field_serializer, field_validator

from commitcraft.errors import PersistenceError
from commitcraft.models import Action, ClipFormat, Provider, Style

# Try to import tomllib (Python 3.11+) or fall back to tomli
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found]

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"

# Stored value for the exploratory template, which has no Style member
EXPLORATORY = "exploratory"

# Quick mode always talks to a fast hosted model
QUICK_PROVIDER = Provider.GROQ
QUICK_MODEL = "llama-3.1-8b-instant"


class Config(BaseModel):
    """Application configuration."""

    provider: Provider = Field(default=Provider.GOOGLE, description="Backend used for generation")
    model: str | None = Field(default=None, description="Model name, provider default when unset")
    api_key: str | None = Field(default=None, description="Overrides the provider's env variable")
    host: str = Field(default="http://localhost", description="Ollama host")
    port: int = Field(default=11434, ge=1, le=65535, description="Ollama port")
    style: Style | None = Field(
        default=Style.CONVENTIONAL, description="Message style, None for the exploratory template"
    )
    action: Action = Field(default=Action.COMMIT, description="Post-generation action")
    clip_format: ClipFormat = Field(default=ClipFormat.MESSAGE, description="Clipboard format")
    timeout: float = Field(default=60.0, gt=0, description="Deadline in seconds per remote call")
    max_length: int = Field(default=72, gt=0, description="Ceiling for the subject line")

    @field_validator("style", mode="before")
    @classmethod
    def _read_exploratory(cls, value: object) -> object:
        return None if value == EXPLORATORY else value

    @field_serializer("style", when_used="json")
    def _write_exploratory(self, style: Style | None) -> str:
        return style.value if style is not None else EXPLORATORY

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the config file."""
        # Check for XDG config directory first (Linux/macOS)
        if xdg_config := os.getenv("XDG_CONFIG_HOME"):
            return Path(xdg_config) / "commitcraft" / CONFIG_FILENAME
        # Fall back to ~/.config on Unix or APPDATA on Windows
        if os.name == "nt":
            base = Path(os.getenv("APPDATA", Path.home()))
        else:
            base = Path.home() / ".config"
        return base / "commitcraft" / CONFIG_FILENAME

    def apply_overrides(self, provider: Provider | None = None, model: str | None = None) -> Config:
        """Return a copy with per-invocation overrides applied.

        A stored model or API key belongs to the stored provider, so both are
        dropped when the provider changes.
        """
        update: dict[str, object] = {}
        if provider is not None and provider != self.provider:
            update.update(provider=provider, model=None, api_key=None)
        if model:
            update["model"] = model
        return self.model_copy(update=update) if update else self


def quick_config() -> Config:
    """Configuration used by quick mode, independent of the stored file."""
    return Config(
        provider=QUICK_PROVIDER,
        model=QUICK_MODEL,
        style=Style.CONVENTIONAL,
        action=Action.COMMIT,
    )


def is_first_run() -> bool:
    """True until a configuration file has been written."""
    return not Config.get_config_path().exists()


def _read_config_data(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            file_config = tomllib.load(f)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.warning("Could not read %s, using defaults: %s", path, e)
        return {}
    # Get settings from [default] section
    data = file_config.get("default", {})
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a [default] table", path)
        return {}
    return data


def load_config() -> Config:
    """Load configuration from the config file, falling back to defaults.

    Never raises: invalid fields are dropped one by one so the rest of the
    file still applies.
    """
    config_path = Config.get_config_path()
    if not config_path.exists():
        return Config()

    data = _read_config_data(config_path)
    try:
        return Config(**data)
    except ValidationError as e:
        bad_fields = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning("Ignoring invalid config fields: %s", ", ".join(sorted(map(str, bad_fields))))
        cleaned = {k: v for k, v in data.items() if k not in bad_fields}
        try:
            return Config(**cleaned)
        except ValidationError:
            return Config()


def save_config(config: Config) -> Path:
    """Write the explicitly set fields of a configuration to disk.

    Raises:
        PersistenceError: If the directory or file cannot be written.
    """
    config_path = Config.get_config_path()
    # TOML has no null, unset optional fields are simply left out
    data = {
        key: value
        for key, value in config.model_dump(mode="json", exclude_unset=True).items()
        if value is not None
    }
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "wb") as f:
            tomli_w.dump({"default": data}, f)
    except OSError as e:
        raise PersistenceError(
            f"Failed to save configuration to {config_path}: {e}",
            hint="Check the permissions of the configuration directory.",
        ) from e
    logger.debug("Saved configuration to %s", config_path)
    return config_path
