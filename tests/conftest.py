"""Shared fixtures for commitcraft tests."""

from typing import Callable

import pytest
from git import Repo

from commitcraft.config import Config
from commitcraft.models import OutputMode, Provider
from commitcraft.providers import BaseProvider

PROVIDER_ENV_VARS = ("ANTHROPIC_API_KEY", "GOOGLE_API_KEY", "GROQ_API_KEY")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path_factory, monkeypatch):
    """Keep the real config file and API keys out of every test."""
    config_home = tmp_path_factory.mktemp("xdg")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return config_home


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository for testing."""
    repo = Repo.init(tmp_path)

    # Configure git user for commits
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")

    return repo


@pytest.fixture
def repo_with_commit(temp_repo, tmp_path):
    """Create a repo with an initial commit."""
    (tmp_path / "initial.txt").write_text("initial content\n")
    temp_repo.index.add(["initial.txt"])
    temp_repo.index.commit("Initial commit")

    return temp_repo


class FakeProvider(BaseProvider):
    """Provider answering from a callable instead of the network."""

    kind = Provider.GROQ
    label = "Fake"
    DEFAULT_MODEL = "fake-model"
    output_mode = OutputMode.STRUCTURED

    def __init__(self, config: Config, responder: Callable[[str], object]):
        super().__init__(config)
        self.responder = responder
        self.prompts: list[str] = []

    async def ensure_available(self) -> None:
        return None

    async def _complete(self, system: str, prompt: str) -> object:
        self.prompts.append(prompt)
        result = self.responder(prompt)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def fake_provider():
    """Factory for providers that answer from a callable."""

    def make(responder: Callable[[str], object], config: Config | None = None) -> FakeProvider:
        return FakeProvider(config or Config(), responder)

    return make
