import pytest

from git_ai.config.loader import ENV_KEYS


BACKEND_URL_VARS = ["OLLAMA_URL", "OPENAI_URL", "ANTHROPIC_URL", "GEMINI_URL"]


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Remove configuration variables of the developer's shell.

    Tests expect configuration to come only from what they set up
    themselves, so any provider, key or URL exported in the environment
    is hidden for the duration of each test.
    """
    for var in list(ENV_KEYS) + BACKEND_URL_VARS:
        monkeypatch.delenv(var, raising=False)
    yield
