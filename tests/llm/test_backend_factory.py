import unittest

from git_ai.config.loader import ConfigError, ProjectConfig
from git_ai.llm.anthropic_client import AnthropicClient
from git_ai.llm.factory import DEFAULT_PROVIDER, create_backend, limits_from_config, resolve_provider
from git_ai.llm.gemini_client import GeminiClient
from git_ai.llm.ollama_client import OllamaClient
from git_ai.llm.openai_client import OpenAIClient


class TestBackendFactory(unittest.TestCase):
    def test_selects_backend_by_provider(self) -> None:
        self.assertIsInstance(create_backend(ProjectConfig(provider="ollama")), OllamaClient)
        self.assertIsInstance(create_backend(ProjectConfig(provider="openai", api_key="k")), OpenAIClient)
        self.assertIsInstance(create_backend(ProjectConfig(provider="Gemini", api_key="k")), GeminiClient)
        self.assertIsInstance(create_backend(ProjectConfig(api_key="k")), AnthropicClient)

    def test_unknown_provider_falls_back_to_default(self) -> None:
        with self.assertLogs("git_ai.llm.factory", level="WARNING") as logs:
            self.assertEqual(resolve_provider("mystery"), DEFAULT_PROVIDER)
        self.assertIn("mystery", logs.output[0])
        self.assertIsInstance(create_backend(ProjectConfig(provider="mystery", api_key="k")), AnthropicClient)

    def test_missing_key_for_hosted_backend(self) -> None:
        for provider in ("openai", "anthropic", "gemini"):
            with self.assertRaises(ConfigError):
                create_backend(ProjectConfig(provider=provider))

    def test_passes_model_url_and_timeout(self) -> None:
        backend = create_backend(
            ProjectConfig(provider="ollama", model="qwen", url="http://h/api/generate", request_timeout=9.0)
        )
        self.assertEqual(backend.model, "qwen")
        self.assertEqual(backend.url, "http://h/api/generate")
        self.assertEqual(backend.request_timeout, 9.0)

    def test_default_model_kept_when_unset(self) -> None:
        backend = create_backend(ProjectConfig(provider="openai", api_key="k"))
        self.assertEqual(backend.model, "gpt-3.5-turbo")

    def test_limits(self) -> None:
        self.assertEqual(limits_from_config(ProjectConfig()).max_output_tokens, 4000)
        self.assertEqual(limits_from_config(ProjectConfig(max_tokens=800)).max_output_tokens, 800)


if __name__ == "__main__":
    unittest.main()
