import json
import unittest
from types import SimpleNamespace
from unittest.mock import patch

import requests

from git_ai.llm.anthropic_client import AnthropicClient
from git_ai.llm.base import GenerationLimits, LLMError, extract_text, strip_thinking_tags
from git_ai.llm.gemini_client import GeminiClient
from git_ai.llm.ollama_client import OllamaClient
from git_ai.llm.openai_client import OpenAIClient


LIMITS = GenerationLimits(max_output_tokens=4000)


class DummyResponse(SimpleNamespace):
    def json(self):
        return json.loads(self.text)


class RecordingPost:
    def __init__(self, body, status_code=200):
        self.text = body if isinstance(body, str) else json.dumps(body)
        self.status_code = status_code
        self.calls = []

    def __call__(self, url, *_args, **kwargs):
        self.calls.append(SimpleNamespace(url=url, **kwargs))
        return DummyResponse(status_code=self.status_code, text=self.text)


class TestOllamaClient(unittest.TestCase):
    def test_generate_success(self) -> None:
        post = RecordingPost({"response": "[]"})
        with patch("git_ai.llm.base.requests.post", post):
            result = OllamaClient(model="llama3").generate("prompt", LIMITS)
        self.assertEqual(result, "[]")
        call = post.calls[0]
        self.assertEqual(call.url, "http://localhost:11434/api/generate")
        self.assertEqual(call.json["options"], {"num_predict": 4000})
        self.assertFalse(call.json["stream"])
        self.assertIsNone(call.headers)
        self.assertIsNone(call.timeout)

    def test_url_from_environment(self) -> None:
        post = RecordingPost({"response": "ok"})
        with patch.dict("os.environ", {"OLLAMA_URL": "http://gpu:11434/api/generate"}):
            with patch("git_ai.llm.base.requests.post", post):
                OllamaClient().generate("prompt", LIMITS)
        self.assertEqual(post.calls[0].url, "http://gpu:11434/api/generate")

    def test_strips_thinking(self) -> None:
        post = RecordingPost({"response": "<think>hmm</think>\n[1]"})
        with patch("git_ai.llm.base.requests.post", post):
            self.assertEqual(OllamaClient().generate("prompt", LIMITS), "[1]")


class TestHostedClients(unittest.TestCase):
    def test_openai_uses_bearer_header(self) -> None:
        post = RecordingPost({"choices": [{"message": {"content": "text"}}]})
        with patch("git_ai.llm.base.requests.post", post):
            result = OpenAIClient(api_key="sk-1").generate("prompt", LIMITS)
        self.assertEqual(result, "text")
        call = post.calls[0]
        self.assertEqual(call.headers["Authorization"], "Bearer sk-1")
        self.assertEqual(call.json["max_tokens"], 4000)
        self.assertEqual(call.json["messages"], [{"role": "user", "content": "prompt"}])

    def test_anthropic_uses_api_key_header(self) -> None:
        post = RecordingPost({"content": [{"type": "text", "text": "text"}]})
        with patch("git_ai.llm.base.requests.post", post):
            result = AnthropicClient(api_key="ak-1", request_timeout=5).generate("prompt", LIMITS)
        self.assertEqual(result, "text")
        call = post.calls[0]
        self.assertEqual(call.url, "https://api.anthropic.com/v1/messages")
        self.assertEqual(call.headers["x-api-key"], "ak-1")
        self.assertEqual(call.headers["anthropic-version"], "2023-06-01")
        self.assertEqual(call.timeout, 5)

    def test_gemini_uses_query_parameter(self) -> None:
        post = RecordingPost({"candidates": [{"content": {"parts": [{"text": "text"}]}}]})
        with patch("git_ai.llm.base.requests.post", post):
            result = GeminiClient(api_key="g-1", model="gemini-pro").generate("prompt", LIMITS)
        self.assertEqual(result, "text")
        call = post.calls[0]
        self.assertTrue(call.url.endswith("/models/gemini-pro:generateContent"))
        self.assertEqual(call.params, {"key": "g-1"})
        self.assertIsNone(call.headers)
        self.assertEqual(call.json["generationConfig"], {"maxOutputTokens": 4000})

    def test_unexpected_shape_is_empty_output(self) -> None:
        post = RecordingPost({"choices": []})
        with patch("git_ai.llm.base.requests.post", post):
            self.assertEqual(OpenAIClient(api_key="k").generate("prompt", LIMITS), "")


class TestErrorPolicy(unittest.TestCase):
    def test_error_status_surfaces_code_and_body(self) -> None:
        post = RecordingPost("rate limited", status_code=429)
        with patch("git_ai.llm.base.requests.post", post):
            with self.assertRaises(LLMError) as ctx:
                AnthropicClient(api_key="k").generate("prompt", LIMITS)
        self.assertIn("429", str(ctx.exception))
        self.assertIn("rate limited", str(ctx.exception))

    def test_body_excerpt_is_bounded(self) -> None:
        post = RecordingPost("x" * 5000, status_code=500)
        with patch("git_ai.llm.base.requests.post", post):
            with self.assertRaises(LLMError) as ctx:
                OllamaClient().generate("prompt", LIMITS)
        self.assertLess(len(str(ctx.exception)), 600)

    def test_transport_failure(self) -> None:
        with patch("git_ai.llm.base.requests.post", side_effect=requests.ConnectionError("refused")):
            with self.assertRaises(LLMError):
                OllamaClient().generate("prompt", LIMITS)

    def test_invalid_json_body(self) -> None:
        post = RecordingPost("not json")
        with patch("git_ai.llm.base.requests.post", post):
            with self.assertRaises(LLMError):
                OpenAIClient(api_key="k").generate("prompt", LIMITS)


class TestHelpers(unittest.TestCase):
    def test_extract_text(self) -> None:
        data = {"a": [{"b": "value"}]}
        self.assertEqual(extract_text(data, ["a", 0, "b"]), "value")
        self.assertEqual(extract_text(data, ["a", 1, "b"]), "")
        self.assertEqual(extract_text(data, ["x"]), "")
        self.assertEqual(extract_text({"a": 3}, ["a"]), "")
        self.assertEqual(extract_text([], ["a"]), "")

    def test_strip_thinking_tags(self) -> None:
        self.assertEqual(strip_thinking_tags("<think>reasoning...</think>Answer"), "Answer")
        self.assertEqual(strip_thinking_tags("<Thinking>a\nb</Thinking>\n\nReal"), "Real")
        self.assertEqual(strip_thinking_tags("plain"), "plain")


if __name__ == "__main__":
    unittest.main()
