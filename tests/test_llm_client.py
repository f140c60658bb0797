"""
Tests for the provider REST clients, with HTTP calls patched out.
"""
import unittest
from unittest.mock import Mock, patch

import requests

from sparks_onboarding.config import Config
from sparks_onboarding.infrastructure.llm import (
    LLMError, OpenAIChatClient, AnthropicMessagesClient, VertexRestClient, create_llm_client
)

POST = "sparks_onboarding.infrastructure.llm.client.requests.post"


def http_response(status_code=200, payload=None, text=""):
    resp = Mock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


class TestOpenAIChatClient(unittest.TestCase):

    def setUp(self):
        self.client = OpenAIChatClient("sk-test", model="gpt-4o", timeout=5)

    @patch(POST)
    def test_request_and_parse(self, mock_post):
        mock_post.return_value = http_response(payload={
            "choices": [{"message": {"role": "assistant", "content": "Hi there!"}}]
        })

        text = self.client.generate_content("Say hi", system_text="Be nice", context='{"x": 1}',
                                            temperature=0.5, max_output_tokens=50)

        self.assertEqual(text, "Hi there!")
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://api.openai.com/v1/chat/completions")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-test")
        self.assertEqual(kwargs["timeout"], 5)
        body = kwargs["json"]
        self.assertEqual(body["model"], "gpt-4o")
        self.assertEqual(body["max_tokens"], 50)
        self.assertEqual([m["role"] for m in body["messages"]], ["system", "system", "user"])
        self.assertEqual(body["messages"][1]["content"], 'Context: {"x": 1}')
        self.assertEqual(body["messages"][2]["content"], "Say hi")

    @patch(POST)
    def test_http_error(self, mock_post):
        mock_post.return_value = http_response(status_code=401, text="invalid key")
        with self.assertRaises(LLMError) as ctx:
            self.client.generate_content("Say hi")
        self.assertIn("401", str(ctx.exception))

    @patch(POST)
    def test_error_payload(self, mock_post):
        mock_post.return_value = http_response(payload={"error": {"message": "quota"}})
        with self.assertRaises(LLMError):
            self.client.generate_content("Say hi")

    @patch(POST)
    def test_transport_failure(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("no route")
        with self.assertRaises(LLMError):
            self.client.generate_content("Say hi")

    @patch(POST)
    def test_non_json_body(self, mock_post):
        mock_post.return_value = http_response(payload=ValueError("not json"), text="<html>")
        with self.assertRaises(LLMError):
            self.client.generate_content("Say hi")

    @patch(POST)
    def test_unexpected_shape(self, mock_post):
        mock_post.return_value = http_response(payload={"choices": []})
        with self.assertRaises(LLMError):
            self.client.generate_content("Say hi")


class TestAnthropicMessagesClient(unittest.TestCase):

    @patch(POST)
    def test_request_and_parse(self, mock_post):
        mock_post.return_value = http_response(payload={
            "content": [{"type": "text", "text": "Hello!"}]
        })
        client = AnthropicMessagesClient("ak-test", model="claude-3-sonnet")

        text = client.generate_content("Say hi", system_text="Be nice", context="ctx")

        self.assertEqual(text, "Hello!")
        kwargs = mock_post.call_args[1]
        self.assertEqual(kwargs["headers"]["x-api-key"], "ak-test")
        self.assertEqual(kwargs["headers"]["anthropic-version"], "2023-06-01")
        self.assertEqual(kwargs["json"]["system"], "Be nice")
        self.assertEqual(kwargs["json"]["messages"][0]["content"], "Context: ctx\n\nSay hi")

    @patch(POST)
    def test_no_text_block(self, mock_post):
        mock_post.return_value = http_response(payload={"content": []})
        with self.assertRaises(LLMError):
            AnthropicMessagesClient("ak-test").generate_content("Say hi")


class TestVertexRestClient(unittest.TestCase):

    def setUp(self):
        self.client = VertexRestClient(project="demo-project", model="gemini-2.5-flash-lite")
        self.client._token = "token-123"

    @patch(POST)
    def test_request_and_parse(self, mock_post):
        mock_post.return_value = http_response(payload={
            "candidates": [{"content": {"parts": [{"text": "Howdy"}]}}]
        })

        text = self.client.generate_content("Say hi", system_text="Be nice")

        self.assertEqual(text, "Howdy")
        args, kwargs = mock_post.call_args
        self.assertTrue(args[0].endswith(
            "projects/demo-project/locations/us-central1/publishers/google/models/"
            "gemini-2.5-flash-lite:generateContent"
        ))
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer token-123")
        self.assertEqual(kwargs["json"]["systemInstruction"], {"parts": [{"text": "Be nice"}]})

    @patch(POST)
    def test_unexpected_shape(self, mock_post):
        mock_post.return_value = http_response(payload={"candidates": []})
        with self.assertRaises(LLMError):
            self.client.generate_content("Say hi")

    def test_auth_failure_becomes_llm_error(self):
        client = VertexRestClient(project="demo-project", credentials_json="/nonexistent/creds.json")
        with self.assertRaises(LLMError):
            client.generate_content("Say hi")


class TestCreateLLMClient(unittest.TestCase):

    def test_unconfigured(self):
        self.assertIsNone(create_llm_client(Config()))
        self.assertIsNone(create_llm_client(Config(ai_model="gemini-2.5-flash-lite", api_key="x")))

    def test_routing(self):
        self.assertIsInstance(create_llm_client(Config(api_key="k", ai_model="gpt-3.5-turbo")),
                              OpenAIChatClient)
        self.assertIsInstance(create_llm_client(Config(api_key="k", ai_model="claude-3-sonnet")),
                              AnthropicMessagesClient)
        client = create_llm_client(Config(ai_model="gemini-2.5-flash-lite",
                                          google_cloud_project="demo-project"))
        self.assertIsInstance(client, VertexRestClient)
        self.assertEqual(client.project, "demo-project")

    def test_unsupported_model(self):
        with self.assertRaises(ValueError):
            create_llm_client(Config(api_key="k", ai_model="llama-3"))


if __name__ == "__main__":
    unittest.main()
