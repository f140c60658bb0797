"""
REST clients for the text-completion providers used during onboarding.

Model names route to providers the same way the admin panel offers them:
``gpt-*`` to OpenAI, ``claude-*`` to Anthropic and ``gemini-*`` to Vertex AI.
"""
import json
import logging
from typing import Optional, Dict, Any, List

import requests
import google.auth
import google.auth.exceptions
import google.auth.transport.requests
from google.oauth2 import service_account

from ...config import (
    Config, OPENAI_CHAT_URL, ANTHROPIC_MESSAGES_URL, ANTHROPIC_VERSION,
    VERTEX_LOCATION, LLM_TIMEOUT, LLM_TEMPERATURE, MAX_OUTPUT_TOKENS
)

logger = logging.getLogger("llm_client")


class LLMError(RuntimeError):
    """Raised when a provider call fails or returns an error payload."""


class BaseChatClient:
    """Shared request plumbing for the provider clients."""

    provider = "base"

    def __init__(self, model: str, timeout: int = LLM_TIMEOUT):
        self.model = model
        self.timeout = timeout

    def generate_content(self,
                         prompt_text: str,
                         system_text: Optional[str] = None,
                         context: Optional[str] = None,
                         temperature: float = LLM_TEMPERATURE,
                         max_output_tokens: int = MAX_OUTPUT_TOKENS) -> str:
        raise NotImplementedError

    def _post(self, url: str, headers: Dict[str, str], body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = requests.post(url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise LLMError(f"{self.provider} request failed: {e}") from e

        if resp.status_code >= 400:
            raise LLMError(f"{self.provider} error {resp.status_code}: {resp.text}")

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError(f"{self.provider} returned non-JSON body: {resp.text[:200]}") from e

        if isinstance(data, dict) and data.get("error"):
            raise LLMError(f"{self.provider} error payload: {data['error']}")
        return data


class OpenAIChatClient(BaseChatClient):
    """Client for the OpenAI chat completions endpoint."""

    provider = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o",
                 timeout: int = LLM_TIMEOUT, url: str = OPENAI_CHAT_URL):
        super().__init__(model, timeout)
        self.api_key = api_key
        self.url = url

    def generate_content(self,
                         prompt_text: str,
                         system_text: Optional[str] = None,
                         context: Optional[str] = None,
                         temperature: float = LLM_TEMPERATURE,
                         max_output_tokens: int = MAX_OUTPUT_TOKENS) -> str:
        messages: List[Dict[str, str]] = []
        if system_text:
            messages.append({"role": "system", "content": system_text})
        if context:
            messages.append({"role": "system", "content": f"Context: {context}"})
        messages.append({"role": "user", "content": prompt_text})

        body = {
            "model": self.model,
            "messages": messages,
            "temperature": float(temperature),
            "max_tokens": int(max_output_tokens),
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        data = self._post(self.url, headers, body)

        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMError(f"Unexpected OpenAI response shape: {json.dumps(data)[:200]}") from e


class AnthropicMessagesClient(BaseChatClient):
    """Client for the Anthropic messages endpoint."""

    provider = "anthropic"

    def __init__(self, api_key: str, model: str = "claude-3-sonnet",
                 timeout: int = LLM_TIMEOUT, url: str = ANTHROPIC_MESSAGES_URL):
        super().__init__(model, timeout)
        self.api_key = api_key
        self.url = url

    def generate_content(self,
                         prompt_text: str,
                         system_text: Optional[str] = None,
                         context: Optional[str] = None,
                         temperature: float = LLM_TEMPERATURE,
                         max_output_tokens: int = MAX_OUTPUT_TOKENS) -> str:
        # Anthropic takes a single system string, so context rides in the user turn
        user_text = f"Context: {context}\n\n{prompt_text}" if context else prompt_text
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": user_text}],
            "temperature": float(temperature),
            "max_tokens": int(max_output_tokens),
        }
        if system_text:
            body["system"] = system_text

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        data = self._post(self.url, headers, body)

        for block in data.get("content", []) if isinstance(data, dict) else []:
            if isinstance(block, dict) and isinstance(block.get("text"), str):
                return block["text"]
        raise LLMError(f"Unexpected Anthropic response shape: {json.dumps(data)[:200]}")


class VertexRestClient(BaseChatClient):
    """REST-based client for Vertex AI Gemini models."""

    provider = "vertex"

    def __init__(self,
                 project: str,
                 model: str = "gemini-2.5-flash-lite",
                 location: str = VERTEX_LOCATION,
                 credentials_json: Optional[str] = None,
                 timeout: int = LLM_TIMEOUT):
        super().__init__(model, timeout)
        self.project = project
        self.location = location
        self.credentials_json = credentials_json
        self.base_url = f"https://{self.location}-aiplatform.googleapis.com/v1"
        self.model_resource = f"projects/{self.project}/locations/{self.location}/publishers/google/models/{self.model}"
        self._token = None

    def _refresh_token(self):
        """Refresh the OAuth token for API calls."""
        if self.credentials_json:
            creds = service_account.Credentials.from_service_account_file(
                self.credentials_json,
                scopes=["https://www.googleapis.com/auth/cloud-platform"],
            )
        else:
            creds, _ = google.auth.default(scopes=["https://www.googleapis.com/auth/cloud-platform"])

        auth_req = google.auth.transport.requests.Request()
        creds.refresh(auth_req)
        self._token = creds.token

    def _ensure_token(self):
        if not self._token:
            try:
                self._refresh_token()
            except (google.auth.exceptions.GoogleAuthError, OSError) as e:
                raise LLMError(f"Vertex authentication failed: {e}") from e

    def generate_content(self,
                         prompt_text: str,
                         system_text: Optional[str] = None,
                         context: Optional[str] = None,
                         temperature: float = LLM_TEMPERATURE,
                         max_output_tokens: int = MAX_OUTPUT_TOKENS) -> str:
        self._ensure_token()
        url = f"{self.base_url}/{self.model_resource}:generateContent"

        user_text = f"Context: {context}\n\n{prompt_text}" if context else prompt_text
        body: Dict[str, Any] = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": user_text}],
                }
            ],
            "generationConfig": {
                "temperature": float(temperature),
                "maxOutputTokens": int(max_output_tokens),
            },
        }
        if system_text:
            body["systemInstruction"] = {"parts": [{"text": system_text}]}

        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        return self._parse_response_text(self._post(url, headers, body))

    def _parse_response_text(self, resp_json: Dict[str, Any]) -> str:
        """
        Parse response JSON to extract text content.
        Vertex schema: candidates[0].content.parts[*].text
        """
        cands = resp_json.get("candidates", [])
        if cands:
            content = cands[0].get("content", {})
            for p in content.get("parts", []) or []:
                if isinstance(p, dict) and isinstance(p.get("text"), str):
                    return p["text"]
            if isinstance(content.get("text"), str):
                return content["text"]

        if isinstance(resp_json.get("text"), str):
            return resp_json["text"]

        raise LLMError(f"Unexpected Vertex response shape: {json.dumps(resp_json, separators=(',', ':'))[:200]}")


def create_llm_client(config: Config) -> Optional[BaseChatClient]:
    """
    Build the provider client for the configured model.

    Returns:
        A client, or None when no credentials are configured

    Raises:
        ValueError: If the model family is not supported
    """
    model = config.ai_model
    if not config.is_llm_configured:
        logger.info("No credentials configured for %s; running in local mode", model)
        return None

    if "gpt" in model:
        return OpenAIChatClient(config.api_key, model=model, timeout=config.llm_timeout)
    if "claude" in model:
        return AnthropicMessagesClient(config.api_key, model=model, timeout=config.llm_timeout)
    if "gemini" in model:
        return VertexRestClient(
            project=config.google_cloud_project,
            model=model,
            credentials_json=config.google_application_credentials,
            timeout=config.llm_timeout,
        )
    raise ValueError(f"AI model '{model}' is not supported; choose a gpt, claude or gemini model")
