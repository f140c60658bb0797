"""Text-completion provider clients."""

from .client import (
    LLMError, BaseChatClient, OpenAIChatClient, AnthropicMessagesClient,
    VertexRestClient, create_llm_client
)

__all__ = [
    "LLMError", "BaseChatClient", "OpenAIChatClient", "AnthropicMessagesClient",
    "VertexRestClient", "create_llm_client"
]
