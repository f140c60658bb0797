"""
Service classes that connect the onboarding engine to its collaborators.
"""
import logging
from typing import Optional

from .prompts import OnboardingPrompts
from ..infrastructure.llm import BaseChatClient, LLMError
from ..config import LLM_TEMPERATURE, MAX_OUTPUT_TOKENS

logger = logging.getLogger("services")


class AIConnectorService:
    """Text-in/text-out access to the configured completion provider."""

    def __init__(self, llm_client: Optional[BaseChatClient] = None,
                 temperature: float = LLM_TEMPERATURE,
                 max_output_tokens: int = MAX_OUTPUT_TOKENS):
        self.llm_client = llm_client
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    @property
    def is_configured(self) -> bool:
        return self.llm_client is not None

    def generate(self, prompt: str, context_json: Optional[str] = None) -> str:
        """
        Generate a reply for a prompt plus a JSON context blob.

        Returns:
            The provider's text, stripped

        Raises:
            LLMError: If no provider is configured or the call fails
        """
        if self.llm_client is None:
            raise LLMError("AI service not configured; add an API key to enable it")

        text = self.llm_client.generate_content(
            prompt,
            system_text=OnboardingPrompts.system_prompt(),
            context=context_json,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        logger.debug("Completion text: %r", text)
        return (text or "").strip()


class VoiceService:
    """Speech I/O seen by the engine: say something, get a final transcript back."""

    def speak(self, text: str) -> None:
        raise NotImplementedError

    def listen(self) -> Optional[str]:
        """
        Block until the user finishes an utterance.

        Returns:
            Final transcript ("" on silence), or None once the user has left
        """
        raise NotImplementedError

    def cleanup(self) -> None:
        pass


class ConsoleVoiceService(VoiceService):
    """Terminal stand-in for speech: prints what would be spoken, reads typed answers."""

    def __init__(self, prefix: str = "🤖", prompt: str = "🎤 You: "):
        self.prefix = prefix
        self.prompt = prompt

    def speak(self, text: str) -> None:
        print(f"{self.prefix} {text}")

    def listen(self) -> Optional[str]:
        try:
            return input(self.prompt).strip()
        except EOFError:
            return None
