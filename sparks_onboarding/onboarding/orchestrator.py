"""
Onboarding orchestrator: drives one session over a voice service.
"""
import time
import random
import logging
from typing import Callable, Dict, Optional

from .models import OnboardingResult
from .schemas import CompletionReason, OnboardingQuestion, ResponseModality
from .services import AIConnectorService, ConsoleVoiceService, VoiceService
from .decision_engine import ResponseEngine, PromptEngine
from .prompts import OnboardingPrompts
from .session import OnboardingSession
from .events import (
    OnboardingEventBus, EventLogger, OnboardingMetrics, ErrorOccurredEvent
)
from ..infrastructure.llm import BaseChatClient, create_llm_client
from ..config import Config

logger = logging.getLogger("orchestrator")


class OnboardingOrchestrator:
    """
    Runs an onboarding conversation end to end.

    The orchestrator owns the presentation loop (speak, listen, speak reply)
    and the decision to complete; all conversation state lives in the
    OnboardingSession it creates for each run.
    """

    def __init__(self,
                 config: Optional[Config] = None,
                 voice_service: Optional[VoiceService] = None,
                 llm_client: Optional[BaseChatClient] = None,
                 clock: Callable[[], float] = time.monotonic,
                 rng: Optional[random.Random] = None,
                 event_bus: Optional[OnboardingEventBus] = None):

        self.config = config or Config()
        self.log_file = self.config.log_file
        self.clock = clock
        self.rng = rng or random.Random()

        # Initialize event system
        self.event_bus = event_bus or OnboardingEventBus()
        self.event_logger = EventLogger()
        self.metrics = OnboardingMetrics()
        self.event_bus.subscribe_all(self.event_logger.handle_event)
        self.event_bus.subscribe_all(self.metrics.handle_event)

        self.voice_service = voice_service or ConsoleVoiceService()

        # Text completion is optional; templates cover for it
        if llm_client is None:
            llm_client = create_llm_client(self.config)
        self.llm_client = llm_client
        self.connector = AIConnectorService(llm_client)
        self.response_engine = ResponseEngine(self.connector, PromptEngine(), self.rng)

        self.session: Optional[OnboardingSession] = None

    def create_session(self) -> OnboardingSession:
        """Fresh session bound to a snapshot of the current settings."""
        snapshot = self.config.snapshot()
        return OnboardingSession(
            time_limit_seconds=snapshot.time_limit_seconds,
            response_engine=self.response_engine,
            event_bus=self.event_bus,
            clock=self.clock,
            rng=self.rng,
            reask_probability=self.config.reask_probability,
        )

    def run(self) -> OnboardingResult:
        """
        Run one onboarding session until it completes.

        Returns:
            OnboardingResult with the assembled profile
        """
        session = self.create_session()
        self.session = session

        print(f"\n✨ Starting onboarding - {session.time_limit_seconds}s to get to know you")
        if not self.connector.is_configured:
            print("💡 AI replies are off; using built-in replies")
            print("   (Set SPARKS_API_KEY to enable them)")
        print(f"📝 Detailed logs: {self.log_file}")
        print("=" * 50)

        try:
            self._ask(session.start())

            while True:
                reason = session.completion_reason()
                if reason is not None:
                    break

                utterance = self.voice_service.listen()
                if utterance is None:
                    reason = CompletionReason.USER_ENDED
                    break
                if not utterance:
                    continue

                question = session.current_question
                if question is not None:
                    utterance = self._resolve_choice(question, utterance)

                response = session.handle_utterance(utterance)
                logger.info(f"Reply ({'generated' if response.generated else 'template'}): {response.text}")
                self.voice_service.speak(response.text)

                if response.next_question is not None:
                    self._ask(response.next_question)

            result = session.complete(reason)
            self.voice_service.speak(OnboardingPrompts.closing_messages()[result.completion_reason.value])
            self._display_results(result)
            return result

        except Exception as e:
            self.event_bus.emit(ErrorOccurredEvent(
                session.session_id, time.time(), type(e).__name__, str(e), "orchestrator"
            ))
            logger.error("Onboarding failed with error: %s", e)
            raise

        finally:
            self.voice_service.cleanup()

    def _ask(self, question: OnboardingQuestion) -> None:
        logger.info(f"Asking {question.id}: {question.text}")
        self.voice_service.speak(question.text)
        if question.response_modality == ResponseModality.MULTIPLE_CHOICE:
            for idx, option in enumerate(question.options, start=1):
                print(f"   {idx}. {option}")

    @staticmethod
    def _resolve_choice(question: OnboardingQuestion, answer: str) -> str:
        """Map a numbered pick ("2") to its option text for multiple-choice questions."""
        if question.response_modality != ResponseModality.MULTIPLE_CHOICE:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(question.options):
            return question.options[int(answer) - 1]
        return answer

    def _display_results(self, result: OnboardingResult):
        """Display the assembled profile."""
        profile = result.profile
        print("\n" + "=" * 50)
        if result.was_forced:
            print("⏰ ONBOARDING FINISHED EARLY")
        else:
            print("🎉 ONBOARDING COMPLETE")
        print("=" * 50)
        print(f"👤 Name: {profile.name}")
        print(f"🎂 Age: {profile.age}")
        print(f"📍 Location: {profile.location}")
        print(f"🎯 Interests: {', '.join(profile.interests)}")

        personality = profile.personality or {}
        if personality:
            style = personality.get("communication_style", "balanced")
            print(f"💬 Communication style: {style}")

        if result.used_defaults:
            print(f"⚠️  Placeholders used for: {', '.join(f.value for f in result.used_defaults)}")
        print(f"🛑 Reason: {result.completion_reason.value}")
        print(f"⏱️  Time used: {result.elapsed_seconds:.0f}s")
        print(f"📁 Full details logged to: {self.log_file}")

        metrics = self.metrics.get_metrics()
        print(f"📈 Session metrics: {metrics}")

    def get_metrics(self) -> Dict[str, int]:
        """Get current session metrics."""
        return self.metrics.get_metrics()

    def reset_metrics(self):
        """Reset session metrics."""
        self.metrics.reset()
