"""
Testing infrastructure with mock services for the onboarding engine.
"""
import random
from typing import Any, Dict, List, Optional, Union

from .services import VoiceService, AIConnectorService
from .decision_engine import ResponseEngine, PromptEngine
from .events import OnboardingEventBus, OnboardingMetrics
from .session import OnboardingSession
from .models import OnboardingResult
from .schemas import MandatoryField
from ..infrastructure.llm import LLMError
from ..config import DEFAULT_PROFILE_NAME, DEFAULT_PROFILE_AGE, DEFAULT_PROFILE_LOCATION


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockLLMClient:
    """Mock LLM client for testing."""

    def __init__(self, mock_responses: Optional[List[Union[str, Exception]]] = None,
                 default_response: str = "Mock reply!"):
        self.mock_responses = list(mock_responses or [])
        self.default_response = default_response
        self.current_response_idx = 0
        self.request_history = []

    def generate_content(self, prompt_text: str, temperature: float = 0.0, **kwargs) -> str:
        """Return the next scripted reply, raising it if it is an exception."""
        self.request_history.append({
            "prompt": prompt_text,
            "temperature": temperature,
            "kwargs": kwargs
        })

        if self.current_response_idx < len(self.mock_responses):
            response = self.mock_responses[self.current_response_idx]
            self.current_response_idx += 1
            if isinstance(response, Exception):
                raise response
            return response
        return self.default_response


class FailingLLMClient(MockLLMClient):
    """LLM client whose every call fails."""

    def __init__(self, error: Optional[Exception] = None):
        super().__init__()
        self.error = error or LLMError("HTTP 500: mock provider failure")

    def generate_content(self, prompt_text: str, temperature: float = 0.0, **kwargs) -> str:
        super().generate_content(prompt_text, temperature, **kwargs)
        raise self.error


class MockVoiceService(VoiceService):
    """Voice service fed from a list of transcripts; records what was spoken."""

    def __init__(self, transcripts: List[Optional[str]], clock: Optional[FakeClock] = None,
                 seconds_per_answer: float = 0.0):
        self.transcripts = list(transcripts)
        self.current_transcript_idx = 0
        self.spoken_messages: List[str] = []
        self.clock = clock
        self.seconds_per_answer = seconds_per_answer
        self.cleaned_up = False

    def speak(self, text: str) -> None:
        self.spoken_messages.append(text)

    def listen(self) -> Optional[str]:
        """Return the next transcript; None (user left) once the list runs out."""
        if self.clock is not None:
            self.clock.advance(self.seconds_per_answer)
        if self.current_transcript_idx < len(self.transcripts):
            transcript = self.transcripts[self.current_transcript_idx]
            self.current_transcript_idx += 1
            return transcript
        return None

    def cleanup(self) -> None:
        self.cleaned_up = True


def create_mock_onboarding_setup(llm_responses: Optional[List[Union[str, Exception]]] = None,
                                 time_limit_seconds: int = 300,
                                 seed: int = 7,
                                 reask_probability: float = 0.5) -> Dict[str, Any]:
    """Create a session wired to mock collaborators, plus handles on each of them."""
    clock = FakeClock()
    rng = random.Random(seed)
    llm_client = MockLLMClient(llm_responses) if llm_responses is not None else None
    connector = AIConnectorService(llm_client)
    response_engine = ResponseEngine(connector, PromptEngine(), rng)

    event_bus = OnboardingEventBus()
    metrics = OnboardingMetrics()
    events = []
    event_bus.subscribe_all(metrics.handle_event)
    event_bus.subscribe_all(events.append)

    session = OnboardingSession(
        time_limit_seconds=time_limit_seconds,
        response_engine=response_engine,
        event_bus=event_bus,
        clock=clock,
        rng=rng,
        reask_probability=reask_probability,
    )

    return {
        "session": session,
        "clock": clock,
        "rng": rng,
        "llm_client": llm_client,
        "event_bus": event_bus,
        "metrics": metrics,
        "events": events,
    }


def create_test_transcripts() -> List[str]:
    """Answers to the full seven-question script from a cooperative user."""
    return [
        "My name is Alex",
        "I'm 15 years old",
        "I live in Boston",
        "I love to explore new places and creative art projects with my friends",
        "On weekends I hang out with friends and we talk a lot",
        "Meeting new people",
        "My friends would say I'm kind and always happy to help",
    ]


class TestOnboardingResult:
    """Helper for validating onboarding results."""

    __test__ = False

    @staticmethod
    def validate_result(result: OnboardingResult) -> List[str]:
        """
        Validate an onboarding result and return list of issues found.

        Returns:
            List of validation error messages (empty if valid)
        """
        issues = []
        profile = result.profile

        if not profile.id.startswith("user-"):
            issues.append(f"Unexpected profile id: {profile.id}")
        if not profile.name:
            issues.append("Missing name")
        if not profile.location:
            issues.append("Missing location")
        if not profile.interests:
            issues.append("No interests")

        for trait, value in profile.personality.items():
            if trait != "communication_style" and not (0.0 <= value <= 1.0):
                issues.append(f"Trait {trait} out of range: {value}")

        placeholders = {
            MandatoryField.NAME: (profile.name, DEFAULT_PROFILE_NAME),
            MandatoryField.AGE: (profile.age, DEFAULT_PROFILE_AGE),
            MandatoryField.LOCATION: (profile.location, DEFAULT_PROFILE_LOCATION),
        }
        for mandatory_field in result.used_defaults:
            actual, expected = placeholders[mandatory_field]
            if actual != expected:
                issues.append(f"{mandatory_field.value} defaulted but profile has {actual!r}")

        return issues

    @staticmethod
    def assert_valid_result(result: OnboardingResult) -> None:
        """Assert that the result is valid, raising AssertionError if not."""
        issues = TestOnboardingResult.validate_result(result)
        if issues:
            raise AssertionError(f"Invalid onboarding result: {'; '.join(issues)}")
