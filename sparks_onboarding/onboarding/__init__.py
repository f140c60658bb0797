"""Onboarding engine components.

This module contains the business logic for the guided onboarding
conversation: the scripted questions, profile extraction, the per-session
state machine, reply generation and the orchestrator that drives it all.
"""

# Orchestrator and session
from .orchestrator import OnboardingOrchestrator
from .session import OnboardingSession, MANDATORY_FIELDS

# Data models
from .models import ConversationTurn, OnboardingResult

# Structured schemas
from .schemas import (
    MandatoryField, ResponseModality, CommunicationStyle, SessionState,
    CompletionReason, OnboardingQuestion, PersonalityTraits, ExtractedProfile,
    ReplyContext, AIResponse
)

# Script and analysis
from .script import (
    ONBOARDING_QUESTIONS, get_onboarding_questions, get_initial_question,
    get_next_question, get_question_by_id, get_question_for_field
)
from .analysis import (
    extract_profile_info, parse_age_answer, classify_communication_style,
    PersonalityEstimator, match_interests, suggest_interests
)

# Services and reply generation
from .services import AIConnectorService, VoiceService, ConsoleVoiceService
from .decision_engine import ResponseEngine, PromptEngine, GeneratedReply

# Errors
from .errors import (
    OnboardingError, SessionNotStartedError, SessionBusyError, SessionClosedError
)

# Event system
from .events import (
    OnboardingEventBus, EventLogger, OnboardingMetrics,
    EventType, OnboardingEvent, SessionStartedEvent, QuestionAskedEvent,
    ResponseProcessedEvent, FieldCollectedEvent, GenerationFailedEvent,
    SessionCompletedEvent, ErrorOccurredEvent
)

__all__ = [
    # Orchestrator and session
    "OnboardingOrchestrator", "OnboardingSession", "MANDATORY_FIELDS",

    # Data models
    "ConversationTurn", "OnboardingResult",

    # Schemas
    "MandatoryField", "ResponseModality", "CommunicationStyle", "SessionState",
    "CompletionReason", "OnboardingQuestion", "PersonalityTraits", "ExtractedProfile",
    "ReplyContext", "AIResponse",

    # Script and analysis
    "ONBOARDING_QUESTIONS", "get_onboarding_questions", "get_initial_question",
    "get_next_question", "get_question_by_id", "get_question_for_field",
    "extract_profile_info", "parse_age_answer", "classify_communication_style",
    "PersonalityEstimator", "match_interests", "suggest_interests",

    # Services
    "AIConnectorService", "VoiceService", "ConsoleVoiceService",
    "ResponseEngine", "PromptEngine", "GeneratedReply",

    # Errors
    "OnboardingError", "SessionNotStartedError", "SessionBusyError", "SessionClosedError",

    # Events
    "OnboardingEventBus", "EventLogger", "OnboardingMetrics",
    "EventType", "OnboardingEvent", "SessionStartedEvent", "QuestionAskedEvent",
    "ResponseProcessedEvent", "FieldCollectedEvent", "GenerationFailedEvent",
    "SessionCompletedEvent", "ErrorOccurredEvent",
]
