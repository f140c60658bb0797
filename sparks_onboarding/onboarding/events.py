"""
Event-driven notifications for the onboarding engine.
"""
import logging
from abc import ABC
from typing import Dict, Any, List, Callable, Optional
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of onboarding events."""
    SESSION_STARTED = "session_started"
    QUESTION_ASKED = "question_asked"
    RESPONSE_PROCESSED = "response_processed"
    FIELD_COLLECTED = "field_collected"
    GENERATION_FAILED = "generation_failed"
    SESSION_COMPLETED = "session_completed"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class OnboardingEvent(ABC):
    """Base class for all onboarding events."""
    event_type: EventType
    session_id: str
    timestamp: float
    data: Dict[str, Any]


@dataclass
class SessionStartedEvent(OnboardingEvent):
    """Event fired when an onboarding session begins."""
    def __init__(self, session_id: str, timestamp: float, time_limit_seconds: int):
        super().__init__(
            event_type=EventType.SESSION_STARTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"time_limit_seconds": time_limit_seconds}
        )


@dataclass
class QuestionAskedEvent(OnboardingEvent):
    """Event fired when a scripted question is put to the user."""
    def __init__(self, session_id: str, timestamp: float, question_id: str, reasked: bool):
        super().__init__(
            event_type=EventType.QUESTION_ASKED,
            session_id=session_id,
            timestamp=timestamp,
            data={"question_id": question_id, "reasked": reasked}
        )


@dataclass
class ResponseProcessedEvent(OnboardingEvent):
    """Event fired when an utterance has been fully processed."""
    def __init__(self, session_id: str, timestamp: float, state: str,
                 generated: bool, next_question_id: Optional[str]):
        super().__init__(
            event_type=EventType.RESPONSE_PROCESSED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "state": state,
                "generated": generated,
                "next_question_id": next_question_id
            }
        )


@dataclass
class FieldCollectedEvent(OnboardingEvent):
    """Event fired the first time a mandatory field is collected."""
    def __init__(self, session_id: str, timestamp: float, field_name: str, value: Any):
        super().__init__(
            event_type=EventType.FIELD_COLLECTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"field": field_name, "value": value}
        )


@dataclass
class GenerationFailedEvent(OnboardingEvent):
    """Event fired when text completion fails and a template reply is used."""
    def __init__(self, session_id: str, timestamp: float, error_type: str, error_message: str):
        super().__init__(
            event_type=EventType.GENERATION_FAILED,
            session_id=session_id,
            timestamp=timestamp,
            data={"error_type": error_type, "error_message": error_message}
        )


@dataclass
class SessionCompletedEvent(OnboardingEvent):
    """Event fired when the session is completed."""
    def __init__(self, session_id: str, timestamp: float, reason: str,
                 turn_count: int, used_defaults: List[str]):
        super().__init__(
            event_type=EventType.SESSION_COMPLETED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "reason": reason,
                "turn_count": turn_count,
                "used_defaults": used_defaults
            }
        )


@dataclass
class ErrorOccurredEvent(OnboardingEvent):
    """Event fired when an error occurs."""
    def __init__(self, session_id: str, timestamp: float, error_type: str,
                 error_message: str, component: str):
        super().__init__(
            event_type=EventType.ERROR_OCCURRED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "error_type": error_type,
                "error_message": error_message,
                "component": component
            }
        )


EventHandler = Callable[[OnboardingEvent], None]


class OnboardingEventBus:
    """Event bus for onboarding components."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to specific event type.

        Args:
            event_type: Type of event to listen for
            handler: Function to call when event occurs
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to {event_type}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type}")
            except ValueError:
                logger.warning(f"Handler not found for {event_type}")

    def emit(self, event: OnboardingEvent) -> None:
        """
        Emit an event to all subscribers.

        A failing handler is logged and never stops the others.
        """
        logger.debug(f"Emitting event: {event.event_type} for session {event.session_id}")

        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type}: {e}")

        for handler in self._global_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in global event handler: {e}")

    def clear_handlers(self) -> None:
        self._handlers.clear()
        self._global_handlers.clear()
        logger.debug("Cleared all event handlers")


class EventLogger:
    """Logs all events for debugging and analysis."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.logger.setLevel(log_level)

    def handle_event(self, event: OnboardingEvent) -> None:
        self.logger.info(f"Event: {event.event_type} | Session: {event.session_id} | Data: {event.data}")


class OnboardingMetrics:
    """Collects counters from onboarding events."""

    _COUNTERS = {
        EventType.SESSION_STARTED: "sessions_started",
        EventType.SESSION_COMPLETED: "sessions_completed",
        EventType.RESPONSE_PROCESSED: "responses_processed",
        EventType.QUESTION_ASKED: "questions_asked",
        EventType.FIELD_COLLECTED: "fields_collected",
        EventType.GENERATION_FAILED: "generation_failures",
        EventType.ERROR_OCCURRED: "errors_occurred",
    }

    def __init__(self):
        self.reset()

    def handle_event(self, event: OnboardingEvent) -> None:
        name = self._COUNTERS.get(event.event_type)
        if name:
            self._counts[name] += 1
        if event.event_type == EventType.SESSION_COMPLETED and event.data.get("used_defaults"):
            self._counts["forced_completions"] += 1

    def get_metrics(self) -> Dict[str, int]:
        return dict(self._counts)

    def reset(self) -> None:
        self._counts: Dict[str, int] = {name: 0 for name in self._COUNTERS.values()}
        self._counts["forced_completions"] = 0
