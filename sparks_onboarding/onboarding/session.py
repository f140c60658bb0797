"""
Per-run onboarding conversation engine.

One OnboardingSession owns all state for a single user's onboarding: the
script position, collected profile fields, personality estimate, history and
the time budget. Nothing is shared between sessions.
"""
import re
import time
import uuid
import random
import logging
from typing import Callable, Dict, List, Optional

from .schemas import (
    AIResponse, CompletionReason, MandatoryField, OnboardingQuestion,
    PersonalityTraits, ProfileValue, ReplyContext, SessionState
)
from .models import ConversationTurn, OnboardingResult
from .analysis import (
    PersonalityEstimator, extract_profile_info, match_interests,
    parse_age_answer, suggest_interests
)
from .script import (
    ONBOARDING_QUESTIONS, get_initial_question, get_next_question,
    get_question_for_field, get_question_index
)
from .decision_engine import ResponseEngine
from .errors import SessionBusyError, SessionClosedError, SessionNotStartedError
from .events import (
    OnboardingEventBus, SessionStartedEvent, QuestionAskedEvent,
    ResponseProcessedEvent, FieldCollectedEvent, GenerationFailedEvent,
    SessionCompletedEvent
)
from ..infrastructure.data import build_user_profile
from ..config import (
    TIME_LIMIT_SECONDS, REASK_PROBABILITY, URGENT_REMAINING_SECONDS,
    WRAP_UP_REMAINING_SECONDS
)

logger = logging.getLogger("session")

MANDATORY_FIELDS = (MandatoryField.NAME, MandatoryField.AGE, MandatoryField.LOCATION)


class OnboardingSession:
    """
    Conversation state machine for one onboarding run.

    States move NOT_STARTED -> AWAITING_SCRIPTED_ANSWER -> ... -> OPEN_CONVERSATION,
    may bounce back to AWAITING_SCRIPTED_ANSWER when a missing mandatory field
    is re-asked, and end in COMPLETED when the caller calls complete().
    """

    def __init__(self,
                 time_limit_seconds: int = TIME_LIMIT_SECONDS,
                 response_engine: Optional[ResponseEngine] = None,
                 event_bus: Optional[OnboardingEventBus] = None,
                 clock: Callable[[], float] = time.monotonic,
                 rng: Optional[random.Random] = None,
                 reask_probability: float = REASK_PROBABILITY,
                 estimator: Optional[PersonalityEstimator] = None,
                 session_id: Optional[str] = None):
        self.session_id = session_id or f"onb_{uuid.uuid4().hex[:12]}"
        self.time_limit_seconds = time_limit_seconds
        self.rng = rng or random.Random()
        self.response_engine = response_engine or ResponseEngine(rng=self.rng)
        self.event_bus = event_bus or OnboardingEventBus()
        self.clock = clock
        self.reask_probability = reask_probability
        self.estimator = estimator or PersonalityEstimator()

        self.state = SessionState.NOT_STARTED
        self.current_question: Optional[OnboardingQuestion] = None
        self.personality = PersonalityTraits()
        self.history: List[ConversationTurn] = []
        self.collected: Dict[MandatoryField, Optional[ProfileValue]] = {}
        self.interests: List[str] = []
        self.result: Optional[OnboardingResult] = None

        self._start_time: Optional[float] = None
        self._reasking = False
        self._busy = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> Optional[OnboardingQuestion]:
        """Start the clock and return the first scripted question."""
        if self.state != SessionState.NOT_STARTED:
            return self.current_question

        self._start_time = self.clock()
        self.state = SessionState.AWAITING_SCRIPTED_ANSWER
        self.current_question = get_initial_question()

        logger.info(f"Session {self.session_id} started with {self.time_limit_seconds}s budget")
        self.event_bus.emit(SessionStartedEvent(self.session_id, time.time(), self.time_limit_seconds))
        self.event_bus.emit(QuestionAskedEvent(self.session_id, time.time(), self.current_question.id, False))
        return self.current_question

    @property
    def question_index(self) -> Optional[int]:
        """Script position of the question awaiting an answer, if any."""
        if self.state != SessionState.AWAITING_SCRIPTED_ANSWER or self.current_question is None:
            return None
        return get_question_index(self.current_question)

    @property
    def is_busy(self) -> bool:
        return self._busy

    def _begin_turn(self) -> None:
        if self.state == SessionState.NOT_STARTED:
            raise SessionNotStartedError("Call start() before sending utterances")
        if self.state == SessionState.COMPLETED:
            raise SessionClosedError(f"Session {self.session_id} is already completed")
        if self._busy:
            raise SessionBusyError("Previous utterance is still being processed")
        self._busy = True

    # ------------------------------------------------------------------
    # Utterance processing
    # ------------------------------------------------------------------

    def handle_utterance(self, text: str) -> AIResponse:
        """Route an utterance to the scripted or open-conversation path by state."""
        if self.state == SessionState.AWAITING_SCRIPTED_ANSWER and self.current_question:
            return self.process_response(self.current_question, text)
        return self.process_conversation(text)

    def process_response(self, question: OnboardingQuestion, response: str) -> AIResponse:
        """
        Handle the answer to a scripted question.

        Args:
            question: The scripted question being answered
            response: Final transcript of the answer

        Returns:
            AIResponse whose next_question is the following scripted question,
            or None once the script (or a re-asked question) is done
        """
        self._begin_turn()
        try:
            extracted = extract_profile_info(response)
            updates = self._incidental_updates(extracted, skip=question.collects)

            if question.collects is not None:
                value = extracted.fields.get(question.collects)
                if value is None:
                    value = self._derive_field_value(question, response, extracted)
                if value is not None:
                    updates[question.collects] = value
                else:
                    logger.info(f"No usable {question.collects.value} in answer to {question.id}")

            next_question = None if self._reasking else get_next_question(question)
            return self._complete_turn(
                ConversationTurn(question.text, response), extracted, updates, question, next_question
            )
        finally:
            self._busy = False

    def process_conversation(self, user_input: str) -> AIResponse:
        """
        Handle a free-form utterance, collecting fields opportunistically.

        While mandatory fields are missing, the first missing one is re-asked
        with probability reask_probability, always once time is short.
        """
        self._begin_turn()
        try:
            extracted = extract_profile_info(user_input)
            updates = self._incidental_updates(extracted)

            next_question = None
            missing = [f for f in MANDATORY_FIELDS if f not in self.collected and f not in updates]
            if missing and self._should_reask():
                next_question = get_question_for_field(missing[0])

            return self._complete_turn(
                ConversationTurn("", user_input), extracted, updates, None, next_question
            )
        finally:
            self._busy = False

    def _should_reask(self) -> bool:
        if self.get_remaining_time() < URGENT_REMAINING_SECONDS:
            return True
        return self.rng.random() < self.reask_probability

    def _complete_turn(self, turn: ConversationTurn, extracted,
                       updates: Dict[MandatoryField, ProfileValue],
                       question: Optional[OnboardingQuestion],
                       next_question: Optional[OnboardingQuestion]) -> AIResponse:
        """
        Word the reply against the post-turn view, then commit the turn.

        Nothing is committed until the reply exists, so an engine that raises
        leaves the session exactly as it was before the utterance.
        """
        personality = self.personality.snapshot()
        self.estimator.update(personality, turn.response)
        collected = dict(self.collected)
        collected.update(updates)

        context = ReplyContext(
            response=turn.response,
            personality=personality.snapshot(),
            remaining_seconds=self.get_remaining_time(),
            question=question,
            next_question=next_question,
            extracted=extracted,
            collected=collected,
            missing_fields=[f for f in MANDATORY_FIELDS if f not in collected],
            history=[(t.question, t.response) for t in self.history] + [(turn.question, turn.response)],
        )
        reply = self.response_engine.generate_reply(context)

        self.history.append(turn)
        self.personality = personality
        for mandatory_field, value in updates.items():
            self.mark_field_collected(mandatory_field, value)
        self._accumulate_interests(turn.response)

        if next_question is not None:
            self.state = SessionState.AWAITING_SCRIPTED_ANSWER
            self.current_question = next_question
            self._reasking = question is None
        else:
            self.state = SessionState.OPEN_CONVERSATION
            self.current_question = None
            self._reasking = False

        if reply.error is not None:
            self.event_bus.emit(GenerationFailedEvent(
                self.session_id, time.time(), type(reply.error).__name__, str(reply.error)
            ))
        if next_question is not None:
            self.event_bus.emit(QuestionAskedEvent(
                self.session_id, time.time(), next_question.id, question is None
            ))
        self.event_bus.emit(ResponseProcessedEvent(
            self.session_id, time.time(), self.state.value, reply.generated,
            next_question.id if next_question else None
        ))

        return AIResponse(
            text=reply.text,
            personality_insight=self.personality.snapshot(),
            suggested_interests=list(dict.fromkeys(suggest_interests(turn.response))),
            next_question=next_question,
            extracted=extracted,
            generated=reply.generated,
        )

    def _derive_field_value(self, question: OnboardingQuestion, response: str,
                            extracted) -> Optional[ProfileValue]:
        """Read a direct answer ("Alex", "15", "Boston") when no phrase pattern matched."""
        if question.collects == MandatoryField.AGE:
            return parse_age_answer(response)

        # "I'm from Boston" answers something else; it is not a name
        if not extracted.is_empty():
            return None

        cleaned = re.sub(r"\s+", " ", response).strip(" .,!?")
        if len(cleaned) < (question.min_response_length or 1):
            return None
        return cleaned[:1].upper() + cleaned[1:]

    def _incidental_updates(self, extracted,
                            skip: Optional[MandatoryField] = None) -> Dict[MandatoryField, ProfileValue]:
        # Incidental matches only fill gaps; "I'm kind" must not rename "Alex"
        return {
            mandatory_field: value
            for mandatory_field, value in extracted.fields.items()
            if mandatory_field != skip and self.collected.get(mandatory_field) is None
        }

    def _accumulate_interests(self, text: str) -> None:
        for interest in match_interests(text):
            if interest not in self.interests:
                self.interests.append(interest)

    # ------------------------------------------------------------------
    # Mandatory field bookkeeping
    # ------------------------------------------------------------------

    def mark_field_collected(self, mandatory_field: MandatoryField,
                             value: Optional[ProfileValue] = None) -> None:
        """Record a mandatory field. Fields are never un-collected; a newer value wins."""
        is_new = mandatory_field not in self.collected
        if value is not None or is_new:
            self.collected[mandatory_field] = value
        if is_new:
            logger.info(f"Collected {mandatory_field.value}: {value!r}")
            self.event_bus.emit(FieldCollectedEvent(
                self.session_id, time.time(), mandatory_field.value, value
            ))

    def are_mandatory_fields_collected(self) -> bool:
        return all(f in self.collected for f in MANDATORY_FIELDS)

    def get_missing_mandatory_fields(self) -> List[MandatoryField]:
        return [f for f in MANDATORY_FIELDS if f not in self.collected]

    # ------------------------------------------------------------------
    # Time budget
    # ------------------------------------------------------------------

    def get_elapsed_seconds(self) -> float:
        if self._start_time is None:
            return 0.0
        return max(0.0, self.clock() - self._start_time)

    def get_remaining_time(self) -> float:
        return max(0.0, self.time_limit_seconds - self.get_elapsed_seconds())

    def get_time_progress(self) -> float:
        """Percentage (0-100) of the time budget consumed."""
        if self.time_limit_seconds <= 0:
            return 100.0
        progress = self.get_elapsed_seconds() / self.time_limit_seconds * 100.0
        return min(100.0, max(0.0, progress))

    def is_time_expired(self) -> bool:
        return self._start_time is not None and self.get_remaining_time() <= 0

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def has_further_scripted_question(self) -> bool:
        return self.state == SessionState.AWAITING_SCRIPTED_ANSWER

    def completion_reason(self) -> Optional[CompletionReason]:
        """
        Why the caller should complete the session now, or None to keep going.
        """
        if self.state == SessionState.COMPLETED:
            return self.result.completion_reason
        if self.state == SessionState.NOT_STARTED:
            return None
        if self.is_time_expired():
            return CompletionReason.TIME_EXPIRED
        if self.state == SessionState.OPEN_CONVERSATION:
            if self.are_mandatory_fields_collected():
                return CompletionReason.PROFILE_COMPLETE
            if self.get_remaining_time() < WRAP_UP_REMAINING_SECONDS:
                return CompletionReason.TIME_LOW
        return None

    def complete(self, reason: Optional[CompletionReason] = None) -> OnboardingResult:
        """
        Finish the session and build the profile, using placeholders for missing fields.

        Idempotent: a completed session returns its existing result.
        """
        if self.state == SessionState.COMPLETED:
            return self.result
        if self._busy:
            raise SessionBusyError("Cannot complete while an utterance is being processed")

        reason = reason or self.completion_reason() or CompletionReason.USER_ENDED
        used_defaults = [f for f in MANDATORY_FIELDS if self.collected.get(f) is None]

        profile = build_user_profile(
            name=self.collected.get(MandatoryField.NAME),
            age=self.collected.get(MandatoryField.AGE),
            location=self.collected.get(MandatoryField.LOCATION),
            interests=self.interests,
            personality=self.personality.to_dict(),
        )
        self.result = OnboardingResult(
            profile=profile,
            completion_reason=reason,
            turns=list(self.history),
            collected_fields=[f for f in MANDATORY_FIELDS if f in self.collected],
            used_defaults=used_defaults,
            elapsed_seconds=self.get_elapsed_seconds(),
            session_id=self.session_id,
        )
        self.state = SessionState.COMPLETED
        self.current_question = None

        if used_defaults:
            logger.warning(f"Session {self.session_id} completed with defaults for "
                           f"{[f.value for f in used_defaults]} ({reason.value})")
        else:
            logger.info(f"Session {self.session_id} completed ({reason.value})")

        self.event_bus.emit(SessionCompletedEvent(
            self.session_id, time.time(), reason.value, len(self.history),
            [f.value for f in used_defaults]
        ))
        return self.result


__all__ = ["OnboardingSession", "MANDATORY_FIELDS", "ONBOARDING_QUESTIONS"]
