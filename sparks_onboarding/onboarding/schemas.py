"""
Structured data models and schemas for the onboarding engine.
"""
from dataclasses import dataclass, field, fields, replace, asdict
from typing import Optional, Dict, Any, List, Tuple, Union
from enum import Enum

from ..config import TRAIT_INITIAL_VALUE


class MandatoryField(str, Enum):
    """Profile fields required before onboarding is structurally complete."""
    NAME = "name"
    AGE = "age"
    LOCATION = "location"

    @property
    def question_id(self) -> str:
        """Id of the scripted question that asks for this field."""
        return _FIELD_QUESTION_IDS[self]


_FIELD_QUESTION_IDS = {
    MandatoryField.NAME: "q1",
    MandatoryField.AGE: "q2",
    MandatoryField.LOCATION: "q3",
}


class ResponseModality(str, Enum):
    """How a question expects to be answered."""
    TEXT = "text"
    VOICE = "voice"
    MULTIPLE_CHOICE = "multiple-choice"


class CommunicationStyle(str, Enum):
    """Categorical label for how the user writes or speaks."""
    EXPRESSIVE = "expressive"
    ANALYTICAL = "analytical"
    INQUISITIVE = "inquisitive"
    CONCISE = "concise"
    BALANCED = "balanced"


class SessionState(str, Enum):
    """Conversation engine states."""
    NOT_STARTED = "not_started"
    AWAITING_SCRIPTED_ANSWER = "awaiting_scripted_answer"
    OPEN_CONVERSATION = "open_conversation"
    COMPLETED = "completed"


class CompletionReason(str, Enum):
    """Why an onboarding session was (or should be) completed."""
    PROFILE_COMPLETE = "profile_complete"
    TIME_LOW = "time_low"
    TIME_EXPIRED = "time_expired"
    USER_ENDED = "user_ended"


TRAIT_NAMES = ("openness", "conscientiousness", "extraversion", "agreeableness", "neuroticism")


@dataclass(frozen=True)
class OnboardingQuestion:
    """A single scripted onboarding question."""
    id: str
    text: str
    response_modality: ResponseModality = ResponseModality.VOICE
    options: Optional[Tuple[str, ...]] = None
    min_response_length: Optional[int] = None
    max_response_time_seconds: Optional[int] = None
    mapped_trait: Optional[str] = None
    collects: Optional[MandatoryField] = None
    audio_prompt: Optional[str] = None

    def __post_init__(self):
        is_choice = self.response_modality == ResponseModality.MULTIPLE_CHOICE
        if is_choice and not self.options:
            raise ValueError(f"Question {self.id} is multiple-choice but has no options")
        if not is_choice and self.options is not None:
            raise ValueError(f"Question {self.id} has options but is not multiple-choice")
        if self.mapped_trait is not None and self.mapped_trait not in TRAIT_NAMES:
            raise ValueError(f"Question {self.id} maps unknown trait '{self.mapped_trait}'")


@dataclass
class PersonalityTraits:
    """Five-factor trait scores in [0, 1] plus a communication style label."""
    openness: float = TRAIT_INITIAL_VALUE
    conscientiousness: float = TRAIT_INITIAL_VALUE
    extraversion: float = TRAIT_INITIAL_VALUE
    agreeableness: float = TRAIT_INITIAL_VALUE
    neuroticism: float = TRAIT_INITIAL_VALUE
    communication_style: CommunicationStyle = CommunicationStyle.BALANCED

    def snapshot(self) -> 'PersonalityTraits':
        """Independent copy safe to hand to callers."""
        return replace(self)

    def scores(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name in TRAIT_NAMES}

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["communication_style"] = self.communication_style.value
        return data


ProfileValue = Union[str, int]


@dataclass(frozen=True)
class ExtractedProfile:
    """Profile fields found in one utterance. Absent fields are None."""
    name: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None

    @property
    def fields(self) -> Dict[MandatoryField, ProfileValue]:
        """Every matched field, keyed by field, in evaluation order."""
        found: Dict[MandatoryField, ProfileValue] = {}
        if self.name is not None:
            found[MandatoryField.NAME] = self.name
        if self.age is not None:
            found[MandatoryField.AGE] = self.age
        if self.location is not None:
            found[MandatoryField.LOCATION] = self.location
        return found

    @property
    def matched_fields(self) -> List[MandatoryField]:
        return list(self.fields)

    @property
    def matched_field(self) -> Optional[MandatoryField]:
        """Last-evaluated match (location, then age, then name)."""
        matched = self.matched_fields
        return matched[-1] if matched else None

    def is_empty(self) -> bool:
        return not self.fields


@dataclass
class ReplyContext:
    """Everything the response engine needs to word a reply to one utterance."""
    response: str
    personality: PersonalityTraits
    remaining_seconds: float
    question: Optional[OnboardingQuestion] = None
    next_question: Optional[OnboardingQuestion] = None
    extracted: ExtractedProfile = field(default_factory=ExtractedProfile)
    collected: Dict[MandatoryField, ProfileValue] = field(default_factory=dict)
    missing_fields: List[MandatoryField] = field(default_factory=list)
    history: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def is_scripted(self) -> bool:
        return self.question is not None

    def get_recent_history(self, count: int = 6) -> List[Tuple[str, str]]:
        return self.history[-count:] if self.history else []


@dataclass
class AIResponse:
    """What the engine hands back to the presentation layer for one utterance."""
    text: str
    personality_insight: PersonalityTraits
    suggested_interests: List[str] = field(default_factory=list)
    next_question: Optional[OnboardingQuestion] = None
    extracted: ExtractedProfile = field(default_factory=ExtractedProfile)
    generated: bool = False
