"""
Data models for the onboarding engine.
"""
from dataclasses import dataclass, field
from typing import Optional, List

from .schemas import CompletionReason, MandatoryField
from ..infrastructure.data import UserProfile


@dataclass(frozen=True)
class ConversationTurn:
    """One exchange: the question asked ("" in open conversation) and the answer."""
    question: str
    response: str


@dataclass
class OnboardingResult:
    """Final outcome of one onboarding session."""
    profile: UserProfile
    completion_reason: CompletionReason
    turns: List[ConversationTurn] = field(default_factory=list)
    collected_fields: List[MandatoryField] = field(default_factory=list)
    used_defaults: List[MandatoryField] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    session_id: Optional[str] = None

    @property
    def was_forced(self) -> bool:
        """True when placeholders had to stand in for missing fields."""
        return bool(self.used_defaults)
