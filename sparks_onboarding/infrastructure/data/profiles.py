"""
User profile records assembled at the end of onboarding.
"""
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Optional

from ...config import (
    DEFAULT_PROFILE_NAME, DEFAULT_PROFILE_AGE, DEFAULT_PROFILE_LOCATION,
    DEFAULT_PROFILE_BIO, DEFAULT_PROFILE_IMAGE, DEFAULT_INTERESTS
)


@dataclass
class UserProfile:
    """Profile handed to the rest of the app once onboarding finishes."""
    id: str
    name: str
    age: int
    location: str
    bio: str = DEFAULT_PROFILE_BIO
    interests: List[str] = field(default_factory=lambda: list(DEFAULT_INTERESTS))
    profile_image: str = DEFAULT_PROFILE_IMAGE
    personality: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_user_id() -> str:
    return f"user-{int(time.time() * 1000)}"


def build_user_profile(name: Optional[str] = None,
                       age: Optional[int] = None,
                       location: Optional[str] = None,
                       interests: Iterable[str] = (),
                       personality: Optional[Dict[str, Any]] = None,
                       user_id: Optional[str] = None) -> UserProfile:
    """
    Build a profile from whatever was collected, filling placeholders for the rest.

    Args:
        name, age, location: Collected values, or None when missing
        interests: Interest tags gathered during the session
        personality: Trait snapshot as a plain dict
        user_id: Explicit id; generated from the clock when omitted
    """
    collected_interests = list(dict.fromkeys(interests))
    return UserProfile(
        id=user_id or new_user_id(),
        name=name or DEFAULT_PROFILE_NAME,
        age=age if age is not None else DEFAULT_PROFILE_AGE,
        location=location or DEFAULT_PROFILE_LOCATION,
        interests=collected_interests or list(DEFAULT_INTERESTS),
        personality=dict(personality or {}),
    )
