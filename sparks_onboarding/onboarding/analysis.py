"""
Text analysis for onboarding answers.
Handles profile entity extraction, personality trait estimation and interest suggestions.
"""
import re
import logging
from typing import Dict, List, Optional, Tuple

from .schemas import ExtractedProfile, PersonalityTraits, CommunicationStyle
from ..config import (
    TRAIT_INCREMENT, EXPRESSIVE_WORD_COUNT, ANALYTICAL_AVG_WORD_LENGTH,
    MIN_AGE_EXCLUSIVE, MAX_AGE_EXCLUSIVE, DEFAULT_INTERESTS
)

logger = logging.getLogger("onboarding_analysis")

# "word" means letters only, so "i am 15" never yields a name of "15"
_WORD = r"([^\W\d_]+)"

NAME_PATTERN = re.compile(r"\b(?:my name is|i am|i'm|call me) " + _WORD)
AGE_PATTERN = re.compile(r"\b(?:i am|i'm|my age is) (\d+)(?: years old)?")
AGE_YEARS_OLD_PATTERN = re.compile(r"\b(\d+) years old")
LOCATION_PATTERN = re.compile(r"\b(?:i live in|i'm from|i am from|from) " + _WORD)

# Words that follow "i am" / "i'm" in ordinary sentences and are never names
NOT_A_NAME = frozenset({
    "a", "an", "the", "from", "in", "at", "not", "so", "very", "really", "just",
    "here", "also", "too", "years", "good", "fine", "okay", "ok", "into", "going",
})

TRAIT_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "openness": ("new", "explore", "experience", "art", "idea", "creative", "curious"),
    "conscientiousness": ("plan", "organize", "detail", "careful", "precise", "responsible", "thorough"),
    "extraversion": ("people", "social", "party", "talk", "outgoing", "energetic", "group"),
    "agreeableness": ("help", "kind", "cooperate", "friendly", "compassionate", "supportive"),
    "neuroticism": ("worry", "stress", "anxious", "nervous", "sensitive"),
}

# First entry of each category is the tag that gets suggested
INTEREST_CATEGORIES: Tuple[Tuple[str, ...], ...] = (
    ("music", "guitar", "piano", "singing", "concert", "festival"),
    ("sports", "football", "basketball", "soccer", "tennis", "running"),
    ("art", "painting", "drawing", "design", "creative"),
    ("travel", "adventure", "explore", "places", "countries"),
    ("gaming", "video games", "board games", "rpg"),
    ("reading", "books", "literature", "stories"),
    ("movies", "films", "cinema", "tv shows", "series"),
    ("cooking", "baking", "food", "culinary"),
    ("technology", "programming", "coding", "computers"),
    ("fashion", "clothing", "style", "design"),
)


def _normalize(text: str) -> str:
    # Speech transcripts often come back with typographic apostrophes
    return text.replace("’", "'").lower()


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def _extract_name(lowered: str) -> Optional[str]:
    for match in NAME_PATTERN.finditer(lowered):
        word = match.group(1)
        if word not in NOT_A_NAME:
            return _capitalize(word)
    return None


def _extract_age(lowered: str) -> Optional[int]:
    match = AGE_PATTERN.search(lowered) or AGE_YEARS_OLD_PATTERN.search(lowered)
    if not match:
        return None
    age = int(match.group(1))
    if MIN_AGE_EXCLUSIVE < age < MAX_AGE_EXCLUSIVE:
        return age
    logger.debug("Discarding age %d outside the supported range", age)
    return None


def _extract_location(lowered: str) -> Optional[str]:
    match = LOCATION_PATTERN.search(lowered)
    return _capitalize(match.group(1)) if match else None


def extract_profile_info(text: str) -> ExtractedProfile:
    """
    Extract name, age and location from free-form text.

    Every field is matched independently; a miss simply leaves the field None.

    Args:
        text: A user utterance

    Returns:
        ExtractedProfile with whatever fields were found
    """
    lowered = _normalize(text or "")
    return ExtractedProfile(
        name=_extract_name(lowered),
        age=_extract_age(lowered),
        location=_extract_location(lowered),
    )


def parse_age_answer(text: str) -> Optional[int]:
    """First integer in a direct answer to the age question, if it is in range."""
    match = re.search(r"\d+", text or "")
    if not match:
        return None
    age = int(match.group(0))
    return age if MIN_AGE_EXCLUSIVE < age < MAX_AGE_EXCLUSIVE else None


def classify_communication_style(text: str) -> CommunicationStyle:
    """
    Classify one utterance. Checks run in priority order:
    word count, then average word length, then question marks.
    """
    words = text.split()
    if not words:
        return CommunicationStyle.CONCISE

    # Spaces and punctuation count toward the length
    avg_word_length = len(text) / len(words)
    if len(words) > EXPRESSIVE_WORD_COUNT:
        return CommunicationStyle.EXPRESSIVE
    if avg_word_length > ANALYTICAL_AVG_WORD_LENGTH:
        return CommunicationStyle.ANALYTICAL
    if "?" in text:
        return CommunicationStyle.INQUISITIVE
    return CommunicationStyle.CONCISE


class PersonalityEstimator:
    """Keyword-frequency accumulator over a session's utterances."""

    def __init__(self,
                 keywords: Optional[Dict[str, Tuple[str, ...]]] = None,
                 increment: float = TRAIT_INCREMENT):
        self.keywords = keywords or TRAIT_KEYWORDS
        self.increment = increment

    def update(self, traits: PersonalityTraits, text: str) -> List[str]:
        """
        Nudge traits for one utterance, in place.

        Returns:
            Names of the traits that were incremented
        """
        lowered = _normalize(text)
        bumped = []

        for trait, words in self.keywords.items():
            if any(word in lowered for word in words):
                current = getattr(traits, trait)
                setattr(traits, trait, min(1.0, current + self.increment))
                bumped.append(trait)

        traits.communication_style = classify_communication_style(text)

        if bumped:
            logger.debug("Traits nudged: %s (style=%s)", bumped, traits.communication_style.value)
        return bumped


def match_interests(text: str) -> List[str]:
    """Interest tags whose keywords appear in the text, in category order."""
    lowered = _normalize(text)
    return [category[0] for category in INTEREST_CATEGORIES
            if any(keyword in lowered for keyword in category)]


def suggest_interests(text: str) -> List[str]:
    """Interest tags for the text, falling back to a fixed default set."""
    return match_interests(text) or list(DEFAULT_INTERESTS)
