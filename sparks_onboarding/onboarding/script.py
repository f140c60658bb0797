"""
The fixed onboarding question script.

Order matters: it is the default progression through the wizard.
"""
from typing import Optional, Tuple

from .schemas import OnboardingQuestion, ResponseModality, MandatoryField


ONBOARDING_QUESTIONS: Tuple[OnboardingQuestion, ...] = (
    OnboardingQuestion(
        id="q1",
        text="Hey there! I'm excited to help you set up your profile. What's your name?",
        audio_prompt="intro_name.mp3",
        min_response_length=2,
        max_response_time_seconds=30,
        collects=MandatoryField.NAME,
    ),
    OnboardingQuestion(
        id="q2",
        text="Nice to meet you! How old are you?",
        max_response_time_seconds=20,
        collects=MandatoryField.AGE,
    ),
    OnboardingQuestion(
        id="q3",
        text="Where are you from?",
        max_response_time_seconds=30,
        collects=MandatoryField.LOCATION,
    ),
    OnboardingQuestion(
        id="q4",
        text="What do you like to do for fun? Tell me a bit about your interests.",
        min_response_length=10,
        max_response_time_seconds=60,
        mapped_trait="openness",
    ),
    OnboardingQuestion(
        id="q5",
        text="If you could travel anywhere right now, where would you go and why?",
        min_response_length=15,
        max_response_time_seconds=60,
        mapped_trait="extraversion",
    ),
    OnboardingQuestion(
        id="q6",
        text="Do you prefer quiet nights in or going out with friends?",
        response_modality=ResponseModality.MULTIPLE_CHOICE,
        options=("Quiet nights in", "Going out with friends", "It depends on my mood", "A mix of both"),
        mapped_trait="extraversion",
    ),
    OnboardingQuestion(
        id="q7",
        text="How would your friends describe your personality?",
        min_response_length=10,
        max_response_time_seconds=60,
        mapped_trait="agreeableness",
    ),
)


def get_onboarding_questions() -> Tuple[OnboardingQuestion, ...]:
    return ONBOARDING_QUESTIONS


def get_initial_question() -> OnboardingQuestion:
    return ONBOARDING_QUESTIONS[0]


def get_question_index(question: OnboardingQuestion) -> int:
    """Position of a question in the script, matched by id."""
    for idx, candidate in enumerate(ONBOARDING_QUESTIONS):
        if candidate.id == question.id:
            return idx
    raise ValueError(f"Question {question.id} is not part of the onboarding script")


def get_next_question(question: OnboardingQuestion) -> Optional[OnboardingQuestion]:
    """The question that follows in the script, or None after the last one."""
    idx = get_question_index(question) + 1
    return ONBOARDING_QUESTIONS[idx] if idx < len(ONBOARDING_QUESTIONS) else None


def get_question_by_id(question_id: str) -> Optional[OnboardingQuestion]:
    return next((q for q in ONBOARDING_QUESTIONS if q.id == question_id), None)


def get_question_for_field(mandatory_field: MandatoryField) -> OnboardingQuestion:
    """The scripted question that collects a mandatory field."""
    for question in ONBOARDING_QUESTIONS:
        if question.collects == mandatory_field:
            return question
    raise LookupError(f"No scripted question collects {mandatory_field.value}")
