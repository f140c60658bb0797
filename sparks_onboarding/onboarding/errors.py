"""
Exceptions raised by the onboarding session to its callers.
"""


class OnboardingError(Exception):
    """Base class for onboarding engine errors."""


class SessionNotStartedError(OnboardingError):
    """An utterance arrived before start() was called."""


class SessionBusyError(OnboardingError):
    """An utterance arrived while the previous one was still being processed."""


class SessionClosedError(OnboardingError):
    """An utterance arrived after the session was completed."""
