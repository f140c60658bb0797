"""
Sparks Onboarding: guided onboarding conversation engine for Sparks Fly.

Walks a new user through a short scripted conversation, collects their name,
age and location, estimates a personality profile, and assembles a user
profile within a fixed time budget.
"""

__version__ = "1.0.0"

# Main entry points
from .onboarding.orchestrator import OnboardingOrchestrator
from .onboarding.session import OnboardingSession
from .onboarding.models import OnboardingResult
from .infrastructure.data import UserProfile

__all__ = ["OnboardingOrchestrator", "OnboardingSession", "OnboardingResult", "UserProfile"]
