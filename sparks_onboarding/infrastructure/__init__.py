"""Infrastructure components for the onboarding engine.

This module contains low-level technical components: provider clients for
text completion and the profile records produced at the end of a session.
"""

# LLM infrastructure
from .llm import LLMError, create_llm_client

# Profile records
from .data import UserProfile, build_user_profile

__all__ = [
    # LLM clients
    "LLMError", "create_llm_client",

    # Profiles
    "UserProfile", "build_user_profile"
]
