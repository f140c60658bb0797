"""
Data management infrastructure for finished onboarding profiles.
"""

from .profiles import UserProfile, build_user_profile, new_user_id

__all__ = [
    'UserProfile',
    'build_user_profile',
    'new_user_id'
]
