"""
Sparks Onboarding Configuration
===============================

This file contains ALL configuration for the onboarding conversation engine.
- User settings at the top (things admins might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# USER SETTINGS - Edit these to customize the onboarding flow
# =============================================================================

# Optional: API key for the text-completion provider (OpenAI / Anthropic)
API_KEY = None
AI_MODEL = "gpt-4o"  # gpt-4o, gpt-3.5-turbo, claude-3-sonnet, gemini-2.5-flash-lite

# Only needed for gemini models (Vertex AI)
GOOGLE_CLOUD_PROJECT = None
GOOGLE_APPLICATION_CREDENTIALS = None

# Session settings
TIME_LIMIT_SECONDS = 300

# Logging
LOG_FILE = "./_onboarding/onboarding.log"
LOG_LEVEL = "INFO"


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# Time budget bounds enforced by the configuration surface
MIN_TIME_LIMIT_SECONDS = 60
MAX_TIME_LIMIT_SECONDS = 600

# Conversation pressure
URGENT_REMAINING_SECONDS = 60   # always re-ask missing fields below this
WRAP_UP_REMAINING_SECONDS = 30  # finish open conversation below this
REASK_PROBABILITY = 0.5

# Personality heuristics
TRAIT_INITIAL_VALUE = 0.5
TRAIT_INCREMENT = 0.05
EXPRESSIVE_WORD_COUNT = 25
ANALYTICAL_AVG_WORD_LENGTH = 6.0

# Target audience (exclusive bounds)
MIN_AGE_EXCLUSIVE = 0
MAX_AGE_EXCLUSIVE = 18

# Placeholder profile values used on forced completion
DEFAULT_PROFILE_NAME = "User"
DEFAULT_PROFILE_AGE = 16
DEFAULT_PROFILE_LOCATION = "Unknown"
DEFAULT_PROFILE_BIO = "I'm excited to connect with new friends!"
DEFAULT_PROFILE_IMAGE = "/placeholder.svg"
DEFAULT_INTERESTS = ("music", "travel", "movies")

# LLM
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
VERTEX_LOCATION = "us-central1"
LLM_TIMEOUT = 30
LLM_TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 150


def clamp_time_limit(seconds: int) -> int:
    """Clamp a session time limit into the supported range."""
    return max(MIN_TIME_LIMIT_SECONDS, min(MAX_TIME_LIMIT_SECONDS, int(seconds)))


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

@dataclass(frozen=True)
class ConfigSnapshot:
    """Read-only view of the settings a session needs at start."""
    has_api_key: bool
    model: str
    time_limit_seconds: int


@dataclass
class Config:
    """Main configuration object."""
    api_key: Optional[str] = API_KEY
    ai_model: str = AI_MODEL
    time_limit_seconds: int = TIME_LIMIT_SECONDS
    google_cloud_project: Optional[str] = GOOGLE_CLOUD_PROJECT
    google_application_credentials: Optional[str] = GOOGLE_APPLICATION_CREDENTIALS
    reask_probability: float = REASK_PROBABILITY
    llm_timeout: int = LLM_TIMEOUT
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL

    def __post_init__(self):
        self.time_limit_seconds = clamp_time_limit(self.time_limit_seconds)

    @property
    def is_llm_configured(self) -> bool:
        """Whether a text-completion provider can be reached with these settings."""
        if "gemini" in self.ai_model:
            return bool(self.google_cloud_project)
        return bool(self.api_key)

    def snapshot(self) -> ConfigSnapshot:
        return ConfigSnapshot(
            has_api_key=bool(self.api_key),
            model=self.ai_model,
            time_limit_seconds=self.time_limit_seconds,
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer number of seconds, got {raw!r}")


def get_config() -> Config:
    """Load configuration, letting environment variables override the settings above."""
    return Config(
        api_key=os.getenv("SPARKS_API_KEY") or API_KEY,
        ai_model=os.getenv("SPARKS_AI_MODEL") or AI_MODEL,
        time_limit_seconds=_env_int("SPARKS_TIME_LIMIT", TIME_LIMIT_SECONDS),
        google_cloud_project=os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT,
        google_application_credentials=(
            os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or GOOGLE_APPLICATION_CREDENTIALS
        ),
        log_file=os.getenv("SPARKS_LOG_FILE") or LOG_FILE,
        log_level=os.getenv("SPARKS_LOG_LEVEL") or LOG_LEVEL,
    )
