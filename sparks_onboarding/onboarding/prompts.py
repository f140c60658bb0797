"""
Onboarding prompt templates and canned replies.

This module contains all the prompt text and fallback replies used by the
onboarding engine, keeping them separate from the business logic for easier
maintenance and editing.
"""

from typing import Dict, List


class OnboardingPrompts:
    """Collection of all onboarding-related prompts."""

    @staticmethod
    def system_prompt() -> str:
        """System instruction sent with every text-completion request."""
        return (
            "You are a friendly assistant helping onboard teenagers to a social app called "
            "Sparks Fly. Keep responses conversational, age-appropriate, and helpful."
        )

    @staticmethod
    def reply_prompt(
        question: str,
        response: str,
        missing_fields: List[str],
        remaining_seconds: int,
        next_question: str
    ) -> str:
        """Prompt for the reply to one user utterance."""
        asked = f'You asked: "{question}"' if question else "You are chatting freely with the user."

        if missing_fields:
            missing_note = (
                "You still need their " + ", ".join(missing_fields) +
                ". Gently steer the conversation toward that."
            )
        else:
            missing_note = "You already know their name, age and location."

        if remaining_seconds < 60:
            time_note = f"Only {remaining_seconds} seconds remain, so keep it very short and wrap up soon."
        else:
            time_note = f"About {remaining_seconds // 60} minute(s) remain in the onboarding."

        follow_up = (
            f'After your reply the app will ask: "{next_question}". Do not ask it yourself.'
            if next_question
            else "End with one short, friendly follow-up question."
        )

        return f"""
{asked}
They answered: "{response}"

{missing_note}
{time_note}
{follow_up}

Reply in one or two sentences. Respond with ONLY what you would say to them.
        """.strip()

    @staticmethod
    def acknowledgments() -> List[str]:
        return [
            "Great!",
            "Awesome!",
            "That's interesting!",
            "I love that!",
            "Thanks for sharing!",
        ]

    @staticmethod
    def fallback_messages() -> Dict[str, List[str]]:
        """Template replies used when text completion is unavailable or fails."""
        return {
            "generic_conversation": [
                "That's interesting! Tell me more about yourself.",
                "I'd love to hear more. What about where you're from?",
                "Cool! By the way, how old are you?",
                "Thanks for sharing. I don't think I caught your name?",
                "Interesting! What kinds of things do you enjoy doing for fun?",
                "I'd love to know more about your interests and hobbies.",
            ],
            "missing_field_prompts": [
                "I don't think I caught your name yet. What should I call you?",
                "How old are you?",
                "Where are you from?",
            ],
            "all_fields_prompt": [
                "What kinds of things do you enjoy doing?",
            ],
        }


    @staticmethod
    def closing_messages() -> Dict[str, str]:
        """Final words, keyed by completion reason value."""
        return {
            "profile_complete": "Awesome, that's everything I need! Your Sparks Fly profile is ready.",
            "time_low": "We're almost out of time, so I'll wrap up here. Your profile is ready!",
            "time_expired": "That's time! I've set up your profile with what we covered.",
            "user_ended": "No problem, I've saved what we talked about. See you soon!",
        }


class ReplyTemplates:
    """Local templated replies, formatted from what the engine knows."""

    @staticmethod
    def scripted_acknowledgment(acknowledgment: str, name: str = "") -> str:
        if name:
            return f"{acknowledgment} Nice to meet you, {name}!"
        return f"{acknowledgment} I'm getting to know you better."

    @staticmethod
    def greet_name(name: str, follow_up: str) -> str:
        return f"Great to meet you, {name}! {follow_up}"

    @staticmethod
    def praise_age(age: int, follow_up: str) -> str:
        return f"{age} is a great age! {follow_up}"

    @staticmethod
    def praise_location(location: str, follow_up: str) -> str:
        return f"{location} sounds like a cool place! {follow_up}"
