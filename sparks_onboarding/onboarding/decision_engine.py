"""
Reply generation for the onboarding conversation.
"""
import json
import random
import logging
from dataclasses import dataclass
from typing import Optional

from .schemas import ReplyContext, MandatoryField
from .prompts import OnboardingPrompts, ReplyTemplates
from .services import AIConnectorService

logger = logging.getLogger("decision_engine")


@dataclass
class GeneratedReply:
    """Reply text plus where it came from."""
    text: str
    generated: bool = False
    error: Optional[Exception] = None


class ResponseEngine:
    """Words the system's reply, via text completion when available, templates otherwise."""

    def __init__(self,
                 connector: Optional[AIConnectorService] = None,
                 prompt_engine: Optional['PromptEngine'] = None,
                 rng: Optional[random.Random] = None):
        self.connector = connector or AIConnectorService()
        self.prompt_engine = prompt_engine or PromptEngine()
        self.rng = rng or random.Random()

    def generate_reply(self, context: ReplyContext) -> GeneratedReply:
        """
        Produce the reply for one utterance. Never raises for provider problems.

        A single completion attempt is made; any failure or empty text falls
        back to a local template.
        """
        if not self.connector.is_configured:
            return GeneratedReply(self._template_reply(context))

        prompt = self.prompt_engine.build_reply_prompt(context)
        context_json = self.prompt_engine.build_context_json(context)

        try:
            text = self.connector.generate(prompt, context_json)
        except Exception as e:
            logger.warning("Text completion failed, using template reply: %s", e)
            return GeneratedReply(self._template_reply(context), error=e)

        if not text:
            logger.warning("Text completion returned nothing, using template reply")
            return GeneratedReply(self._template_reply(context), error=ValueError("empty completion"))

        return GeneratedReply(text, generated=True)

    def _template_reply(self, context: ReplyContext) -> str:
        if context.is_scripted:
            return self._scripted_template(context)
        return self._conversation_template(context)

    def _scripted_template(self, context: ReplyContext) -> str:
        acknowledgment = self.rng.choice(OnboardingPrompts.acknowledgments())
        name = ""
        if context.question.collects == MandatoryField.NAME:
            name = str(context.collected.get(MandatoryField.NAME) or "")
        return ReplyTemplates.scripted_acknowledgment(acknowledgment, name)

    def _conversation_template(self, context: ReplyContext) -> str:
        extracted = context.extracted
        follow_up = self._next_conversation_prompt(context)

        if extracted.name:
            return ReplyTemplates.greet_name(extracted.name, follow_up)
        if extracted.age:
            return ReplyTemplates.praise_age(extracted.age, follow_up)
        if extracted.location:
            return ReplyTemplates.praise_location(extracted.location, follow_up)

        return self.rng.choice(OnboardingPrompts.fallback_messages()["generic_conversation"])

    def _next_conversation_prompt(self, context: ReplyContext) -> str:
        """Steer toward the first missing mandatory field."""
        messages = OnboardingPrompts.fallback_messages()
        order = [MandatoryField.NAME, MandatoryField.AGE, MandatoryField.LOCATION]
        for idx, mandatory_field in enumerate(order):
            if mandatory_field in context.missing_fields:
                return messages["missing_field_prompts"][idx]
        return messages["all_fields_prompt"][0]


class PromptEngine:
    """Handles prompt generation and templating."""

    def build_reply_prompt(self, context: ReplyContext) -> str:
        """
        Build the prompt embedding the last exchange, missing fields and time pressure.
        """
        return OnboardingPrompts.reply_prompt(
            question=context.question.text if context.question else "",
            response=context.response,
            missing_fields=[f.value for f in context.missing_fields],
            remaining_seconds=int(context.remaining_seconds),
            next_question=context.next_question.text if context.next_question else "",
        )

    def build_context_json(self, context: ReplyContext) -> str:
        """Advisory context blob: recent history, collected fields, personality."""
        payload = {
            "history": [
                {"question": question, "response": response}
                for question, response in context.get_recent_history()
            ],
            "collected": {f.value: value for f, value in context.collected.items()},
            "missing_fields": [f.value for f in context.missing_fields],
            "personality": context.personality.to_dict(),
            "remaining_seconds": int(context.remaining_seconds),
        }
        return json.dumps(payload, ensure_ascii=False)
