"""
Tests for the onboarding question script and question schema validation.
"""
import unittest

from sparks_onboarding.onboarding.script import (
    ONBOARDING_QUESTIONS, get_onboarding_questions, get_initial_question,
    get_next_question, get_question_by_id, get_question_for_field, get_question_index
)
from sparks_onboarding.onboarding.schemas import (
    OnboardingQuestion, ResponseModality, MandatoryField
)


class TestOnboardingScript(unittest.TestCase):

    def test_script_order(self):
        ids = [q.id for q in get_onboarding_questions()]
        self.assertEqual(ids, ["q1", "q2", "q3", "q4", "q5", "q6", "q7"])

    def test_initial_question_asks_for_name(self):
        question = get_initial_question()
        self.assertEqual(question.id, "q1")
        self.assertEqual(question.collects, MandatoryField.NAME)
        self.assertEqual(question.audio_prompt, "intro_name.mp3")

    def test_mandatory_questions_come_first(self):
        collected = [q.collects for q in ONBOARDING_QUESTIONS[:3]]
        self.assertEqual(collected, [MandatoryField.NAME, MandatoryField.AGE, MandatoryField.LOCATION])
        self.assertTrue(all(q.collects is None for q in ONBOARDING_QUESTIONS[3:]))

    def test_only_q6_is_multiple_choice(self):
        for question in ONBOARDING_QUESTIONS:
            if question.id == "q6":
                self.assertEqual(question.response_modality, ResponseModality.MULTIPLE_CHOICE)
                self.assertEqual(len(question.options), 4)
            else:
                self.assertEqual(question.response_modality, ResponseModality.VOICE)
                self.assertIsNone(question.options)

    def test_next_question(self):
        self.assertEqual(get_next_question(ONBOARDING_QUESTIONS[0]).id, "q2")
        self.assertIsNone(get_next_question(ONBOARDING_QUESTIONS[-1]))

    def test_lookup_by_id(self):
        self.assertEqual(get_question_by_id("q5").mapped_trait, "extraversion")
        self.assertIsNone(get_question_by_id("q99"))

    def test_question_for_field(self):
        for mandatory_field in MandatoryField:
            question = get_question_for_field(mandatory_field)
            self.assertEqual(question.id, mandatory_field.question_id)
            self.assertEqual(question.collects, mandatory_field)

    def test_unknown_question_index(self):
        stranger = OnboardingQuestion(id="qx", text="Who?")
        with self.assertRaises(ValueError):
            get_question_index(stranger)


class TestOnboardingQuestionValidation(unittest.TestCase):

    def test_multiple_choice_requires_options(self):
        with self.assertRaises(ValueError):
            OnboardingQuestion(id="x", text="Pick", response_modality=ResponseModality.MULTIPLE_CHOICE)

    def test_options_require_multiple_choice(self):
        with self.assertRaises(ValueError):
            OnboardingQuestion(id="x", text="Say", options=("a", "b"))

    def test_unknown_trait(self):
        with self.assertRaises(ValueError):
            OnboardingQuestion(id="x", text="Say", mapped_trait="charisma")

    def test_questions_are_immutable(self):
        with self.assertRaises(AttributeError):
            ONBOARDING_QUESTIONS[0].text = "changed"


if __name__ == "__main__":
    unittest.main()
