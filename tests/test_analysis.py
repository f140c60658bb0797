"""
Tests for profile extraction, personality estimation and interest suggestions.
"""
import unittest

from sparks_onboarding.onboarding.analysis import (
    extract_profile_info, parse_age_answer, classify_communication_style,
    PersonalityEstimator, match_interests, suggest_interests
)
from sparks_onboarding.onboarding.schemas import (
    MandatoryField, PersonalityTraits, CommunicationStyle
)


class TestExtractProfileInfo(unittest.TestCase):
    """Name, age and location extraction from free-form text."""

    def test_name_from_introduction(self):
        extracted = extract_profile_info("My name is Alex")
        self.assertEqual(extracted.name, "Alex")
        self.assertIsNone(extracted.age)
        self.assertIsNone(extracted.location)
        self.assertEqual(extracted.matched_field, MandatoryField.NAME)

    def test_name_is_capitalized(self):
        self.assertEqual(extract_profile_info("call me jordan").name, "Jordan")

    def test_typographic_apostrophe(self):
        self.assertEqual(extract_profile_info("I’m Maya").name, "Maya")

    def test_age_with_years_old(self):
        extracted = extract_profile_info("I'm 15 years old")
        self.assertEqual(extracted.age, 15)
        self.assertIsNone(extracted.name)

    def test_bare_years_old(self):
        self.assertEqual(extract_profile_info("turning 16 years old soon").age, 16)

    def test_age_out_of_range_is_discarded(self):
        self.assertIsNone(extract_profile_info("I am 25 years old").age)
        self.assertIsNone(extract_profile_info("I am 0").age)
        self.assertIsNone(extract_profile_info("I'm 18").age)

    def test_location(self):
        self.assertEqual(extract_profile_info("I live in Boston").location, "Boston")

    def test_from_is_not_a_name(self):
        extracted = extract_profile_info("I'm from Boston")
        self.assertIsNone(extracted.name)
        self.assertEqual(extracted.location, "Boston")

    def test_all_fields_in_one_utterance(self):
        extracted = extract_profile_info("My name is Alex, I am 14 and I live in Denver")
        self.assertEqual(extracted.fields, {
            MandatoryField.NAME: "Alex",
            MandatoryField.AGE: 14,
            MandatoryField.LOCATION: "Denver",
        })
        self.assertEqual(extracted.matched_field, MandatoryField.LOCATION)

    def test_no_match(self):
        extracted = extract_profile_info("I like turtles")
        self.assertTrue(extracted.is_empty())
        self.assertIsNone(extracted.matched_field)

    def test_empty_text(self):
        self.assertTrue(extract_profile_info("").is_empty())


class TestParseAgeAnswer(unittest.TestCase):

    def test_direct_answer(self):
        self.assertEqual(parse_age_answer("15"), 15)
        self.assertEqual(parse_age_answer("about 13 I guess"), 13)

    def test_rejects_out_of_range(self):
        self.assertIsNone(parse_age_answer("42"))
        self.assertIsNone(parse_age_answer("0"))

    def test_no_number(self):
        self.assertIsNone(parse_age_answer("not telling"))


class TestCommunicationStyle(unittest.TestCase):

    def test_empty_is_concise(self):
        self.assertEqual(classify_communication_style(""), CommunicationStyle.CONCISE)

    def test_long_answer_is_expressive(self):
        text = " ".join(["word"] * 26)
        self.assertEqual(classify_communication_style(text), CommunicationStyle.EXPRESSIVE)

    def test_exactly_twenty_five_words_is_not_expressive(self):
        text = " ".join(["word"] * 25)
        self.assertEqual(classify_communication_style(text), CommunicationStyle.CONCISE)

    def test_long_words_are_analytical(self):
        text = "Photosynthesis fundamentally transforms sunlight"
        self.assertEqual(classify_communication_style(text), CommunicationStyle.ANALYTICAL)

    def test_average_counts_the_separating_spaces(self):
        # 13 characters over 2 words
        self.assertEqual(classify_communication_style("abcdef abcdef"), CommunicationStyle.ANALYTICAL)

    def test_question_is_inquisitive(self):
        self.assertEqual(classify_communication_style("why not?"), CommunicationStyle.INQUISITIVE)

    def test_word_count_takes_priority_over_question(self):
        text = " ".join(["what"] * 30) + "?"
        self.assertEqual(classify_communication_style(text), CommunicationStyle.EXPRESSIVE)

    def test_short_plain_is_concise(self):
        self.assertEqual(classify_communication_style("hi there"), CommunicationStyle.CONCISE)


class TestPersonalityEstimator(unittest.TestCase):

    def setUp(self):
        self.estimator = PersonalityEstimator()
        self.traits = PersonalityTraits()

    def test_keyword_bumps_trait(self):
        bumped = self.estimator.update(self.traits, "I love to explore")
        self.assertEqual(bumped, ["openness"])
        self.assertAlmostEqual(self.traits.openness, 0.55)
        self.assertAlmostEqual(self.traits.extraversion, 0.5)

    def test_one_bump_per_trait_per_utterance(self):
        self.estimator.update(self.traits, "new art, new ideas, creative and curious")
        self.assertAlmostEqual(self.traits.openness, 0.55)

    def test_multiple_traits(self):
        bumped = self.estimator.update(self.traits, "Meeting new people")
        self.assertEqual(set(bumped), {"openness", "extraversion"})

    def test_capped_at_one(self):
        self.traits.openness = 0.98
        self.estimator.update(self.traits, "something new")
        self.assertEqual(self.traits.openness, 1.0)

    def test_sets_communication_style(self):
        self.estimator.update(self.traits, "why?")
        self.assertEqual(self.traits.communication_style, CommunicationStyle.INQUISITIVE)

    def test_custom_increment(self):
        PersonalityEstimator(increment=0.2).update(self.traits, "I worry a lot")
        self.assertAlmostEqual(self.traits.neuroticism, 0.7)


class TestInterests(unittest.TestCase):

    def test_matches_in_category_order(self):
        self.assertEqual(match_interests("I play soccer and guitar"), ["music", "sports"])

    def test_multiword_keyword(self):
        self.assertIn("gaming", match_interests("I play video games"))

    def test_defaults_when_nothing_matches(self):
        self.assertEqual(match_interests("hello"), [])
        self.assertEqual(suggest_interests("hello"), ["music", "travel", "movies"])

    def test_suggest_uses_matches(self):
        self.assertEqual(suggest_interests("I love baking"), ["cooking"])


if __name__ == "__main__":
    unittest.main()
