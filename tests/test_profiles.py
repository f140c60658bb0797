"""
Tests for user profile assembly.
"""
import unittest

from sparks_onboarding.infrastructure.data import UserProfile, build_user_profile, new_user_id


class TestBuildUserProfile(unittest.TestCase):

    def test_all_defaults(self):
        profile = build_user_profile()
        self.assertTrue(profile.id.startswith("user-"))
        self.assertEqual(profile.name, "User")
        self.assertEqual(profile.age, 16)
        self.assertEqual(profile.location, "Unknown")
        self.assertEqual(profile.bio, "I'm excited to connect with new friends!")
        self.assertEqual(profile.interests, ["music", "travel", "movies"])
        self.assertEqual(profile.profile_image, "/placeholder.svg")
        self.assertEqual(profile.personality, {})

    def test_collected_values(self):
        profile = build_user_profile(
            name="Alex", age=15, location="Boston",
            interests=["art", "music", "art"],
            personality={"openness": 0.6},
            user_id="user-1",
        )
        self.assertEqual(profile.id, "user-1")
        self.assertEqual(profile.name, "Alex")
        self.assertEqual(profile.age, 15)
        self.assertEqual(profile.interests, ["art", "music"])
        self.assertEqual(profile.personality, {"openness": 0.6})

    def test_to_dict(self):
        data = build_user_profile(name="Alex", user_id="user-1").to_dict()
        self.assertEqual(data["id"], "user-1")
        self.assertEqual(data["name"], "Alex")
        self.assertIn("profile_image", data)

    def test_new_user_id(self):
        self.assertRegex(new_user_id(), r"^user-\d+$")

    def test_profile_defaults_are_not_shared(self):
        first = UserProfile(id="a", name="A", age=14, location="X")
        second = UserProfile(id="b", name="B", age=14, location="Y")
        first.interests.append("gaming")
        self.assertNotIn("gaming", second.interests)


if __name__ == "__main__":
    unittest.main()
