"""
Tests for log file setup.
"""
import os
import shutil
import logging
import tempfile
import unittest

from sparks_onboarding.utils import setup_logging


class TestSetupLogging(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level

    def tearDown(self):
        for handler in self.root.handlers:
            handler.close()
        self.root.handlers[:] = self.saved_handlers
        self.root.setLevel(self.saved_level)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_creates_directory_and_writes(self):
        path = os.path.join(self.temp_dir, "nested", "onboarding.log")
        self.assertEqual(setup_logging(path, "INFO"), path)

        logging.getLogger("session").info("hello log")
        logging.getLogger("session").debug("hidden")
        for handler in self.root.handlers:
            handler.flush()

        with open(path) as f:
            contents = f.read()
        self.assertIn("INFO session - hello log", contents)
        self.assertNotIn("hidden", contents)

    def test_console_only_shows_critical(self):
        setup_logging(os.path.join(self.temp_dir, "onboarding.log"))
        console = [h for h in self.root.handlers if not isinstance(h, logging.FileHandler)]
        self.assertEqual(len(console), 1)
        self.assertEqual(console[0].level, logging.CRITICAL)


if __name__ == "__main__":
    unittest.main()
