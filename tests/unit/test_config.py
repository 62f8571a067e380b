"""Tests for the configuration module."""

import os
import tempfile
import unittest
from unittest.mock import patch

from feedback_board.config import Settings, get_settings

ENV_NAMES = (
    "TRACKER_API_BASE_URL",
    "TRACKER_OWNER",
    "TRACKER_REPO",
    "TRACKER_TOKEN",
    "TRACKER_TIMEOUT",
    "LEDGER_PATH",
    "VERIFY_BEFORE_WRITE",
    "LOG_LEVEL",
    "DEBUG_MODE",
)


class TestSettings(unittest.TestCase):
    """Test cases for the Settings class."""

    def setUp(self):
        """Set up a clean environment without feedback board variables."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.env_path = os.path.join(self.temp_dir.name, ".env")
        clean_env = {k: v for k, v in os.environ.items() if k.upper() not in ENV_NAMES}
        self.env_patch = patch.dict(os.environ, clean_env, clear=True)
        self.env_patch.start()

    def tearDown(self):
        """Clean up test environment."""
        self.env_patch.stop()
        self.temp_dir.cleanup()

    def test_defaults(self):
        """Test the default configuration."""
        settings = Settings(_env_file=None)

        self.assertEqual(settings.tracker_api_base_url, "https://api.github.com")
        self.assertEqual(settings.tracker_owner, "")
        self.assertIsNone(settings.tracker_token)
        self.assertEqual(settings.tracker_timeout, 30)
        self.assertEqual(settings.ledger_path, "data/voted_records.json")
        self.assertFalse(settings.verify_before_write)
        self.assertEqual(settings.log_level, "INFO")

    def test_environment_overrides(self):
        """Test loading values from environment variables."""
        os.environ["TRACKER_OWNER"] = "acme"
        os.environ["TRACKER_REPO"] = "app-feedback"
        os.environ["TRACKER_TIMEOUT"] = "12"
        os.environ["verify_before_write"] = "true"

        settings = Settings(_env_file=None)

        self.assertEqual(settings.tracker_owner, "acme")
        self.assertEqual(settings.tracker_repo, "app-feedback")
        self.assertEqual(settings.tracker_timeout, 12)
        self.assertTrue(settings.verify_before_write)

    def test_load_from_env_file(self):
        """Test loading values from a .env file."""
        with open(self.env_path, "w", encoding="utf-8") as f:
            f.write("TRACKER_TOKEN=test_token\n")
            f.write("LEDGER_PATH=/tmp/votes.json\n")
            f.write("DEBUG_MODE=false\n")

        settings = Settings(_env_file=self.env_path)

        self.assertEqual(settings.tracker_token, "test_token")
        self.assertEqual(settings.ledger_path, "/tmp/votes.json")
        self.assertFalse(settings.debug_mode)

    def test_environment_beats_env_file(self):
        """Test precedence of process environment over the .env file."""
        with open(self.env_path, "w", encoding="utf-8") as f:
            f.write("TRACKER_OWNER=from_file\n")
        os.environ["TRACKER_OWNER"] = "from_env"

        settings = Settings(_env_file=self.env_path)

        self.assertEqual(settings.tracker_owner, "from_env")

    def test_get_settings_is_cached(self):
        """Test that get_settings returns a shared instance."""
        get_settings.cache_clear()
        try:
            self.assertIs(get_settings(), get_settings())
        finally:
            get_settings.cache_clear()


if __name__ == "__main__":
    unittest.main()
