import os
import unittest
from unittest.mock import patch

from app.core.config import Settings, get_settings


class TestSettings(unittest.TestCase):
    def test_reads_environment(self):
        env = {
            "BEDTALE_API_KEY": "key-a, key-b",
            "GEMINI_API_KEY": "text-key",
            "GEMINI_VIDEO_API_KEY": "",
            "BEDTALE_VIDEO_ENABLED": "false",
            "BEDTALE_MAX_ATTEMPTS": "4",
            "BEDTALE_BACKOFF_BASE_SEC": "0.5",
            "BEDTALE_CHILD_NAME_MAX_LEN": "12",
        }
        with patch.dict(os.environ, env, clear=False):
            settings = get_settings()

        self.assertEqual(settings.api_keys, ("key-a", "key-b"))
        self.assertEqual(settings.gemini_api_key, "text-key")
        self.assertEqual(settings.video_api_key, "text-key")
        self.assertFalse(settings.video_enabled)
        self.assertFalse(settings.video_configured)
        self.assertEqual(settings.max_attempts, 4)
        self.assertEqual(settings.backoff_base_sec, 0.5)
        self.assertEqual(settings.child_name_max_len, 12)

    def test_bad_values_fall_back_to_defaults(self):
        env = {
            "BEDTALE_MAX_ATTEMPTS": "zero",
            "BEDTALE_VIDEO_WORKERS": "0",
            "BEDTALE_VIDEO_ENABLED": "maybe",
        }
        with patch.dict(os.environ, env, clear=False):
            settings = get_settings()

        self.assertEqual(settings.max_attempts, 3)
        self.assertEqual(settings.video_workers, 2)
        self.assertTrue(settings.video_enabled)

    def test_video_configured_needs_flag_and_key(self):
        self.assertFalse(Settings(video_api_key="").video_configured)
        self.assertFalse(Settings(video_api_key="k", video_enabled=False).video_configured)
        self.assertTrue(Settings(video_api_key="k").video_configured)

    def test_properties_are_limited_to_derived_video_flag(self):
        properties = {
            name for name, value in vars(Settings).items() if isinstance(value, property)
        }
        self.assertEqual(properties, {"video_configured"})


if __name__ == "__main__":
    unittest.main()
