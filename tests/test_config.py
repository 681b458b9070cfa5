import os
import unittest
from unittest.mock import patch

from cvcompare.config import MAX_RESUME_BYTES, load_settings


class LoadSettingsTests(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True), patch("cvcompare.config.load_dotenv"):
            settings = load_settings()
        self.assertEqual(settings.analysis_endpoint, "")
        self.assertEqual(settings.analysis_timeout, 90.0)
        self.assertEqual(settings.max_resume_bytes, MAX_RESUME_BYTES)
        self.assertEqual(settings.resume_extensions, (".pdf", ".doc", ".docx"))
        self.assertEqual(settings.rate_limit, "5/hour")
        self.assertTrue(settings.rate_limit_enabled)
        self.assertEqual(settings.log_level, "INFO")

    def test_overrides_and_bad_values(self):
        env = {
            "ANALYSIS_ENDPOINT": " https://analysis.test/run ",
            "ANALYSIS_TIMEOUT": "not-a-number",
            "MAX_RESUME_BYTES": "1024",
            "RESUME_EXTENSIONS": ".PDF, ,.txt",
            "RATE_LIMIT_ENABLED": "off",
            "LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env, clear=True), patch("cvcompare.config.load_dotenv"):
            settings = load_settings()
        self.assertEqual(settings.analysis_endpoint, "https://analysis.test/run")
        self.assertEqual(settings.analysis_timeout, 90.0)
        self.assertEqual(settings.max_resume_bytes, 1024)
        self.assertEqual(settings.resume_extensions, (".pdf", ".txt"))
        self.assertFalse(settings.rate_limit_enabled)
        self.assertEqual(settings.log_level, "DEBUG")


if __name__ == "__main__":
    unittest.main()
