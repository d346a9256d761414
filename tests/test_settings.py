# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from shopfront.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_api_base_url_has_no_trailing_slash(self) -> None:
        """Paths are joined with '/', so the base must not end in one."""
        self.assertTrue(Settings.API_BASE_URL.startswith("http"))
        self.assertFalse(Settings.API_BASE_URL.endswith("/"))

    def test_timeouts_are_positive_floats(self) -> None:
        """Connect and response timeouts must be positive numbers."""
        for name in ("CONNECT_TIMEOUT", "RESPONSE_TIMEOUT"):
            with self.subTest(name=name):
                value = getattr(Settings, name)
                self.assertIsInstance(value, float)
                self.assertGreater(value, 0)

    def test_token_lifetime_positive(self) -> None:
        """TOKEN_EXPIRES_MINS must be >= 1."""
        self.assertGreaterEqual(Settings.TOKEN_EXPIRES_MINS, 1)

    def test_persistence_keys_distinct(self) -> None:
        """Bearer and refresh tokens live under different keys."""
        self.assertNotEqual(
            Settings.TOKEN_KEY, Settings.REFRESH_TOKEN_KEY
        )

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.DATA_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)
        self.assertIsInstance(Settings.TOKEN_STORE_PATH, Path)

    def test_default_headers_request_json(self) -> None:
        """DEFAULT_HEADERS must ask for JSON."""
        self.assertEqual(
            Settings.DEFAULT_HEADERS["Accept"], "application/json"
        )

    def test_impersonate_browser_is_string(self) -> None:
        """IMPERSONATE_BROWSER must be a non-empty string."""
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)


if __name__ == "__main__":
    unittest.main()
