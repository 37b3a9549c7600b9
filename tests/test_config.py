"""Tests for metal_notifier/config.py."""

import unittest

from metal_notifier.config import ConfigError, is_valid_email, validate_config

VALID = dict(
    api_key="SG.key",
    email_from="admin@example.com",
    app_url="https://metal.example.com",
    max_subscribers=100,
)


class TestValidateConfig(unittest.TestCase):
    def test_valid_config(self):
        validate_config(**VALID)

    def test_invalid_settings(self):
        cases = {
            "email_from": "admin",
            "max_subscribers": 0,
            "api_key": "",
            "app_url": "",
        }
        for key, value in cases.items():
            with self.subTest(key=key):
                with self.assertRaises(ConfigError):
                    validate_config(**{**VALID, key: value})


class TestIsValidEmail(unittest.TestCase):
    def test_addresses(self):
        self.assertTrue(is_valid_email("metal.head+news@mail.example.org"))
        self.assertFalse(is_valid_email("no at sign"))
        self.assertFalse(is_valid_email("user@"))
        self.assertFalse(is_valid_email(""))


if __name__ == "__main__":
    unittest.main()
