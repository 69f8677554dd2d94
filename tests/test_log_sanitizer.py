"""Tests for log sanitization helpers."""

import pytest

from utils.log_sanitizer import mask_topic, mask_url, sanitize_log


class TestSanitizeLog:

    def test_empty_passthrough(self):
        assert sanitize_log("") == ""
        assert sanitize_log(None) is None

    def test_redacts_bearer_token(self):
        assert sanitize_log("Authorization: Bearer abc.def-123") == "Authorization: Bearer [REDACTED]"

    def test_redacts_key_value_secret(self):
        assert "hunter2hunter2" not in sanitize_log("token=hunter2hunter2")

    def test_masks_known_secrets(self):
        text = "Client error '429 Too Many Requests' for url 'https://ntfy.sh/fitbuddy-abc123'"

        result = sanitize_log(text, ["fitbuddy-abc123"])

        assert "fitbuddy-abc123" not in result
        assert "https://ntfy.sh/fit" in result

    def test_none_secret_ignored(self):
        assert sanitize_log("plain message", [None, ""]) == "plain message"


@pytest.mark.parametrize("topic,expected", [
    ("fitbuddy-abc123", "fit************"),
    ("abcd", "****"),
    ("", "(none)"),
    (None, "(none)"),
])
def test_mask_topic(topic, expected):
    assert mask_topic(topic) == expected


@pytest.mark.parametrize("url,expected", [
    ("https://relay.example/push/secret-id?key=1", "https://relay.example/..."),
    ("not a url", "[URL]"),
    (None, "(none)"),
])
def test_mask_url(url, expected):
    assert mask_url(url) == expected
