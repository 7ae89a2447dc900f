import json
import logging

from pitch_proxy.logging_utils import log_event


def test_log_event_is_json_line(caplog):
    with caplog.at_level(logging.INFO, logger="pitch_proxy"):
        log_event("cache_hit", endpoint="gemini", key="abc123")

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["event"] == "cache_hit"
    assert payload["endpoint"] == "gemini"
    assert "ts" in payload


def test_sensitive_fields_are_redacted(caplog):
    with caplog.at_level(logging.INFO, logger="pitch_proxy"):
        log_event("debug", token="eyJhbGciOi", prompt="my secret idea", api_key="sk-123")

    message = caplog.records[-1].getMessage()
    assert "eyJhbGciOi" not in message
    assert "my secret idea" not in message
    assert "sk-123" not in message
    assert json.loads(message)["token"] == "[REDACTED]"
