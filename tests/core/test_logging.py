"""Tests for JSON log output."""
import json
import logging

import pytest

from aidee.core.config import Settings
from aidee.core.logging import JsonFormatter, configure_logging


def _record(**extra):
    record = logging.LogRecord("aidee.test", logging.WARNING, __file__, 1, "image_provider_fallback", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_whitelisted_extra_fields_only(self):
        line = JsonFormatter("test").format(_record(provider="pexels", fallback_provider="unsplash", secret="x"))
        payload = json.loads(line)
        assert payload["message"] == "image_provider_fallback"
        assert payload["service"] == "aidee"
        assert payload["env"] == "test"
        assert payload["provider"] == "pexels"
        assert payload["fallback_provider"] == "unsplash"
        assert "secret" not in payload

    def test_non_serializable_detail_is_stringified(self):
        payload = json.loads(JsonFormatter().format(_record(error={"cause": ValueError("bad")})))
        assert payload["error"] == {"cause": "bad"}


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers = handlers
        root.setLevel(level)

    def test_level_and_file_handler_from_settings(self, tmp_path):
        log_file = tmp_path / "aidee.log"
        configure_logging(Settings(_env_file=None, log_level="warning", log_file=str(log_file)))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 2
        assert all(isinstance(h.formatter, JsonFormatter) for h in root.handlers)
