import json
import logging

from reflection_engine.config import Settings
from reflection_engine.log import JSONFormatter, setup_logging


def test_json_formatter_emits_fields():
    record = logging.LogRecord("reflection_engine.metrics", logging.INFO, __file__, 10, "summarized %d", (3,), None)
    payload = json.loads(JSONFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "reflection_engine.metrics"
    assert payload["message"] == "summarized 3"


def test_setup_logging_installs_single_handler():
    logger = setup_logging(level="debug", fmt="json")
    setup_logging(level="debug", fmt="json")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("REFLECTION_DUE_SOON_DAYS", "3")
    monkeypatch.setenv("REFLECTION_STEPS_GOAL", "8000")
    settings = Settings()
    assert settings.DUE_SOON_DAYS == 3
    assert settings.STEPS_GOAL == 8000
    assert settings.EXERCISE_MINUTES_GOAL == 30
