"""Structured Logging — JSON formatting and idempotent setup."""

import json
import logging

from lamontai.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "lamontai.test", logging.WARNING, __file__, 1, "Credit consumed", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_known_extras_only():
    payload = json.loads(JSONFormatter().format(
        _record(user_id="u1", status_code=403, secret="nope"),
    ))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "lamontai.test"
    assert payload["message"] == "Credit consumed"
    assert payload["user_id"] == "u1"
    assert payload["status_code"] == 403
    assert "secret" not in payload


def test_setup_logging_does_not_duplicate_handlers():
    before = [h for h in logging.root.handlers if h.get_name() == "lamontai"]
    setup_logging("DEBUG", "text")
    setup_logging("INFO", "json")
    ours = [h for h in logging.root.handlers if h.get_name() == "lamontai"]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, JSONFormatter)
    assert logging.root.level == logging.INFO
    for handler in ours:
        logging.root.removeHandler(handler)
    for handler in before:
        logging.root.addHandler(handler)
