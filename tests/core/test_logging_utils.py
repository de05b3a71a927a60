# tests/core/test_logging_utils.py
import json
import logging

from app.core.logging_utils import JSONLogFormatter

def make_record(msg="fetched %d records", args=(3,), **extra) -> logging.LogRecord:
    record = logging.LogRecord("app.test", logging.INFO, __file__, 10, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record

def test_json_formatter_maps_keys_and_extras():
    formatter = JSONLogFormatter(fmt_keys={"level": "levelname", "logger": "name"})
    output = json.loads(formatter.format(make_record(event_code="EVT1")))

    assert output["level"] == "INFO"
    assert output["logger"] == "app.test"
    assert output["message"] == "fetched 3 records"
    assert output["event_code"] == "EVT1"
    assert "timestamp" in output

def test_json_formatter_includes_exception():
    formatter = JSONLogFormatter()
    try:
        raise ValueError("bad body")
    except ValueError:
        import sys
        record = logging.LogRecord("app.test", logging.ERROR, __file__, 20, "failed", (), sys.exc_info())
    output = json.loads(formatter.format(record))
    assert "ValueError: bad body" in output["exc_info"]
