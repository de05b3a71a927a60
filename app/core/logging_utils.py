import logging
import json
import datetime as dt
from typing import Dict, Any, Optional, Set

# LogRecord attributes that are never copied as "extra" fields
LOG_RECORD_BUILTIN_ATTRS: Set[str] = {
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "levelname", "levelno", "lineno", "module", "msecs",
    "message", "msg", "name", "pathname", "process", "processName",
    "relativeCreated", "stack_info", "thread", "threadName", "taskName",
}

class JSONLogFormatter(logging.Formatter):
    """Formats each record as one JSON object per line.

    ``fmt_keys`` maps output keys to LogRecord attribute names, e.g.
    ``{"level": "levelname", "logger": "name"}``. The message and a UTC
    ISO timestamp are always present; anything passed through ``extra=``
    is appended as-is.
    """

    def __init__(self, *, fmt_keys: Optional[Dict[str, str]] = None, datefmt: Optional[str] = None):
        super().__init__(datefmt=datefmt)
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(self._build_payload(record), default=str)

    def _build_payload(self, record: logging.LogRecord) -> Dict[str, Any]:
        base_fields: Dict[str, Any] = {"message": record.getMessage()}
        if self.datefmt:
            base_fields["timestamp"] = self.formatTime(record, self.datefmt)
        else:
            base_fields["timestamp"] = dt.datetime.fromtimestamp(
                record.created, tz=dt.timezone.utc
            ).isoformat()

        if record.exc_info:
            base_fields["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            base_fields["stack_info"] = self.formatStack(record.stack_info)

        payload: Dict[str, Any] = {}
        for out_key, attr_name in self.fmt_keys.items():
            if attr_name in base_fields:
                payload[out_key] = base_fields[attr_name]
                continue
            value = getattr(record, attr_name, None)
            if value is not None:
                payload[out_key] = value

        mapped_attrs = set(self.fmt_keys.values())
        for key, value in base_fields.items():
            if key not in mapped_attrs and key not in payload:
                payload[key] = value

        # Fields passed via logger.x(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in LOG_RECORD_BUILTIN_ATTRS and key not in payload and key not in mapped_attrs:
                payload[key] = value

        return payload
