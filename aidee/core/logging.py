"""
JSON logging. Event names are the message; context goes in `extra=` and only
whitelisted keys are written out.
"""
import json
import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime, timezone

from aidee.core.config import Settings, settings

SERVICE_NAME = "aidee"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    # Keys copied from a record's extra dict
    EXTRA_FIELDS = (
        "request_id", "path", "method", "status_code", "latency_ms",
        "provider", "fallback_provider", "kind", "reason", "error",
        "endpoint", "task_id", "task_status", "attempt", "requested",
        "clamped", "delivered", "collection", "record_id", "event_type",
        "notification",
    )

    def __init__(self, app_env: str = "local") -> None:
        super().__init__()
        self.app_env = app_env

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "env": self.app_env,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (name, getattr(record, name))
            for name in self.EXTRA_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Provider error details can hold arbitrary objects.
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(app_settings: Settings | None = None) -> None:
    """Replace the root handlers with a JSON stream handler (and a rotating file, if set)."""
    app_settings = app_settings or settings
    formatter = JsonFormatter(app_settings.app_env)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if app_settings.log_file:
        handlers.append(
            RotatingFileHandler(
                app_settings.log_file,
                maxBytes=app_settings.log_max_bytes,
                backupCount=app_settings.log_backup_count,
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(app_settings.log_level.upper())
    root.handlers = handlers
