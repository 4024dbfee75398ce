import logging
import json
from logging.handlers import TimedRotatingFileHandler
import os
from datetime import datetime

LOG_DIR = os.getenv("LOG_DIR", "logs")

# Attributes passed through `extra=` that end up in the JSON line
CONTEXT_FIELDS = ("actor", "role", "path", "status")


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "func": record.funcName,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logger(log_dir: str = LOG_DIR, filename: str = "carease.log", level=logging.INFO, console: bool = True):
    """
    Root logger writing JSON lines to `<log_dir>/<filename>`.
    Calling it again does not stack a second set of handlers.
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    os.makedirs(log_dir, exist_ok=True)

    path = os.path.abspath(os.path.join(log_dir, filename))
    for existing in logger.handlers:
        if isinstance(existing, TimedRotatingFileHandler) and existing.baseFilename == path:
            return logger

    # Log file rotates daily, keeps 14 days
    handler = TimedRotatingFileHandler(
        filename=path,
        when="midnight",
        backupCount=14,
        encoding="utf-8"
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(JsonFormatter())
        logger.addHandler(stream)

    return logger
