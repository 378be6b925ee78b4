# app/core/logging_config.py
import json
import logging
import sys
from datetime import datetime, timezone

from app.core.config import LogFormatEnum, Settings

SIMPLE_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(settings: Settings) -> None:
    """
    Configures the root logger for the application.
    Called once at startup from the application lifespan.
    """
    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == LogFormatEnum.json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))

    logging.basicConfig(level=settings.log_level.value, handlers=[handler], force=True)

    # Silence noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )
    logging.getLogger("passlib").setLevel(logging.WARNING)
