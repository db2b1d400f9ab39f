# certperu/core/logging.py
import logging
import logging.config

from certperu.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def setup_logging(level: str | None = None) -> None:
    level = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "loggers": {
            "certperu": {"handlers": ["console"], "level": level, "propagate": False},
            # uvicorn ya trae sus propios handlers; solo alineamos el nivel
            "uvicorn": {"level": level},
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    })
