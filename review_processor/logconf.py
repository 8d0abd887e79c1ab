import logging
from logging.config import dictConfig

from review_processor.settings import settings

dictConfig({
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "std": {
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "std",
        }
    },
    "loggers": {
        # request lines from the HTTP client are noise at INFO
        "httpx": {"level": "WARNING"},
    },
    "root": {
        "level": settings.log_level.upper(),
        "handlers": ["console"],
    },
})

logger = logging.getLogger("review_processor")
