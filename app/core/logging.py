import copy
from logging.config import dictConfig

from app.core.config import settings

# Uvicorn-compatible logging configuration
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": "uvicorn.logging.DefaultFormatter",
            "fmt": "%(levelprefix)s %(asctime)s [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "access": {
            "()": "uvicorn.logging.AccessFormatter",
            "fmt": '%(levelprefix)s %(asctime)s [%(name)s] "%(request_line)s" %(status_code)s',
        },
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stderr",
            "level": "INFO",
        },
        "access": {
            "class": "logging.StreamHandler",
            "formatter": "access",
            "stream": "ext://sys.stdout",
            "level": "INFO",
        },
        "app": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stdout",
            "level": "DEBUG",
        },
    },
    "loggers": {
        "root": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
        "app": {"handlers": ["app"], "level": "DEBUG", "propagate": False},
    },
}


def setup_logging(level: str | None = None) -> None:
    """Configures application-wide logging using dictConfig.

    ``level`` (default ``settings.log_level``) applies to the ``app`` logger tree.
    """
    config = copy.deepcopy(LOGGING_CONFIG)
    app_level = (level or settings.log_level).upper()
    config["handlers"]["app"]["level"] = app_level
    config["loggers"]["app"]["level"] = app_level
    dictConfig(config)
