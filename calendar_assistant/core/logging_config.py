"""Logging configuration for the Calendar Assistant application.
"""

import logging
import logging.config
from typing import Any, Dict

# Define logging format
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai")


def get_logging_config(level: str | int = logging.INFO) -> Dict[str, Any]:
    """Builds the dictConfig dictionary used by the app and by uvicorn.

    Args:
        level: Root log level, either a name ("DEBUG") or a logging constant.

    Returns:
        A dictionary suitable for ``logging.config.dictConfig``.
    """
    if isinstance(level, str):
        level = level.upper()

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False, # Keep existing loggers (e.g., uvicorn)
        "formatters": {
            "default": {
                "format": LOG_FORMAT,
                "datefmt": DATE_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": level,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": logging.INFO,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }
    for name in QUIET_LOGGERS:
        config["loggers"][name] = {
            "level": logging.WARNING,
            "handlers": ["console"],
            "propagate": False,
        }
    return config


def configure_logging(level: str | int = logging.INFO) -> None:
    """Applies the logging configuration to the running process."""
    logging.config.dictConfig(get_logging_config(level))
