"""Logging setup.

Two levels are configurable: the service loggers (om.*) and the HTTP access
logger (om.request), which is usually kept quieter.
"""

import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(service_level: str = "INFO", http_level: str = "WARNING") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "om": {
                    "handlers": ["console"],
                    "level": service_level.upper(),
                    "propagate": False,
                },
                "om.request": {
                    "handlers": ["console"],
                    "level": http_level.upper(),
                    "propagate": False,
                },
            },
        }
    )
