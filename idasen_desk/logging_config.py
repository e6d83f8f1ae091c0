"""Logging setup shared by the CLI and the MCP server."""

import logging
import logging.config
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logging_config(level: str = "INFO") -> dict[str, Any]:
    """Timestamped stderr logging; bleak only reports errors."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "idasen_desk": {"handlers": ["default"], "level": level, "propagate": False},
            # Suppress bleak's internal chatter (CoreBluetooth race warnings)
            "bleak": {"handlers": ["default"], "level": "ERROR", "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["default"]},
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(get_logging_config(level))
