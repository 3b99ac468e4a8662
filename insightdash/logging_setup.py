"""Central logging configuration for the API process."""

from __future__ import annotations

from logging.config import dictConfig

from insightdash.config import settings

_CONFIGURED = False


def configure_logging(level: str | None = None, force: bool = False) -> None:
    """Install the console handler on the root logger (once per process)."""
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    log_level = (level or settings.LOG_LEVEL).upper()
    if settings.DEBUG and level is None:
        log_level = "DEBUG"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": log_level,
                "handlers": ["console"],
            },
        }
    )

    _CONFIGURED = True


__all__ = ["configure_logging"]
