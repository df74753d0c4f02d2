"""
Structured logging (structlog поверх stdlib logging).

configure_logging вызывается при создании ChartSession (или хостом раньше,
со своими настройками); повторные вызовы игнорируются.
"""

import logging
import sys
from typing import Optional

import structlog

from src.core.config.settings import ChartSettings, LogFormat

_logging_configured = False


def configure_logging(settings: Optional[ChartSettings] = None) -> None:
    """Настройка structlog: уровень и формат вывода из ChartSettings."""
    global _logging_configured

    if _logging_configured:
        return

    settings = settings or ChartSettings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=settings.log_level,
    )

    if settings.log_format == LogFormat.CONSOLE:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structured logger для модуля."""
    return structlog.get_logger(name)
