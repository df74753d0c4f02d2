"""Конфигурация leverage lens."""

from src.core.config.settings import ChartSettings, LogFormat, get_settings

__all__ = [
    "ChartSettings",
    "LogFormat",
    "get_settings",
]
