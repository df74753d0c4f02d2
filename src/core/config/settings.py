"""
Settings — конфигурация leverage lens

Загружается из переменных окружения (prefix LEVERAGE_LENS_, вложенные
секции через "__", например LEVERAGE_LENS_LENS__PNL_SPAN=1.5) и .env.
Immutable после создания.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.domain.viewport import LeverageLensConfig, RenderBand
from src.core.math.leverage_lens import DEFAULT_MMR


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


class ChartSettings(BaseSettings):
    """Настройки графика и leverage lens."""

    model_config = SettingsConfigDict(
        env_prefix="LEVERAGE_LENS_",
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    lens: LeverageLensConfig = LeverageLensConfig()
    render_band: RenderBand = RenderBand()

    recenter_threshold: float = Field(
        0.85, gt=0, le=1, description="Порог recenter в долях half-range"
    )
    max_leverage: float = Field(500.0, ge=1, description="Верхний предел плеча")
    maintenance_margin_ratio: float = Field(
        DEFAULT_MMR, ge=0, lt=1, description="MMR по умолчанию"
    )
    pnl_grid_span: float = Field(1.0, gt=0, description="Множитель PnL-сетки")
    axis_sections: int = Field(4, ge=1, description="Секций оси Y")

    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.JSON

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log_level: {v}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> ChartSettings:
    """Кэшированный экземпляр настроек."""
    return ChartSettings()
