"""
Viewport — модели видимой области графика

Immutable Pydantic модели:
- LeverageLensConfig: параметры минимальной ширины viewport
- Viewport: видимый ценовой диапазон [y_min, y_max]
- RenderBand: фиксированная пиксельная полоса отрисовки
- PnlGridLine / AxisTick / WarningBand: оверлеи для слоя отрисовки
"""

import math

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# CONFIG
# =============================================================================


class LeverageLensConfig(BaseModel):
    """
    Конфигурация leverage lens.

    pnl_span — половина видимого диапазона в долях equity при leverage=1
    (1.2 → ±120% цены / leverage). min_band_bps — минимальная половина
    диапазона в basis points от anchor, чтобы viewport не схлопывался
    при экстремальном leverage.
    """

    pnl_span: float = Field(1.2, gt=0, description="Множитель половины диапазона")
    min_band_bps: float = Field(
        4.0, ge=0, description="Минимальная половина диапазона (bps от anchor)"
    )

    model_config = {"frozen": True}


# =============================================================================
# VIEWPORT
# =============================================================================


class Viewport(BaseModel):
    """
    Видимый ценовой диапазон графика.

    Инвариант: y_min < y_max, оба конечные.
    """

    y_min: float = Field(..., description="Нижняя граница (цена)")
    y_max: float = Field(..., description="Верхняя граница (цена)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_bounds(self) -> "Viewport":
        if not (math.isfinite(self.y_min) and math.isfinite(self.y_max)):
            raise ValueError(
                f"Viewport bounds must be finite, got [{self.y_min}, {self.y_max}]"
            )
        if self.y_min >= self.y_max:
            raise ValueError(
                f"Viewport requires y_min < y_max, got [{self.y_min}, {self.y_max}]"
            )
        return self

    @property
    def range(self) -> float:
        return self.y_max - self.y_min

    @property
    def half_range(self) -> float:
        return (self.y_max - self.y_min) / 2.0

    @property
    def center(self) -> float:
        return (self.y_max + self.y_min) / 2.0


class RenderBand(BaseModel):
    """
    Пиксельная полоса отрисовки.

    top/bottom — отступы сверху и снизу, total_height_px — полная высота.
    Plot area = total_height_px - top - bottom, должна быть > 0.
    """

    top: float = Field(20.0, ge=0, description="Верхний отступ (px)")
    bottom: float = Field(20.0, ge=0, description="Нижний отступ (px)")
    total_height_px: float = Field(200.0, gt=0, description="Полная высота (px)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_plot_area(self) -> "RenderBand":
        if self.total_height_px - self.top - self.bottom <= 0:
            raise ValueError(
                f"Plot area must be positive: total_height_px={self.total_height_px}, "
                f"top={self.top}, bottom={self.bottom}"
            )
        return self

    @property
    def plot_area_px(self) -> float:
        return self.total_height_px - self.top - self.bottom

    @property
    def plot_bottom_px(self) -> float:
        return self.total_height_px - self.bottom


# =============================================================================
# OVERLAYS
# =============================================================================


class PnlGridLine(BaseModel):
    """Линия PnL-сетки: PnL в процентах equity и соответствующая цена."""

    pnl_pct: float = Field(..., description="PnL в процентах (например, -100.0)")
    price: float = Field(..., description="Цена уровня")

    model_config = {"frozen": True}


class AxisTick(BaseModel):
    """Метка оси Y."""

    value: float = Field(..., description="Цена")
    offset_px: float = Field(..., description="Вертикальное смещение (px)")
    label: str = Field(..., description="Отформатированная цена")

    model_config = {"frozen": True}


class WarningBand(BaseModel):
    """Полоса предупреждения между линией ликвидации и краем графика."""

    top_px: float = Field(..., description="Верх полосы (px)")
    height_px: float = Field(..., ge=0, description="Высота полосы (px)")

    model_config = {"frozen": True}
