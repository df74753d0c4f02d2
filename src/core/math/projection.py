"""
Viewport Projection — цена → пиксельное смещение

Линейное отображение цены в вертикальное смещение внутри RenderBand:
    ratio  = (price - y_min) / (y_max - y_min)
    offset = top + plot_area_px * (1 - ratio)

Цена растёт вверх, пиксели растут вниз: инверсия (1 - ratio) обязательна.
y_max проецируется в band.top, y_min — в band.top + plot_area_px.

Также: метки оси Y и полоса предупреждения о ликвидации.
"""

from typing import Final

from src.core.domain.position import Side
from src.core.domain.price_point import Token
from src.core.domain.viewport import (
    AxisTick,
    PnlGridLine,
    RenderBand,
    Viewport,
    WarningBand,
)
from src.core.math.numerical_safeguards import is_valid_float, normalize_to_range

# Количество секций оси Y по умолчанию (5 меток)
DEFAULT_AXIS_SECTIONS: Final[int] = 4


# =============================================================================
# PROJECTION
# =============================================================================


def project_price(price: float, viewport: Viewport, band: RenderBand) -> float:
    """
    Вертикальное пиксельное смещение цены.

    Цены вне viewport проецируются за пределы plot area (без обрезки),
    решение о скрытии таких линий принимает слой отрисовки.

    Args:
        price: Цена
        viewport: Видимый диапазон
        band: Пиксельная полоса отрисовки

    Returns:
        Смещение от верха графика (px)

    Raises:
        ValueError: Если price NaN/Inf

    Examples:
        >>> vp = Viewport(y_min=88.0, y_max=112.0)
        >>> project_price(112.0, vp, RenderBand())
        20.0
        >>> project_price(88.0, vp, RenderBand())
        180.0
    """
    if not is_valid_float(price):
        raise ValueError(f"price must be a valid float (not NaN/Inf), got {price}")

    ratio = normalize_to_range(price, viewport.y_min, viewport.y_max)
    return band.top + band.plot_area_px * (1.0 - ratio)


# =============================================================================
# ФОРМАТИРОВАНИЕ
# =============================================================================


def axis_decimals(token: Token) -> int:
    """Знаков после запятой для меток оси Y: BTC — 1, остальные — 3."""
    return 1 if token == Token.BTC else 3


def format_price(price: float, decimals: int = 2) -> str:
    """
    Examples:
        >>> format_price(104250.5, 1)
        '$104,250.5'
    """
    return f"${price:,.{decimals}f}"


def format_pnl_label(line: PnlGridLine) -> str:
    """
    Подпись линии PnL-сетки.

    Examples:
        >>> format_pnl_label(PnlGridLine(pnl_pct=25.0, price=102.5))
        '+25% PnL → $102.50'
    """
    pct = line.pnl_pct + 0.0  # -0.0 → 0.0
    sign = "+" if pct > 0 else ""
    return f"{sign}{pct:g}% PnL → {format_price(line.price)}"


# =============================================================================
# OVERLAYS
# =============================================================================


def axis_ticks(
    viewport: Viewport,
    band: RenderBand,
    token: Token,
    sections: int = DEFAULT_AXIS_SECTIONS,
) -> list[AxisTick]:
    """
    Равномерные метки оси Y от y_min до y_max.

    Returns:
        sections + 1 меток, по возрастанию цены

    Raises:
        ValueError: Если sections < 1
    """
    if sections < 1:
        raise ValueError(f"sections must be >= 1, got {sections}")

    decimals = axis_decimals(token)
    ticks = []
    for i in range(sections + 1):
        value = viewport.y_min + viewport.range * i / sections
        ticks.append(
            AxisTick(
                value=value,
                offset_px=project_price(value, viewport, band),
                label=format_price(value, decimals),
            )
        )
    return ticks


def warning_band(liquidation_px: float, side: Side, band: RenderBand) -> WarningBand:
    """
    Полоса предупреждения между линией ликвидации и краем plot area.

    LONG ликвидируется при падении: полоса от линии вниз до низа plot area.
    SHORT ликвидируется при росте: полоса от верха plot area до линии.
    Высота не бывает отрицательной (линия за пределами графика → 0).
    """
    if side == Side.LONG:
        return WarningBand(
            top_px=liquidation_px,
            height_px=max(0.0, band.plot_bottom_px - liquidation_px),
        )
    return WarningBand(
        top_px=band.top,
        height_px=max(0.0, liquidation_px - band.top),
    )
