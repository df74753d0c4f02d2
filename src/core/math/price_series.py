"""
Price Series — хелперы для ценового ряда графика

- current_price_from_history: последняя цена ряда
- calculate_price_change: изменение цены от первой точки к последней
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.domain.price_point import PricePoint


@dataclass(frozen=True)
class PriceChange:
    """Изменение цены за окно ряда."""

    change: float
    change_pct: float


def current_price_from_history(points: Sequence[PricePoint]) -> Optional[float]:
    """Последняя цена ряда или None для пустого ряда."""
    if not points:
        return None
    return points[-1].value


def calculate_price_change(points: Sequence[PricePoint]) -> PriceChange:
    """
    Изменение цены от первой к последней точке.

    change_pct = (last - first) / first * 100

    Для ряда короче 2 точек возвращает нули.
    """
    if len(points) < 2:
        return PriceChange(change=0.0, change_pct=0.0)

    first = points[0].value
    last = points[-1].value
    change = last - first

    # first > 0 гарантируется PricePoint
    return PriceChange(change=change, change_pct=change / first * 100.0)
