"""
Domain models and value objects.

Contains chart domain entities: PricePoint, PositionSnapshot, Viewport, overlays.
"""

from src.core.domain.position import PositionSnapshot, Side, TradeState
from src.core.domain.price_point import PricePoint, Token
from src.core.domain.viewport import (
    AxisTick,
    LeverageLensConfig,
    PnlGridLine,
    RenderBand,
    Viewport,
    WarningBand,
)

__all__ = [
    # Position
    "PositionSnapshot",
    "Side",
    "TradeState",
    # Price
    "PricePoint",
    "Token",
    # Viewport
    "LeverageLensConfig",
    "Viewport",
    "RenderBand",
    "PnlGridLine",
    "AxisTick",
    "WarningBand",
]
