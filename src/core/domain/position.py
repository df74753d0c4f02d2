"""
Position — снапшот позиции и pre-trade состояние сделки

Immutable Pydantic модели:
- PositionSnapshot: открытая позиция от внешнего position-tracking источника
  (backend open positions). Read-only на время одного evaluation.
- TradeState: локальное pre-trade состояние (слайдер leverage, сторона).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Side(str, Enum):
    """Направление позиции"""

    LONG = "long"
    SHORT = "short"


# =============================================================================
# MODELS
# =============================================================================


class PositionSnapshot(BaseModel):
    """
    Снапшот позиции.

    liquidation_price — цена ликвидации, сообщённая биржей (если есть).
    Клиентская оценка используется только когда её нет.
    """

    entry_price: float = Field(..., gt=0, description="Цена входа")
    leverage: float = Field(..., ge=1, description="Плечо позиции")
    side: Side = Field(..., description="Направление (long/short)")
    is_open: bool = Field(True, description="Флаг открытой позиции")
    liquidation_price: Optional[float] = Field(
        None, gt=0, description="Цена ликвидации от биржи (nullable)"
    )

    model_config = {"frozen": True}


class TradeState(BaseModel):
    """Pre-trade состояние для одного токена."""

    leverage: float = Field(1.0, ge=1, description="Выбранное плечо")
    side: Side = Field(Side.SHORT, description="Выбранное направление")

    model_config = {"frozen": True}
