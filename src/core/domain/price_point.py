"""
PricePoint — точка ценового ряда

Immutable модель, поступающая от исторического или real-time фида.
Ряд упорядочен по timestamp, последняя точка — самая свежая.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PricePoint(BaseModel):
    """Цена с опциональным timestamp (UTC, миллисекунды)."""

    value: float = Field(..., gt=0, description="Цена")
    timestamp: Optional[int] = Field(
        None, ge=0, description="Время точки (UTC, миллисекунды, nullable)"
    )

    model_config = {"frozen": True}


class Token(str, Enum):
    """
    Поддерживаемые perp-рынки.

    Значение enum — ключ токена; market_symbol — символ рынка на бэкенде.
    """

    SOL = "sol"
    ETH = "eth"
    BTC = "btc"

    @property
    def display_symbol(self) -> str:
        return self.value.upper()

    @property
    def market_symbol(self) -> str:
        return f"{self.display_symbol}-PERP"
