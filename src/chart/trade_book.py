"""Trade Book — pre-trade состояние по токенам.

Ключ — Token, значение — TradeState (плечо и сторона со слайдера).
Добавление нового токена не требует ветвления по строкам.
"""

from typing import Dict, Mapping, Optional

from src.core.domain.position import TradeState
from src.core.domain.price_point import Token


class TradeBook:
    """Контейнер TradeState по токенам; отсутствующий токен → TradeState()."""

    def __init__(self, trades: Optional[Mapping[Token, TradeState]] = None):
        self._trades: Dict[Token, TradeState] = dict(trades or {})

    def get(self, token: Token) -> TradeState:
        return self._trades.get(token, TradeState())

    def set(self, token: Token, trade: TradeState) -> None:
        self._trades[token] = trade

    def update(self, token: Token, **changes) -> TradeState:
        """Частичное обновление с валидацией, возвращает новый TradeState."""
        trade = TradeState(**{**self.get(token).model_dump(), **changes})
        self._trades[token] = trade
        return trade

    def __contains__(self, token: object) -> bool:
        return token in self._trades

    def __len__(self) -> int:
        return len(self._trades)
