"""Chart — состояние графика с leverage lens.

- AnchorRecenterController: anchor с гистерезисом recenter
- TradeBook: pre-trade состояние по токенам
- ChartSession: сборка ChartFrame на каждый тик
"""

from .anchor_controller import (
    AnchorMode,
    AnchorRecenterController,
    AnchorUpdate,
)
from .chart_session import (
    ChartFrame,
    ChartSession,
    LiquidationSource,
    PnlGridMark,
    PnlStatus,
)
from .trade_book import TradeBook

__all__ = [
    "AnchorMode",
    "AnchorRecenterController",
    "AnchorUpdate",
    "ChartFrame",
    "ChartSession",
    "LiquidationSource",
    "PnlGridMark",
    "PnlStatus",
    "TradeBook",
]
