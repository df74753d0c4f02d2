"""Chart Session — одно evaluation графика с leverage lens.

ChartSession владеет AnchorRecenterController одного графика и на каждый
тик цены / изменение позиции собирает ChartFrame для слоя отрисовки:

1. текущая цена (живая или последняя точка истории)
2. режим: post-trade (открытая позиция) или pre-trade (TradeBook)
3. плечо (clamp в [1, max_leverage]) и сторона
4. anchor (гистерезис) → viewport
5. ликвидация: биржевая / оценка от entry / проекция от текущей цены
6. PnL-сетка, метки оси Y, полоса предупреждения, пиксельные смещения
"""

from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from src.chart.anchor_controller import AnchorMode, AnchorRecenterController
from src.chart.trade_book import TradeBook
from src.core.config.settings import ChartSettings, get_settings
from src.core.domain.position import PositionSnapshot, Side
from src.core.domain.price_point import PricePoint, Token
from src.core.domain.viewport import AxisTick, RenderBand, Viewport, WarningBand
from src.core.logging import configure_logging, get_logger
from src.core.math.leverage_lens import (
    compute_viewport,
    estimate_liquidation_gated,
    generate_pnl_grid,
    unrealized_pnl_pct,
)
from src.core.math.numerical_safeguards import (
    clamp,
    validate_in_range,
    validate_positive,
)
from src.core.math.price_series import (
    calculate_price_change,
    current_price_from_history,
)
from src.core.math.projection import (
    axis_ticks,
    format_pnl_label,
    project_price,
    warning_band,
)

logger = get_logger(__name__)


# =============================================================================
# ENUMS
# =============================================================================


class LiquidationSource(str, Enum):
    """Источник цены ликвидации в кадре."""

    EXCHANGE = "exchange"  # сообщена биржей для открытой позиции
    ESTIMATED = "estimated"  # оценка от цены входа открытой позиции
    PROJECTED = "projected"  # pre-trade проекция от текущей цены


class PnlStatus(str, Enum):
    PROFIT = "profit"
    LOSS = "loss"
    NONE = "none"


# =============================================================================
# FRAME
# =============================================================================


class PnlGridMark(BaseModel):
    """Линия PnL-сетки, спроецированная в пиксели."""

    pnl_pct: float
    price: float
    offset_px: float
    label: str

    model_config = {"frozen": True}


class ChartFrame(BaseModel):
    """
    Всё, что нужно слою отрисовки для одного кадра.

    Совместим с JSON Schema contracts/schema/chart_frame.json
    (model_dump(mode="json")).
    """

    token: Token
    is_post_trade: bool
    side: Side
    leverage: float = Field(..., ge=1)

    current_price: float = Field(..., gt=0)
    current_price_px: float

    anchor: float = Field(..., gt=0)
    anchor_mode: AnchorMode
    recentered: bool

    viewport: Viewport
    render_band: RenderBand

    entry_price: Optional[float] = Field(None, gt=0)
    entry_price_px: Optional[float] = None

    liquidation_price: Optional[float] = Field(None, gt=0)
    liquidation_px: Optional[float] = None
    liquidation_source: Optional[LiquidationSource] = None
    warning_band: Optional[WarningBand] = None

    pnl_grid: list[PnlGridMark]
    axis_ticks: list[AxisTick]

    pnl_status: PnlStatus
    unrealized_pnl_pct: Optional[float] = None

    price_change: float
    price_change_pct: float

    model_config = {"frozen": True}


# =============================================================================
# SESSION
# =============================================================================


class ChartSession:
    """Состояние одного графика: anchor controller + pre-trade TradeBook.

    Создаётся при монтировании графика, close() при размонтировании.
    Смена токена сбрасывает anchor.
    """

    def __init__(
        self,
        token: Token,
        settings: Optional[ChartSettings] = None,
        trade_book: Optional[TradeBook] = None,
        mmr: Optional[float] = None,
    ):
        """
        Args:
            token: токен графика
            settings: настройки (default: get_settings())
            trade_book: pre-trade состояние по токенам
            mmr: maintenance margin ratio (default: settings.maintenance_margin_ratio)
        """
        self.settings = settings or get_settings()
        configure_logging(self.settings)
        self.token = token
        self.trade_book = trade_book if trade_book is not None else TradeBook()

        self.mmr = self.settings.maintenance_margin_ratio if mmr is None else mmr
        validate_in_range(self.mmr, "mmr", min_value=0.0, max_value=1.0, max_inclusive=False)

        self.anchor_controller = AnchorRecenterController(
            lens_config=self.settings.lens,
            recenter_threshold=self.settings.recenter_threshold,
        )
        self._closed = False

        logger.info("chart_session_opened", token=token.value, mmr=self.mmr)

    @property
    def closed(self) -> bool:
        return self._closed

    def select_token(self, token: Token) -> None:
        """Переключение токена; anchor предыдущего токена отбрасывается."""
        self._ensure_open()
        if token == self.token:
            return
        logger.info("chart_token_selected", previous=self.token.value, token=token.value)
        self.token = token
        self.anchor_controller.reset()

    def close(self) -> None:
        """Teardown: anchor state отбрасывается, дальнейшие evaluate запрещены."""
        if self._closed:
            return
        self.anchor_controller.reset()
        self._closed = True
        logger.info("chart_session_closed", token=self.token.value)

    def resolve_leverage(self, position: Optional[PositionSnapshot]) -> float:
        """Отображаемое плечо: позиции post-trade, TradeBook pre-trade; clamp [1, max]."""
        if position is not None and position.is_open:
            raw = position.leverage
        else:
            raw = self.trade_book.get(self.token).leverage
        return clamp(raw, 1.0, self.settings.max_leverage)

    def resolve_side(self, position: Optional[PositionSnapshot]) -> Side:
        if position is not None and position.is_open:
            return position.side
        return self.trade_book.get(self.token).side

    def evaluate(
        self,
        price: Optional[float] = None,
        history: Sequence[PricePoint] = (),
        position: Optional[PositionSnapshot] = None,
        band: Optional[RenderBand] = None,
    ) -> ChartFrame:
        """Сборка ChartFrame для одного тика.

        Args:
            price: живая цена; если None — последняя точка history
            history: ценовой ряд (старые → новые)
            position: снапшот позиции (None — pre-trade)
            band: пиксельная полоса (default: settings.render_band)

        Returns:
            ChartFrame

        Raises:
            RuntimeError: если сессия закрыта
            ValueError: если цена недоступна или невалидна
        """
        self._ensure_open()

        current_price = self._resolve_price(price, history)
        band = band or self.settings.render_band

        is_post_trade = position is not None and position.is_open
        leverage = self.resolve_leverage(position)
        side = self.resolve_side(position)

        update = self.anchor_controller.evaluate(current_price, leverage, position)
        anchor = update.anchor
        viewport = compute_viewport(anchor, leverage, self.settings.lens)

        # Ликвидация
        liquidation_price, liquidation_source = self._resolve_liquidation(
            current_price, leverage, side, position
        )
        liquidation_px = None
        band_overlay = None
        if liquidation_price is not None:
            liquidation_px = project_price(liquidation_price, viewport, band)
            band_overlay = warning_band(liquidation_px, side, band)

        # Entry и PnL
        entry_price = position.entry_price if is_post_trade else None
        entry_price_px = None
        pnl_pct = None
        pnl_status = PnlStatus.NONE
        if entry_price is not None:
            entry_price_px = project_price(entry_price, viewport, band)
            pnl_pct = unrealized_pnl_pct(entry_price, current_price, leverage, side)
            pnl_status = PnlStatus.PROFIT if pnl_pct >= 0 else PnlStatus.LOSS

        grid = [
            PnlGridMark(
                pnl_pct=line.pnl_pct,
                price=line.price,
                offset_px=project_price(line.price, viewport, band),
                label=format_pnl_label(line),
            )
            for line in generate_pnl_grid(anchor, leverage, self.settings.pnl_grid_span)
        ]

        change = calculate_price_change(history)

        return ChartFrame(
            token=self.token,
            is_post_trade=is_post_trade,
            side=side,
            leverage=leverage,
            current_price=current_price,
            current_price_px=project_price(current_price, viewport, band),
            anchor=anchor,
            anchor_mode=update.mode,
            recentered=update.recentered,
            viewport=viewport,
            render_band=band,
            entry_price=entry_price,
            entry_price_px=entry_price_px,
            liquidation_price=liquidation_price,
            liquidation_px=liquidation_px,
            liquidation_source=liquidation_source,
            warning_band=band_overlay,
            pnl_grid=grid,
            axis_ticks=axis_ticks(viewport, band, self.token, self.settings.axis_sections),
            pnl_status=pnl_status,
            unrealized_pnl_pct=pnl_pct,
            price_change=change.change,
            price_change_pct=change.change_pct,
        )

    def _resolve_price(self, price: Optional[float], history: Sequence[PricePoint]) -> float:
        if price is not None:
            validate_positive(price, "price")
            return price

        last = current_price_from_history(history)
        if last is None:
            raise ValueError(
                f"No price available for {self.token.value}: live price and history are empty"
            )
        return last

    def _resolve_liquidation(
        self,
        current_price: float,
        leverage: float,
        side: Side,
        position: Optional[PositionSnapshot],
    ) -> tuple[Optional[float], Optional[LiquidationSource]]:
        if position is not None and position.is_open:
            if position.liquidation_price is not None:
                return position.liquidation_price, LiquidationSource.EXCHANGE
            estimate = estimate_liquidation_gated(
                position.entry_price, leverage, side, self.mmr
            )
            source = LiquidationSource.ESTIMATED
        else:
            estimate = estimate_liquidation_gated(current_price, leverage, side, self.mmr)
            source = LiquidationSource.PROJECTED

        if estimate is None:
            logger.debug(
                "liquidation_gate_failed",
                token=self.token.value,
                leverage=leverage,
                mmr=self.mmr,
            )
            return None, None
        # LONG 1x: entry * (1 - 1) = 0, линии ликвидации нет
        if estimate <= 0:
            return None, None
        return estimate, source

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Chart session for {self.token.value} is closed")
