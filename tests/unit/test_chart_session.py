"""Тесты для ChartSession и TradeBook.

Coverage:
- Pre-trade кадр: anchor = живая цена, проекция ликвидации от текущей цены
- Post-trade кадр: anchor от входа, биржевая/оценочная ликвидация, PnL статус
- Плечо: clamp в [1, max_leverage], gating ликвидации
- Жизненный цикл: смена токена, close, ошибки входа
"""

import pytest

from src.chart import chart_session as session_module
from src.chart.anchor_controller import AnchorMode
from src.chart.chart_session import ChartSession, LiquidationSource, PnlStatus
from src.chart.trade_book import TradeBook
from src.core.config.settings import ChartSettings
from src.core.domain.position import PositionSnapshot, Side, TradeState
from src.core.domain.price_point import PricePoint, Token
from src.core.domain.viewport import RenderBand


@pytest.fixture
def settings() -> ChartSettings:
    return ChartSettings()


@pytest.fixture
def trade_book() -> TradeBook:
    return TradeBook({Token.BTC: TradeState(leverage=10.0, side=Side.LONG)})


@pytest.fixture
def session(settings, trade_book) -> ChartSession:
    return ChartSession(Token.BTC, settings=settings, trade_book=trade_book)


@pytest.fixture
def long_position() -> PositionSnapshot:
    return PositionSnapshot(entry_price=100.0, leverage=10.0, side=Side.LONG)


# =============================================================================
# TRADE BOOK
# =============================================================================


class TestTradeBook:
    def test_missing_token_defaults(self):
        book = TradeBook()

        assert book.get(Token.SOL) == TradeState(leverage=1.0, side=Side.SHORT)
        assert Token.SOL not in book

    def test_update_is_validated(self):
        book = TradeBook()

        trade = book.update(Token.ETH, leverage=25.0)

        assert trade.leverage == 25.0
        assert trade.side == Side.SHORT
        assert book.get(Token.ETH) == trade
        with pytest.raises(ValueError):
            book.update(Token.ETH, leverage=0.5)

    def test_tokens_are_independent(self):
        book = TradeBook()
        book.set(Token.SOL, TradeState(leverage=50.0, side=Side.LONG))

        assert book.get(Token.BTC).leverage == 1.0
        assert len(book) == 1


# =============================================================================
# PRE-TRADE
# =============================================================================


class TestPreTradeFrame:
    def test_reference_frame(self, session):
        frame = session.evaluate(price=100.0)

        assert not frame.is_post_trade
        assert frame.anchor == 100.0
        assert frame.anchor_mode == AnchorMode.UNTRACKED
        assert frame.leverage == 10.0
        assert frame.side == Side.LONG
        assert frame.viewport.y_min == pytest.approx(88.0)
        assert frame.viewport.y_max == pytest.approx(112.0)
        assert frame.current_price_px == pytest.approx(100.0)
        assert frame.entry_price is None
        assert frame.entry_price_px is None
        assert frame.pnl_status == PnlStatus.NONE
        assert frame.unrealized_pnl_pct is None

    def test_projected_liquidation(self, session):
        frame = session.evaluate(price=100.0)

        assert frame.liquidation_source == LiquidationSource.PROJECTED
        assert frame.liquidation_price == pytest.approx(90.4523, abs=1e-4)
        assert frame.warning_band is not None
        assert frame.warning_band.top_px == frame.liquidation_px
        assert frame.warning_band.height_px == pytest.approx(180.0 - frame.liquidation_px)

    def test_overlays(self, session):
        frame = session.evaluate(price=100.0)

        assert len(frame.pnl_grid) == 7
        assert frame.pnl_grid[3].price == 100.0
        assert frame.pnl_grid[0].offset_px > frame.pnl_grid[-1].offset_px
        assert frame.pnl_grid[-1].label == "+100% PnL → $110.00"
        assert len(frame.axis_ticks) == 5
        assert frame.axis_ticks[0].label == "$88.0"

    def test_default_trade_state(self, settings):
        session = ChartSession(Token.SOL, settings=settings)

        frame = session.evaluate(price=150.0)

        assert frame.leverage == 1.0
        assert frame.side == Side.SHORT

    def test_leverage_capped(self, settings):
        book = TradeBook({Token.ETH: TradeState(leverage=1000.0, side=Side.LONG)})
        session = ChartSession(Token.ETH, settings=settings, trade_book=book)

        frame = session.evaluate(price=3500.0)

        assert frame.leverage == settings.max_leverage

    def test_gate_failure_hides_liquidation(self, settings):
        """1/500 < 0.005 → ликвидация отсутствует (не 0)"""
        book = TradeBook({Token.ETH: TradeState(leverage=500.0, side=Side.LONG)})
        session = ChartSession(Token.ETH, settings=settings, trade_book=book)

        frame = session.evaluate(price=3500.0)

        assert frame.liquidation_price is None
        assert frame.liquidation_px is None
        assert frame.liquidation_source is None
        assert frame.warning_band is None

    def test_mmr_override(self, settings, trade_book):
        session = ChartSession(Token.BTC, settings=settings, trade_book=trade_book, mmr=0.0)

        frame = session.evaluate(price=100.0)

        assert frame.liquidation_price == pytest.approx(90.0)

    def test_unit_leverage_long_has_no_liquidation(self, settings):
        """LONG 1x: entry * (1 - 1/1) = 0 → линии ликвидации нет, а не $0"""
        book = TradeBook({Token.SOL: TradeState(leverage=1.0, side=Side.LONG)})
        session = ChartSession(Token.SOL, settings=settings, trade_book=book)

        frame = session.evaluate(price=100.0)

        assert frame.liquidation_price is None
        assert frame.liquidation_px is None
        assert frame.liquidation_source is None
        assert frame.warning_band is None

    def test_unit_leverage_long_position_has_no_liquidation(self, session):
        position = PositionSnapshot(entry_price=100.0, leverage=1.0, side=Side.LONG)

        frame = session.evaluate(price=101.0, position=position)

        assert frame.liquidation_price is None
        assert frame.liquidation_source is None

    def test_unit_leverage_short_keeps_liquidation(self, settings):
        """SHORT 1x: entry * 2 / (1 + mmr) > 0"""
        session = ChartSession(Token.SOL, settings=settings)

        frame = session.evaluate(price=100.0)

        assert frame.liquidation_price == pytest.approx(200.0 / 1.005)
        assert frame.liquidation_source == LiquidationSource.PROJECTED

    def test_price_from_history(self, session):
        history = [
            PricePoint(value=100.0, timestamp=1_700_000_000_000),
            PricePoint(value=104.0, timestamp=1_700_000_060_000),
            PricePoint(value=110.0, timestamp=1_700_000_120_000),
        ]

        frame = session.evaluate(history=history)

        assert frame.current_price == 110.0
        assert frame.price_change == pytest.approx(10.0)
        assert frame.price_change_pct == pytest.approx(10.0)

    def test_live_price_wins_over_history(self, session):
        frame = session.evaluate(price=101.0, history=[PricePoint(value=99.0)])

        assert frame.current_price == 101.0
        assert frame.price_change == 0.0

    def test_custom_band(self, session):
        band = RenderBand(top=0.0, bottom=0.0, total_height_px=100.0)

        frame = session.evaluate(price=100.0, band=band)

        assert frame.render_band == band
        assert frame.current_price_px == pytest.approx(50.0)


# =============================================================================
# POST-TRADE
# =============================================================================


class TestPostTradeFrame:
    def test_anchor_follows_entry(self, session, long_position):
        frame = session.evaluate(price=101.0, position=long_position)

        assert frame.is_post_trade
        assert frame.anchor == 100.0
        assert frame.anchor_mode == AnchorMode.TRACKED
        assert frame.entry_price == 100.0
        assert frame.entry_price_px == pytest.approx(100.0)

    def test_exchange_liquidation_preferred(self, session):
        position = PositionSnapshot(
            entry_price=100.0, leverage=10.0, side=Side.LONG, liquidation_price=91.0
        )

        frame = session.evaluate(price=101.0, position=position)

        assert frame.liquidation_source == LiquidationSource.EXCHANGE
        assert frame.liquidation_price == 91.0

    def test_estimated_liquidation_from_entry(self, session, long_position):
        frame = session.evaluate(price=104.0, position=long_position)

        assert frame.liquidation_source == LiquidationSource.ESTIMATED
        assert frame.liquidation_price == pytest.approx(90.4523, abs=1e-4)

    def test_position_leverage_and_side_override_trade_book(self, session):
        position = PositionSnapshot(entry_price=100.0, leverage=20.0, side=Side.SHORT)

        frame = session.evaluate(price=100.0, position=position)

        assert frame.leverage == 20.0
        assert frame.side == Side.SHORT
        assert frame.warning_band.top_px == 20.0

    def test_profit_and_loss_status(self, session, long_position):
        profit = session.evaluate(price=101.0, position=long_position)
        loss = session.evaluate(price=99.0, position=long_position)

        assert profit.pnl_status == PnlStatus.PROFIT
        assert profit.unrealized_pnl_pct == pytest.approx(10.0)
        assert loss.pnl_status == PnlStatus.LOSS
        assert loss.unrealized_pnl_pct == pytest.approx(-10.0)

    @pytest.mark.parametrize("side", [Side.LONG, Side.SHORT])
    def test_price_at_entry_counts_as_profit(self, session, side):
        """PnL ровно 0% → PROFIT (граница включена)"""
        position = PositionSnapshot(entry_price=100.0, leverage=10.0, side=side)

        frame = session.evaluate(price=100.0, position=position)

        assert frame.unrealized_pnl_pct == 0.0
        assert frame.pnl_status == PnlStatus.PROFIT

    def test_recenter_reported(self, session, long_position):
        session.evaluate(price=100.0, position=long_position)

        frame = session.evaluate(price=111.0, position=long_position)

        assert frame.recentered
        assert frame.anchor == 111.0
        assert frame.viewport.center == pytest.approx(111.0)

    def test_close_mid_session(self, session):
        """Tracked (anchor=105) → Untracked: следующий тик 98 → anchor 98"""
        position = PositionSnapshot(entry_price=105.0, leverage=10.0, side=Side.LONG)
        session.evaluate(price=105.0, position=position)

        frame = session.evaluate(price=98.0)

        assert frame.anchor == 98.0
        assert frame.anchor_mode == AnchorMode.UNTRACKED
        assert not frame.is_post_trade


# =============================================================================
# LIFECYCLE
# =============================================================================


class TestSessionLifecycle:
    def test_session_configures_logging(self, settings, monkeypatch):
        calls = []
        monkeypatch.setattr(session_module, "configure_logging", calls.append)

        ChartSession(Token.BTC, settings=settings)

        assert calls == [settings]

    def test_select_token_resets_anchor(self, session, long_position):
        session.evaluate(price=100.0, position=long_position)

        session.select_token(Token.ETH)

        assert session.token == Token.ETH
        assert session.anchor_controller.mode == AnchorMode.UNTRACKED
        assert session.anchor_controller.center_anchor is None

    def test_select_same_token_keeps_anchor(self, session, long_position):
        session.evaluate(price=100.0, position=long_position)

        session.select_token(Token.BTC)

        assert session.anchor_controller.center_anchor == 100.0

    def test_close_discards_state(self, session, long_position):
        session.evaluate(price=100.0, position=long_position)

        session.close()
        session.close()

        assert session.closed
        assert session.anchor_controller.center_anchor is None
        with pytest.raises(RuntimeError, match="closed"):
            session.evaluate(price=100.0)

    def test_no_price_raises(self, session):
        with pytest.raises(ValueError, match="No price available"):
            session.evaluate()

    @pytest.mark.parametrize("price", [0.0, -10.0])
    def test_invalid_price_raises(self, session, price):
        with pytest.raises(ValueError):
            session.evaluate(price=price)

    @pytest.mark.parametrize("mmr", [-0.1, 1.0])
    def test_invalid_mmr_raises(self, settings, mmr):
        with pytest.raises(ValueError):
            ChartSession(Token.BTC, settings=settings, mmr=mmr)
