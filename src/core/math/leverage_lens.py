"""
Leverage Lens — видимый диапазон, ликвидация и PnL-сетка

Модуль реализует «leverage lens»: видимый ценовой диапазон графика
масштабируется обратно пропорционально плечу, чтобы движения цены,
значимые для трейдера (вплоть до ликвидации), занимали всю высоту графика.

Функции:
- compute_viewport: anchor + leverage → Viewport
- estimate_isolated_liquidation: приближение цены ликвидации (isolated margin)
- liquidation_gate_ok / estimate_liquidation_gated: gating по MMR на стороне вызова
- generate_pnl_grid: 7 линий PnL% → цена вокруг anchor
- unrealized_pnl_pct: обратное отображение цена → PnL% equity

Все функции чистые. Плечо < 1 приводится к 1 внутри формул.
"""

from typing import Final, Optional

from src.core.domain.position import Side
from src.core.domain.viewport import LeverageLensConfig, PnlGridLine, Viewport
from src.core.math.numerical_safeguards import (
    clamp,
    validate_in_range,
    validate_positive,
)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Maintenance margin ratio по умолчанию (0.5%). Per-tier значения приходят извне.
DEFAULT_MMR: Final[float] = 0.005

# Минимальное плечо внутри формул
LEVERAGE_FLOOR: Final[float] = 1.0

# Уровни PnL-сетки в долях equity (до умножения на span)
PNL_GRID_LEVELS: Final[tuple[float, ...]] = (-1.0, -0.5, -0.25, 0.0, 0.25, 0.5, 1.0)


def bps_to_fraction(bps: float) -> float:
    """
    Конверсия basis points в дробь.

    Examples:
        >>> bps_to_fraction(4)
        0.0004
    """
    return bps / 10000.0


def effective_leverage(leverage: float) -> float:
    """Плечо с floor = 1 (защита от деления на значения < 1)."""
    return clamp(leverage, min_value=LEVERAGE_FLOOR)


# =============================================================================
# VIEWPORT
# =============================================================================


def compute_viewport(
    anchor: float,
    leverage: float,
    config: Optional[LeverageLensConfig] = None,
) -> Viewport:
    """
    Видимый ценовой диапазон вокруг anchor.

    half = max(anchor * pnl_span / max(1, leverage),
               anchor * min_band_bps / 10000)
    viewport = [anchor - half, anchor + half]

    Большее плечо сжимает диапазон; floor min_band_bps не даёт диапазону
    выродиться при экстремальном плече.

    Args:
        anchor: Центр viewport (цена, > 0)
        leverage: Плечо (>= 1, меньшие значения приводятся к 1)
        config: LeverageLensConfig (default: pnl_span=1.2, min_band_bps=4)

    Returns:
        Viewport

    Raises:
        ValueError: Если anchor <= 0 или NaN/Inf

    Examples:
        >>> compute_viewport(100.0, 10.0)
        Viewport(y_min=88.0, y_max=112.0)
    """
    validate_positive(anchor, "anchor")
    cfg = config or LeverageLensConfig()

    half_by_leverage = anchor * (cfg.pnl_span / effective_leverage(leverage))
    half_floor = anchor * bps_to_fraction(cfg.min_band_bps)
    half = max(half_by_leverage, half_floor)

    return Viewport(y_min=anchor - half, y_max=anchor + half)


# =============================================================================
# LIQUIDATION
# =============================================================================


def liquidation_gate_ok(leverage: float, mmr: float = DEFAULT_MMR) -> bool:
    """
    Проверка применимости приближения ликвидации.

    Оценка имеет смысл только если начальная маржа 1/L покрывает MMR:
    1 / L >= mmr. Иначе позиция уже недомаржинальна и оценки нет.
    """
    return 1.0 / effective_leverage(leverage) >= mmr


def estimate_isolated_liquidation(
    entry: float,
    leverage: float,
    side: Side,
    mmr: float = DEFAULT_MMR,
) -> float:
    """
    Приближение цены ликвидации для isolated margin.

    Без учёта fees, funding и tiered MMR:
        LONG:  entry * (1 - 1/L) / (1 - mmr)
        SHORT: entry * (1 + 1/L) / (1 + mmr)

    Gating (1/L >= mmr) НЕ проверяется здесь: это ответственность вызова,
    см. estimate_liquidation_gated.

    Args:
        entry: Цена входа (> 0)
        leverage: Плечо (приводится к >= 1)
        side: Направление позиции
        mmr: Maintenance margin ratio в [0, 1)

    Returns:
        Цена ликвидации

    Raises:
        ValueError: Если entry <= 0 или mmr вне [0, 1)

    Examples:
        >>> round(estimate_isolated_liquidation(100.0, 10.0, Side.LONG, 0.005), 2)
        90.45
    """
    validate_positive(entry, "entry")
    validate_in_range(mmr, "mmr", min_value=0.0, max_value=1.0, max_inclusive=False)

    inv_leverage = 1.0 / effective_leverage(leverage)

    if side == Side.LONG:
        return entry * (1.0 - inv_leverage) / (1.0 - mmr)
    else:  # SHORT
        return entry * (1.0 + inv_leverage) / (1.0 + mmr)


def estimate_liquidation_gated(
    entry: float,
    leverage: float,
    side: Side,
    mmr: float = DEFAULT_MMR,
) -> Optional[float]:
    """
    Оценка ликвидации с gating на стороне вызова.

    Returns:
        Цена ликвидации или None, если 1/L < mmr (оценка недоступна)
    """
    if not liquidation_gate_ok(leverage, mmr):
        return None
    return estimate_isolated_liquidation(entry, leverage, side, mmr)


# =============================================================================
# PnL GRID
# =============================================================================


def generate_pnl_grid(
    anchor: float,
    leverage: float,
    span: float = 1.0,
) -> list[PnlGridLine]:
    """
    Линии PnL-сетки вокруг anchor.

    level ∈ {-1, -0.5, -0.25, 0, 0.25, 0.5, 1} * span
    price = anchor * (1 + level / L), pnl_pct = level * 100

    Сетка — только аннотация, на границы viewport не влияет.

    Raises:
        ValueError: Если anchor <= 0 или span <= 0

    Returns:
        7 линий, упорядоченных по pnl_pct (и по цене) по возрастанию
    """
    validate_positive(anchor, "anchor")
    validate_positive(span, "span")

    lev = effective_leverage(leverage)
    lines = []
    for base_level in PNL_GRID_LEVELS:
        level = base_level * span
        lines.append(
            PnlGridLine(pnl_pct=level * 100.0, price=anchor * (1.0 + level / lev))
        )
    return lines


def unrealized_pnl_pct(
    entry: float,
    price: float,
    leverage: float,
    side: Side,
) -> float:
    """
    Нереализованный PnL в процентах equity (без fees/funding).

    Обратное к PnL-сетке: LONG = L * (price / entry - 1) * 100,
    SHORT — с противоположным знаком.
    """
    validate_positive(entry, "entry")
    validate_positive(price, "price")

    move = price / entry - 1.0
    pnl = effective_leverage(leverage) * move * 100.0
    return pnl if side == Side.LONG else -pnl
