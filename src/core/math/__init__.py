"""
Core math modules для leverage lens

Чистые численные функции: viewport, ликвидация, PnL-сетка, проекция в пиксели.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    EPS_CALC,
    clamp,
    is_valid_float,
    normalize_to_range,
    validate_in_range,
    validate_positive,
)

# Leverage Lens
from src.core.math.leverage_lens import (
    DEFAULT_MMR,
    LEVERAGE_FLOOR,
    PNL_GRID_LEVELS,
    bps_to_fraction,
    compute_viewport,
    effective_leverage,
    estimate_isolated_liquidation,
    estimate_liquidation_gated,
    generate_pnl_grid,
    liquidation_gate_ok,
    unrealized_pnl_pct,
)

# Projection
from src.core.math.projection import (
    DEFAULT_AXIS_SECTIONS,
    axis_decimals,
    axis_ticks,
    format_pnl_label,
    format_price,
    project_price,
    warning_band,
)

# Price Series
from src.core.math.price_series import (
    PriceChange,
    calculate_price_change,
    current_price_from_history,
)

__all__ = [
    # Numerical Safeguards
    "EPS_CALC",
    "clamp",
    "is_valid_float",
    "normalize_to_range",
    "validate_in_range",
    "validate_positive",
    # Leverage Lens
    "DEFAULT_MMR",
    "LEVERAGE_FLOOR",
    "PNL_GRID_LEVELS",
    "bps_to_fraction",
    "compute_viewport",
    "effective_leverage",
    "estimate_isolated_liquidation",
    "estimate_liquidation_gated",
    "generate_pnl_grid",
    "liquidation_gate_ok",
    "unrealized_pnl_pct",
    # Projection
    "DEFAULT_AXIS_SECTIONS",
    "axis_decimals",
    "axis_ticks",
    "format_pnl_label",
    "format_price",
    "project_price",
    "warning_band",
    # Price Series
    "PriceChange",
    "calculate_price_change",
    "current_price_from_history",
]
