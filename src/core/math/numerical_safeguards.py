"""
Numerical Safeguards — Safe Math Primitives для leverage lens

Модуль обеспечивает численную устойчивость ценовых вычислений графика:
- NaN/Inf проверки, чтобы невалидные цены не попадали в viewport
- Clamp и нормализация значений в диапазон
- Валидация предусловий (цены > 0, параметры в диапазоне)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf никогда не пропагируют в viewport и пиксельные смещения
2. Нарушение предусловия всегда явное (ValueError), без тихого fallback
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для общих вычислений
EPS_CALC: Final[float] = 1e-12


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


# =============================================================================
# УТИЛИТЫ
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения в заданном диапазоне.

    Используется для leverage floor (>= 1) и cap (max_leverage).

    Examples:
        >>> clamp(0.5, 1.0, 500.0)
        1.0
        >>> clamp(1000.0, 1.0, 500.0)
        500.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


def normalize_to_range(
    value: float,
    old_min: float,
    old_max: float,
    new_min: float = 0.0,
    new_max: float = 1.0,
    eps: float = EPS_CALC,
) -> float:
    """
    Линейная нормализация значения из [old_min, old_max] в [new_min, new_max].

    Значения за пределами исходного диапазона не обрезаются: цена ниже
    y_min даёт ratio < 0, что нужно для линий вне видимой области.

    Raises:
        ValueError: Если диапазон вырожден (old_max - old_min < eps)

    Examples:
        >>> normalize_to_range(100.0, 88.0, 112.0)
        0.5
        >>> normalize_to_range(2.5, 0.0, 10.0, -1.0, 1.0)
        -0.5
    """
    span = old_max - old_min
    if not is_valid_float(span) or span < eps:
        raise ValueError(
            f"Degenerate range: old_min={old_min}, old_max={old_max}"
        )

    normalized = (value - old_min) / span
    return new_min + normalized * (new_max - new_min)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_positive(value: float, name: str, eps: float = 0.0) -> None:
    """
    Валидация, что значение положительное и конечное.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)
        eps: Минимальный порог (default: 0.0, т.е. строго > 0)

    Raises:
        ValueError: Если value <= eps или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= eps:
        raise ValueError(f"{name} must be positive (> {eps}), got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
    max_inclusive: bool = True,
) -> None:
    """
    Валидация, что значение конечное и лежит в заданном диапазоне.

    Raises:
        ValueError: Если value вне диапазона или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None:
        if max_inclusive and value > max_value:
            raise ValueError(f"{name} must be <= {max_value}, got {value}")
        if not max_inclusive and value >= max_value:
            raise ValueError(f"{name} must be < {max_value}, got {value}")
