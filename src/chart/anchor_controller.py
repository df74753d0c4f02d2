"""Anchor Recenter Controller — визуальный центр графика с гистерезисом.

Режимы:
- UNTRACKED (нет открытой позиции): anchor всегда равен живой цене
- TRACKED (позиция открыта): anchor хранится между тиками, сидируется
  ценой входа и прыгает на текущую цену, когда отклонение достигает
  recenter_threshold (0.85) половины видимого диапазона

Контроллер — единственный владелец anchor state. Один экземпляр на один
график; evaluate вызывается строго в порядке поступления тиков.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.core.domain.position import PositionSnapshot
from src.core.domain.viewport import LeverageLensConfig
from src.core.logging import get_logger
from src.core.math.leverage_lens import compute_viewport
from src.core.math.numerical_safeguards import validate_in_range, validate_positive

logger = get_logger(__name__)


class AnchorMode(str, Enum):
    """Режим anchor."""
    UNTRACKED = "UNTRACKED"
    TRACKED = "TRACKED"


@dataclass(frozen=True)
class AnchorUpdate:
    """Результат одного evaluation контроллера."""

    anchor: float
    mode: AnchorMode
    previous_mode: AnchorMode
    previous_center_anchor: Optional[float]

    # Диагностика
    seeded: bool
    recentered: bool
    reason: str

    # Для отладки
    details: str


class AnchorRecenterController:
    """State machine для anchor с гистерезисом recenter.

    Переходы:
    - UNTRACKED → TRACKED: anchor := entry_price
    - TRACKED, entry_price изменилась (усреднение): anchor := entry_price
    - TRACKED, |price - anchor| >= threshold * half: anchor := price
    - TRACKED → UNTRACKED: anchor сбрасывается, далее зеркалит живую цену

    Recenter — дискретный прыжок; сглаживание остаётся слою отрисовки.
    """

    def __init__(
        self,
        lens_config: Optional[LeverageLensConfig] = None,
        recenter_threshold: float = 0.85,
    ):
        """
        Args:
            lens_config: конфигурация viewport для расчёта half-range
            recenter_threshold: доля half-range, при которой anchor прыгает
        """
        validate_in_range(recenter_threshold, "recenter_threshold", min_value=0.0, max_value=1.0)
        if recenter_threshold == 0.0:
            raise ValueError("recenter_threshold must be > 0")

        self.lens_config = lens_config or LeverageLensConfig()
        self.recenter_threshold = recenter_threshold

        self._mode = AnchorMode.UNTRACKED
        self._center_anchor: Optional[float] = None
        self._entry_price: Optional[float] = None

    @property
    def mode(self) -> AnchorMode:
        return self._mode

    @property
    def center_anchor(self) -> Optional[float]:
        """Сохранённый anchor (None в режиме UNTRACKED)."""
        return self._center_anchor

    def reset(self) -> None:
        """Возврат в начальное состояние UNTRACKED (teardown графика)."""
        self._mode = AnchorMode.UNTRACKED
        self._center_anchor = None
        self._entry_price = None

    def evaluate(
        self,
        current_price: float,
        leverage: float,
        position: Optional[PositionSnapshot] = None,
    ) -> AnchorUpdate:
        """Обработка одного тика цены / изменения позиции.

        Args:
            current_price: текущая цена (> 0)
            leverage: отображаемое плечо (для half-range viewport)
            position: снапшот позиции; None или is_open=False → UNTRACKED

        Returns:
            AnchorUpdate с anchor для этого тика

        Raises:
            ValueError: если current_price <= 0 или NaN/Inf
        """
        validate_positive(current_price, "current_price")

        previous_mode = self._mode
        previous_center_anchor = self._center_anchor

        # 1. Нет открытой позиции → UNTRACKED, anchor = живая цена
        if position is None or not position.is_open:
            self.reset()

            if previous_mode == AnchorMode.TRACKED:
                logger.info(
                    "anchor_tracking_stopped",
                    previous_center_anchor=previous_center_anchor,
                    current_price=current_price,
                )
                reason = "position_closed"
            else:
                reason = "untracked_live_price"

            return self._create_result(
                anchor=current_price,
                previous_mode=previous_mode,
                previous_center_anchor=previous_center_anchor,
                seeded=False,
                recentered=False,
                reason=reason,
                details=f"Anchor mirrors live price {current_price}",
            )

        # 2. Seed anchor ценой входа
        seed_reason = self._seed_reason(previous_mode, position.entry_price)
        if seed_reason is not None:
            self._center_anchor = position.entry_price
            self._entry_price = position.entry_price
            logger.info(
                "anchor_seeded",
                reason=seed_reason,
                entry_price=position.entry_price,
                previous_center_anchor=previous_center_anchor,
            )
        self._mode = AnchorMode.TRACKED

        anchor = self._center_anchor

        # 3. Гистерезис recenter по half-range текущего viewport
        half = compute_viewport(anchor, leverage, self.lens_config).half_range
        if half <= 0:
            logger.debug("anchor_recenter_skipped", anchor=anchor, half_range=half)
            return self._create_result(
                anchor=anchor,
                previous_mode=previous_mode,
                previous_center_anchor=previous_center_anchor,
                seeded=seed_reason is not None,
                recentered=False,
                reason="degenerate_half_range",
                details=f"half_range={half}, recenter skipped",
            )

        delta = abs(current_price - anchor)
        if delta >= self.recenter_threshold * half:
            self._center_anchor = current_price
            logger.debug(
                "anchor_recentered",
                previous_anchor=anchor,
                new_anchor=current_price,
                delta=delta,
                half_range=half,
            )
            return self._create_result(
                anchor=current_price,
                previous_mode=previous_mode,
                previous_center_anchor=previous_center_anchor,
                seeded=seed_reason is not None,
                recentered=True,
                reason="hysteresis_recenter",
                details=(
                    f"|{current_price} - {anchor}| = {delta:.6g} >= "
                    f"{self.recenter_threshold} * {half:.6g}"
                ),
            )

        return self._create_result(
            anchor=anchor,
            previous_mode=previous_mode,
            previous_center_anchor=previous_center_anchor,
            seeded=seed_reason is not None,
            recentered=False,
            reason=seed_reason or "within_band",
            details=f"delta={delta:.6g}, half_range={half:.6g}",
        )

    def _seed_reason(self, previous_mode: AnchorMode, entry_price: float) -> Optional[str]:
        """Причина пересидирования anchor ценой входа (None — не нужно)."""
        if previous_mode == AnchorMode.UNTRACKED:
            return "position_opened"
        if self._entry_price != entry_price:
            return "entry_price_changed"
        if self._center_anchor is None:
            return "anchor_unset"
        return None

    def _create_result(
        self,
        anchor: float,
        previous_mode: AnchorMode,
        previous_center_anchor: Optional[float],
        seeded: bool,
        recentered: bool,
        reason: str,
        details: str,
    ) -> AnchorUpdate:
        """Создание результата evaluation."""
        return AnchorUpdate(
            anchor=anchor,
            mode=self._mode,
            previous_mode=previous_mode,
            previous_center_anchor=previous_center_anchor,
            seeded=seeded,
            recentered=recentered,
            reason=reason,
            details=details,
        )
