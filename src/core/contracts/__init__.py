"""
Contract Validation Module

Валидация JSON контрактов leverage lens.
"""

from .validators import (
    ChartFrameValidator,
    ContractValidator,
    SchemaLoader,
    validate_chart_frame,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ChartFrameValidator",
    # Functions
    "validate_chart_frame",
]
