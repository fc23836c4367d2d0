"""
Risk Limit Configuration

Limits every allocation and execution stage is bound by.
"""

import logging

from pydantic import Field, model_validator

from .base import FundLaunchBaseConfig
from ..utils.numeric import clamp, round6
from ..validation.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

# Limit fields that must be strictly positive; the rest only non-negative.
POSITIVE_LIMIT_FIELDS = (
    'max_abs_weight_per_symbol',
    'max_gross_exposure',
    'max_turnover',
    'capital_base',
)
NON_NEGATIVE_LIMIT_FIELDS = (
    'max_abs_net_exposure',
    'min_order_notional',
)


class RiskLimitConfig(FundLaunchBaseConfig):
    """
    Portfolio risk limits.

    Weights and exposures are fractions of capital; notionals are in
    currency units of ``capital_base``.
    """

    max_abs_weight_per_symbol: float = Field(description="Per-symbol absolute weight cap")
    max_gross_exposure: float = Field(description="Cap on sum of absolute target weights")
    max_turnover: float = Field(description="Cap on sum of absolute weight deltas")
    max_abs_net_exposure: float = Field(description="Cap on absolute sum of target weights")
    min_order_notional: float = Field(default=0.0, description="Orders below this notional are dropped")
    capital_base: float = Field(description="Capital base used to size order notionals")

    @model_validator(mode='after')
    def _check_limits(self):
        self.validate_limits()
        return self

    def validate_limits(self) -> None:
        """
        Check every limit field.

        Raises:
            ConfigValidationError: If a field violates its sign rule
        """
        for field_name in POSITIVE_LIMIT_FIELDS:
            value = getattr(self, field_name)
            if value <= 0:
                raise ConfigValidationError(field_name, value, "must be greater than 0")

        for field_name in NON_NEGATIVE_LIMIT_FIELDS:
            value = getattr(self, field_name)
            if value < 0:
                raise ConfigValidationError(field_name, value, "must be greater than or equal to 0")

    def with_value(self, field_name: str, value: float) -> 'RiskLimitConfig':
        """
        Return a validated copy with one field replaced.

        ``model_copy`` skips validation, so the copy is checked explicitly.
        """
        updated = self.model_copy(update={field_name: float(value)})
        updated.validate_limits()
        return updated

    def scaled(self, share: float) -> 'RiskLimitConfig':
        """Return limits sized for a book holding ``share`` of capital."""
        bounded = clamp(share, 0.0001, 1.0)
        return RiskLimitConfig(
            max_abs_weight_per_symbol=round6(self.max_abs_weight_per_symbol * bounded),
            max_gross_exposure=round6(self.max_gross_exposure * bounded),
            max_turnover=round6(self.max_turnover * bounded),
            max_abs_net_exposure=round6(self.max_abs_net_exposure * bounded),
            min_order_notional=self.min_order_notional,
            capital_base=round6(self.capital_base * bounded)
        )
