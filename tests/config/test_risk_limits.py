"""
Tests for RiskLimitConfig validation, copying and scaling.
"""

import pytest
from pydantic import ValidationError

from fund_launch.config import RiskLimitConfig
from fund_launch.validation import ConfigValidationError


class TestRiskLimitValidation:
    """Test sign rules on limit fields."""

    @pytest.mark.parametrize("field_name", [
        'max_abs_weight_per_symbol', 'max_gross_exposure', 'max_turnover', 'capital_base'
    ])
    def test_positive_fields_reject_zero(self, risk_limits, field_name):
        """Strictly positive fields reject 0."""
        data = risk_limits.model_dump()
        data[field_name] = 0.0
        with pytest.raises(ConfigValidationError) as exc_info:
            RiskLimitConfig(**data)
        assert exc_info.value.field_name == field_name

    @pytest.mark.parametrize("field_name", ['max_abs_net_exposure', 'min_order_notional'])
    def test_non_negative_fields_accept_zero(self, risk_limits, field_name):
        """Non-negative fields accept 0 and reject negatives."""
        data = risk_limits.model_dump()
        data[field_name] = 0.0
        assert getattr(RiskLimitConfig(**data), field_name) == 0.0

        data[field_name] = -0.01
        with pytest.raises(ConfigValidationError):
            RiskLimitConfig(**data)

    def test_min_order_notional_defaults_to_zero(self):
        """min_order_notional is optional."""
        limits = RiskLimitConfig(
            max_abs_weight_per_symbol=0.2, max_gross_exposure=1.0, max_turnover=0.5,
            max_abs_net_exposure=0.1, capital_base=1_000_000
        )
        assert limits.min_order_notional == 0.0

    def test_unknown_fields_are_rejected(self, risk_limits):
        """Unknown keys fail pydantic validation."""
        data = risk_limits.model_dump()
        data['max_leverage'] = 2.0
        with pytest.raises(ValidationError):
            RiskLimitConfig(**data)

    def test_limits_are_frozen(self, risk_limits):
        """Limits cannot be mutated in place."""
        with pytest.raises(ValidationError):
            risk_limits.max_turnover = 0.9


class TestRiskLimitCopies:
    """Test with_value and scaled."""

    def test_with_value_returns_new_instance(self, risk_limits):
        """with_value leaves the original untouched."""
        updated = risk_limits.with_value('max_turnover', 0.75)
        assert updated.max_turnover == 0.75
        assert risk_limits.max_turnover == 0.70

    def test_with_value_validates(self, risk_limits):
        """An invalid replacement value raises ConfigValidationError."""
        with pytest.raises(ConfigValidationError) as exc_info:
            risk_limits.with_value('max_gross_exposure', -1.0)
        assert exc_info.value.rule == "must be greater than 0"

    def test_scaled_limits(self, risk_limits):
        """Scaling multiplies every field except the minimum order notional."""
        scaled = risk_limits.scaled(0.55)
        assert scaled.max_abs_weight_per_symbol == 0.132
        assert scaled.max_gross_exposure == 0.5225
        assert scaled.max_turnover == 0.385
        assert scaled.max_abs_net_exposure == 0.121
        assert scaled.capital_base == 1_650_000
        assert scaled.min_order_notional == 15000

    def test_scaled_share_is_bounded(self, risk_limits):
        """Shares are bounded to [0.0001, 1] before scaling."""
        assert risk_limits.scaled(2.0).max_gross_exposure == 0.95
        assert risk_limits.scaled(0.0).capital_base == 300.0
