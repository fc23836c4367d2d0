"""
Policy Override Engine - Audited Risk Limit Changes

Applies named limit overrides in request order against a baseline limit
config. Every request produces one audit entry; only approved, unexpired,
valid requests change the effective limits, and applied overrides compound.

Status resolution, first match wins:
    UNSUPPORTED_POLICY → PENDING_APPROVAL → EXPIRED
    → REJECTED_INVALID_VALUE → APPLIED
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence, Tuple

from ...config.risk import RiskLimitConfig
from ...config.scenario import PolicyOverrideRequest
from ...types.enums import OverrideStatus
from ...types.governance import PolicyOverrideAuditEntry
from ...validation.exceptions import (
    ConfigValidationError, PolicyValueRejectedError, UnsupportedPolicyKeyError
)

logger = logging.getLogger(__name__)

# Normalized policy key -> RiskLimitConfig field
POLICY_FIELDS = {
    'MAXABSWEIGHTPERSYMBOL': 'max_abs_weight_per_symbol',
    'MAXGROSSEXPOSURE': 'max_gross_exposure',
    'MAXTURNOVER': 'max_turnover',
    'MAXABSNETEXPOSURE': 'max_abs_net_exposure',
    'MINORDERNOTIONAL': 'min_order_notional',
    'CAPITALBASE': 'capital_base',
}


def normalize_policy_key(policy_key: str) -> str:
    return policy_key.strip().upper().replace("_", "").replace("-", "")


@dataclass(frozen=True)
class PolicyOverrideResult:
    effective_limits: RiskLimitConfig
    audit_trail: Tuple[PolicyOverrideAuditEntry, ...]

    def count(self, status: OverrideStatus) -> int:
        return sum(1 for entry in self.audit_trail if entry.status == status)


class PolicyOverrideEngine:
    """Resolves override requests into effective limits plus an audit trail."""

    def apply(self, baseline: RiskLimitConfig, overrides: Sequence[PolicyOverrideRequest],
              as_of: datetime) -> PolicyOverrideResult:
        """
        Apply override requests.

        Args:
            baseline: Limits before any override
            overrides: Override requests, applied in requested_at order
            as_of: Evaluation time used for expiry checks

        Returns:
            PolicyOverrideResult with effective limits and audit trail

        Raises:
            ConfigValidationError: If the baseline or final limits are invalid
        """
        baseline.validate_limits()
        if not overrides:
            return PolicyOverrideResult(effective_limits=baseline, audit_trail=())

        effective = baseline
        audit = []
        for request in sorted(overrides, key=lambda r: r.requested_at):
            prior_value = None
            applied_value = None
            try:
                field_name = self._resolve_field(request.policy_key)
                prior_value = getattr(effective, field_name)

                if not request.is_approved:
                    status = OverrideStatus.PENDING_APPROVAL
                elif request.expires_at is not None and request.expires_at <= as_of:
                    status = OverrideStatus.EXPIRED
                else:
                    effective = self._apply_value(effective, field_name, request)
                    applied_value = request.requested_value
                    status = OverrideStatus.APPLIED
            except UnsupportedPolicyKeyError as e:
                logger.warning(str(e))
                status = OverrideStatus.UNSUPPORTED_POLICY
            except PolicyValueRejectedError as e:
                logger.warning(str(e))
                status = OverrideStatus.REJECTED_INVALID_VALUE

            logger.info(f"Override {request.policy_key}={request.requested_value}: {status.value}")
            audit.append(PolicyOverrideAuditEntry(
                policy_key=request.policy_key,
                requested_value=request.requested_value,
                prior_value=prior_value,
                applied_value=applied_value,
                status=status,
                reason=request.reason,
                requested_by=request.requested_by,
                approved_by=request.approved_by,
                requested_at=request.requested_at,
                approved_at=request.approved_at,
                evaluated_at=as_of
            ))

        effective.validate_limits()
        return PolicyOverrideResult(effective_limits=effective, audit_trail=tuple(audit))

    @staticmethod
    def _resolve_field(policy_key: str) -> str:
        field_name = POLICY_FIELDS.get(normalize_policy_key(policy_key))
        if field_name is None:
            raise UnsupportedPolicyKeyError(policy_key)
        return field_name

    @staticmethod
    def _apply_value(limits: RiskLimitConfig, field_name: str,
                     request: PolicyOverrideRequest) -> RiskLimitConfig:
        try:
            return limits.with_value(field_name, request.requested_value)
        except ConfigValidationError as e:
            raise PolicyValueRejectedError(request.policy_key, request.requested_value, e.rule) from e
