"""
Unified Enum Types

Single source of truth for all enumerations in the fund launch pipeline.
Values are the canonical upper-case labels used in reports and audit trails.
"""

from enum import Enum


class TradeAction(Enum):
    """Allocation action derived from the weight delta."""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class Urgency(Enum):
    """Execution urgency of an order intent."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    BLOCKED = "BLOCKED"


class Route(Enum):
    """Execution routes, including failover and incident outcomes."""
    LIT_SMART = "LIT_SMART"
    INTERNAL_CROSS = "INTERNAL_CROSS"
    LIT_SMART_FAILOVER = "LIT_SMART_FAILOVER"
    INTERNAL_CROSS_FAILOVER = "INTERNAL_CROSS_FAILOVER"
    SAFE_PASSIVE = "SAFE_PASSIVE"
    REJECTED_BY_VENUE = "REJECTED_BY_VENUE"
    CANCELLED_FEED_GAP = "CANCELLED_FEED_GAP"

    @property
    def is_lit(self) -> bool:
        """True for lit smart routes, including the failover variant."""
        return "LIT_SMART" in self.value


class Regime(Enum):
    """Synthetic market-stress classification."""
    CALM = "CALM"
    VOLATILE = "VOLATILE"
    STRESS = "STRESS"


class FaultType(Enum):
    """Injectable incident faults, listed in application order."""
    LATENCY_SPIKE = "LATENCY_SPIKE"
    VENUE_REJECT_BURST = "VENUE_REJECT_BURST"
    FEED_DROPOUT = "FEED_DROPOUT"


class ReplayOutcome(Enum):
    """Before/after classification of one incident replay step."""
    UNCHANGED = "UNCHANGED"
    REJECTED = "REJECTED"
    THROTTLED = "THROTTLED"
    REROUTED = "REROUTED"


class QualityBand(Enum):
    """TCA fill quality classification."""
    STRONG = "STRONG"
    GOOD = "GOOD"
    DEGRADED = "DEGRADED"
    POOR = "POOR"
    BLOCKED = "BLOCKED"

    @property
    def is_poor(self) -> bool:
        """POOR and BLOCKED both count as poor-quality fills."""
        return self in (QualityBand.POOR, QualityBand.BLOCKED)


class Priority(Enum):
    """Routing recommendation priority."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return {Priority.HIGH: 3, Priority.MEDIUM: 2}.get(self, 1)


class GuardrailDecision(Enum):
    """Approval state gating a routing-policy change."""
    APPROVED = "APPROVED"
    MONITOR = "MONITOR"
    BLOCKED = "BLOCKED"


class FeedbackPolicyState(Enum):
    """Overall state of the routing feedback loop."""
    ACTIVE_TUNING = "ACTIVE_TUNING"
    GUARDRAILED_ONLY = "GUARDRAILED_ONLY"
    OBSERVE_ONLY = "OBSERVE_ONLY"


class ArenaDecision(Enum):
    """Per-round capital decision for one agent."""
    INCREASE = "INCREASE"
    DECREASE = "DECREASE"
    HOLD = "HOLD"


class ArenaPolicyState(Enum):
    """Terminal state of an agent arena negotiation."""
    DISABLED = "DISABLED"
    HALTED = "HALTED"
    GUARDRAILED = "GUARDRAILED"
    CONVERGED = "CONVERGED"
    STABILIZING = "STABILIZING"
    DIVERGENT = "DIVERGENT"


class OverrideStatus(Enum):
    """Outcome of a single policy override request."""
    APPLIED = "APPLIED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    EXPIRED = "EXPIRED"
    REJECTED_INVALID_VALUE = "REJECTED_INVALID_VALUE"
    UNSUPPORTED_POLICY = "UNSUPPORTED_POLICY"


class PluginHook(Enum):
    """Strategy plugin lifecycle hooks."""
    INITIALIZE = "INITIALIZE"
    COMPOSITE_PUBLISHED = "COMPOSITE_PUBLISHED"
    RUN_COMPLETED = "RUN_COMPLETED"


class HookStatus(Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class ControlState(Enum):
    """Platform control state reported by telemetry."""
    RUNNING = "RUNNING"
    DEGRADED = "DEGRADED"
    SAFE_MODE = "SAFE_MODE"
