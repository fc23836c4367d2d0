"""
Telemetry Builder - Platform Health Snapshot

Derives fleet health, flag counts, an estimated latency and the control
state from the risk decision, the execution plan and the incident result.
"""

import logging
from typing import Sequence

from ...types.enums import ControlState, FaultType
from ...types.execution import ExecutionIntent, IncidentSimulationResult
from ...types.portfolio import AllocationDraft, RiskDecision
from ...types.runtime import PlatformTelemetry
from ...utils.numeric import clamp, round6

logger = logging.getLogger(__name__)

WARNING_DELTA_LOWER = 0.07
WARNING_DELTA_UPPER = 0.10


class TelemetryBuilder:
    """Builds PlatformTelemetry for one run."""

    def build(self, allocations: Sequence[AllocationDraft], risk: RiskDecision,
              intents: Sequence[ExecutionIntent],
              incident: IncidentSimulationResult) -> PlatformTelemetry:
        """
        Build telemetry.

        Args:
            allocations: Allocation drafts
            risk: Risk decision
            intents: Baseline execution intents
            incident: Incident result

        Returns:
            PlatformTelemetry
        """
        faults = incident.active_faults
        venue_faults = sum(1 for f in faults if f == FaultType.VENUE_REJECT_BURST)

        critical_flags = (0 if risk.approved else max(1, len(risk.breaches))) + venue_faults
        warning_flags = sum(
            1 for a in allocations
            if WARNING_DELTA_LOWER <= abs(a.delta_weight) < WARNING_DELTA_UPPER
        ) + (len(faults) - venue_faults)

        if risk.approved:
            fleet_score = 90.0 - warning_flags * 2.0
        else:
            fleet_score = 55.0 - critical_flags * 3.0
        fleet_score = clamp(fleet_score - len(faults) * 1.5, 0.0, 100.0)

        latency = 18.0 + len(intents) * 2.4 + critical_flags * 9.0 + incident.added_latency_ms

        if not risk.approved:
            control_state = ControlState.SAFE_MODE
        elif faults:
            control_state = ControlState.DEGRADED
        else:
            control_state = ControlState.RUNNING

        telemetry = PlatformTelemetry(
            fleet_health_score=round6(fleet_score),
            critical_flags=critical_flags,
            warning_flags=warning_flags,
            execution_intent_count=len(intents),
            estimated_latency_ms=round6(latency),
            control_state=control_state
        )
        logger.info(f"Telemetry: health={telemetry.fleet_health_score:.1f}, "
                    f"state={control_state.value}, critical={critical_flags}, warning={warning_flags}")
        return telemetry
