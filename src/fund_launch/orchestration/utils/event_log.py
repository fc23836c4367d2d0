"""
Runtime Event Log
=================

Append-only, sequence-ordered audit log owned by a single pipeline run.
Stages receive the log as an explicit argument; there is no shared or
module-level instance.
"""

import logging
from datetime import datetime
from typing import List, Tuple

from ...types.runtime import RuntimeEvent
from ...utils.numeric import round6

logger = logging.getLogger(__name__)


class RuntimeEventLog:
    """
    In-memory runtime event log.

    ``publish`` assigns the next 1-based sequence number; ``snapshot``
    returns every event published so far in sequence order. Published
    events are frozen and never removed.
    """

    def __init__(self):
        self._events: List[RuntimeEvent] = []
        self._sequence = 0

    def publish(self, event_type: str, source: str, detail: str,
                impact_score: float, timestamp: datetime) -> RuntimeEvent:
        """
        Append an event to the log.

        Args:
            event_type: Event type label (e.g. REGIME_SELECTED)
            source: Publishing component label
            detail: Human readable detail
            impact_score: Numeric impact, rounded to 6 decimals
            timestamp: Run timestamp

        Returns:
            The published event
        """
        self._sequence += 1
        event = RuntimeEvent(
            sequence=self._sequence,
            timestamp=timestamp,
            event_type=event_type,
            source=source,
            detail=detail,
            impact_score=round6(impact_score)
        )
        self._events.append(event)
        logger.debug(f"Event #{event.sequence} {event_type} from {source}: {detail}")
        return event

    def snapshot(self) -> Tuple[RuntimeEvent, ...]:
        """Return all events ordered by sequence."""
        return tuple(sorted(self._events, key=lambda e: e.sequence))

    def __len__(self) -> int:
        return len(self._events)
