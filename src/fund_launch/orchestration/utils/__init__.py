"""
Orchestration utilities.
"""

from .event_log import RuntimeEventLog

__all__ = [
    'RuntimeEventLog',
]
