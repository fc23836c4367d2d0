"""
Shared utilities: numeric helpers and logging configuration.
"""

from .numeric import MATERIALITY_TOLERANCE, round_half_away, round6, round4, truncate6, clamp, is_material
from .logging_config import FundLaunchLogFormatter, PipelineStageLogger, configure_logging

__all__ = [
    'MATERIALITY_TOLERANCE',
    'round_half_away',
    'round6',
    'round4',
    'truncate6',
    'clamp',
    'is_material',
    'FundLaunchLogFormatter',
    'PipelineStageLogger',
    'configure_logging'
]
