"""
Logging configuration for the fund launch pipeline.

Provides a structured formatter and a stage logger that attaches
``extra_fields`` to records, so every pipeline stage logs its start and
completion with the same shape.
"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

PACKAGE_LOGGER_NAME = 'fund_launch'


class FundLaunchLogFormatter(logging.Formatter):
    """
    Formatter producing ``[ts] LEVEL name message | k=v ...`` lines.

    Extra fields are read from ``record.extra_fields`` when present.
    """

    def __init__(self, include_extra: bool = True):
        """
        Initialize formatter.

        Args:
            include_extra: Whether to include extra fields in log output
        """
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        name = record.name.split('.')[-1]
        log_line = f"[{timestamp}] {record.levelname:8s} {name:20s} {record.getMessage()}"

        extra = getattr(record, 'extra_fields', None)
        if self.include_extra and extra:
            extra_str = " | ".join(f"{k}={v}" for k, v in extra.items())
            log_line += f" | {extra_str}"

        if record.exc_info:
            log_line += "\n" + self.formatException(record.exc_info)
        return log_line


class PipelineStageLogger:
    """
    Structured logger for pipeline stages.

    Records go through the standard logging hierarchy; handlers are set up
    by ``configure_logging`` or by the host application.
    """

    def __init__(self, name: str = None):
        self.logger = logging.getLogger(name or PACKAGE_LOGGER_NAME)

    def stage_started(self, stage: str, run_id: str, details: Dict[str, Any] = None):
        extra_fields = {'run_id': run_id, 'stage': stage, 'status': 'start'}
        if details:
            extra_fields.update(details)
        self._log_with_extra(logging.DEBUG, f"Stage {stage} started", extra_fields)

    def stage_completed(self, stage: str, run_id: str, details: Dict[str, Any] = None):
        extra_fields = {'run_id': run_id, 'stage': stage, 'status': 'complete'}
        if details:
            extra_fields.update(details)
        self._log_with_extra(logging.INFO, f"Stage {stage} completed", extra_fields)

    def stage_warning(self, stage: str, run_id: str, message: str,
                      details: Dict[str, Any] = None):
        extra_fields = {'run_id': run_id, 'stage': stage, 'status': 'warning'}
        if details:
            extra_fields.update(details)
        self._log_with_extra(logging.WARNING, message, extra_fields)

    def _log_with_extra(self, level: int, message: str, extra_fields: Dict[str, Any]):
        """Log message with extra fields."""
        if not self.logger.isEnabledFor(level):
            return

        record = self.logger.makeRecord(
            name=self.logger.name,
            level=level,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=None
        )
        record.extra_fields = extra_fields
        self.logger.handle(record)


def configure_logging(level: str = "INFO", file_path: Optional[str] = None) -> logging.Logger:
    """
    Attach structured handlers to the package logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        file_path: Optional file path for log output

    Returns:
        The configured package logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    formatter = FundLaunchLogFormatter(include_extra=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger
