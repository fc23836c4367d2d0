"""
Exception classes for the fund launch pipeline.

Only ConfigValidationError is allowed to escape a run; the other errors are
raised and caught at their own stage boundary and turned into audit or
lifecycle records.
"""

from typing import Any, Optional


class FundLaunchError(Exception):
    """Base exception for fund launch pipeline errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize fund launch error.

        Args:
            message: Error message
            details: Optional additional details dictionary
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """String representation with details."""
        if self.details:
            details_str = ", ".join(f"{k}: {v}" for k, v in self.details.items())
            return f"{self.message} (Details: {details_str})"
        return self.message


class ConfigValidationError(FundLaunchError):
    """Raised when a limit or configuration field is invalid. Fatal for a run."""

    def __init__(self, field_name: str, value: Any, rule: str):
        """
        Initialize config validation error.

        Args:
            field_name: Name of the offending configuration field
            value: Value that failed validation
            rule: Human readable rule that was violated
        """
        message = f"Invalid configuration for {field_name}: {rule}"
        super().__init__(message, {
            'field': field_name,
            'value': value,
            'rule': rule
        })
        self.field_name = field_name
        self.value = value
        self.rule = rule


class UnsupportedPolicyKeyError(FundLaunchError):
    """Raised when an override names a limit field that does not exist."""

    def __init__(self, policy_key: str):
        super().__init__(f"Unsupported policy key '{policy_key}'", {
            'policy_key': policy_key
        })
        self.policy_key = policy_key


class PolicyValueRejectedError(FundLaunchError):
    """Raised when applying an override would produce an invalid limit config."""

    def __init__(self, policy_key: str, value: float, reason: str):
        super().__init__(f"Override value {value} rejected for '{policy_key}'", {
            'policy_key': policy_key,
            'value': value,
            'reason': reason
        })
        self.policy_key = policy_key
        self.value = value
        self.reason = reason


class PluginHookFailure(FundLaunchError):
    """Wraps an exception thrown by a strategy plugin hook."""

    MAX_DETAIL_LENGTH = 120

    def __init__(self, strategy_id: str, hook: str, cause: Optional[BaseException] = None):
        """
        Initialize plugin hook failure.

        Args:
            strategy_id: Normalized strategy id of the failing plugin
            hook: Hook name (INITIALIZE, COMPOSITE_PUBLISHED, RUN_COMPLETED)
            cause: Original exception raised by the plugin
        """
        super().__init__(f"Plugin hook {hook} failed for {strategy_id}", {
            'strategy_id': strategy_id,
            'hook': hook,
            'error_type': type(cause).__name__ if cause else None
        })
        self.strategy_id = strategy_id
        self.hook = hook
        self.cause = cause

    @property
    def detail(self) -> str:
        """Cause message truncated for lifecycle records."""
        message = str(self.cause) if self.cause is not None else ""
        if not message.strip():
            return "Plugin hook failed."
        return message[:self.MAX_DETAIL_LENGTH]
