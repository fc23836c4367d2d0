"""
Validation Module

Error taxonomy shared by configuration and pipeline components.
"""

from .exceptions import (
    FundLaunchError,
    ConfigValidationError,
    UnsupportedPolicyKeyError,
    PolicyValueRejectedError,
    PluginHookFailure
)

__all__ = [
    'FundLaunchError',
    'ConfigValidationError',
    'UnsupportedPolicyKeyError',
    'PolicyValueRejectedError',
    'PluginHookFailure',
]
