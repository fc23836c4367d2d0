"""
Base Pydantic Configuration

Foundation for all fund launch configuration classes. Configuration objects
are frozen: changes go through ``model_copy(update=...)`` and are
re-validated explicitly by the caller.
"""

from pydantic import BaseModel


class FundLaunchBaseConfig(BaseModel):
    """
    Base configuration class using Pydantic.

    Provides:
    - Automatic validation on construction
    - Immutability after construction
    - Rejection of unknown fields
    """

    class Config:
        frozen = True
        extra = "forbid"
        validate_default = True

    def get_summary(self) -> dict:
        """Get configuration summary for logging."""
        return {
            'type': self.__class__.__name__,
            'fields': self.model_dump()
        }
