"""
Pydantic models for option validation and reporting.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import DEFAULT_POLL_S, DEFAULT_TIMEOUT_S
from .errors import InvalidArgumentError


class WaitOptions(BaseModel):
    """Timeout/polling for one dispatcher call. Both values are seconds."""

    model_config = ConfigDict(frozen=True)

    timeout_s: float = Field(DEFAULT_TIMEOUT_S, ge=0)
    poll_s: float = Field(DEFAULT_POLL_S, ge=0)

    @classmethod
    def build(cls, timeout_s: float, poll_s: float) -> WaitOptions:
        """Validate, surfacing bad values as InvalidArgumentError."""
        try:
            return cls(timeout_s=timeout_s, poll_s=poll_s)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid wait options: {e}") from e


class AttemptRecord(BaseModel):
    """One dispatcher attempt, kept for failure manifests."""

    attempt: int
    outcome: str
    error_type: str | None = None
    message: str | None = None
    elapsed_s: float = 0.0
