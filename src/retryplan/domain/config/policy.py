"""Base retry policy configuration model."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PolicyConfig(BaseModel):
    """Configuration shared by every retry strategy.

    Strategy configs extend this model with their own delay parameters.
    Validation is performed at construction time to fail fast on
    configuration errors.

    Attributes:
        max_attempts: Consecutive failures before giving up (0 = never give up,
            1 = give up on the first failure, i.e. no retries)
        jitter_factor: Randomization half-width as a fraction of the delay (0.0-0.5)
        max_delay: Hard ceiling on any returned delay, in seconds (None = no ceiling)
    """

    max_attempts: int = Field(0, ge=0)
    jitter_factor: Optional[float] = Field(None, ge=0.0, le=0.5)
    max_delay: Optional[float] = Field(None, ge=0.0)

    model_config = ConfigDict(
        extra="forbid",  # Reject unknown fields
        frozen=True,  # Configuration is immutable after construction
    )
