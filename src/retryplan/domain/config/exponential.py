"""Exponential backoff configuration model."""

from pydantic import Field

from retryplan.domain.config.policy import PolicyConfig


class ExponentialConfig(PolicyConfig):
    """Configuration for exponential backoff.

    Attributes:
        initial_delay: Delay after the first failure, in seconds
        exponent_base: Growth factor applied per consecutive failure
        delay_on_success: Seconds to wait after a success
    """

    initial_delay: float = Field(..., ge=0.0)
    exponent_base: float = Field(2.0, ge=1.0)
    delay_on_success: float = Field(0.0, ge=0.0)
