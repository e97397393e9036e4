"""Fibonacci backoff configuration model."""

from pydantic import Field

from retryplan.domain.config.policy import PolicyConfig


class FibonacciConfig(PolicyConfig):
    """Configuration for fibonacci backoff.

    Attributes:
        initial_delay1: Delay after the first failure
        initial_delay2: Delay after the second consecutive failure
        delay_on_success: Seconds to wait after a success
    """

    initial_delay1: float = Field(..., ge=0.0)
    initial_delay2: float = Field(..., ge=0.0)
    delay_on_success: float = Field(0.0, ge=0.0)
