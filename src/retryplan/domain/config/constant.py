"""Constant delay configuration model."""

from pydantic import Field

from retryplan.domain.config.policy import PolicyConfig


class ConstantConfig(PolicyConfig):
    """Configuration for the constant delay strategy.

    Attributes:
        delay_on_failure: Seconds to wait after a failure
        delay_on_success: Seconds to wait after a success
    """

    delay_on_failure: float = Field(..., ge=0.0)
    delay_on_success: float = Field(0.0, ge=0.0)
