"""Configuration models for the increase/decrease strategies.

LILD: linear increase, linear decrease
LIMD: linear increase, multiplicative decrease
MILD: multiplicative increase, linear decrease
MIMD: multiplicative increase, multiplicative decrease
"""

from pydantic import Field, model_validator

from retryplan.domain.config.policy import PolicyConfig


class AdaptiveConfig(PolicyConfig):
    """Fields shared by the increase/decrease strategies.

    Attributes:
        initial_delay: Delay after the first failure, in seconds
        min_delay: Lower bound of the running delay
    """

    initial_delay: float = Field(..., ge=0.0)
    min_delay: float = Field(0.0, ge=0.0)

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.max_delay is not None and self.min_delay > self.max_delay:
            raise ValueError("min_delay must not exceed max_delay")
        return self


class LILDConfig(AdaptiveConfig):
    delay_increment_on_failure: float = Field(..., ge=0.0)
    delay_increment_on_success: float = Field(..., le=0.0)


class LIMDConfig(AdaptiveConfig):
    delay_increment_on_failure: float = Field(..., ge=0.0)
    delay_multiple_on_success: float = Field(..., ge=0.0, le=1.0)


class MILDConfig(AdaptiveConfig):
    delay_multiple_on_failure: float = Field(..., ge=1.0)
    delay_increment_on_success: float = Field(..., le=0.0)


class MIMDConfig(AdaptiveConfig):
    delay_multiple_on_failure: float = Field(..., ge=1.0)
    delay_multiple_on_success: float = Field(..., ge=0.0, le=1.0)
