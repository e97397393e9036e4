"""Configuration models with Pydantic validation."""

from retryplan.domain.config.adaptive import (
    AdaptiveConfig,
    LILDConfig,
    LIMDConfig,
    MILDConfig,
    MIMDConfig,
)
from retryplan.domain.config.constant import ConstantConfig
from retryplan.domain.config.exponential import ExponentialConfig
from retryplan.domain.config.fibonacci import FibonacciConfig
from retryplan.domain.config.policy import PolicyConfig

__all__ = [
    "PolicyConfig",
    "ConstantConfig",
    "ExponentialConfig",
    "FibonacciConfig",
    "AdaptiveConfig",
    "LILDConfig",
    "LIMDConfig",
    "MILDConfig",
    "MIMDConfig",
]
