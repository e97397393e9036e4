"""retryplan - retry/backoff delay policies"""

from retryplan.domain.errors import (
    ConfigurationError,
    InvalidTimestampError,
    RetryPolicyError,
    TimestampOrderError,
)
from retryplan.domain.policy import GIVE_UP, RetryPolicy
from retryplan.infrastructure.strategy_factory import StrategyFactory, build_policy

__all__ = [
    "GIVE_UP",
    "RetryPolicy",
    "build_policy",
    "StrategyFactory",
    "RetryPolicyError",
    "ConfigurationError",
    "TimestampOrderError",
    "InvalidTimestampError",
]
