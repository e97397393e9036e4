"""Backoff strategies"""

from retryplan.domain.strategies.adaptive import (
    LILDStrategy,
    LIMDStrategy,
    MILDStrategy,
    MIMDStrategy,
)
from retryplan.domain.strategies.base import BackoffStrategy
from retryplan.domain.strategies.constant import ConstantStrategy
from retryplan.domain.strategies.exponential import ExponentialStrategy
from retryplan.domain.strategies.fibonacci import FibonacciStrategy

__all__ = [
    "BackoffStrategy",
    "ConstantStrategy",
    "ExponentialStrategy",
    "FibonacciStrategy",
    "LILDStrategy",
    "LIMDStrategy",
    "MILDStrategy",
    "MIMDStrategy",
]
