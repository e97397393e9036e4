"""Increase/decrease strategies (LILD, LIMD, MILD, MIMD).

These keep a running delay: each failure grows the previous delay, each
success shrinks it. The first failure of a fresh policy starts at
initial_delay and the first success at min_delay. The running delay is kept
between min_delay and max_delay (when configured).
"""

from abc import ABC, abstractmethod
from typing import Optional

from retryplan.domain.config.adaptive import (
    AdaptiveConfig,
    LILDConfig,
    LIMDConfig,
    MILDConfig,
    MIMDConfig,
)
from retryplan.domain.models.policy_state import PolicyState


class _AdaptiveStrategy(ABC):
    config: AdaptiveConfig

    def __init__(self, config: AdaptiveConfig):
        self.config = config

    @abstractmethod
    def _increase(self, delay: float) -> float:
        """Grow the running delay after a failure"""
        pass

    @abstractmethod
    def _decrease(self, delay: float) -> float:
        """Shrink the running delay after a success"""
        pass

    def _bounded(self, delay: float) -> float:
        delay = max(delay, self.config.min_delay)
        if self.config.max_delay is not None:
            delay = min(delay, self.config.max_delay)
        return delay

    def on_success(self, state: PolicyState, timestamp: float) -> float:
        previous: Optional[float] = state.previous_delay
        if previous is None:
            return self._bounded(self.config.min_delay)
        return self._bounded(self._decrease(previous))

    def on_failure(self, state: PolicyState, timestamp: float) -> float:
        previous: Optional[float] = state.previous_delay
        if previous is None:
            return self._bounded(self.config.initial_delay)
        return self._bounded(self._increase(previous))


class LILDStrategy(_AdaptiveStrategy):
    """Linear increase, linear decrease"""

    config: LILDConfig

    def _increase(self, delay: float) -> float:
        return delay + self.config.delay_increment_on_failure

    def _decrease(self, delay: float) -> float:
        return delay + self.config.delay_increment_on_success


class LIMDStrategy(_AdaptiveStrategy):
    """Linear increase, multiplicative decrease"""

    config: LIMDConfig

    def _increase(self, delay: float) -> float:
        return delay + self.config.delay_increment_on_failure

    def _decrease(self, delay: float) -> float:
        return delay * self.config.delay_multiple_on_success


class MILDStrategy(_AdaptiveStrategy):
    """Multiplicative increase, linear decrease"""

    config: MILDConfig

    def _increase(self, delay: float) -> float:
        return delay * self.config.delay_multiple_on_failure

    def _decrease(self, delay: float) -> float:
        return delay + self.config.delay_increment_on_success


class MIMDStrategy(_AdaptiveStrategy):
    """Multiplicative increase, multiplicative decrease"""

    config: MIMDConfig

    def _increase(self, delay: float) -> float:
        return delay * self.config.delay_multiple_on_failure

    def _decrease(self, delay: float) -> float:
        return delay * self.config.delay_multiple_on_success
