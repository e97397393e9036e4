"""Fibonacci backoff strategy"""

from retryplan.domain.config.fibonacci import FibonacciConfig
from retryplan.domain.models.policy_state import PolicyState


class FibonacciStrategy:
    """Delay follows a fibonacci sequence seeded by two initial delays"""

    def __init__(self, config: FibonacciConfig):
        self.config = config

    def on_success(self, state: PolicyState, timestamp: float) -> float:
        return self.config.delay_on_success

    def on_failure(self, state: PolicyState, timestamp: float) -> float:
        return self.term(state.consecutive_failures)

    def term(self, n: int) -> float:
        """Delay for the n-th consecutive failure (1-based)"""
        previous, current = self.config.initial_delay1, self.config.initial_delay2
        if n <= 1:
            return previous
        for _ in range(n - 2):
            previous, current = current, previous + current
        return current
