"""Exponential backoff strategy"""

from retryplan.domain.config.exponential import ExponentialConfig
from retryplan.domain.models.policy_state import PolicyState


class ExponentialStrategy:
    """Delay grows geometrically with consecutive failures

    initial_delay * (exponent_base ^ (consecutive_failures - 1))
    """

    def __init__(self, config: ExponentialConfig):
        self.config = config

    def on_success(self, state: PolicyState, timestamp: float) -> float:
        return self.config.delay_on_success

    def on_failure(self, state: PolicyState, timestamp: float) -> float:
        exponent = max(state.consecutive_failures - 1, 0)
        try:
            return self.config.initial_delay * float(self.config.exponent_base) ** exponent
        except OverflowError:
            return float("inf")
