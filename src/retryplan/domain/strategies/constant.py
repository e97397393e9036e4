"""Constant delay strategy"""

from retryplan.domain.config.constant import ConstantConfig
from retryplan.domain.models.policy_state import PolicyState


class ConstantStrategy:
    """Waits the same number of seconds after every failure"""

    def __init__(self, config: ConstantConfig):
        self.config = config

    def on_success(self, state: PolicyState, timestamp: float) -> float:
        return self.config.delay_on_success

    def on_failure(self, state: PolicyState, timestamp: float) -> float:
        return self.config.delay_on_failure
