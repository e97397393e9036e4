"""Backoff strategy interface"""

from typing import Protocol, runtime_checkable

from retryplan.domain.config.policy import PolicyConfig
from retryplan.domain.models.policy_state import PolicyState


@runtime_checkable
class BackoffStrategy(Protocol):
    """Supplies raw delays to a RetryPolicy.

    A strategy holds its validated configuration and computes the raw delay
    (before ceiling clamp, elapsed-time correction and jitter) for each
    reported outcome. Run state lives in the policy and is passed in.
    """

    config: PolicyConfig

    def on_success(self, state: PolicyState, timestamp: float) -> float:
        """Raw delay after a success

        Args:
            state: Policy run state (failure count already reset)
            timestamp: Timestamp of the reported success

        Returns:
            Delay in seconds
        """
        ...

    def on_failure(self, state: PolicyState, timestamp: float) -> float:
        """Raw delay after a failure

        Args:
            state: Policy run state (failure count already incremented)
            timestamp: Timestamp of the reported failure

        Returns:
            Delay in seconds
        """
        ...
