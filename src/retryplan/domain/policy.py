"""Retry policy - turns reported outcomes into delays.

A RetryPolicy tracks consecutive failures and the timestamp of the last
reported outcome. For every outcome it asks its strategy for a raw delay,
clamps it to max_delay, subtracts the time already elapsed since the previous
outcome and applies jitter. The policy never sleeps; the caller's loop does.

Typical use:

    policy = build_policy({"strategy": "constant", "delay_on_failure": 2})
    delay = policy.failure()   # seconds to wait, or GIVE_UP
    delay = policy.success()
"""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Callable, Optional

from retryplan.domain.config.policy import PolicyConfig
from retryplan.domain.errors import InvalidTimestampError, TimestampOrderError
from retryplan.domain.models.policy_state import PolicyState
from retryplan.domain.strategies.base import BackoffStrategy

logger = logging.getLogger(__name__)

GIVE_UP = -1

Hook = Callable[[PolicyState, float], float]


class RetryPolicy:
    """Per-loop delay calculator.

    Not thread-safe: success() and failure() read and mutate the run state
    without locking, so callers sharing one instance must serialize access.
    """

    def __init__(
        self,
        strategy: BackoffStrategy,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        """Initialize policy

        Args:
            strategy: Strategy supplying raw delays (holds the validated config)
            clock: Zero-argument callable returning the current time in seconds
            rng: Random source for jitter (a fresh random.Random if None)
        """
        self.strategy = strategy
        self.state = PolicyState()
        self._clock = clock
        self._rng = rng if rng is not None else random.Random()

    @property
    def config(self) -> PolicyConfig:
        return self.strategy.config

    @property
    def exhausted(self) -> bool:
        """True once the consecutive failures reached max_attempts"""
        max_attempts = self.config.max_attempts
        return bool(max_attempts) and self.state.consecutive_failures >= max_attempts

    def success(self, timestamp: Optional[float] = None) -> float:
        """Report a successful attempt

        Args:
            timestamp: Time of the success in seconds (current time if None)

        Returns:
            Seconds to wait before the next attempt (never GIVE_UP)

        Raises:
            TimestampOrderError: If timestamp is older than the last reported one
            InvalidTimestampError: If timestamp is NaN or infinite
        """
        timestamp = self._resolve_timestamp(timestamp)
        self.state.consecutive_failures = 0
        return self._schedule(self.strategy.on_success, timestamp, "success")

    def failure(self, timestamp: Optional[float] = None) -> float:
        """Report a failed attempt

        Args:
            timestamp: Time of the failure in seconds (current time if None)

        Returns:
            Seconds to wait before the next attempt, or GIVE_UP (-1) once
            max_attempts consecutive failures have been reported

        Raises:
            TimestampOrderError: If timestamp is older than the last reported one
            InvalidTimestampError: If timestamp is NaN or infinite
        """
        timestamp = self._resolve_timestamp(timestamp)
        self.state.consecutive_failures += 1
        if self.exhausted:
            # No further scheduling for this failure, so the baseline stays put
            logger.debug(
                f"Giving up after {self.state.consecutive_failures} consecutive failures"
            )
            return GIVE_UP
        return self._schedule(self.strategy.on_failure, timestamp, "failure")

    def reset(self) -> None:
        """Forget all reported outcomes"""
        self.state.reset()

    def _resolve_timestamp(self, timestamp: Optional[float]) -> float:
        if timestamp is None:
            timestamp = self._clock()
        if not math.isfinite(timestamp):
            raise InvalidTimestampError(timestamp)
        last = self.state.last_timestamp
        if last is not None and timestamp < last:
            raise TimestampOrderError(last, timestamp)
        return float(timestamp)

    def _schedule(self, hook: Hook, timestamp: float, outcome: str) -> float:
        if self.state.last_timestamp is None:
            self.state.last_timestamp = timestamp

        delay = hook(self.state, timestamp)
        max_delay = self.config.max_delay
        if max_delay is not None and delay > max_delay:
            delay = max_delay
        self.state.previous_delay = delay

        elapsed = timestamp - self.state.last_timestamp
        self.state.last_timestamp = timestamp
        corrected = delay - elapsed
        if corrected < 0:
            logger.debug(f"{outcome}: raw delay {delay:.3f}s already covered by {elapsed:.3f}s elapsed")
            return 0.0

        result = self._add_jitter(corrected)
        logger.debug(
            f"{outcome} (consecutive failures: {self.state.consecutive_failures}): "
            f"raw delay {delay:.3f}s, elapsed {elapsed:.3f}s, delay {result:.3f}s"
        )
        return result

    def _add_jitter(self, delay: float) -> float:
        jitter_factor = self.config.jitter_factor
        if not delay or not jitter_factor or math.isinf(delay):
            return delay
        low = delay * (1 - jitter_factor)
        high = delay * (1 + jitter_factor)
        jittered = self._rng.uniform(low, high)
        max_delay = self.config.max_delay
        if max_delay is not None and jittered > max_delay:
            jittered = max_delay
        return jittered
