"""Tenacity integration for retry policies.

A RetryPolicy only computes delays. This module lets tenacity run the actual
retry loop (calling the function, sleeping) while the policy decides how long
to wait and when to give up.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Dict, Optional

from tenacity import RetryCallState, Retrying, retry_if_exception

from retryplan.domain.policy import GIVE_UP, RetryPolicy

logger = logging.getLogger(__name__)


def _retry_any_exception(exception: BaseException) -> bool:
    return isinstance(exception, Exception)


class PolicyRetryBridge:
    """Adapts a RetryPolicy to tenacity's ``wait`` and ``stop`` callables.

    Each failed attempt is reported to the policy exactly once, whichever of
    ``wait`` or ``stop`` tenacity calls first. Timestamps handed to the policy
    leave out the time slept in earlier waits, so the elapsed-time correction
    only charges time spent inside the operation itself.
    """

    def __init__(self, policy: RetryPolicy, clock: Callable[[], float] = time.monotonic):
        self.policy = policy
        self._clock = clock
        self._waited = 0.0
        self._last_stamp: Optional[float] = None
        self._decisions: Dict[int, float] = {}

    def _timestamp(self) -> float:
        stamp = self._clock() - self._waited
        # A sleep shorter than requested would otherwise move the clock backwards
        if self._last_stamp is not None and stamp < self._last_stamp:
            stamp = self._last_stamp
        self._last_stamp = stamp
        return stamp

    def _decide(self, retry_state: RetryCallState) -> float:
        attempt = retry_state.attempt_number
        if attempt not in self._decisions:
            delay = self.policy.failure(self._timestamp())
            self._decisions[attempt] = delay
            if delay != GIVE_UP:
                self._waited += delay
        return self._decisions[attempt]

    def wait(self, retry_state: RetryCallState) -> float:
        """Seconds tenacity should sleep before the next attempt"""
        delay = self._decide(retry_state)
        return 0.0 if delay == GIVE_UP else delay

    def stop(self, retry_state: RetryCallState) -> bool:
        """True when the policy gave up"""
        return self._decide(retry_state) == GIVE_UP

    def report_success(self) -> float:
        """Report the successful attempt to the policy"""
        return self.policy.success(self._timestamp())


def retry_with_policy(
    policy_factory: Callable[[], RetryPolicy],
    retry_condition: Callable[[BaseException], bool] = _retry_any_exception,
    before_sleep: Optional[Callable[[RetryCallState], None]] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> Callable[[Callable], Callable]:
    """Create a retry decorator driven by a RetryPolicy.

    Every call of the decorated function is its own retry loop with a fresh
    policy from ``policy_factory``. When the policy gives up, the last
    exception is re-raised.

    Args:
        policy_factory: Returns a new RetryPolicy per call
        retry_condition: Function that returns True if exception should be retried
        before_sleep: Optional callback before sleep (defaults to logging)
        sleep: Optional sleep function (defaults to tenacity's)

    Returns:
        Retry decorator
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapped(*args: Any, **kwargs: Any) -> Any:
            bridge = PolicyRetryBridge(policy_factory())

            def _before_sleep_log(retry_state: RetryCallState) -> None:
                if retry_state.outcome is None:
                    return
                exception = retry_state.outcome.exception()
                attempt = retry_state.attempt_number
                logger.warning(
                    f"{getattr(func, '__name__', func)} failed (attempt {attempt}): {exception}. "
                    f"Retrying in {bridge.wait(retry_state):.2f}s..."
                )

            retrying_kwargs: Dict[str, Any] = {}
            if sleep is not None:
                retrying_kwargs["sleep"] = sleep
            retrying = Retrying(
                stop=bridge.stop,
                wait=bridge.wait,
                retry=retry_if_exception(retry_condition),
                reraise=True,
                before_sleep=before_sleep or _before_sleep_log,
                **retrying_kwargs,
            )
            result = retrying(func, *args, **kwargs)
            delay = bridge.report_success()
            logger.debug(f"{getattr(func, '__name__', func)} succeeded, next attempt after {delay:.2f}s")
            return result

        return wrapped

    return decorator
