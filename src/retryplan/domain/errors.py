"""Exceptions raised by retry policies"""


class RetryPolicyError(Exception):
    """Base class for retry policy errors."""

    pass


class ConfigurationError(RetryPolicyError):
    """Policy configuration validation error."""

    pass


class TimestampOrderError(RetryPolicyError, ValueError):
    """An outcome was reported with a timestamp older than the previous one."""

    def __init__(self, previous: float, current: float):
        self.previous = previous
        self.current = current
        super().__init__(f"Decreasing timestamp ({previous} -> {current})")


class InvalidTimestampError(RetryPolicyError, ValueError):
    """An outcome was reported with a NaN or infinite timestamp."""

    def __init__(self, timestamp: float):
        self.timestamp = timestamp
        super().__init__(f"Timestamp must be a finite number, got {timestamp}")
