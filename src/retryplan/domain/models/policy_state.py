"""Policy state model - mutable run state of one retry loop"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class PolicyState:
    """Run state owned by a single RetryPolicy"""

    consecutive_failures: int = 0  # Reset on success, incremented on failure
    last_timestamp: Optional[float] = None  # Timestamp of the last scheduled outcome
    previous_delay: Optional[float] = None  # Last raw delay after the ceiling clamp

    def reset(self) -> None:
        """Return to the initial state (fresh timestamp baseline)"""
        self.consecutive_failures = 0
        self.last_timestamp = None
        self.previous_delay = None
