"""Outcome model - a reported success or failure"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutcomeKind(str, Enum):
    """Kind of reported outcome"""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Outcome:
    """An outcome reported to a policy, with an optional timestamp"""

    kind: OutcomeKind
    timestamp: Optional[float] = None

    @classmethod
    def parse(cls, text: str) -> "Outcome":
        """Parse an outcome token such as ``f``, ``success`` or ``f@1000.5``

        Raises:
            ValueError: If the token is not a valid outcome
        """
        token, _, stamp = text.strip().partition("@")
        token = token.lower()
        if token in ("s", "success"):
            kind = OutcomeKind.SUCCESS
        elif token in ("f", "failure"):
            kind = OutcomeKind.FAILURE
        else:
            raise ValueError(f"Invalid outcome: {text!r} (expected s/f, optionally @timestamp)")

        timestamp = None
        if stamp:
            try:
                timestamp = float(stamp)
            except ValueError:
                raise ValueError(f"Invalid timestamp in outcome: {text!r}") from None
        return cls(kind=kind, timestamp=timestamp)
