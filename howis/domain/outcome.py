"""Outcome of verifying or probing a single name."""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional


class OutcomeKind(str, Enum):
    GOOD = "good"
    BAD = "bad"
    NOT_AVAILABLE = "n/a"
    ERROR = "error"


class Outcome(NamedTuple):
    """Tagged result: ``good``, ``bad``, ``n/a`` or ``error: <message>``.

    Use the constructors below rather than building tuples by hand.
    """
    kind: OutcomeKind
    message: Optional[str] = None

    @classmethod
    def good(cls) -> "Outcome":
        return cls(OutcomeKind.GOOD)

    @classmethod
    def bad(cls) -> "Outcome":
        return cls(OutcomeKind.BAD)

    @classmethod
    def not_available(cls) -> "Outcome":
        return cls(OutcomeKind.NOT_AVAILABLE)

    @classmethod
    def error(cls, message: str) -> "Outcome":
        return cls(OutcomeKind.ERROR, message)

    def render(self) -> str:
        """Fixed token form used in the record file and on the console."""
        if self.kind is OutcomeKind.ERROR:
            return f"error: {self.message}"
        return self.kind.value


def classify_status(status: str) -> Optional[OutcomeKind]:
    """Map a recorded status token to its counter bucket.

    Anything starting with ``error`` counts as an error whatever follows it.
    Unknown tokens return None.
    """
    if status == OutcomeKind.GOOD.value:
        return OutcomeKind.GOOD
    if status == OutcomeKind.BAD.value:
        return OutcomeKind.BAD
    if status == OutcomeKind.NOT_AVAILABLE.value:
        return OutcomeKind.NOT_AVAILABLE
    if status.startswith(OutcomeKind.ERROR.value):
        return OutcomeKind.ERROR
    return None
