"""Comparator result data model."""
from typing import NamedTuple

from howis.domain.outcome import Outcome

# Clamp for transfers that finish faster than the clock resolution.
_MIN_ELAPSED = 1e-9


class VerifyResult(NamedTuple):
    """Result of comparing one local file against its remote copy."""
    outcome: Outcome
    """Good/Bad on a completed transfer, Error on transport failure"""

    bytes_transferred: int = 0
    """Body bytes received from the remote"""

    elapsed: float = 0.0
    """Wall-clock seconds spent on the transfer"""

    @property
    def kib_per_second(self) -> float:
        return self.bytes_transferred / max(self.elapsed, _MIN_ELAPSED) / 1024.0

    def format_speed(self) -> str:
        return format_speed(self.kib_per_second)


def format_speed(kib_per_second: float) -> str:
    """``12.3 KB/s`` below 1024 KB/s, ``1.5 MB/s`` from there on."""
    if kib_per_second >= 1024.0:
        return f"{kib_per_second / 1024.0:.1f} MB/s"
    return f"{kib_per_second:.1f} KB/s"
