from dataclasses import dataclass

from howis.domain.outcome import OutcomeKind


@dataclass
class Counters:
    """Running outcome totals for one process run.

    Seeded from the record file on startup and bumped once per decided item.
    """
    good: int = 0
    bad: int = 0
    na: int = 0
    error: int = 0

    def add(self, kind: OutcomeKind) -> None:
        if kind is OutcomeKind.GOOD:
            self.good += 1
        elif kind is OutcomeKind.BAD:
            self.bad += 1
        elif kind is OutcomeKind.NOT_AVAILABLE:
            self.na += 1
        elif kind is OutcomeKind.ERROR:
            self.error += 1
        else:
            raise ValueError(f"Unknown outcome kind: {kind!r}")

    def summary(self) -> str:
        return f"{self.good} good, {self.bad} bad, {self.na} n/a, {self.error} error"
