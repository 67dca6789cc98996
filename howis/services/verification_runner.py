import logging
import os
import sys
from typing import Iterable, Optional, Set, TextIO

from howis.domain.counters import Counters
from howis.domain.outcome import Outcome, OutcomeKind
from howis.services.comparator import Comparator
from howis.services.http_service import Credentials
from howis.services.ledger import Ledger
from howis.services.prober import Prober
from howis.services.source_resolver import Source

logger = logging.getLogger(__name__)

MISSING_SOURCE = "missing source"
NOT_A_FILE = "not a file"


class VerificationRunner:
    """Runs one verification batch given configured collaborators.

    Owns the control flow: replay the record file, verify each input file
    that is not already decided, probe whatever the source table still holds,
    and print the summaries. Every decision is appended to the record file
    before the next item starts. It does NOT construct dependencies (that
    stays in the DI layer).
    """

    def __init__(
        self,
        *,
        source: Source,
        ledger: Ledger,
        comparator: Comparator,
        prober: Prober,
        credentials: Optional[Credentials] = None,
        out: Optional[TextIO] = None,
    ):
        self.source = source
        self.ledger = ledger
        self.comparator = comparator
        self.prober = prober
        self.credentials = credentials
        self._out = out

    def _emit(self, text: str) -> None:
        out = self._out if self._out is not None else sys.stdout
        out.write(text)
        out.flush()

    def _record(self, name: str, outcome: Outcome, counters: Counters, skip: Set[str]) -> None:
        self.ledger.append(name, outcome)
        counters.add(outcome.kind)
        skip.add(name)

    def verify_path(self, path: str, skip: Set[str], counters: Counters) -> None:
        if not os.path.isfile(path):
            self._emit(f"{path}: error: {NOT_A_FILE}\n")
            return

        name = os.path.basename(path)
        if name in skip:
            logger.debug("Skipping (already recorded) %s", path)
            return
        self._emit(f"{name}: ")

        url = self.source.resolve(name)
        if url is None:
            outcome = Outcome.error(MISSING_SOURCE)
            self._emit(f"{outcome.render()}\n")
            self._record(name, outcome, counters, skip)
            return

        logger.info("Verifying %s against %s", path, url)
        result = self.comparator.verify(path, url, self.credentials)
        if result.outcome.kind is OutcomeKind.ERROR:
            self._emit(f"{result.outcome.render()}\n")
        else:
            self._emit(f"{result.outcome.render()} ({result.format_speed()})\n")
        self._record(name, result.outcome, counters, skip)

    def probe_remaining(self, skip: Set[str], counters: Counters) -> None:
        for name, url in self.source.drain_remaining():
            self._emit(f"{name}: ")
            outcome = self.prober.probe(name, url, self.credentials)
            self._emit(f"{outcome.render()}\n")
            self._record(name, outcome, counters, skip)

    def run(self, paths: Iterable[str]) -> Counters:
        skip, counters = self.ledger.replay(self.source)
        self._emit(f"loaded: {counters.summary()}\n")

        for path in paths:
            self.verify_path(path, skip, counters)

        self.probe_remaining(skip, counters)

        self._emit(f"finished: {counters.summary()}\n")
        return counters
