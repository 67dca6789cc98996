import logging
import time
from typing import Optional

from howis.domain.outcome import Outcome
from howis.domain.verify_result import VerifyResult
from howis.exceptions import HttpFetchError, LocalFileError
from howis.services.http_service import Credentials, HttpRequest, HttpService
from howis.services.stream_comparator import StreamComparator

logger = logging.getLogger(__name__)


class Comparator:
    """Downloads a remote URL and checks it byte-for-byte against a local file.

    The transfer always runs to completion, even after the first differing
    byte, so the throughput figure covers the whole body.
    """

    def __init__(self, http_service: HttpService):
        self.http_service = http_service

    def verify(self, local_path: str, url: str, credentials: Optional[Credentials] = None) -> VerifyResult:
        try:
            local_file = open(local_path, "rb")
        except OSError as e:
            raise LocalFileError(local_path, e) from e

        with local_file:
            stream = StreamComparator(local_file)
            start = time.monotonic()
            try:
                for chunk in self.http_service.perform(HttpRequest(url, True, credentials)):
                    stream.consume(chunk)
            except HttpFetchError as e:
                logger.debug("Transfer failed for %s", url, exc_info=True)
                return VerifyResult(Outcome.error(e.reason), stream.bytes_consumed, time.monotonic() - start)
            elapsed = time.monotonic() - start

            good = stream.finish()
            logger.debug(
                "Compared %s against %s: %d remote bytes, local length %d, match=%s",
                local_path, url, stream.bytes_consumed, stream.length, good,
            )
        outcome = Outcome.good() if good else Outcome.bad()
        return VerifyResult(outcome, stream.bytes_consumed, elapsed)
