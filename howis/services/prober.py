import logging
from typing import Optional

from howis.domain.outcome import Outcome
from howis.exceptions import HttpFetchError
from howis.services.http_service import Credentials, HttpRequest, HttpService

logger = logging.getLogger(__name__)

AVAILABLE = "available"


class Prober:
    """Checks whether a source URL with no matching local file is live.

    A success status only counts as present when the final URL still contains
    the name; a redirect to a generic landing page is treated as absent.
    Presence is reported as ``error: available`` since the batch expected it
    to be gone.
    """

    def __init__(self, http_service: HttpService):
        self.http_service = http_service

    def probe(self, name: str, url: str, credentials: Optional[Credentials] = None) -> Outcome:
        try:
            response = self.http_service.perform(HttpRequest(url, False, credentials))
        except HttpFetchError as e:
            logger.debug("Probe failed for %s", url, exc_info=True)
            return Outcome.error(e.reason)

        if response.is_success and name in response.url:
            logger.info("Source still available: %s -> %s (%s)", url, response.url, response.status_code)
            return Outcome.error(AVAILABLE)
        logger.debug("Probe %s -> %s (%s): not available", url, response.url, response.status_code)
        return Outcome.not_available()
