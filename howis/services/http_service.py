from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import requests
import urllib3

from howis.domain.http_response import HttpResponse
from howis.exceptions import HttpFetchError

Credentials = Tuple[str, str]


@dataclass(frozen=True)
class HttpRequest:
    """Per-call request descriptor.

    `with_body=False` asks for status and headers only.
    """
    url: str
    with_body: bool = True
    credentials: Optional[Credentials] = None


class CredentialKeepingSession(requests.Session):
    """Session that keeps basic-auth credentials on cross-host redirects.

    Mirrors are commonly fronted by a redirector on another host, and the
    credentials are meant for wherever the content ends up. The session's
    cookie jar doubles as the run-wide cookie store.
    """

    def should_strip_auth(self, old_url, new_url):
        return False


def make_session(max_redirects: int = 30) -> requests.Session:
    session = CredentialKeepingSession()
    session.max_redirects = int(max_redirects)
    return session


class HttpService:
    """
    HTTP client wrapper used for both content comparison and probing.

    Requires a `requests.Session` for dependency injection so tests can pass a
    double and the whole run shares one cookie jar. Redirects are always
    followed and HTTP status codes never raise; only transport failures are
    turned into `HttpFetchError`.
    """

    def __init__(self, user_agent: str, session: requests.Session, timeout: Optional[float] = None, chunk_size: int = 16384):
        self.user_agent = user_agent
        self.session = session
        self.timeout = timeout
        self.chunk_size = int(chunk_size)

    def _kwargs(self, request: HttpRequest) -> dict:
        return {
            "headers": {"User-Agent": self.user_agent, "Accept-Encoding": "identity"},
            "auth": request.credentials,
            "timeout": self.timeout,
            "allow_redirects": True,
        }

    def iter_body(self, request: HttpRequest) -> Iterator[bytes]:
        """Stream the response body of a GET in chunks of at most `chunk_size` bytes.

        Chunks are the bytes as sent, never content-decoded. Errors raised
        mid-transfer surface from the iteration as `HttpFetchError`.
        """
        try:
            with self.session.get(request.url, stream=True, **self._kwargs(request)) as resp:
                for chunk in resp.raw.stream(self.chunk_size, decode_content=False):
                    if chunk:
                        yield chunk
        except (requests.exceptions.RequestException, urllib3.exceptions.HTTPError) as e:
            raise HttpFetchError(request.url, e) from e

    def head(self, request: HttpRequest) -> HttpResponse:
        """Fetch status and effective URL after following redirects, without a body."""
        try:
            resp = self.session.head(request.url, **self._kwargs(request))
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(request.url, e) from e
        try:
            return HttpResponse(resp.status_code, resp.url or request.url)
        finally:
            resp.close()

    def perform(self, request: HttpRequest):
        """Dispatch on the descriptor: a chunk iterator for body requests, a
        `HttpResponse` for header-only ones."""
        if request.with_body:
            return self.iter_body(request)
        return self.head(request)
