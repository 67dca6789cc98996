"""Dependency injection container for the application."""
from typing import Iterator, Optional

from dependency_injector import containers, providers

from howis import config as env
from howis.services.comparator import Comparator
from howis.services.http_service import Credentials, HttpService, make_session
from howis.services.ledger import Ledger
from howis.services.prober import Prober
from howis.services.source_resolver import build_source
from howis.services.verification_runner import VerificationRunner


# Environment variables used by the container (read via `howis.config` helpers).
#
# USER_AGENT (str, default: "howis/<version>")
#   User-Agent header for every outbound request.
#
# HOWIS_HTTP_TIMEOUT (float seconds | optional)
#   Connect/read timeout for requests. Unset means no timeout.
#
# HOWIS_CHUNK_SIZE (int bytes, default: 16384)
#   Read size for streamed response bodies and matching local file reads.
#
# HOWIS_MAX_REDIRECTS (int, default: 30)
#   Redirect hops before a request fails with a redirect-loop error.
#
# HOWIS_RECORD_FILE (str, default: "howis.txt")
#   Record file used to resume progress. Overridden by `--rec`.
#
# SOURCE, USERNAME and PASSWORD have no environment variable; they come from
# the command line.
ENV = {
    "USER_AGENT": env.get_str_env("USER_AGENT", f"howis/{env.VERSION}"),
    "HOWIS_HTTP_TIMEOUT": env.get_optional_float_env("HOWIS_HTTP_TIMEOUT"),
    "HOWIS_CHUNK_SIZE": env.get_int_env("HOWIS_CHUNK_SIZE", env.DEFAULT_CHUNK_SIZE),
    "HOWIS_MAX_REDIRECTS": env.get_int_env("HOWIS_MAX_REDIRECTS", env.DEFAULT_MAX_REDIRECTS),
    "HOWIS_RECORD_FILE": env.get_str_env("HOWIS_RECORD_FILE", env.DEFAULT_RECORD_FILE),
    "SOURCE": None,
    "USERNAME": None,
    "PASSWORD": None,
}


def make_credentials(username: Optional[str], password: Optional[str]) -> Optional[Credentials]:
    if username is None and password is None:
        return None
    return (username or "", password or "")


def open_ledger(path: str) -> Iterator[Ledger]:
    ledger = Ledger.open(path)
    try:
        yield ledger
    finally:
        ledger.close()


class Container(containers.DeclarativeContainer):
    """Dependency injection container for howis."""

    # Configuration
    config = providers.Configuration(default=ENV)

    # One session per run so cookies carry over between requests
    http_session = providers.Singleton(
        make_session,
        max_redirects=config.HOWIS_MAX_REDIRECTS.as_(int),
    )

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        session=http_session,
        timeout=config.HOWIS_HTTP_TIMEOUT,
        chunk_size=config.HOWIS_CHUNK_SIZE.as_(int),
    )

    credentials = providers.Singleton(
        make_credentials,
        username=config.USERNAME,
        password=config.PASSWORD,
    )

    source = providers.Singleton(
        build_source,
        src=config.SOURCE,
    )

    # Opened and locked on first use, closed by shutdown_resources()
    ledger = providers.Resource(
        open_ledger,
        path=config.HOWIS_RECORD_FILE,
    )

    comparator = providers.Singleton(
        Comparator,
        http_service=http_service,
    )

    prober = providers.Singleton(
        Prober,
        http_service=http_service,
    )

    verification_runner = providers.Factory(
        VerificationRunner,
        source=source,
        ledger=ledger,
        comparator=comparator,
        prober=prober,
        credentials=credentials,
    )
