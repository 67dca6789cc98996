from typing import NamedTuple


class HttpResponse(NamedTuple):
    """Final response of a header-only request, after redirects."""
    status_code: int
    url: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300
