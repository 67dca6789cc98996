"""Custom exceptions for howis services."""


class HttpFetchError(Exception):
    """Raised when an HTTP request fails due to network/transport errors.

    HTTP status codes are never turned into this error; only failures where no
    usable response was obtained (DNS, connection, TLS, redirect loops, broken
    transfers).
    """

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")

    @property
    def reason(self) -> str:
        """Transport error text, as recorded in the ledger."""
        return str(self.original) or type(self.original).__name__


class LedgerError(Exception):
    """Raised when the record file cannot be opened, created, read or written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Record file '{path}': {reason}")


class LedgerLockedError(LedgerError):
    """Raised when another process already holds the record file lock."""

    def __init__(self, path: str):
        super().__init__(path, "locked by another process")


class LocalFileError(Exception):
    """Raised when an existing regular input file cannot be opened for reading."""

    def __init__(self, path: str, original: Exception):
        self.path = path
        self.original = original
        super().__init__(f"failed to open {path}: {original}")
