"""Domain objects for howis - explicit re-exports to satisfy linters."""
from .counters import Counters as Counters
from .http_response import HttpResponse as HttpResponse
from .name_key import derive_name as derive_name
from .outcome import Outcome as Outcome
from .outcome import OutcomeKind as OutcomeKind
from .verify_result import VerifyResult as VerifyResult

__all__ = ["Counters", "HttpResponse", "derive_name", "Outcome", "OutcomeKind", "VerifyResult"]
