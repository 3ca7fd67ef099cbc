"""
Fetch error taxonomy.

Every failure a status source can report is a FetchError carrying an explicit kind.
The orchestrator decides between aborting the scrape and skipping one source by
looking at that kind, never at the exception message.
"""

from enum import Enum
from typing import Optional


class FetchErrorKind(str, Enum):
    """Why a fetch failed."""

    AUTHENTICATION = "authentication"
    SOURCE_UNAVAILABLE = "source_unavailable"
    MALFORMED_SNAPSHOT = "malformed_snapshot"
    TIMEOUT = "timeout"


class FetchError(Exception):
    """Base exception for a failed status fetch."""

    kind: FetchErrorKind = FetchErrorKind.SOURCE_UNAVAILABLE

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.source = source
        self.status_code = status_code

    @property
    def is_fatal(self) -> bool:
        """True when no other fetch on the same credentials can succeed."""
        return self.kind is FetchErrorKind.AUTHENTICATION

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class AuthenticationFailure(FetchError):
    """The PBX rejected our credentials."""

    kind = FetchErrorKind.AUTHENTICATION


class SourceUnavailable(FetchError):
    """The PBX could not be reached or answered with an error."""

    kind = FetchErrorKind.SOURCE_UNAVAILABLE


class MalformedSnapshot(FetchError):
    """The PBX answered with a payload we could not understand."""

    kind = FetchErrorKind.MALFORMED_SNAPSHOT


class FetchTimeout(FetchError):
    """The fetch did not complete within its deadline."""

    kind = FetchErrorKind.TIMEOUT
