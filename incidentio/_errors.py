"""Exception hierarchy for the incident.io client.

Every error raised by the client derives from IncidentIOError. Nothing
is retried or swallowed; the first failure reaches the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._client import Response
    from .models import ErrorDetail, ErrorResponse


class IncidentIOError(Exception):
    """Base class for all client errors."""
    pass


class ConfigurationError(IncidentIOError):
    """Raised on invalid client configuration (e.g. base URL without trailing slash)."""
    pass


class InvalidArgumentError(IncidentIOError, ValueError):
    """Raised when a call is made with an unusable argument, such as ctx=None."""
    pass


class CancellationError(IncidentIOError):
    """Raised when the call's Context was canceled or its deadline passed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"context {reason.replace('_', ' ')}")
        self.reason = reason


class TransportError(IncidentIOError):
    """Network, DNS or TLS failure. The original exception is chained."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(f"{message} (url: {url})")
        self.url = url


class APIError(IncidentIOError):
    """The API answered with a non-2xx status (or 202).

    Carries the decoded error envelope. Fields the body did not provide
    stay at their zero values.
    """

    def __init__(self, response: Response, body: ErrorResponse) -> None:
        self.response = response
        self.type = body.type
        self.status = body.status
        self.request_id = body.request_id
        self.errors: list[ErrorDetail] = list(body.errors)
        super().__init__(str(self))

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def __str__(self) -> str:
        details = ", ".join(str(e) for e in self.errors)
        return (
            f"{self.response.method} {self.response.url}: "
            f"{self.response.status_code} {self.type} {self.request_id} [{details}]"
        )


class DecodeError(IncidentIOError):
    """A success body could not be mapped onto the expected result."""

    def __init__(self, message: str, response: Response) -> None:
        super().__init__(message)
        self.response = response
