"""Domain error taxonomy.

Every failure that leaves the library is one of the classes below:

- `InvalidParametersError` (400), `UnauthenticatedError` (401),
  `ForbiddenError` (403), `NotFoundError` (404), `RateLimitedError` (429).
- `UpstreamUnavailableError` (500/502/503), `UpstreamError` (any other status).
- `RequestTimeoutError`, `NetworkError` (transport level).
- `ValidationError` (local, raised before any network call).
- `UnknownError` (wraps whatever could not be recognised).

The mapping from raw failures to these classes lives in
`nicoapi.core.services.error_classifier`.
"""

from __future__ import annotations

from enum import Enum

DETAILS_UNKNOWN = "details unknown"


class ErrorKind(str, Enum):
    """Closed set of error kinds exposed to callers."""

    INVALID_PARAMETERS = "invalid_parameters"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_ERROR = "upstream_error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    VALIDATION_ERROR = "validation_error"
    UNKNOWN = "unknown"

    def label(self) -> str:
        """Human readable label used as the message prefix."""

        return _LABELS[self]


_LABELS: dict[ErrorKind, str] = {
    ErrorKind.INVALID_PARAMETERS: "Invalid parameters",
    ErrorKind.UNAUTHENTICATED: "Unauthenticated",
    ErrorKind.FORBIDDEN: "Forbidden",
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.RATE_LIMITED: "Rate limited",
    ErrorKind.UPSTREAM_UNAVAILABLE: "Upstream unavailable",
    ErrorKind.UPSTREAM_ERROR: "Upstream error",
    ErrorKind.TIMEOUT: "Timeout",
    ErrorKind.NETWORK_ERROR: "Network error",
    ErrorKind.VALIDATION_ERROR: "Validation error",
    ErrorKind.UNKNOWN: "Unknown error",
}


class NicoApiError(Exception):
    """Base class for every error raised by nicoapi.

    Attributes:
        kind: the taxonomy entry.
        status: HTTP or envelope status when the failure came from upstream.
        upstream_message: message text supplied by the upstream, if any.
        detail: the part of the message after the kind label.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN
    default_detail: str = DETAILS_UNKNOWN

    def __init__(
        self,
        detail: str | None = None,
        *,
        status: int | None = None,
        upstream_message: str | None = None,
    ) -> None:
        self.status = status
        self.upstream_message = upstream_message
        self.detail = detail or upstream_message or self.default_detail
        super().__init__(self._format())

    def _format(self) -> str:
        label = self.kind.label()
        if self.status is not None:
            label = f"{label} ({self.status})"
        return f"{label}: {self.detail}"


class InvalidParametersError(NicoApiError):
    kind = ErrorKind.INVALID_PARAMETERS


class UnauthenticatedError(NicoApiError):
    kind = ErrorKind.UNAUTHENTICATED
    default_detail = "session cookies are missing, invalid or expired"


class ForbiddenError(NicoApiError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(NicoApiError):
    kind = ErrorKind.NOT_FOUND
    default_detail = "resource not found"


class RateLimitedError(NicoApiError):
    kind = ErrorKind.RATE_LIMITED
    default_detail = "too many requests"


class UpstreamUnavailableError(NicoApiError):
    kind = ErrorKind.UPSTREAM_UNAVAILABLE
    default_detail = "server error, retry later"


class UpstreamError(NicoApiError):
    kind = ErrorKind.UPSTREAM_ERROR


class RequestTimeoutError(NicoApiError):
    kind = ErrorKind.TIMEOUT
    default_detail = "the request timed out"


class NetworkError(NicoApiError):
    kind = ErrorKind.NETWORK_ERROR


class ValidationError(NicoApiError):
    """Local pre-flight validation failure; no request was sent."""

    kind = ErrorKind.VALIDATION_ERROR


class UnknownError(NicoApiError):
    """Unrecognised failure. The original object is kept in `original`."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, detail: str | None = None, *, original: object = None) -> None:
        self.original = original
        if detail is None and original is not None:
            detail = str(original) or type(original).__name__
        super().__init__(detail)
