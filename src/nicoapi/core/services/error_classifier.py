"""Failure classification.

`classify` is total: every failure object maps to exactly one `NicoApiError`
subclass, and nothing is swallowed. Inputs it understands:

- a `TransportResponse` with a non-success status;
- an envelope status (`meta.status` != 200 on a 2xx transport response);
- httpx exceptions (timeouts, transport errors, `HTTPStatusError`);
- builtin timeout / OS errors raised by a custom transport;
- an already classified `NicoApiError` (returned unchanged).

Anything else becomes `UnknownError` wrapping the original object.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from nicoapi.core.domain.models import TransportResponse
from nicoapi.core.errors import (
    DETAILS_UNKNOWN,
    ForbiddenError,
    InvalidParametersError,
    NetworkError,
    NicoApiError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    UnauthenticatedError,
    UnknownError,
    UpstreamError,
    UpstreamUnavailableError,
)

_UNAVAILABLE_STATUSES = frozenset({500, 502, 503})


def extract_message(body: Any) -> str:
    """Upstream message text, or "details unknown".

    Looks at a top-level string `message` first, then at the envelope's
    `meta.errorMessage`. Empty strings carry no text and are skipped.
    """

    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
        meta = body.get("meta")
        if isinstance(meta, dict):
            error_message = meta.get("errorMessage")
            if isinstance(error_message, str) and error_message:
                return error_message
    return DETAILS_UNKNOWN


def classify_status(status: int, body: Any = None) -> NicoApiError:
    """Map an HTTP (or envelope) status to its error kind."""

    message = extract_message(body)
    upstream_message = None if message == DETAILS_UNKNOWN else message

    if status == 400:
        return InvalidParametersError(message, status=status, upstream_message=upstream_message)
    if status == 401:
        return UnauthenticatedError(status=status, upstream_message=upstream_message)
    if status == 403:
        return ForbiddenError(message, status=status, upstream_message=upstream_message)
    if status == 404:
        return NotFoundError(status=status, upstream_message=upstream_message)
    if status == 429:
        return RateLimitedError(status=status, upstream_message=upstream_message)
    if status in _UNAVAILABLE_STATUSES:
        return UpstreamUnavailableError(status=status, upstream_message=upstream_message)
    return UpstreamError(message, status=status, upstream_message=upstream_message)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def classify(failure: object) -> NicoApiError:
    """Turn any failure into a classified domain error."""

    if isinstance(failure, NicoApiError):
        return failure
    if isinstance(failure, TransportResponse):
        return classify_status(failure.status, failure.body)
    if isinstance(failure, httpx.HTTPStatusError):
        return classify_status(failure.response.status_code, _response_body(failure.response))
    if isinstance(failure, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return RequestTimeoutError(str(failure) or None)
    if isinstance(failure, (httpx.HTTPError, OSError)):
        return NetworkError(str(failure) or type(failure).__name__)
    return UnknownError(original=failure)
