from __future__ import annotations

from datetime import date
from typing import Any, Mapping

import pytest

from nicoapi.core.domain.models import Cookie, Credential, RequestSpec, TransportResponse
from nicoapi.core.services.rate_limiter import RateLimiter
from nicoapi.core.services.request_pipeline import RequestPipeline


class FakeTransport:
    """Scripted transport: returns (or raises) queued items in order and records calls."""

    def __init__(self, *responses: TransportResponse | BaseException) -> None:
        self.calls: list[tuple[RequestSpec, dict[str, str]]] = []
        self._responses: list[TransportResponse | BaseException] = list(responses)
        self.closed = False

    def queue(self, *responses: TransportResponse | BaseException) -> None:
        self._responses.extend(responses)

    @property
    def requests(self) -> list[RequestSpec]:
        return [request for request, _ in self.calls]

    async def send(self, request: RequestSpec, headers: Mapping[str, str]) -> TransportResponse:
        self.calls.append((request, dict(headers)))
        if not self._responses:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def aclose(self) -> None:
        self.closed = True


def envelope(data: Any = None, *, status: int = 200, http_status: int | None = None, **meta: Any) -> TransportResponse:
    """`{meta: {status, ...}, data}` wrapped in a transport response."""

    body = {"meta": {"status": status, **meta}, "data": data}
    return TransportResponse(status=http_status if http_status is not None else status, body=body)


def fixed_clock(value: date):
    return lambda: value


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def pipeline(transport: FakeTransport) -> RequestPipeline:
    return RequestPipeline(transport, RateLimiter(0))


@pytest.fixture
def credential() -> Credential:
    return Credential(
        cookies=(
            Cookie(name="user_session", value="user_session_12345_abc"),
            Cookie(name="nicosid", value="1700000000.123"),
        ),
        user_id="12345",
    )
