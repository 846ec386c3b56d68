"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts and the headers nvapi expects (`x-frontend-id`,
  `x-request-with`, ...).
- Implements `core.interfaces.transport.Transport`, so the pipeline never
  touches httpx directly and tests can swap in `httpx.MockTransport`.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from nicoapi.core.config import AppSettings
from nicoapi.core.domain.models import RequestSpec, TransportResponse


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the niconico defaults."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "x-frontend-id": settings.frontend_id,
        "x-request-with": settings.request_with,
        "Accept": "application/json",
        "Accept-Language": settings.accept_language,
        "Cache-Control": "no-cache",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _query_params(params: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport:
    """`Transport` backed by an `httpx.AsyncClient`.

    Every HTTP status is returned as a `TransportResponse`; httpx exceptions
    (timeouts, connection errors) propagate to the pipeline's classifier.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        settings: AppSettings | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or build_async_client(settings)

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(self, request: RequestSpec, headers: Mapping[str, str]) -> TransportResponse:
        kwargs: dict[str, Any] = {
            "params": _query_params(request.params),
            "headers": dict(headers),
        }
        if request.body is not None:
            kwargs["json"] = request.body

        response = await self._client.request(request.method, request.url, **kwargs)
        return TransportResponse(status=response.status_code, body=_decode_body(response))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
