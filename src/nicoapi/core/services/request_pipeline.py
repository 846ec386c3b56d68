"""Shared request pipeline.

Every outbound call goes through `RequestPipeline.execute`, in this order:

1. rate limiting (one shared `RateLimiter`);
2. `Cookie` header built from the credential;
3. dispatch through the injected `Transport`;
4. envelope check: `meta.status` must be 200 unless the caller asked to skip it;
5. any failure is classified into the `NicoApiError` taxonomy.

Resource modules receive one pipeline instance and never talk to the
transport directly.
"""

from __future__ import annotations

import logging

from nicoapi.core.domain.models import (
    Credential,
    RequestSpec,
    ResponseEnvelope,
    TransportResponse,
    is_envelope,
)
from nicoapi.core.interfaces.transport import Transport
from nicoapi.core.services.error_classifier import classify, classify_status
from nicoapi.core.services.rate_limiter import RateLimiter

lib_logger = logging.getLogger("nicoapi")


def build_cookie_header(credential: Credential) -> str:
    """`name=value; name=value; ...` in credential order."""

    return "; ".join(f"{cookie.name}={cookie.value}" for cookie in credential.cookies)


class RequestPipeline:
    """Rate-limited, authenticated, classified access to the upstream APIs."""

    def __init__(self, transport: Transport, rate_limiter: RateLimiter | None = None) -> None:
        self._transport = transport
        self._rate_limiter = rate_limiter or RateLimiter()

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    async def execute(
        self,
        request: RequestSpec,
        credential: Credential,
        *,
        skip_status_check: bool = False,
    ) -> ResponseEnvelope:
        """Send `request` and return its envelope.

        With `skip_status_check=True` an envelope whose `meta.status` is not 200
        is returned as data instead of raised, even when the transport status is
        non-2xx. Bodies that are not envelopes are still classified.

        Raises:
            NicoApiError: any classified failure.
        """

        await self._rate_limiter.enforce()

        headers: dict[str, str] = {}
        cookie_header = build_cookie_header(credential)
        if cookie_header:
            headers["Cookie"] = cookie_header
        headers.update(request.extra_headers)

        lib_logger.info(f"[RequestPipeline] {request.method} {request.url}")
        if request.params:
            lib_logger.debug(f"[RequestPipeline] params: {dict(request.params)}")
        if request.body is not None:
            lib_logger.debug(f"[RequestPipeline] body: {request.body}")

        try:
            response = await self._transport.send(request, headers)
        except Exception as exc:
            error = classify(exc)
            lib_logger.warning(f"[RequestPipeline] {request.method} {request.url} failed: {error}")
            raise error from exc

        lib_logger.debug(f"[RequestPipeline] response status: {response.status}")

        if not response.is_success:
            if skip_status_check and is_envelope(response.body):
                return ResponseEnvelope.from_response(response)
            raise self._fail(request, response)

        envelope = ResponseEnvelope.from_response(response)
        if not skip_status_check and not envelope.ok:
            error = classify_status(envelope.status, response.body)
            lib_logger.warning(
                f"[RequestPipeline] {request.method} {request.url} returned meta.status={envelope.status}: {error}"
            )
            raise error
        return envelope

    def _fail(self, request: RequestSpec, response: TransportResponse) -> Exception:
        error = classify(response)
        if response.status == 400:
            lib_logger.error(f"[RequestPipeline] 400 body: {response.body!r}")
        lib_logger.warning(f"[RequestPipeline] {request.method} {request.url} failed: {error}")
        return error
