"""Transport contract.

Why a Protocol:
- The pipeline only needs "send this request, give me status and body".
- Tests (and alternative HTTP stacks) can plug in without inheritance.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from nicoapi.core.domain.models import RequestSpec, TransportResponse


@runtime_checkable
class Transport(Protocol):
    """Issues one HTTP request.

    Rules:
    - Every HTTP status comes back as a `TransportResponse`, including 4xx/5xx.
    - Transport-level failures (timeouts, connection errors) are raised as-is;
      the pipeline classifies them.
    """

    async def send(self, request: RequestSpec, headers: Mapping[str, str]) -> TransportResponse:
        ...

    async def aclose(self) -> None:
        ...
