"""Credential source contract."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from nicoapi.core.domain.models import Credential


@runtime_checkable
class CredentialSource(Protocol):
    """Supplies the current cookie set and platform user id.

    Called once per business operation, so a source may re-read storage and
    pick up refreshed cookies between calls.
    """

    async def load(self) -> Credential:
        ...
