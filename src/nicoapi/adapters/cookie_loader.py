"""Credential sources (in-memory and browser-exported JSON).

Supported file formats:
- a bare list of cookie records (EditThisCookie / Cookie-Editor exports);
- `{"cookies": [...], "userId": "12345"}`.

Cookie acquisition itself (logging in, refreshing sessions) is out of scope:
the file is produced by the user's browser.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from nicoapi.core.domain.models import Credential
from nicoapi.core.errors import ValidationError

NICONICO_DOMAIN = "nicovideo.jp"


def load_credential(
    path: Path,
    *,
    user_id: str | None = None,
    domain_suffix: str | None = NICONICO_DOMAIN,
) -> Credential:
    """Read a cookie export and return a `Credential`.

    Cookies whose domain does not end with `domain_suffix` are dropped;
    pass `None` to keep them all. An explicit `user_id` wins over the file's.
    """

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValidationError(f"cannot read cookie file {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"cookie file {path} is not valid JSON: {exc}") from exc

    if isinstance(data, list):
        data = {"cookies": data}
    if not isinstance(data, dict):
        raise ValidationError(f"cookie file {path} must contain a list or an object")

    try:
        credential = Credential.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(f"cookie file {path} has invalid records ({exc.error_count()} errors)") from exc

    if domain_suffix:
        kept = tuple(c for c in credential.cookies if c.domain.lstrip(".").endswith(domain_suffix))
        credential = credential.model_copy(update={"cookies": kept})
    if user_id:
        credential = credential.model_copy(update={"user_id": user_id})
    return credential


class StaticCredentialSource:
    """Always returns the same in-memory credential."""

    def __init__(self, credential: Credential) -> None:
        self._credential = credential

    async def load(self) -> Credential:
        return self._credential


class CookieFileSource:
    """Re-reads a cookie export on every call, picking up refreshed cookies."""

    def __init__(
        self,
        path: Path,
        *,
        user_id: str | None = None,
        domain_suffix: str | None = NICONICO_DOMAIN,
    ) -> None:
        self._path = path
        self._user_id = user_id
        self._domain_suffix = domain_suffix

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> Credential:
        return load_credential(self._path, user_id=self._user_id, domain_suffix=self._domain_suffix)
