"""Domain models for the request pipeline (Pydantic v2 + dataclasses).

What lives here:
- Credentials (cookie records plus the platform user id).
- The request/response plumbing: `RequestSpec`, `TransportResponse`,
  `ResponseEnvelope`.
- Result shapes shared by every resource: `PageResult`, `EarningsPeriod`.

These models describe *what* travels through the pipeline, not *how* it is sent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Generic, Literal, Mapping, TypeVar
from urllib.parse import urlparse

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.config import ConfigDict

from nicoapi.core.errors import UpstreamError, ValidationError

HttpMethod = Literal["GET", "POST", "DELETE"]

ItemT = TypeVar("ItemT")


class Cookie(BaseModel):
    """A single browser cookie record.

    Browser exports carry many more keys (hostOnly, storeId, ...); they are
    ignored. Only `name=value` ever reaches the wire.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1, description="Cookie name, e.g. `user_session`.")
    value: str = Field(..., description="Raw cookie value.")
    domain: str = Field(default=".nicovideo.jp", description="Cookie domain.")
    path: str = Field(default="/", description="Cookie path.")
    expires: float | None = Field(default=None, description="Expiry as a UNIX timestamp.")
    http_only: bool | None = Field(default=None, alias="httpOnly")
    secure: bool | None = Field(default=None)
    same_site: str | None = Field(default=None, alias="sameSite")


class Credential(BaseModel):
    """Forwarded browser session: ordered cookies plus the platform user id.

    Owned by the caller. The library only reads it.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    cookies: tuple[Cookie, ...] = Field(
        default_factory=tuple,
        description="Cookie records, serialized in this order.",
    )
    user_id: str | None = Field(
        default=None,
        alias="userId",
        description="Internal niconico user id (needed by live-broadcast queries).",
    )


def is_absolute_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass(frozen=True)
class RequestSpec:
    """One outbound call. Immutable; built per call.

    A relative URL is rejected here, before the request can reach the rate
    limiter or the transport.
    """

    method: HttpMethod
    url: str
    params: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    extra_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.method not in ("GET", "POST", "DELETE"):
            raise ValidationError(f"unsupported HTTP method: {self.method!r}")
        if not isinstance(self.url, str) or not is_absolute_url(self.url):
            raise ValidationError(f"an absolute http(s) URL is required, received: {self.url!r}")
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "extra_headers", MappingProxyType(dict(self.extra_headers)))


@dataclass(frozen=True)
class TransportResponse:
    """What the transport hands back: HTTP status and decoded body."""

    status: int
    body: Any = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


class ResponseMeta(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: int = Field(..., description="Upstream status mirrored inside the body.")
    error_code: str | int | None = Field(default=None, alias="errorCode")
    error_message: str | None = Field(default=None, alias="errorMessage")


def is_envelope(body: Any) -> bool:
    """True when `body` looks like `{"meta": {"status": <int>}, ...}`."""

    if not isinstance(body, dict):
        return False
    meta = body.get("meta")
    return isinstance(meta, dict) and isinstance(meta.get("status"), int)


class ResponseEnvelope(BaseModel):
    """The `{meta, data}` wrapper used by every upstream response.

    `meta.status` is the authoritative success signal; the transport status is
    only a secondary check.
    """

    model_config = ConfigDict(extra="allow")

    meta: ResponseMeta
    data: Any = None

    @classmethod
    def from_response(cls, response: TransportResponse) -> "ResponseEnvelope":
        """Parse a transport response, synthesizing `meta` for bare bodies.

        Raises:
            UpstreamError: the body looks like an envelope but does not validate.
        """

        if is_envelope(response.body):
            try:
                return cls.model_validate(response.body)
            except PydanticValidationError as exc:
                raise UpstreamError(
                    f"unexpected envelope shape ({exc.error_count()} validation errors)",
                    status=response.body["meta"]["status"],
                ) from exc
        return cls(meta=ResponseMeta(status=response.status), data=response.body)

    @property
    def status(self) -> int:
        return self.meta.status

    @property
    def ok(self) -> bool:
        return self.meta.status == 200


class PageResult(BaseModel, Generic[ItemT]):
    """One page of a list resource. `has_more` is computed, never trusted."""

    items: list[ItemT] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    has_more: bool = Field(default=False)


class EarningsPeriod(BaseModel):
    """A calendar month of the CPP earnings programme."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1)
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def from_date(cls, value: date) -> "EarningsPeriod":
        return cls(year=value.year, month=value.month)

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "EarningsPeriod":
        year, month_index = divmod(ordinal, 12)
        return cls(year=year, month=month_index + 1)

    @property
    def ordinal(self) -> int:
        """Months since year 0; makes month arithmetic and comparisons trivial."""

        return self.year * 12 + (self.month - 1)

    def shift(self, months: int) -> "EarningsPeriod":
        return EarningsPeriod.from_ordinal(self.ordinal + months)

    def previous(self) -> "EarningsPeriod":
        return self.shift(-1)

    @property
    def year_month(self) -> str:
        return f"{self.year:04d}{self.month:02d}"

    def __str__(self) -> str:
        return f"{self.year:04d}/{self.month:02d}"
