"""nicoapi: async client for the niconico creator APIs."""

from nicoapi.adapters.cookie_loader import CookieFileSource, StaticCredentialSource, load_credential
from nicoapi.adapters.http_client import HttpxTransport, build_async_client
from nicoapi.client import NiconicoClient
from nicoapi.core.config import AppSettings
from nicoapi.core.domain.models import (
    Cookie,
    Credential,
    EarningsPeriod,
    PageResult,
    RequestSpec,
    ResponseEnvelope,
    TransportResponse,
)
from nicoapi.core.domain.resources import (
    AnalyticsStat,
    EarningsPage,
    IncomeContent,
    LiveProgram,
    MonthlyHistoryItem,
    Mylist,
    MylistDetail,
    MylistItem,
    VideoItem,
)
from nicoapi.core.errors import (
    ErrorKind,
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
    ValidationError,
)
from nicoapi.core.services.rate_limiter import RateLimiter
from nicoapi.core.services.request_pipeline import RequestPipeline

__version__ = "1.0.0"

__all__ = [
    "AnalyticsStat",
    "AppSettings",
    "Cookie",
    "CookieFileSource",
    "Credential",
    "EarningsPage",
    "EarningsPeriod",
    "ErrorKind",
    "ForbiddenError",
    "HttpxTransport",
    "IncomeContent",
    "InvalidParametersError",
    "LiveProgram",
    "MonthlyHistoryItem",
    "Mylist",
    "MylistDetail",
    "MylistItem",
    "NetworkError",
    "NicoApiError",
    "NiconicoClient",
    "NotFoundError",
    "PageResult",
    "RateLimitedError",
    "RateLimiter",
    "RequestPipeline",
    "RequestSpec",
    "RequestTimeoutError",
    "ResponseEnvelope",
    "StaticCredentialSource",
    "TransportResponse",
    "UnauthenticatedError",
    "UnknownError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "ValidationError",
    "VideoItem",
    "__version__",
    "build_async_client",
    "load_credential",
]
