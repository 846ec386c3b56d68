"""Core services: rate limiting, the request pipeline, pagination and the
earnings period state machine."""

from nicoapi.core.services.earnings_period import (
    EarningsPeriodResolver,
    parse_year_month,
    validate_history_period,
    zoned_clock,
)
from nicoapi.core.services.error_classifier import classify, classify_status, extract_message
from nicoapi.core.services.pagination import (
    OffsetRequest,
    PageNumberRequest,
    PageRequest,
    PaginatedResource,
    field_extractor,
    has_more_by_offset,
    has_more_by_page,
)
from nicoapi.core.services.rate_limiter import RateLimiter
from nicoapi.core.services.request_pipeline import RequestPipeline, build_cookie_header

__all__ = [
    "EarningsPeriodResolver",
    "OffsetRequest",
    "PageNumberRequest",
    "PageRequest",
    "PaginatedResource",
    "RateLimiter",
    "RequestPipeline",
    "build_cookie_header",
    "classify",
    "classify_status",
    "extract_message",
    "field_extractor",
    "has_more_by_offset",
    "has_more_by_page",
    "parse_year_month",
    "validate_history_period",
    "zoned_clock",
]
