"""Resource: CPP (creator support programme) earnings.

- Current earnings: the month is decided by `EarningsPeriodResolver` on every
  call, then the forecast contents of that month are listed.
- Monthly history: finalized months only, validated locally first.

Both endpoints use the `_offset`/`_limit` family.
"""

from __future__ import annotations

from nicoapi.core.domain.models import Credential, PageResult
from nicoapi.core.domain.resources import EarningsPage, IncomeContent, MonthlyHistoryItem
from nicoapi.core.services.earnings_period import (
    CPP_BASE_URL,
    Clock,
    EarningsPeriodResolver,
    validate_history_period,
    zoned_clock,
)
from nicoapi.core.services.pagination import OffsetRequest, PaginatedResource, field_extractor
from nicoapi.core.services.request_pipeline import RequestPipeline


class EarningsResource:
    def __init__(self, pipeline: RequestPipeline, *, clock: Clock | None = None) -> None:
        self._clock = clock or zoned_clock()
        self._resolver = EarningsPeriodResolver(pipeline, clock=self._clock)
        self._forecasts = PaginatedResource(
            pipeline,
            url_template=CPP_BASE_URL + "/forecasts/{year}/{month}",
            item_model=IncomeContent,
            extract=field_extractor("contents", "total"),
            param_keys=("_offset", "_limit"),
            base_params={"_sort": "-createdAt", "with_filter": 0},
        )
        self._histories = PaginatedResource(
            pipeline,
            url_template=CPP_BASE_URL + "/histories/{year:04d}/{month:02d}",
            item_model=MonthlyHistoryItem,
            extract=field_extractor("contents", "total"),
            param_keys=("_offset", "_limit"),
            base_params={"_sort": "-score.thisMonth.allTotal"},
        )

    @property
    def resolver(self) -> EarningsPeriodResolver:
        return self._resolver

    async def fetch_earnings(self, credential: Credential, offset: int, limit: int) -> EarningsPage:
        """Current-month forecast, or last month's while it is still aggregating."""

        page_request = OffsetRequest(offset=offset, limit=limit)
        period = await self._resolver.resolve(credential)
        page = await self._forecasts.fetch(
            credential,
            page_request,
            path_params={"year": period.year, "month": period.month},
        )
        return EarningsPage(
            items=page.items,
            total_count=page.total_count,
            has_more=page.has_more,
            period=period,
        )

    async def fetch_earnings_history(
        self,
        credential: Credential,
        year_month: str,
        offset: int,
        limit: int,
    ) -> PageResult[MonthlyHistoryItem]:
        """Finalized earnings of `year_month` (`YYYYMM`, at least two months old).

        Raises:
            ValidationError: malformed, future or too recent month; nothing is sent.
        """

        period = validate_history_period(year_month, today=self._clock())
        return await self._histories.fetch(
            credential,
            OffsetRequest(offset=offset, limit=limit),
            path_params={"year": period.year, "month": period.month},
        )
