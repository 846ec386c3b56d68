"""Earnings period resolution and monthly-history validation.

Current earnings:
- The upstream aggregates each month's CPP revenue for a while after it ends.
  While that runs, the totals endpoint answers with an envelope whose
  `meta.status` is 409.
- `EarningsPeriodResolver.resolve` probes the current month once
  (`_limit=1`) and falls back one calendar month on 409.
- Any other probe status counts as "available". This optimistic default keeps
  unknown upstream states from blocking callers but may serve a month that is
  not final; the follow-up data request still runs its own status check.
- Transport failures during the probe are not caught here.

Monthly history:
- `validate_history_period` only accepts `YYYYMM` periods that are at least two
  full months old; it runs before any request.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from nicoapi.core.domain.models import Credential, EarningsPeriod, RequestSpec
from nicoapi.core.errors import ValidationError
from nicoapi.core.services.request_pipeline import RequestPipeline

lib_logger = logging.getLogger("nicoapi")

CPP_BASE_URL = "https://public-api.commons.nicovideo.jp/v1/my/cpp"
PROBE_URL_TEMPLATE = CPP_BASE_URL + "/forecasts/total/{year}/{month}"

STATUS_AVAILABLE = 200
STATUS_AGGREGATING = 409

HISTORY_MIN_AGE_MONTHS = 2

_YEAR_MONTH_RE = re.compile(r"([0-9]{4})([0-9]{2})")

Clock = Callable[[], date]


def zoned_clock(timezone: str = "Asia/Tokyo") -> Clock:
    """Clock returning today's date in `timezone`."""

    zone = ZoneInfo(timezone)

    def today() -> date:
        return datetime.now(zone).date()

    return today


class EarningsPeriodResolver:
    """Decides which (year, month) "current earnings" refers to.

    Two outcomes, no memory: the current month when its aggregation is final
    (or the status is unrecognised), the previous month while the upstream is
    still aggregating. Every call probes again.
    """

    def __init__(self, pipeline: RequestPipeline, *, clock: Clock | None = None) -> None:
        self._pipeline = pipeline
        self._clock = clock or zoned_clock()

    def current_period(self) -> EarningsPeriod:
        return EarningsPeriod.from_date(self._clock())

    def build_probe(self, period: EarningsPeriod) -> RequestSpec:
        url = PROBE_URL_TEMPLATE.format(year=period.year, month=period.month)
        return RequestSpec(method="GET", url=url, params={"_limit": 1})

    async def resolve(self, credential: Credential) -> EarningsPeriod:
        current = self.current_period()
        envelope = await self._pipeline.execute(
            self.build_probe(current),
            credential,
            skip_status_check=True,
        )
        status = envelope.status
        lib_logger.info(f"[EarningsPeriodResolver] probe {current}: meta.status={status}")

        if status == STATUS_AVAILABLE:
            return current

        if status == STATUS_AGGREGATING:
            previous = current.previous()
            lib_logger.info(
                f"[EarningsPeriodResolver] {current} is still aggregating, falling back to {previous}"
            )
            lib_logger.debug(f"[EarningsPeriodResolver] aggregation details: {envelope.data!r}")
            return previous

        lib_logger.warning(
            f"[EarningsPeriodResolver] unexpected probe status {status} for {current}, treating it as available"
        )
        return current


def parse_year_month(year_month: str) -> EarningsPeriod:
    """Parse `YYYYMM`; raise `ValidationError` for anything else."""

    match = _YEAR_MONTH_RE.fullmatch(year_month.strip()) if isinstance(year_month, str) else None
    if match is None:
        raise ValidationError(f"malformed year-month (expected YYYYMM): {year_month!r}")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(f"malformed year-month (month must be 01-12): {year_month!r}")
    return EarningsPeriod(year=year, month=month)


def latest_history_period(today: date) -> EarningsPeriod:
    """Most recent month whose history is queryable (current month minus two)."""

    return EarningsPeriod.from_date(today).shift(-HISTORY_MIN_AGE_MONTHS)


def validate_history_period(year_month: str, *, today: date) -> EarningsPeriod:
    """Check a requested history month against `today`.

    Raises:
        ValidationError: malformed input, a future month, or a month that is
            not yet two months old.
    """

    requested = parse_year_month(year_month)
    current = EarningsPeriod.from_date(today)

    if requested.ordinal > current.ordinal:
        raise ValidationError(f"future months have no earnings history: {requested}")

    limit = latest_history_period(today)
    if requested.ordinal > limit.ordinal:
        raise ValidationError(
            f"monthly history is only available for months at least "
            f"{HISTORY_MIN_AGE_MONTHS} months old: {requested} (latest allowed: {limit})"
        )
    return requested
