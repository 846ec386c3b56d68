from __future__ import annotations

from datetime import date

import httpx
import pytest

from nicoapi.core.domain.models import EarningsPeriod
from nicoapi.core.errors import NetworkError, ValidationError
from nicoapi.core.services.earnings_period import (
    EarningsPeriodResolver,
    latest_history_period,
    parse_year_month,
    validate_history_period,
)

from tests.conftest import envelope, fixed_clock

JUNE_15 = date(2024, 6, 15)


def resolver_at(pipeline, today: date) -> EarningsPeriodResolver:
    return EarningsPeriodResolver(pipeline, clock=fixed_clock(today))


async def test_available_month_is_current(pipeline, transport, credential):
    transport.queue(envelope({"total": 1200}))

    period = await resolver_at(pipeline, JUNE_15).resolve(credential)

    assert period == EarningsPeriod(year=2024, month=6)
    request = transport.requests[0]
    assert request.url == "https://public-api.commons.nicovideo.jp/v1/my/cpp/forecasts/total/2024/6"
    assert request.params == {"_limit": 1}


async def test_aggregating_month_falls_back(pipeline, transport, credential):
    transport.queue(envelope(None, status=409))

    period = await resolver_at(pipeline, JUNE_15).resolve(credential)

    assert period == EarningsPeriod(year=2024, month=5)


async def test_aggregating_january_wraps_to_december(pipeline, transport, credential):
    transport.queue(envelope(None, status=409, http_status=200))

    period = await resolver_at(pipeline, date(2024, 1, 3)).resolve(credential)

    assert period == EarningsPeriod(year=2023, month=12)


async def test_unexpected_status_is_treated_as_available(pipeline, transport, credential, caplog):
    transport.queue(envelope(None, status=202))

    with caplog.at_level("WARNING", logger="nicoapi"):
        period = await resolver_at(pipeline, JUNE_15).resolve(credential)

    assert period == EarningsPeriod(year=2024, month=6)
    assert "unexpected probe status 202" in caplog.text


async def test_every_call_probes_again(pipeline, transport, credential):
    transport.queue(envelope(None, status=409), envelope({}))
    resolver = resolver_at(pipeline, JUNE_15)

    first = await resolver.resolve(credential)
    second = await resolver.resolve(credential)

    assert (first.month, second.month) == (5, 6)
    assert len(transport.calls) == 2


async def test_transport_failures_propagate(pipeline, transport, credential):
    transport.queue(httpx.ConnectError("refused"))

    with pytest.raises(NetworkError):
        await resolver_at(pipeline, JUNE_15).resolve(credential)


def test_history_accepts_months_two_months_old():
    assert validate_history_period("202404", today=JUNE_15) == EarningsPeriod(year=2024, month=4)
    assert validate_history_period("202312", today=JUNE_15) == EarningsPeriod(year=2023, month=12)


@pytest.mark.parametrize("year_month", ["202406", "202405"])
def test_history_rejects_recent_months(year_month):
    with pytest.raises(ValidationError) as info:
        validate_history_period(year_month, today=JUNE_15)

    assert year_month[:4] in str(info.value)


def test_history_rejects_future_months():
    with pytest.raises(ValidationError, match="future"):
        validate_history_period("202501", today=JUNE_15)


@pytest.mark.parametrize("year_month", ["202413", "202400", "2024-06", "24066", "abcdef", "", "２０２４０４"])
def test_history_rejects_malformed_input(year_month):
    with pytest.raises(ValidationError, match="malformed"):
        validate_history_period(year_month, today=JUNE_15)


def test_history_limit_wraps_years():
    assert latest_history_period(date(2024, 2, 1)) == EarningsPeriod(year=2023, month=12)
    assert validate_history_period("202312", today=date(2024, 2, 1)).month == 12
    with pytest.raises(ValidationError):
        validate_history_period("202401", today=date(2024, 2, 1))


def test_parse_year_month():
    assert parse_year_month("202001") == EarningsPeriod(year=2020, month=1)


def test_period_arithmetic():
    period = EarningsPeriod(year=2024, month=1)

    assert period.previous() == EarningsPeriod(year=2023, month=12)
    assert period.shift(11) == EarningsPeriod(year=2024, month=12)
    assert period.shift(12) == EarningsPeriod(year=2025, month=1)
    assert period.year_month == "202401"
    assert str(period) == "2024/01"
