from __future__ import annotations

import json
from datetime import date

import pytest

from nicoapi.adapters.cookie_loader import StaticCredentialSource
from nicoapi.adapters.http_client import HttpxTransport
from nicoapi.client import NiconicoClient
from nicoapi.core.config import AppSettings
from nicoapi.core.domain.models import EarningsPeriod
from nicoapi.core.errors import UnauthenticatedError

from tests.conftest import FakeTransport, envelope, fixed_clock


class CountingSource(StaticCredentialSource):
    def __init__(self, credential) -> None:
        super().__init__(credential)
        self.loads = 0

    async def load(self):
        self.loads += 1
        return await super().load()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(request_interval_ms=0)


@pytest.fixture
def client(credential, settings, transport) -> NiconicoClient:
    return NiconicoClient(
        StaticCredentialSource(credential),
        settings=settings,
        transport=transport,
        clock=fixed_clock(date(2024, 6, 15)),
    )


async def test_operations_share_one_pipeline(client, transport):
    transport.queue(envelope({"items": [], "totalCount": 0}), envelope({"mylists": []}))

    await client.fetch_videos(page=1, page_size=10)
    await client.fetch_mylists()

    assert len(transport.calls) == 2
    assert client.pipeline.transport is transport


async def test_limiter_follows_settings(credential, transport):
    client = NiconicoClient(
        StaticCredentialSource(credential),
        settings=AppSettings(request_interval_ms=250),
        transport=transport,
    )

    assert client.pipeline.rate_limiter.min_interval_ms == 250


async def test_credentials_are_loaded_per_operation(credential, settings, transport):
    source = CountingSource(credential)
    client = NiconicoClient(source, settings=settings, transport=transport)
    transport.queue(envelope({"mylists": []}), envelope({"mylists": []}))

    await client.fetch_mylists()
    await client.fetch_mylists()

    assert source.loads == 2


async def test_resolve_and_fetch_earnings(client, transport):
    transport.queue(envelope({}), envelope({"total": 0, "contents": []}))

    page = await client.fetch_earnings()

    assert page.period == EarningsPeriod(year=2024, month=6)
    assert transport.requests[1].url.endswith("/forecasts/2024/6")


async def test_resolve_earnings_period(client, transport):
    transport.queue(envelope(None, status=409))

    assert await client.resolve_earnings_period() == EarningsPeriod(year=2024, month=5)


async def test_history_validation_uses_the_client_clock(client, transport):
    transport.queue(envelope({"total": 0, "contents": []}))

    await client.fetch_earnings_history("202404")

    assert transport.requests[0].url.endswith("/histories/2024/04")


async def test_lives_accept_an_explicit_user_id(client, transport):
    transport.queue(envelope({"programsList": [], "totalCount": 0}))

    await client.fetch_lives(user_id="42")

    assert transport.requests[0].params["providerId"] == "42"


async def test_empty_mutations_are_no_ops(client, transport):
    await client.add_to_mylist(1, [])
    await client.remove_from_mylist(1, ())

    assert transport.calls == []


async def test_iter_videos_follows_pages(client, transport):
    transport.queue(
        envelope({"items": [{"essential": {"id": "sm1"}}], "totalCount": 2}),
        envelope({"items": [{"essential": {"id": "sm2"}}], "totalCount": 2}),
    )

    ids = [video.video_id async for video in client.iter_videos(page_size=1)]

    assert ids == ["sm1", "sm2"]


async def test_errors_reach_the_caller(client, transport):
    transport.queue(envelope(None, status=401))

    with pytest.raises(UnauthenticatedError):
        await client.fetch_analytics_stats("sm9", "2024-06-01", "2024-06-07")


async def test_injected_transport_is_not_closed(client, transport):
    async with client:
        pass

    assert transport.closed is False


async def test_owned_transport_is_closed(credential, settings):
    async with NiconicoClient(StaticCredentialSource(credential), settings=settings) as client:
        owned = client.pipeline.transport
        assert isinstance(owned, HttpxTransport)

    assert owned.client.is_closed


async def test_from_cookies_reads_the_file(tmp_path, settings):
    path = tmp_path / "cookies.json"
    path.write_text(
        json.dumps({"userId": "777", "cookies": [{"name": "user_session", "value": "s", "domain": ".nicovideo.jp"}]}),
        encoding="utf-8",
    )
    transport = FakeTransport(envelope({"programsList": [], "totalCount": 0}))

    async with NiconicoClient.from_cookies(path, settings=settings, transport=transport) as client:
        await client.fetch_lives()

    request, headers = transport.calls[0]
    assert request.params["providerId"] == "777"
    assert headers["Cookie"] == "user_session=s"
