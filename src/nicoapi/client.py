"""`NiconicoClient`: the public facade.

One client owns:
- one `RequestPipeline` (so one rate limiter: every resource shares the same
  request spacing);
- one credential source, asked for a fresh `Credential` on every operation;
- the transport, when the client built it (closed by `aclose`).

Example:
    async with NiconicoClient.from_cookies(Path("cookies.json")) as client:
        page = await client.fetch_videos(page=1, page_size=25)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncIterator, Iterable

from nicoapi.adapters.cookie_loader import CookieFileSource
from nicoapi.adapters.http_client import HttpxTransport
from nicoapi.adapters.resources import (
    AnalyticsResource,
    EarningsResource,
    LiveResource,
    MylistResource,
    VideoResource,
)
from nicoapi.core.config import AppSettings
from nicoapi.core.domain.models import EarningsPeriod, PageResult
from nicoapi.core.domain.resources import (
    AnalyticsStat,
    EarningsPage,
    LiveProgram,
    MonthlyHistoryItem,
    Mylist,
    MylistDetail,
    VideoItem,
)
from nicoapi.core.interfaces import CredentialSource, Transport
from nicoapi.core.services.earnings_period import Clock, zoned_clock
from nicoapi.core.services.rate_limiter import RateLimiter
from nicoapi.core.services.request_pipeline import RequestPipeline

lib_logger = logging.getLogger("nicoapi")


class NiconicoClient:
    def __init__(
        self,
        credential_source: CredentialSource,
        *,
        settings: AppSettings | None = None,
        transport: Transport | None = None,
        rate_limiter: RateLimiter | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._credentials = credential_source
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(settings=self._settings)
        self._pipeline = RequestPipeline(
            self._transport,
            rate_limiter or RateLimiter(self._settings.request_interval_ms),
        )

        clock = clock or zoned_clock(self._settings.timezone)
        self._videos = VideoResource(self._pipeline)
        self._lives = LiveResource(self._pipeline)
        self._earnings = EarningsResource(self._pipeline, clock=clock)
        self._mylists = MylistResource(self._pipeline)
        self._analytics = AnalyticsResource(self._pipeline)

    @classmethod
    def from_cookies(
        cls,
        path: Path,
        *,
        user_id: str | None = None,
        settings: AppSettings | None = None,
        transport: Transport | None = None,
    ) -> "NiconicoClient":
        """Client reading credentials from a browser cookie export."""

        return cls(CookieFileSource(path, user_id=user_id), settings=settings, transport=transport)

    @property
    def pipeline(self) -> RequestPipeline:
        return self._pipeline

    @property
    def settings(self) -> AppSettings:
        return self._settings

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "NiconicoClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # Videos / lives

    async def fetch_videos(self, page: int = 1, page_size: int = 100) -> PageResult[VideoItem]:
        credential = await self._credentials.load()
        return await self._videos.fetch_videos(credential, page, page_size)

    async def iter_videos(self, page_size: int = 100) -> AsyncIterator[VideoItem]:
        credential = await self._credentials.load()
        async for item in self._videos.iter_videos(credential, page_size):
            yield item

    async def fetch_lives(
        self,
        offset: int = 0,
        limit: int = 100,
        *,
        user_id: str | None = None,
    ) -> PageResult[LiveProgram]:
        credential = await self._credentials.load()
        return await self._lives.fetch_lives(credential, offset, limit, user_id=user_id)

    async def iter_lives(self, limit: int = 100, *, user_id: str | None = None) -> AsyncIterator[LiveProgram]:
        credential = await self._credentials.load()
        async for item in self._lives.iter_lives(credential, limit=limit, user_id=user_id):
            yield item

    # Earnings

    async def resolve_earnings_period(self) -> EarningsPeriod:
        """Which month `fetch_earnings` would query right now."""

        credential = await self._credentials.load()
        return await self._earnings.resolver.resolve(credential)

    async def fetch_earnings(self, offset: int = 0, limit: int = 100) -> EarningsPage:
        credential = await self._credentials.load()
        return await self._earnings.fetch_earnings(credential, offset, limit)

    async def fetch_earnings_history(
        self,
        year_month: str,
        offset: int = 0,
        limit: int = 100,
    ) -> PageResult[MonthlyHistoryItem]:
        credential = await self._credentials.load()
        return await self._earnings.fetch_earnings_history(credential, year_month, offset, limit)

    # Mylists

    async def fetch_mylists(self, sample_item_count: int = 3) -> list[Mylist]:
        credential = await self._credentials.load()
        return await self._mylists.fetch_mylists(credential, sample_item_count)

    async def fetch_mylist_items(self, mylist_id: int, page: int = 1, page_size: int = 100) -> MylistDetail:
        credential = await self._credentials.load()
        return await self._mylists.fetch_mylist_items(credential, mylist_id, page, page_size)

    async def add_to_mylist(self, mylist_id: int, video_ids: Iterable[str]) -> None:
        video_ids = list(video_ids)
        if not video_ids:
            return
        credential = await self._credentials.load()
        await self._mylists.add_to_mylist(credential, mylist_id, video_ids)

    async def remove_from_mylist(self, mylist_id: int, item_ids: Iterable[int]) -> None:
        item_ids = list(item_ids)
        if not item_ids:
            return
        credential = await self._credentials.load()
        await self._mylists.remove_from_mylist(credential, mylist_id, item_ids)

    # Analytics

    async def fetch_analytics_stats(self, video_id: str, date_from: str, date_to: str) -> list[AnalyticsStat]:
        credential = await self._credentials.load()
        return await self._analytics.fetch_analytics_stats(credential, video_id, date_from, date_to)
