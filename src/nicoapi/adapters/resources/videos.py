"""Resource: uploaded videos (nvapi v2, page/pageSize family)."""

from __future__ import annotations

from typing import AsyncIterator

from nicoapi.core.domain.models import Credential, PageResult
from nicoapi.core.domain.resources import VideoItem
from nicoapi.core.services.pagination import PageNumberRequest, PaginatedResource, field_extractor
from nicoapi.core.services.request_pipeline import RequestPipeline


class VideoResource:
    """Lists the authenticated user's uploads, newest first."""

    _base_url = "https://nvapi.nicovideo.jp/v2"

    def __init__(self, pipeline: RequestPipeline) -> None:
        self._pages = PaginatedResource(
            pipeline,
            url_template=f"{self._base_url}/users/me/videos",
            item_model=VideoItem,
            extract=field_extractor("items", "totalCount"),
            param_keys=("page", "pageSize"),
            base_params={"sortKey": "registeredAt", "sortOrder": "desc"},
        )

    async def fetch_videos(self, credential: Credential, page: int, page_size: int) -> PageResult[VideoItem]:
        return await self._pages.fetch(credential, PageNumberRequest(page=page, page_size=page_size))

    def iter_videos(self, credential: Credential, page_size: int = 100) -> AsyncIterator[VideoItem]:
        return self._pages.iter_items(credential, PageNumberRequest(page=1, page_size=page_size))
