"""Resource: live-broadcast history (offset/limit family).

The endpoint also returns a `hasNext` flag. It is unreliable and ignored;
`has_more` comes from the offset arithmetic alone.
"""

from __future__ import annotations

from typing import AsyncIterator

from nicoapi.core.domain.models import Credential, PageResult
from nicoapi.core.domain.resources import LiveProgram
from nicoapi.core.errors import ValidationError
from nicoapi.core.services.pagination import OffsetRequest, PaginatedResource, field_extractor
from nicoapi.core.services.request_pipeline import RequestPipeline


class LiveResource:
    _base_url = "https://live.nicovideo.jp/front/api/v2"

    def __init__(self, pipeline: RequestPipeline) -> None:
        self._pages = PaginatedResource(
            pipeline,
            url_template=f"{self._base_url}/user-broadcast-history",
            item_model=LiveProgram,
            extract=field_extractor("programsList", "totalCount"),
            param_keys=("offset", "limit"),
            base_params={
                "providerType": "user",
                "isIncludeNonPublic": True,
                "withTotalCount": True,
            },
        )

    @staticmethod
    def _provider_id(credential: Credential, user_id: str | None) -> str:
        provider_id = user_id or credential.user_id
        if not provider_id:
            raise ValidationError("a niconico user id is required for the live-broadcast history")
        return provider_id

    async def fetch_lives(
        self,
        credential: Credential,
        offset: int,
        limit: int,
        *,
        user_id: str | None = None,
    ) -> PageResult[LiveProgram]:
        """One page of broadcasts, including non-public ones.

        `user_id` wins over the credential's user id.
        """

        provider_id = self._provider_id(credential, user_id)
        return await self._pages.fetch(
            credential,
            OffsetRequest(offset=offset, limit=limit),
            params={"providerId": provider_id},
        )

    def iter_lives(
        self,
        credential: Credential,
        *,
        limit: int = 100,
        user_id: str | None = None,
    ) -> AsyncIterator[LiveProgram]:
        provider_id = self._provider_id(credential, user_id)
        return self._pages.iter_items(
            credential,
            OffsetRequest(offset=0, limit=limit),
            params={"providerId": provider_id},
        )
