"""Resource: mylists (listing, items, add and remove).

The mutation endpoints answer 200 or 201 depending on the operation, so they
run in skip-status mode and accept any 2xx `meta.status`.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pydantic import ValidationError as PydanticValidationError

from nicoapi.core.domain.models import Credential, RequestSpec, ResponseEnvelope
from nicoapi.core.domain.resources import Mylist, MylistDetail
from nicoapi.core.errors import UpstreamError
from nicoapi.core.services.error_classifier import classify_status
from nicoapi.core.services.pagination import PageNumberRequest
from nicoapi.core.services.request_pipeline import RequestPipeline

lib_logger = logging.getLogger("nicoapi")


def _ensure_success(envelope: ResponseEnvelope) -> None:
    if 200 <= envelope.status < 300:
        return
    body = {"meta": envelope.meta.model_dump(by_alias=True, exclude_none=True)}
    raise classify_status(envelope.status, body)


def _section(data: object, key: str) -> object:
    if not isinstance(data, dict) or key not in data:
        raise UpstreamError(f"unexpected response shape: missing '{key}'")
    return data[key]


class MylistResource:
    _base_url = "https://nvapi.nicovideo.jp/v1/users/me/mylists"

    def __init__(self, pipeline: RequestPipeline) -> None:
        self._pipeline = pipeline

    def _items_url(self, mylist_id: int) -> str:
        return f"{self._base_url}/{mylist_id}/items"

    async def fetch_mylists(self, credential: Credential, sample_item_count: int = 3) -> list[Mylist]:
        request = RequestSpec(
            method="GET",
            url=self._base_url,
            params={"sampleItemCount": sample_item_count},
        )
        envelope = await self._pipeline.execute(request, credential)
        raw = _section(envelope.data, "mylists")
        if not isinstance(raw, list):
            raise UpstreamError("unexpected response shape: 'mylists' is not a list")
        try:
            return [Mylist.model_validate(item) for item in raw]
        except PydanticValidationError as exc:
            raise UpstreamError(f"unexpected Mylist shape ({exc.error_count()} validation errors)") from exc

    async def fetch_mylist_items(
        self,
        credential: Credential,
        mylist_id: int,
        page: int = 1,
        page_size: int = 100,
    ) -> MylistDetail:
        page_request = PageNumberRequest(page=page, page_size=page_size)
        request = RequestSpec(
            method="GET",
            url=f"{self._base_url}/{mylist_id}",
            params=page_request.to_params(),
        )
        envelope = await self._pipeline.execute(request, credential)
        raw = _section(envelope.data, "mylist")
        try:
            return MylistDetail.model_validate(raw)
        except PydanticValidationError as exc:
            raise UpstreamError(f"unexpected MylistDetail shape ({exc.error_count()} validation errors)") from exc

    async def add_to_mylist(self, credential: Credential, mylist_id: int, video_ids: Iterable[str]) -> None:
        """Add videos one request at a time; the first failure stops the loop."""

        for video_id in video_ids:
            request = RequestSpec(
                method="POST",
                url=self._items_url(mylist_id),
                params={"itemId": video_id},
                body={},
            )
            envelope = await self._pipeline.execute(request, credential, skip_status_check=True)
            _ensure_success(envelope)
            lib_logger.info(f"[MylistResource] added {video_id} to mylist {mylist_id}")

    async def remove_from_mylist(self, credential: Credential, mylist_id: int, item_ids: Iterable[int]) -> None:
        ids = [str(item_id) for item_id in item_ids]
        if not ids:
            return
        request = RequestSpec(
            method="DELETE",
            url=self._items_url(mylist_id),
            params={"itemIds": ",".join(ids)},
        )
        envelope = await self._pipeline.execute(request, credential, skip_status_check=True)
        _ensure_success(envelope)
        lib_logger.info(f"[MylistResource] removed {len(ids)} items from mylist {mylist_id}")
