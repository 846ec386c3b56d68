"""Generic pagination contract.

Two addressing families exist upstream and are kept apart on purpose:

- page/pageSize (videos, mylist items): `has_more = page < ceil(total / page_size)`;
- offset/limit (lives, earnings, earnings history):
  `has_more = offset + limit < total and returned > 0`.

The second conjunct of the offset rule guards against pages that come back
empty while `totalCount` still promises more. Upstream `hasNext` flags are
ignored. A zero page size or limit never has more.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Generic, Mapping, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from nicoapi.core.domain.models import Credential, PageResult, RequestSpec
from nicoapi.core.errors import UpstreamError, ValidationError
from nicoapi.core.services.request_pipeline import RequestPipeline

lib_logger = logging.getLogger("nicoapi")

ModelT = TypeVar("ModelT", bound=BaseModel)

ItemsExtractor = Callable[[Any], tuple[list[Any], int]]


def has_more_by_page(page: int, page_size: int, total_count: int) -> bool:
    if page_size <= 0:
        return False
    total_pages = -(-total_count // page_size)
    return page < total_pages


def has_more_by_offset(offset: int, limit: int, total_count: int, returned: int) -> bool:
    if limit <= 0:
        return False
    return offset + limit < total_count and returned > 0


@dataclass(frozen=True)
class PageNumberRequest:
    """1-based page number plus page size."""

    page: int = 1
    page_size: int = 100

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError(f"page must be >= 1, received: {self.page}")
        if self.page_size < 0:
            raise ValidationError(f"page_size must be >= 0, received: {self.page_size}")

    def to_params(self, page_key: str = "page", size_key: str = "pageSize") -> dict[str, int]:
        return {size_key: self.page_size, page_key: self.page}

    def has_more(self, total_count: int, returned: int) -> bool:
        return has_more_by_page(self.page, self.page_size, total_count)

    def next(self) -> "PageNumberRequest":
        return PageNumberRequest(page=self.page + 1, page_size=self.page_size)


@dataclass(frozen=True)
class OffsetRequest:
    """0-based offset plus limit."""

    offset: int = 0
    limit: int = 100

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValidationError(f"offset must be >= 0, received: {self.offset}")
        if self.limit < 0:
            raise ValidationError(f"limit must be >= 0, received: {self.limit}")

    def to_params(self, page_key: str = "offset", size_key: str = "limit") -> dict[str, int]:
        return {page_key: self.offset, size_key: self.limit}

    def has_more(self, total_count: int, returned: int) -> bool:
        return has_more_by_offset(self.offset, self.limit, total_count, returned)

    def next(self) -> "OffsetRequest":
        return OffsetRequest(offset=self.offset + self.limit, limit=self.limit)


PageRequest = Union[PageNumberRequest, OffsetRequest]


def field_extractor(items_key: str, total_key: str) -> ItemsExtractor:
    """Extractor for the common `{<items_key>: [...], <total_key>: n}` data shape."""

    def extract(data: Any) -> tuple[list[Any], int]:
        if not isinstance(data, dict):
            raise UpstreamError(f"unexpected response shape: expected an object, got {type(data).__name__}")
        items = data.get(items_key)
        if not isinstance(items, list):
            raise UpstreamError(f"unexpected response shape: '{items_key}' is not a list")
        total = data.get(total_key)
        if not isinstance(total, int) or isinstance(total, bool):
            total = len(items)
        return items, max(total, 0)

    return extract


class PaginatedResource(Generic[ModelT]):
    """One list endpoint: URL template, parameters and item extraction.

    Example:
        videos = PaginatedResource(
            pipeline,
            url_template="https://nvapi.nicovideo.jp/v2/users/me/videos",
            item_model=VideoItem,
            extract=field_extractor("items", "totalCount"),
            param_keys=("page", "pageSize"),
        )
        page = await videos.fetch(credential, PageNumberRequest(page=1, page_size=25))
    """

    def __init__(
        self,
        pipeline: RequestPipeline,
        *,
        url_template: str,
        item_model: type[ModelT],
        extract: ItemsExtractor,
        param_keys: tuple[str, str],
        base_params: Mapping[str, Any] | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._url_template = url_template
        self._item_model = item_model
        self._extract = extract
        self._param_keys = param_keys
        self._base_params = dict(base_params or {})

    def build_request(
        self,
        page: PageRequest,
        *,
        path_params: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> RequestSpec:
        url = self._url_template.format(**(path_params or {}))
        query = {**self._base_params, **(params or {}), **page.to_params(*self._param_keys)}
        return RequestSpec(method="GET", url=url, params=query)

    async def fetch(
        self,
        credential: Credential,
        page: PageRequest,
        *,
        path_params: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> PageResult[ModelT]:
        """Fetch one page and compute `has_more` locally."""

        request = self.build_request(page, path_params=path_params, params=params)
        envelope = await self._pipeline.execute(request, credential)
        raw_items, total_count = self._extract(envelope.data)

        try:
            items = [self._item_model.model_validate(raw) for raw in raw_items]
        except PydanticValidationError as exc:
            raise UpstreamError(
                f"unexpected {self._item_model.__name__} shape ({exc.error_count()} validation errors)"
            ) from exc

        has_more = page.has_more(total_count, len(items))
        lib_logger.info(
            f"[PaginatedResource] {request.url}: {len(items)} items (total {total_count}, has_more={has_more})"
        )
        return PageResult[self._item_model](items=items, total_count=total_count, has_more=has_more)

    async def iter_items(
        self,
        credential: Credential,
        first: PageRequest,
        *,
        path_params: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> AsyncIterator[ModelT]:
        """Yield items page after page until `has_more` is false or a page is empty."""

        request: PageRequest = first
        while True:
            page = await self.fetch(credential, request, path_params=path_params, params=params)
            for item in page.items:
                yield item
            if not page.has_more or not page.items:
                return
            request = request.next()
