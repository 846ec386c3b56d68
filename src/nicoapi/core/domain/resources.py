"""Resource models (videos, lives, earnings, mylists, analytics).

The upstream schemas are private and drift without notice, so every model here
is lenient:
- camelCase aliases, snake_case attributes;
- `extra="allow"` keeps unknown fields instead of failing;
- nested blobs the library does not interpret stay as plain dicts.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from nicoapi.core.domain.models import EarningsPeriod, PageResult


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class VideoItem(_UpstreamModel):
    """An uploaded video as listed by `/v2/users/me/videos`."""

    essential: dict[str, Any] = Field(
        default_factory=dict,
        description="Core video record (id, title, registeredAt, count, thumbnail, duration...).",
    )
    description: str | None = None
    like_count: int | None = Field(default=None, alias="likeCount")
    gift_point: int | None = Field(default=None, alias="giftPoint")
    is_hidden: bool = Field(default=False, alias="isHidden")
    is_deleted: bool = Field(default=False, alias="isDeleted")
    is_cpp_registered: bool | None = Field(default=None, alias="isCppRegistered")
    series: dict[str, Any] | None = None
    thread_id: int | None = Field(default=None, alias="threadId")

    @property
    def video_id(self) -> str | None:
        value = self.essential.get("id")
        return value if isinstance(value, str) else None

    @property
    def title(self) -> str | None:
        value = self.essential.get("title")
        return value if isinstance(value, str) else None


class LiveProgram(_UpstreamModel):
    """A past or scheduled broadcast from the user broadcast history."""

    id: dict[str, Any] = Field(default_factory=dict, description="`{value: 'lv...'}`.")
    program: dict[str, Any] = Field(default_factory=dict)
    statistics: dict[str, Any] = Field(default_factory=dict)
    thumbnail: dict[str, Any] | None = None

    @property
    def program_id(self) -> str | None:
        value = self.id.get("value")
        return value if isinstance(value, str) else None

    @property
    def title(self) -> str | None:
        value = self.program.get("title")
        return value if isinstance(value, str) else None


class IncomeContent(_UpstreamModel):
    """One content row of the CPP forecast (current earnings).

    Deleted contents come back with most descriptive fields missing.
    """

    global_id: str | None = Field(default=None, alias="globalId")
    content_id: int | None = Field(default=None, alias="contentId")
    content_kind: str | None = Field(default=None, alias="contentKind")
    user_id: int | None = Field(default=None, alias="userId")
    title: str | None = None
    description: str | None = None
    thumbnail_url: str | None = Field(default=None, alias="thumbnailURL")
    watch_url: str | None = Field(default=None, alias="watchURL")
    created_at: str | None = Field(default=None, alias="createdAt")
    score_disclosed_status: int | None = Field(default=None, alias="scoreDisclosedStatus")
    score_impartment_status: int | None = Field(default=None, alias="scoreImpartmentStatus")
    score: dict[str, Any] | None = None


class MonthlyHistoryItem(_UpstreamModel):
    """One content row of a finalized month (earnings history)."""

    global_id: str | None = Field(default=None, alias="globalId")
    title: str | None = None
    content_kind: str | None = Field(default=None, alias="contentKind")
    score: dict[str, Any] | None = None

    @property
    def all_total(self) -> float | None:
        this_month = (self.score or {}).get("thisMonth")
        if isinstance(this_month, dict):
            value = this_month.get("allTotal")
            if isinstance(value, (int, float)):
                return value
        return None


class MylistOwner(_UpstreamModel):
    owner_type: str | None = Field(default=None, alias="ownerType")
    type: str | None = None
    visibility: str | None = None
    id: str | None = None
    name: str | None = None
    icon_url: str | None = Field(default=None, alias="iconUrl")


class MylistSampleItem(_UpstreamModel):
    item_id: int | None = Field(default=None, alias="itemId")
    watch_id: str | None = Field(default=None, alias="watchId")
    title: str | None = None
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")


class Mylist(_UpstreamModel):
    """A mylist as listed by `/v1/users/me/mylists`."""

    id: int
    name: str = ""
    description: str = ""
    is_public: bool = Field(default=False, alias="isPublic")
    default_sort_key: str | None = Field(default=None, alias="defaultSortKey")
    default_sort_order: str | None = Field(default=None, alias="defaultSortOrder")
    items_count: int = Field(default=0, alias="itemsCount")
    follower_count: int = Field(default=0, alias="followerCount")
    created_at: str | None = Field(default=None, alias="createdAt")
    owner: MylistOwner | None = None
    sample_items: list[MylistSampleItem] = Field(default_factory=list, alias="sampleItems")


class MylistItem(_UpstreamModel):
    item_id: int = Field(..., alias="itemId")
    watch_id: str | None = Field(default=None, alias="watchId")
    description: str = ""
    added_at: str | None = Field(default=None, alias="addedAt")
    status: str | None = None
    video: dict[str, Any] = Field(default_factory=dict)


class MylistDetail(_UpstreamModel):
    """One page of a mylist's items plus the list metadata."""

    id: int
    name: str = ""
    description: str = ""
    is_public: bool = Field(default=False, alias="isPublic")
    default_sort_key: str | None = Field(default=None, alias="defaultSortKey")
    default_sort_order: str | None = Field(default=None, alias="defaultSortOrder")
    items: list[MylistItem] = Field(default_factory=list)
    total_item_count: int = Field(default=0, alias="totalItemCount")
    has_next: bool = Field(default=False, alias="hasNext")
    follower_count: int = Field(default=0, alias="followerCount")
    owner: MylistOwner | None = None


class AnalyticsStat(BaseModel):
    """Daily metrics of one video, flattened from the analytics stats API."""

    date: str = Field(..., pattern=r"^\d{8}$", description="YYYYMMDD.")
    view_count: int = 0
    comment_count: int = 0
    like_count: int = 0
    mylist_count: int = 0


class EarningsPage(PageResult[IncomeContent]):
    """Current-earnings page, annotated with the month that was actually queried."""

    period: EarningsPeriod
