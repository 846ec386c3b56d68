"""Resource: per-video daily analytics."""

from __future__ import annotations

from typing import Any

from nicoapi.core.domain.models import Credential, RequestSpec
from nicoapi.core.domain.resources import AnalyticsStat
from nicoapi.core.errors import UpstreamError
from nicoapi.core.services.request_pipeline import RequestPipeline

METRICS = ("viewCount", "commentCount", "likeCount", "mylistCount")

_METRIC_FIELDS = {
    "viewCount": "view_count",
    "commentCount": "comment_count",
    "likeCount": "like_count",
    "mylistCount": "mylist_count",
}


def parse_stat_row(row: Any) -> AnalyticsStat:
    """Flatten `{dimensions: [{type: 'date', label}], metrics: [{type, value}]}`.

    The `YYYY-MM-DD` label becomes `YYYYMMDD`; missing metrics count as 0.
    """

    if not isinstance(row, dict):
        raise UpstreamError(f"unexpected analytics row: {row!r}")

    label = None
    for dimension in row.get("dimensions") or []:
        if isinstance(dimension, dict) and dimension.get("type") == "date":
            label = dimension.get("label")
            break
    if not isinstance(label, str):
        raise UpstreamError("analytics row has no date dimension")

    values: dict[str, int] = {}
    for metric in row.get("metrics") or []:
        if not isinstance(metric, dict):
            continue
        metric_type = metric.get("type")
        field = _METRIC_FIELDS.get(metric_type) if isinstance(metric_type, str) else None
        value = metric.get("value")
        if field and isinstance(value, (int, float)):
            values[field] = int(value)

    compact = label.replace("-", "")
    if len(compact) != 8 or not compact.isdigit():
        raise UpstreamError(f"analytics row has a malformed date label: {label!r}")
    return AnalyticsStat(date=compact, **values)


class AnalyticsResource:
    _url = "https://nvapi.nicovideo.jp/v1/users/me/analytics/stats"

    def __init__(self, pipeline: RequestPipeline) -> None:
        self._pipeline = pipeline

    async def fetch_analytics_stats(
        self,
        credential: Credential,
        video_id: str,
        date_from: str,
        date_to: str,
    ) -> list[AnalyticsStat]:
        """Daily stats of `video_id` between two `YYYY-MM-DD` dates, inclusive."""

        request = RequestSpec(
            method="GET",
            url=self._url,
            params={
                "from": date_from,
                "to": date_to,
                "videoId": video_id,
                "term": "custom",
                "metrics": ",".join(METRICS),
                "dimensions": "date",
            },
        )
        envelope = await self._pipeline.execute(request, credential)
        if not isinstance(envelope.data, list):
            raise UpstreamError("unexpected response shape: analytics data is not a list")
        return [parse_stat_row(row) for row in envelope.data]
