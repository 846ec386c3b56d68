"""Resource modules. Each receives the shared `RequestPipeline`."""

from nicoapi.adapters.resources.analytics import AnalyticsResource
from nicoapi.adapters.resources.earnings import EarningsResource
from nicoapi.adapters.resources.lives import LiveResource
from nicoapi.adapters.resources.mylists import MylistResource
from nicoapi.adapters.resources.videos import VideoResource

__all__ = [
    "AnalyticsResource",
    "EarningsResource",
    "LiveResource",
    "MylistResource",
    "VideoResource",
]
