"""Application queries package."""

from .get_ipo_records_query import GetIpoRecordsQuery, GetIpoRecordsQueryHandler
from .get_ipo_server_status_query import GetIpoServerStatusQuery, GetIpoServerStatusQueryHandler
from .get_ipo_user_stats_baseline_query import (
    GetIpoUserStatsBaselineQuery,
    GetIpoUserStatsBaselineQueryHandler,
)

__all__ = [
    "GetIpoRecordsQuery",
    "GetIpoRecordsQueryHandler",
    "GetIpoServerStatusQuery",
    "GetIpoServerStatusQueryHandler",
    "GetIpoUserStatsBaselineQuery",
    "GetIpoUserStatsBaselineQueryHandler",
]
