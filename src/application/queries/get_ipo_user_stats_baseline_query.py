"""Get stored user statistics baseline query with handler."""

import logging
from dataclasses import dataclass
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Query, QueryHandler

from domain.repositories.ipo_server_config_repository import IpoServerConfigRepository
from domain.value_object.ipo_server_config import IpoServerConfig

log = logging.getLogger(__name__)


@dataclass
class GetIpoUserStatsBaselineQuery(Query[OperationResult[dict[str, Any]]]):
    """Query to read the last synced user statistics of a config."""

    config_id: str
    owner_id: str


class GetIpoUserStatsBaselineQueryHandler(
    QueryHandler[GetIpoUserStatsBaselineQuery, OperationResult[dict[str, Any]]]
):
    """Handle reading the user statistics baseline. No appliance call is made."""

    def __init__(self, server_config_repository: IpoServerConfigRepository):
        super().__init__()
        self.server_config_repository = server_config_repository

    async def handle_async(self, request: GetIpoUserStatsBaselineQuery) -> OperationResult[dict[str, Any]]:
        config = await self.server_config_repository.get_for_owner_async(request.config_id, request.owner_id)
        if config is None:
            return self.not_found(IpoServerConfig, request.config_id)

        baseline = await self.server_config_repository.get_stats_baseline_async(request.config_id, request.owner_id)
        if baseline is None:
            return self.ok({"baseline": None})

        return self.ok(
            {
                "baseline": {
                    "server_config_id": baseline.server_config_id,
                    "total_users": baseline.total_users,
                    "licensed_count": baseline.licensed_count,
                    "stats": baseline.stats,
                    "last_synced_at": baseline.last_synced_at.isoformat() if baseline.last_synced_at else None,
                }
            }
        )
