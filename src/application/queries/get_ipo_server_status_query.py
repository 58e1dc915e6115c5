"""Get IP Office server reachability query with handler."""

import logging
from dataclasses import dataclass
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Query, QueryHandler
from opentelemetry import trace

from domain.repositories.ipo_server_config_repository import IpoServerConfigRepository
from domain.value_object.ipo_server_config import IpoServerConfig
from integration.services.ipo_reachability_probe import IpoReachabilityProbe

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class GetIpoServerStatusQuery(Query[OperationResult[dict[str, Any]]]):
    """Query to check whether the appliance of a config answers on its web listener."""

    config_id: str
    owner_id: str


class GetIpoServerStatusQueryHandler(QueryHandler[GetIpoServerStatusQuery, OperationResult[dict[str, Any]]]):
    """Handle probing an appliance without opening a management session."""

    def __init__(
        self,
        server_config_repository: IpoServerConfigRepository,
        reachability_probe: IpoReachabilityProbe,
    ):
        super().__init__()
        self.server_config_repository = server_config_repository
        self.reachability_probe = reachability_probe

    @tracer.start_as_current_span("get_ipo_server_status_query_handler")
    async def handle_async(self, request: GetIpoServerStatusQuery) -> OperationResult[dict[str, Any]]:
        config = await self.server_config_repository.get_for_owner_async(request.config_id, request.owner_id)
        if config is None:
            return self.not_found(IpoServerConfig, request.config_id)

        result = await self.reachability_probe.check_async(config.host)
        trace.get_current_span().set_attribute("ipo.reachable", result.reachable)
        return self.ok(result.to_dict())
