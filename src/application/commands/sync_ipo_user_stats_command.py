"""Sync IP Office user statistics command with handler."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from neuroglia.core import OperationResult
from neuroglia.mediation import Command, CommandHandler
from opentelemetry import trace

from application.services.ipo_credentials_provider import IpoCredentialsProvider
from domain.repositories.ipo_server_config_repository import IpoServerConfigRepository
from domain.services.user_stats_service import UserStatsService
from domain.value_object.ipo_server_config import IpoServerConfig, UserStatsBaseline
from integration.enums import IpoRecordKind
from integration.exceptions import IpoException
from integration.services.ipo_api_client import IpoApiClient
from integration.services.ipo_envelope_parser import parse_envelope

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class SyncIpoUserStatsCommand(Command[OperationResult[dict[str, Any]]]):
    """Command to recompute user statistics from the appliance and store them as the baseline.

    This command:
    1. Lists users from the appliance in a single session
    2. Folds them into per-package counts
    3. Replaces the stored baseline for the config
    """

    config_id: str
    owner_id: str


class SyncIpoUserStatsCommandHandler(CommandHandler[SyncIpoUserStatsCommand, OperationResult[dict[str, Any]]]):
    """Handle syncing the user statistics baseline."""

    def __init__(
        self,
        server_config_repository: IpoServerConfigRepository,
        credentials_provider: IpoCredentialsProvider,
        ipo_api_client: IpoApiClient,
        user_stats_service: UserStatsService,
    ):
        super().__init__()
        self.server_config_repository = server_config_repository
        self.credentials_provider = credentials_provider
        self.ipo_api_client = ipo_api_client
        self.user_stats_service = user_stats_service

    async def handle_async(self, request: SyncIpoUserStatsCommand) -> OperationResult[dict[str, Any]]:
        """Handle sync user stats command.

        Returns:
            OperationResult with the stored baseline, or error
        """
        with tracer.start_as_current_span("sync_ipo_user_stats_command_handler") as span:
            span.set_attribute("ipo.server_config_id", request.config_id)

            try:
                credentials = await self.credentials_provider.resolve_async(request.config_id, request.owner_id)
            except ValueError as e:
                log.error(f"Cannot load credentials for IP Office config {request.config_id}: {e}")
                return self.bad_request(f"Cannot load credentials: {e}")

            if credentials is None:
                return self.not_found(IpoServerConfig, request.config_id)

            users_path = IpoRecordKind.USERS.resource_path
            try:
                response = await self.ipo_api_client.with_session(
                    credentials,
                    lambda session: self.ipo_api_client.request(credentials, session, users_path),
                )
            except IpoException as e:
                log.error(f"Failed to list users from IP Office {credentials.host}: {e}")
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return self.bad_request(str(e))

            parsed = parse_envelope(response.text, IpoRecordKind.USERS.record_key)
            stats = self.user_stats_service.compute(parsed.records)

            baseline = await self.server_config_repository.upsert_stats_baseline_async(
                UserStatsBaseline(
                    server_config_id=request.config_id,
                    owner_id=request.owner_id,
                    total_users=stats.total_users,
                    licensed_count=stats.licensed_count,
                    stats=stats.to_dict(),
                    last_synced_at=datetime.now(timezone.utc),
                )
            )

            span.set_attribute("ipo.total_users", baseline.total_users)
            log.info(
                f"Synced user stats for IP Office config {request.config_id}: "
                f"{baseline.total_users} users, {baseline.licensed_count} licensed"
            )

            return self.ok(
                {
                    "server_config_id": baseline.server_config_id,
                    "total_users": baseline.total_users,
                    "licensed_count": baseline.licensed_count,
                    "stats": baseline.stats,
                    "last_synced_at": baseline.last_synced_at.isoformat() if baseline.last_synced_at else None,
                }
            )
