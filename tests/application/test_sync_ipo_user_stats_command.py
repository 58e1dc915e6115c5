"""Tests for SyncIpoUserStatsCommand."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from application.commands.sync_ipo_user_stats_command import (
    SyncIpoUserStatsCommand,
    SyncIpoUserStatsCommandHandler,
)
from domain.services.user_stats_service import UserStatsService
from domain.value_object.ipo_server_config import UserStatsBaseline
from integration.exceptions import IpoRequestException
from integration.models.ipo_session_dto import IpoRawResponse
from integration.services.ipo_api_client import IpoApiClient
from tests.fixtures.ipo_payloads import USERS_BODY
from tests.fixtures.mixins import BaseTestCase


class TestSyncIpoUserStatsCommand(BaseTestCase):
    @pytest.fixture
    def mock_api_client(self) -> MagicMock:
        client = MagicMock(spec=IpoApiClient)
        client.with_session = AsyncMock(
            return_value=IpoRawResponse(status_code=200, text=USERS_BODY, content_type="application/json")
        )
        return client

    @pytest.fixture
    def handler(self, mock_repository, mock_credentials_provider, mock_api_client) -> SyncIpoUserStatsCommandHandler:
        mock_repository.upsert_stats_baseline_async = self.create_async_mock(side_effect=lambda baseline: baseline)
        return SyncIpoUserStatsCommandHandler(
            server_config_repository=mock_repository,
            credentials_provider=mock_credentials_provider,
            ipo_api_client=mock_api_client,
            user_stats_service=UserStatsService(),
        )

    @pytest.mark.asyncio
    async def test_sync_stores_baseline(self, handler, mock_repository) -> None:
        # Act
        result = await handler.handle_async(SyncIpoUserStatsCommand(config_id="cfg-1", owner_id="o"))

        # Assert
        assert result.is_success
        assert result.data["total_users"] == 2
        assert result.data["licensed_count"] == 1
        assert result.data["stats"] == {"totalUsers": 2, "licensedCount": 1, "packageCounts": {"3": 1, "8": 1}}
        assert result.data["last_synced_at"] is not None

        baseline: UserStatsBaseline = mock_repository.upsert_stats_baseline_async.call_args.args[0]
        assert baseline.server_config_id == "cfg-1"
        assert baseline.owner_id == "o"
        assert baseline.last_synced_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_upstream_failure_keeps_previous_baseline(self, handler, mock_repository, mock_api_client) -> None:
        mock_api_client.with_session.side_effect = IpoRequestException("Cannot connect to IP Office")

        result = await handler.handle_async(SyncIpoUserStatsCommand(config_id="cfg-1", owner_id="o"))

        assert not result.is_success
        mock_repository.upsert_stats_baseline_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_config(self, handler, mock_credentials_provider, mock_repository) -> None:
        mock_credentials_provider.resolve_async.return_value = None

        result = await handler.handle_async(SyncIpoUserStatsCommand(config_id="nope", owner_id="o"))

        assert not result.is_success
        mock_repository.upsert_stats_baseline_async.assert_not_called()
