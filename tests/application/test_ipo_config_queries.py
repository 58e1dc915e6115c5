"""Tests for the stats baseline and server status queries."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from application.queries.get_ipo_server_status_query import (
    GetIpoServerStatusQuery,
    GetIpoServerStatusQueryHandler,
)
from application.queries.get_ipo_user_stats_baseline_query import (
    GetIpoUserStatsBaselineQuery,
    GetIpoUserStatsBaselineQueryHandler,
)
from domain.value_object.ipo_server_config import UserStatsBaseline
from integration.services.ipo_reachability_probe import IpoReachabilityProbe, ReachabilityResult

CHECKED_AT = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


class TestGetIpoUserStatsBaselineQuery:
    @pytest.fixture
    def handler(self, mock_repository):
        return GetIpoUserStatsBaselineQueryHandler(server_config_repository=mock_repository)

    @pytest.mark.asyncio
    async def test_returns_stored_baseline(self, handler, mock_repository, server_config):
        mock_repository.get_for_owner_async.return_value = server_config
        mock_repository.get_stats_baseline_async.return_value = UserStatsBaseline(
            server_config_id="cfg-1",
            owner_id="owner@example.com",
            total_users=10,
            licensed_count=7,
            stats={"totalUsers": 10},
            last_synced_at=CHECKED_AT,
        )

        result = await handler.handle_async(GetIpoUserStatsBaselineQuery(config_id="cfg-1", owner_id="owner@example.com"))

        assert result.is_success
        assert result.data["baseline"]["total_users"] == 10
        assert result.data["baseline"]["licensed_count"] == 7
        assert result.data["baseline"]["last_synced_at"] == CHECKED_AT.isoformat()

    @pytest.mark.asyncio
    async def test_never_synced(self, handler, mock_repository, server_config):
        mock_repository.get_for_owner_async.return_value = server_config
        mock_repository.get_stats_baseline_async.return_value = None

        result = await handler.handle_async(GetIpoUserStatsBaselineQuery(config_id="cfg-1", owner_id="owner@example.com"))

        assert result.is_success
        assert result.data == {"baseline": None}

    @pytest.mark.asyncio
    async def test_unknown_config(self, handler, mock_repository):
        mock_repository.get_for_owner_async.return_value = None

        result = await handler.handle_async(GetIpoUserStatsBaselineQuery(config_id="cfg-1", owner_id="intruder"))

        assert not result.is_success
        mock_repository.get_stats_baseline_async.assert_not_called()


class TestGetIpoServerStatusQuery:
    @pytest.fixture
    def mock_probe(self) -> MagicMock:
        probe = MagicMock(spec=IpoReachabilityProbe)
        probe.check_async = AsyncMock(
            return_value=ReachabilityResult(reachable=True, status_code=200, checked_at=CHECKED_AT)
        )
        return probe

    @pytest.fixture
    def handler(self, mock_repository, mock_probe):
        return GetIpoServerStatusQueryHandler(server_config_repository=mock_repository, reachability_probe=mock_probe)

    @pytest.mark.asyncio
    async def test_probes_stored_host(self, handler, mock_repository, mock_probe, server_config):
        mock_repository.get_for_owner_async.return_value = server_config

        result = await handler.handle_async(GetIpoServerStatusQuery(config_id="cfg-1", owner_id="owner@example.com"))

        assert result.is_success
        assert result.data == {"reachable": True, "statusCode": 200, "checkedAt": CHECKED_AT.isoformat()}
        mock_probe.check_async.assert_called_once_with("10.0.0.10")

    @pytest.mark.asyncio
    async def test_unknown_config(self, handler, mock_repository, mock_probe):
        mock_repository.get_for_owner_async.return_value = None

        result = await handler.handle_async(GetIpoServerStatusQuery(config_id="cfg-1", owner_id="intruder"))

        assert not result.is_success
        mock_probe.check_async.assert_not_called()
