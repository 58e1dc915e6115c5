"""Repository interface for stored IP Office connection configs."""

from abc import ABC, abstractmethod

from domain.value_object.ipo_server_config import IpoServerConfig, UserStatsBaseline


class IpoServerConfigRepository(ABC):
    """Repository for per-owner IP Office configs and their cached statistics.

    Every lookup is scoped to the owner; a config belonging to another
    operator is reported as missing.
    """

    @abstractmethod
    async def get_for_owner_async(self, config_id: str, owner_id: str) -> IpoServerConfig | None:
        """Get a config by ID if it belongs to the owner."""

    @abstractmethod
    async def get_stats_baseline_async(self, config_id: str, owner_id: str) -> UserStatsBaseline | None:
        """Get the last synced user statistics for a config."""

    @abstractmethod
    async def upsert_stats_baseline_async(self, baseline: UserStatsBaseline) -> UserStatsBaseline:
        """Create or replace the user statistics baseline for a config."""
