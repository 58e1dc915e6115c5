"""Domain service folding appliance users into license statistics."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from domain.value_object.user_stats import UserStats

if TYPE_CHECKING:
    from neuroglia.hosting.web import WebApplicationBuilder

UNLICENSED_PACKAGE = "8"


def compute_user_stats(
    users: Iterable[Mapping[str, str]],
    unlicensed_package: str = UNLICENSED_PACKAGE,
) -> UserStats:
    """Count users per assigned package.

    A user with a blank package is counted in the total only. Every other
    package is counted in ``package_counts`` and, unless it is the
    unlicensed package, in ``licensed_count``.

    Args:
        users: Normalized user records (``assignedPackage`` key)
        unlicensed_package: Package code meaning "no license"

    Returns:
        UserStats for the given users
    """
    total_users = 0
    licensed_count = 0
    package_counts: dict[str, int] = {}

    for user in users:
        total_users += 1
        package = (user.get("assignedPackage") or "").strip()
        if not package:
            continue
        package_counts[package] = package_counts.get(package, 0) + 1
        if package != unlicensed_package:
            licensed_count += 1

    return UserStats(
        total_users=total_users,
        licensed_count=licensed_count,
        package_counts=package_counts,
    )


class UserStatsService:
    """Service computing user statistics with the configured unlicensed package."""

    def __init__(self, unlicensed_package: str = UNLICENSED_PACKAGE):
        self.unlicensed_package = unlicensed_package

    def compute(self, users: Iterable[Mapping[str, str]]) -> UserStats:
        return compute_user_stats(users, unlicensed_package=self.unlicensed_package)

    @classmethod
    def configure(cls, builder: "WebApplicationBuilder") -> None:
        """Configure the UserStatsService in the dependency injection container."""
        from application.settings import app_settings

        builder.services.add_singleton(
            cls, singleton=cls(unlicensed_package=app_settings.ipo_unlicensed_package)
        )
