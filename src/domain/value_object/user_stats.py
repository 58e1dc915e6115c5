"""Value Object for appliance user statistics."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UserStats:
    """Per-package user counts for one appliance."""

    total_users: int = 0
    licensed_count: int = 0
    package_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalUsers": self.total_users,
            "licensedCount": self.licensed_count,
            "packageCounts": dict(self.package_counts),
        }
