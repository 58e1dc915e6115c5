"""Tests for the user statistics domain service."""

from domain.services.user_stats_service import UserStatsService, compute_user_stats


def test_counts_per_package():
    users = [
        {"assignedPackage": "3"},
        {"assignedPackage": "3"},
        {"assignedPackage": "8"},
        {"assignedPackage": " 5 "},
        {"assignedPackage": ""},
        {"name": "no package key"},
    ]

    stats = compute_user_stats(users)

    assert stats.total_users == 6
    assert stats.licensed_count == 3
    assert stats.package_counts == {"3": 2, "8": 1, "5": 1}


def test_empty_user_list():
    stats = compute_user_stats([])

    assert stats.total_users == 0
    assert stats.licensed_count == 0
    assert stats.package_counts == {}


def test_configured_unlicensed_package():
    service = UserStatsService(unlicensed_package="0")

    stats = service.compute([{"assignedPackage": "0"}, {"assignedPackage": "8"}])

    assert stats.licensed_count == 1


def test_to_dict_uses_wire_keys():
    stats = compute_user_stats([{"assignedPackage": "3"}])

    assert stats.to_dict() == {"totalUsers": 1, "licensedCount": 1, "packageCounts": {"3": 1}}


def test_blank_and_unlicensed_packages_are_not_licensed():
    users = [{"assignedPackage": package} for package in ["1", "1", "8", "", "3"]]

    stats = compute_user_stats(users)

    assert stats.total_users == 5
    assert stats.package_counts == {"1": 2, "8": 1, "3": 1}
    assert stats.licensed_count == 3
