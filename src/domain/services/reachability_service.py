"""Domain service combining reachability checks."""

from domain.enums import Reachability


def resolve_reachability(server_reachable: bool, client_reachable: bool) -> Reachability:
    """Combine the server-side and browser-side checks into one indicator."""
    if server_reachable and client_reachable:
        return Reachability.GREEN
    if server_reachable or client_reachable:
        return Reachability.AMBER
    return Reachability.RED
