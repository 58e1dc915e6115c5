from enum import Enum


class Reachability(str, Enum):
    """Combined reachability of an appliance from the server and the browser."""
    GREEN = "green"  # Reachable from both sides
    AMBER = "amber"  # Reachable from one side only
    RED = "red"  # Unreachable
