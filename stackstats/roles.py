"""
Lane positions a tracked player can occupy in a match.
The set is closed: every per-role map in this package is keyed by these 5 values only.
"""
from __future__ import annotations

from enum import Enum


# ---------- Role enum (exactly these 5) ----------


class Role(str, Enum):
    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"
    UTILITY = "UTILITY"


# Fixed iteration order. Tie-breaks everywhere ("first role wins") follow this order.
ROLE_ORDER: tuple[Role, ...] = tuple(Role)

ROLE_COUNT = len(ROLE_ORDER)


def list_all_roles() -> list[Role]:
    """For API: roles in iteration order."""
    return list(ROLE_ORDER)


def parse_role(value: str | Role | None) -> Role | None:
    """Parse a teamPosition string to the enum; None if empty or not one of the 5 lanes."""
    if isinstance(value, Role):
        return value
    if not value:
        return None
    try:
        return Role(value.strip().upper())
    except ValueError:
        return None
