"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    User roles.

    - ADMIN: Back office, sees every CRM appointment and manages users
    - SURVEYOR: Field surveyor, sees own and team appointments
    - SALES: Sales consultant, sees only appointments assigned to them
    """

    ADMIN = "ADMIN"
    SURVEYOR = "SURVEYOR"
    SALES = "SALES"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class UserStatus(str, Enum):
    """Account status. Only ACTIVE users can authenticate."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class GhlLinkStatus(str, Enum):
    """Outcome of linking one user to a GoHighLevel user."""

    VERIFIED = "VERIFIED"  # stored id still exists in GHL
    UPDATED = "UPDATED"  # stale stored id replaced by a match
    ASSIGNED = "ASSIGNED"  # no stored id, match saved
    NOT_FOUND = "NOT_FOUND"  # no GHL user matches
    CONFLICT = "CONFLICT"  # match already linked to another user
