"""Records read from the platform store."""

from dataclasses import dataclass
from typing import Optional

# PlatformAdmin.role
ROLE_MASTER = "MASTER"
ROLE_ADMIN = "ADMIN"

# PlatformAdmin.status
ADMIN_ACTIVE = "ACTIVE"
ADMIN_DISABLED = "DISABLED"

# Organization.platform_status
ORG_ACTIVE = "ACTIVE"
ORG_BLOCKED = "BLOCKED"


@dataclass(frozen=True)
class SessionUser:
    """A live session in the admin app."""

    user_id: str
    session_id: str


@dataclass(frozen=True)
class PlatformAdmin:
    """Privilege record of a platform operator (distinct from the account)."""

    id: str
    user_id: str
    role: str
    status: str
    must_change_password: bool = False

    @property
    def is_active(self) -> bool:
        return self.status == ADMIN_ACTIVE

    @property
    def is_master(self) -> bool:
        return self.role == ROLE_MASTER


@dataclass(frozen=True)
class Organization:
    """A tenant, with the two sources its owner can be resolved from."""

    id: str
    slug: str
    platform_status: str
    subscription_owner_user_id: Optional[str] = None
    owner_member_user_id: Optional[str] = None

    @property
    def is_blocked(self) -> bool:
        return self.platform_status == ORG_BLOCKED

    @property
    def owner_user_id(self) -> str:
        """Subscription owner if recorded, else the first ``owner`` member.

        Empty string when neither is available.
        """
        return (self.subscription_owner_user_id or "").strip() or (
            self.owner_member_user_id or ""
        ).strip()
