"""Results returned by the impersonation issuer.

The issuer never raises for expected failures; it returns one of these and
the HTTP layer decides how to present it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class DenialKind(str, Enum):
    VALIDATION = "validation"  # bad origin, missing organization id
    AUTHENTICATION = "authentication"  # no session, no active admin record
    AUTHORIZATION = "authorization"  # not MASTER, password rotation pending
    DOMAIN_STATE = "domain_state"  # organization missing/blocked/ownerless
    CONFIGURATION = "configuration"  # token could not be minted
    PERSISTENCE = "persistence"  # store unavailable


@dataclass(frozen=True)
class ImpersonationDenied:
    """
    Request refused. Presented as a redirect to ``redirect_path`` carrying
    ``message`` as ``?error=``.

    For sign-in redirects ``next_path`` is the page to return to afterwards.
    """

    kind: DenialKind
    message: str
    redirect_path: str
    next_path: Optional[str] = None

    @property
    def granted(self) -> bool:
        return False


@dataclass(frozen=True)
class ImpersonationGranted:
    """Token minted; ready for the handoff transport."""

    token: str
    action_url: str
    next_path: str
    organization_id: str
    target_user_id: str

    @property
    def granted(self) -> bool:
        return True

    def __repr__(self) -> str:
        return (
            f"ImpersonationGranted(token='***', action_url={self.action_url!r}, "
            f"organization_id={self.organization_id!r}, target_user_id={self.target_user_id!r})"
        )


Outcome = Union[ImpersonationGranted, ImpersonationDenied]
