"""
Impersonation issuer.

Decides whether the caller may open a session in the tenant application as
an organization's owner, and mints the token when it may. Checks run in a
fixed order and the first failure wins:

    1. Origin header, when present, matches this app
    2. organizationId was submitted
    3. Caller has a live session
    4. Caller has an ACTIVE platform-admin record
    5. Caller is not pending a mandatory password change
    6. Caller is MASTER
    7. Organization exists
    8. Organization is not BLOCKED
    9. Organization has a resolvable owner

Nothing here raises for an expected failure; see ``outcomes``.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import ImpersonationSettings
from ..errors import ConfigurationError, StoreError, TokenValidationError
from ..security.validators import is_allowed_origin
from ..store import SEVERITY_INFO, PlatformStore
from .outcomes import DenialKind, ImpersonationDenied, ImpersonationGranted, Outcome
from .transport import DEFAULT_STARTER_NEXT, starter_action_url

log = logging.getLogger(__name__)

SIGN_IN_PATH = "/sign-in"
CHANGE_PASSWORD_PATH = "/change-password"

AUDIT_SOURCE = "admin"
AUDIT_ACTION = "starter.impersonation.requested"

MSG_INVALID_ORIGIN = "Invalid origin for starting cross-app authentication."
MSG_MISSING_ORGANIZATION = "Organization not provided."
MSG_NOT_PLATFORM_ADMIN = "User lacks platform administrator permission."
MSG_ADMIN_DISABLED = "Administrator is disabled."
MSG_PASSWORD_ROTATION = "Change your password before accessing tenants in Starter."
MSG_MASTER_REQUIRED = "Only MASTER can open a cross-app session in tenants."
MSG_ORGANIZATION_NOT_FOUND = "Organization not found."
MSG_ORGANIZATION_BLOCKED = (
    "Tenant is blocked on the platform. Unblock it before authenticating in Starter."
)
MSG_NO_OWNER = "Organization has no owner to authenticate as."
MSG_TOKEN_FAILED = "Failed to create authentication token for the tenant application."
MSG_STORE_UNAVAILABLE = "Platform data is temporarily unavailable. Try again."


@dataclass(frozen=True)
class ImpersonationRequest:
    """Everything the issuer needs from the inbound HTTP request.

    ``return_to`` must already be a safe local path.
    """

    organization_id: str
    return_to: str
    expected_origin: str
    origin: Optional[str] = None
    session_token_hash: Optional[str] = None


def _short(value: str) -> str:
    return f"{value[:8]}..."


class ImpersonationIssuer:
    """
    Args:
        store_provider: Returns the platform store (sessions, admins,
            organizations, audit). Called only once the request has passed
            the origin and form checks; may raise StoreError
        settings_provider: Returns validated settings; may raise ConfigurationError
        token_factory: Token codec, ``create_token`` in production
    """

    def __init__(
        self,
        store_provider: Callable[[], PlatformStore],
        settings_provider: Callable[[], ImpersonationSettings],
        token_factory: Callable[..., str],
    ):
        self.store_provider = store_provider
        self.settings_provider = settings_provider
        self.token_factory = token_factory

    def issue(self, request: ImpersonationRequest) -> Outcome:
        try:
            return self._issue(request)
        except StoreError as e:
            log.error(f"Impersonation aborted, store failure (sqlstate={e.sqlstate})")
            return ImpersonationDenied(
                DenialKind.PERSISTENCE, MSG_STORE_UNAVAILABLE, request.return_to
            )

    def _deny(self, kind: DenialKind, message: str, path: str) -> ImpersonationDenied:
        log.info(f"Impersonation denied ({kind.value}): {message}")
        return ImpersonationDenied(kind, message, path)

    def _issue(self, request: ImpersonationRequest) -> Outcome:
        return_to = request.return_to

        if not is_allowed_origin(request.origin, request.expected_origin):
            log.warning(f"Cross-origin impersonation attempt from {request.origin!r}")
            return ImpersonationDenied(DenialKind.VALIDATION, MSG_INVALID_ORIGIN, return_to)

        organization_id = (request.organization_id or "").strip()
        if not organization_id:
            return self._deny(DenialKind.VALIDATION, MSG_MISSING_ORGANIZATION, return_to)

        store = self.store_provider()
        session_user = (
            store.validate_session(request.session_token_hash)
            if request.session_token_hash
            else None
        )
        if session_user is None:
            return ImpersonationDenied(
                DenialKind.AUTHENTICATION,
                "",
                SIGN_IN_PATH,
                next_path=return_to,
            )

        admin = store.get_platform_admin(session_user.user_id)
        if admin is None or not admin.is_active:
            message = MSG_NOT_PLATFORM_ADMIN if admin is None else MSG_ADMIN_DISABLED
            log.info(f"Impersonation denied for user {_short(session_user.user_id)}: {message}")
            return ImpersonationDenied(
                DenialKind.AUTHENTICATION, message, SIGN_IN_PATH, next_path=return_to
            )

        if admin.must_change_password:
            return self._deny(
                DenialKind.AUTHORIZATION, MSG_PASSWORD_ROTATION, CHANGE_PASSWORD_PATH
            )

        if not admin.is_master:
            return self._deny(DenialKind.AUTHORIZATION, MSG_MASTER_REQUIRED, return_to)

        organization = store.get_organization(organization_id)
        if organization is None:
            return self._deny(DenialKind.DOMAIN_STATE, MSG_ORGANIZATION_NOT_FOUND, return_to)

        if organization.is_blocked:
            return self._deny(DenialKind.DOMAIN_STATE, MSG_ORGANIZATION_BLOCKED, return_to)

        owner_user_id = organization.owner_user_id
        if not owner_user_id:
            return self._deny(DenialKind.DOMAIN_STATE, MSG_NO_OWNER, return_to)

        try:
            settings = self.settings_provider()
            token = self.token_factory(
                session_user.user_id,
                admin.id,
                owner_user_id,
                organization.id,
                settings=settings,
            )
        except (ConfigurationError, TokenValidationError) as e:
            # Class name only; the message may describe the secret
            log.error(f"Impersonation token minting failed: {type(e).__name__}")
            return ImpersonationDenied(DenialKind.CONFIGURATION, MSG_TOKEN_FAILED, return_to)

        store.log_platform_event(
            source=AUDIT_SOURCE,
            action=AUDIT_ACTION,
            severity=SEVERITY_INFO,
            actor_user_id=session_user.user_id,
            actor_admin_id=admin.id,
            organization_id=organization.id,
            target_type="organization",
            target_id=organization.id,
            metadata={
                "organizationSlug": organization.slug,
                "targetUserId": owner_user_id,
            },
        )

        log.info(
            f"Impersonation granted: admin={_short(admin.id)} "
            f"org={_short(organization.id)} target={_short(owner_user_id)}"
        )
        return ImpersonationGranted(
            token=token,
            action_url=starter_action_url(settings.starter_app_base_url),
            next_path=DEFAULT_STARTER_NEXT,
            organization_id=organization.id,
            target_user_id=owner_user_id,
        )
