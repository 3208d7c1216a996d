"""Test helpers - an in-memory stand-in for the PostgreSQL platform store."""

import base64
import hashlib
import json
from urllib.parse import parse_qs, urlsplit

from admin_console.errors import StoreError
from admin_console.models import (
    ADMIN_ACTIVE,
    ORG_ACTIVE,
    ROLE_MASTER,
    Organization,
    PlatformAdmin,
    SessionUser,
)


def hash_token(token: str) -> str:
    """SHA-256 hex digest, the form in which sessions store their token."""
    return hashlib.sha256(token.encode()).hexdigest()


def b64url_decode(value: str) -> bytes:
    """Decode unpadded base64url."""
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


class FakePlatformStore:
    """
    Same interface as PlatformStore, backed by dicts.

    ``calls`` records every method invoked, in order, so tests can assert
    that a check short-circuited before touching the store. ``fail_on``
    names methods that raise StoreError.
    """

    def __init__(self):
        self.sessions: dict[str, SessionUser] = {}
        self.admins: dict[str, PlatformAdmin] = {}
        self.organizations: dict[str, Organization] = {}
        self.events: list[dict] = []
        self.calls: list[str] = []
        self.fail_on: set[str] = set()

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise StoreError(f"{name} unavailable", sqlstate="08006")

    # --- setup ---

    def add_session(self, user_id: str, raw_token: str = "session-token") -> str:
        """Register a session and return the token hash stored in the cookie."""
        token_hash = hash_token(raw_token)
        self.sessions[token_hash] = SessionUser(user_id=user_id, session_id=f"sess-{user_id}")
        return token_hash

    def add_admin(
        self,
        user_id: str,
        admin_id: str,
        role: str = ROLE_MASTER,
        status: str = ADMIN_ACTIVE,
        must_change_password: bool = False,
    ) -> PlatformAdmin:
        admin = PlatformAdmin(
            id=admin_id,
            user_id=user_id,
            role=role,
            status=status,
            must_change_password=must_change_password,
        )
        self.admins[user_id] = admin
        return admin

    def add_organization(
        self,
        organization_id: str,
        slug: str = "acme",
        platform_status: str = ORG_ACTIVE,
        subscription_owner_user_id: str | None = "owner-user-1",
        owner_member_user_id: str | None = None,
    ) -> Organization:
        org = Organization(
            id=organization_id,
            slug=slug,
            platform_status=platform_status,
            subscription_owner_user_id=subscription_owner_user_id,
            owner_member_user_id=owner_member_user_id,
        )
        self.organizations[organization_id] = org
        return org

    # --- PlatformStore interface ---

    def validate_session(self, token_hash):
        self._record("validate_session")
        return self.sessions.get(token_hash)

    def get_platform_admin(self, user_id):
        self._record("get_platform_admin")
        return self.admins.get(user_id)

    def get_organization(self, organization_id):
        self._record("get_organization")
        return self.organizations.get(organization_id)

    def log_platform_event(self, **event):
        self._record("log_platform_event")
        self.events.append(event)


def decode_claims(token: str) -> dict:
    """Decode the payload segment of an impersonation token."""
    return json.loads(b64url_decode(token.split(".", 1)[0]))


def redirect_target(response) -> tuple[str, dict]:
    """(path, single-valued query params) of a redirect response."""
    parts = urlsplit(response.headers["Location"])
    return parts.path, {k: v[0] for k, v in parse_qs(parts.query).items()}
