"""Platform store - the persistence collaborator behind the console.

Sessions, platform admins and organizations are owned by other parts of the
platform; this module only reads them and appends audit events.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from .errors import StoreError
from .models import Organization, PlatformAdmin, SessionUser

log = logging.getLogger(__name__)

# platform_events.severity
SEVERITY_INFO = "INFO"


class PlatformStore:
    """Point reads and the audit append, over a single psycopg connection.

    Every psycopg failure is re-raised as StoreError with its SQLSTATE.
    """

    def __init__(self, conn: psycopg.Connection) -> None:
        self.conn = conn

    def _handle_error(self, e: psycopg.Error) -> None:
        raise StoreError(str(e), getattr(e, "sqlstate", None)) from e

    def _fetchone(self, sql: str, params: tuple[Any, ...]) -> Optional[dict]:
        try:
            with self.conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                return cur.fetchone()
        except psycopg.Error as e:
            self._handle_error(e)

    def validate_session(self, token_hash: str) -> Optional[SessionUser]:
        """Resolve a session token hash to its user, if unexpired and unrevoked."""
        row = self._fetchone(
            """
            SELECT id AS session_id, user_id
            FROM sessions
            WHERE token_hash = %s
            AND revoked_at IS NULL
            AND expires_at > now()
            """,
            (token_hash,),
        )
        if row is None:
            return None
        return SessionUser(user_id=str(row["user_id"]), session_id=str(row["session_id"]))

    def get_platform_admin(self, user_id: str) -> Optional[PlatformAdmin]:
        row = self._fetchone(
            """
            SELECT id, user_id, role, status, must_change_password
            FROM platform_admins
            WHERE user_id = %s
            """,
            (user_id,),
        )
        if row is None:
            return None
        return PlatformAdmin(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            role=row["role"],
            status=row["status"],
            must_change_password=bool(row["must_change_password"]),
        )

    def get_organization(self, organization_id: str) -> Optional[Organization]:
        """Get an organization with its subscription owner and first owner member."""
        row = self._fetchone(
            """
            SELECT o.id, o.slug, o.platform_status,
                   s.owner_user_id AS subscription_owner_user_id,
                   (
                       SELECT m.user_id FROM members m
                       WHERE m.organization_id = o.id
                       AND lower(m.role) = 'owner'
                       ORDER BY m.created_at
                       LIMIT 1
                   ) AS owner_member_user_id
            FROM organizations o
            LEFT JOIN owner_subscriptions s ON s.organization_id = o.id
            WHERE o.id = %s
            """,
            (organization_id,),
        )
        if row is None:
            return None
        return Organization(
            id=str(row["id"]),
            slug=row["slug"] or "",
            platform_status=row["platform_status"],
            subscription_owner_user_id=row["subscription_owner_user_id"],
            owner_member_user_id=row["owner_member_user_id"],
        )

    def log_platform_event(
        self,
        *,
        source: str,
        action: str,
        severity: str = SEVERITY_INFO,
        actor_user_id: Optional[str] = None,
        actor_admin_id: Optional[str] = None,
        organization_id: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        """Append an audit event."""
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO platform_events (
                        source, action, severity, actor_user_id, actor_admin_id,
                        organization_id, target_type, target_id, metadata
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        source,
                        action,
                        severity,
                        actor_user_id,
                        actor_admin_id,
                        organization_id,
                        target_type,
                        target_id,
                        Jsonb(metadata or {}),
                    ),
                )
        except psycopg.Error as e:
            self._handle_error(e)
        log.info(f"Platform event recorded: {source}/{action}")
