"""
Signed impersonation tokens.

Wire format::

    base64url(JSON(payload)) + "." + base64url(HMAC-SHA256(secret, base64url(JSON(payload))))

The tenant application verifies tokens with the same secret and the same
construction, so the claim names, their order and the compact JSON encoding
are part of the contract. Tokens are never stored here.
"""

import json
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from ..config import TOKEN_TTL_SECONDS, ImpersonationSettings
from ..errors import TokenValidationError
from .crypto import b64url_encode, hmac_sha256

TOKEN_VERSION = 1
NONCE_BYTES = 16  # 128 bits


@dataclass(frozen=True)
class ImpersonationPayload:
    """Signed content of an impersonation token."""

    version: int
    issued_at: int
    expires_at: int
    nonce: str
    actor_user_id: str
    actor_admin_id: str
    target_user_id: str
    organization_id: str

    def __post_init__(self) -> None:
        for name in ("actor_user_id", "actor_admin_id", "target_user_id", "organization_id"):
            value = (getattr(self, name) or "").strip()
            if not value:
                raise TokenValidationError(
                    f"Invalid impersonation token: missing identifier ({name})."
                )
            object.__setattr__(self, name, value)
        if self.expires_at <= self.issued_at:
            raise TokenValidationError("Token expiry must be after its issue time.")

    def to_claims(self) -> dict:
        """Claims in wire order."""
        return {
            "v": self.version,
            "iat": self.issued_at,
            "exp": self.expires_at,
            "jti": self.nonce,
            "actorUserId": self.actor_user_id,
            "actorAdminId": self.actor_admin_id,
            "targetUserId": self.target_user_id,
            "organizationId": self.organization_id,
        }


def encode_payload(payload: ImpersonationPayload) -> str:
    data = json.dumps(payload.to_claims(), separators=(",", ":"), ensure_ascii=False)
    return b64url_encode(data.encode("utf-8"))


def sign_payload(encoded_payload: str, secret: str) -> str:
    """Signature segment for an already-encoded payload."""
    return b64url_encode(hmac_sha256(secret, encoded_payload))


def create_token(
    actor_user_id: str,
    actor_admin_id: str,
    target_user_id: str,
    organization_id: str,
    *,
    settings: Optional[ImpersonationSettings] = None,
    now: Optional[int] = None,
) -> str:
    """
    Mint a short-lived impersonation token.

    Args:
        actor_user_id: Account id of the platform admin
        actor_admin_id: Platform-admin record id
        target_user_id: Tenant owner being impersonated
        organization_id: Tenant being accessed
        settings: Signing settings; read from the environment when omitted
        now: Issue time in Unix seconds (defaults to the wall clock)

    Returns:
        "<payload>.<signature>", both segments unpadded base64url

    Raises:
        TokenValidationError: If any identifier is empty after trimming
        ConfigurationError: If the secret is missing or shorter than 32 chars
    """
    issued_at = int(time.time()) if now is None else int(now)
    ttl = settings.ttl_seconds if settings is not None else TOKEN_TTL_SECONDS

    # Identifiers are checked before the secret is resolved
    payload = ImpersonationPayload(
        version=TOKEN_VERSION,
        issued_at=issued_at,
        expires_at=issued_at + ttl,
        nonce=secrets.token_hex(NONCE_BYTES),
        actor_user_id=actor_user_id,
        actor_admin_id=actor_admin_id,
        target_user_id=target_user_id,
        organization_id=organization_id,
    )

    if settings is None:
        settings = ImpersonationSettings.from_env()

    encoded = encode_payload(payload)
    return f"{encoded}.{sign_payload(encoded, settings.secret)}"
