"""
Security module - token signing and request validation.

Usage:
    from admin_console.security import create_token, resolve_safe_path

    token = create_token(actor_user_id, actor_admin_id, owner_id, org_id, settings=settings)
"""

# Crypto utilities
from .crypto import b64url_encode, hmac_sha256

# Impersonation tokens
from .tokens import (
    TOKEN_VERSION,
    ImpersonationPayload,
    create_token,
    encode_payload,
    sign_payload,
)

# Validators
from .validators import is_allowed_origin, resolve_safe_path

__all__ = [
    # Crypto
    "hmac_sha256",
    "b64url_encode",
    # Tokens
    "TOKEN_VERSION",
    "ImpersonationPayload",
    "create_token",
    "encode_payload",
    "sign_payload",
    # Validators
    "resolve_safe_path",
    "is_allowed_origin",
]
