"""Cross-app impersonation: issuer, outcomes and handoff transport."""

from .issuer import ImpersonationIssuer, ImpersonationRequest
from .outcomes import DenialKind, ImpersonationDenied, ImpersonationGranted, Outcome
from .transport import (
    DEFAULT_STARTER_NEXT,
    STARTER_IMPERSONATION_PATH,
    handoff_response,
    render_handoff_document,
    starter_action_url,
)

__all__ = [
    "ImpersonationIssuer",
    "ImpersonationRequest",
    "DenialKind",
    "ImpersonationDenied",
    "ImpersonationGranted",
    "Outcome",
    "DEFAULT_STARTER_NEXT",
    "STARTER_IMPERSONATION_PATH",
    "handoff_response",
    "render_handoff_document",
    "starter_action_url",
]
