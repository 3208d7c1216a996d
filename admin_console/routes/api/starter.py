"""Starter (tenant app) handoff endpoint.

POST-only in effect: a GET always bounces back with an error so the token
issuing action cannot be triggered by a link or a prefetch.
"""

import logging
from urllib.parse import urlencode

from flask import Blueprint, current_app, redirect, request, session

from ...config import ImpersonationSettings
from ...db import get_store
from ...impersonation import (
    ImpersonationDenied,
    ImpersonationIssuer,
    ImpersonationRequest,
    handoff_response,
    render_handoff_document,
)
from ...schemas import ImpersonateForm
from ...security import create_token, resolve_safe_path

bp = Blueprint("starter", __name__, url_prefix="/starter")
log = logging.getLogger(__name__)

DEFAULT_RETURN_TO = "/admin/empresas"
MSG_INVALID_FLOW = "Invalid flow. Use the secure access button in the console."


def _redirect_with_params(path: str, params: dict):
    url = request.host_url.rstrip("/") + path
    query = urlencode({k: v for k, v in params.items() if v})
    return redirect(f"{url}?{query}" if query else url)


def redirect_with_error(path: str, message: str):
    """302 to a local path with ``?error=``."""
    return _redirect_with_params(resolve_safe_path(path, DEFAULT_RETURN_TO), {"error": message})


def _expected_origin() -> str:
    configured = current_app.config.get("ADMIN_APP_URL")
    if configured:
        return configured
    return f"{request.scheme}://{request.host}"


def _impersonation_settings() -> ImpersonationSettings:
    settings = current_app.config.get("IMPERSONATION_SETTINGS")
    if settings is None:
        # Not configured at startup; retried per request so a fixed
        # environment takes effect without a restart
        settings = ImpersonationSettings.from_env()
    return settings


def _denial_response(denial: ImpersonationDenied):
    if denial.next_path is not None:
        return _redirect_with_params(
            denial.redirect_path,
            {"next": denial.next_path, "error": denial.message},
        )
    return redirect_with_error(denial.redirect_path, denial.message)


@bp.get("/impersonate")
def impersonate_get():
    return_to = resolve_safe_path(request.args.get("returnTo", ""), DEFAULT_RETURN_TO)
    return redirect_with_error(return_to, MSG_INVALID_FLOW)


@bp.post("/impersonate")
def impersonate():
    form = ImpersonateForm.model_validate(request.form.to_dict())
    return_to = resolve_safe_path(form.return_to, DEFAULT_RETURN_TO)

    issuer = ImpersonationIssuer(
        store_provider=get_store,
        settings_provider=_impersonation_settings,
        token_factory=create_token,
    )
    outcome = issuer.issue(
        ImpersonationRequest(
            organization_id=form.organization_id,
            return_to=return_to,
            expected_origin=_expected_origin(),
            origin=request.headers.get("Origin"),
            session_token_hash=session.get("token_hash"),
        )
    )

    if isinstance(outcome, ImpersonationDenied):
        return _denial_response(outcome)

    document = render_handoff_document(outcome.action_url, outcome.token, outcome.next_path)
    return handoff_response(document)
