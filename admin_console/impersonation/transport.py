"""
Cross-app handoff transport.

The token reaches the tenant application as a POST body submitted by the
browser from a self-posting document, so it never appears in a URL, in
history, or in a Referer header.
"""

from flask import Response, render_template

STARTER_IMPERSONATION_PATH = "/api/platform-admin/impersonation"
DEFAULT_STARTER_NEXT = "/dashboard"

HANDOFF_HEADERS = {
    "Cache-Control": "no-store",
    "Referrer-Policy": "no-referrer",
    "X-Frame-Options": "DENY",
}


def starter_action_url(base_url: str) -> str:
    """Verification endpoint of the tenant app. ``base_url`` is an origin."""
    return base_url.rstrip("/") + STARTER_IMPERSONATION_PATH


def render_handoff_document(
    action_url: str, token: str, next_path: str = DEFAULT_STARTER_NEXT
) -> str:
    """Render the auto-submitting form. Values are HTML-escaped by the template."""
    return render_template(
        "starter/handoff.html",
        action_url=action_url,
        token=token,
        next_path=next_path,
    )


def handoff_response(document: str) -> Response:
    response = Response(document, status=200, content_type="text/html; charset=utf-8")
    for name, value in HANDOFF_HEADERS.items():
        response.headers[name] = value
    return response
