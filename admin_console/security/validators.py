"""
Request input validators.

Usage:
    from admin_console.security import resolve_safe_path, is_allowed_origin

    return_to = resolve_safe_path(request.form.get("returnTo", ""), "/admin")
    if not is_allowed_origin(request.headers.get("Origin"), expected_origin):
        ...
"""

from typing import Optional

from ..config import url_origin


def resolve_safe_path(path: Optional[str], fallback_path: str) -> str:
    """
    Return ``path`` if it is an absolute local path, else ``fallback_path``.

    Rejects empty values, relative paths, absolute URLs and
    protocol-relative ``//host`` paths so redirects never leave this origin.
    """
    trimmed = (path or "").strip()
    if not trimmed or not trimmed.startswith("/") or trimmed.startswith("//"):
        return fallback_path
    if "\\" in trimmed:
        return fallback_path
    return trimmed


def is_allowed_origin(origin: Optional[str], expected_origin: str) -> bool:
    """
    Same-origin check for form posts.

    A missing ``Origin`` header is tolerated (non-browser client, or a
    browser that omits it on same-origin requests). A present header must
    match ``expected_origin`` exactly after normalization.
    """
    declared = (origin or "").strip()
    if not declared:
        return True
    normalized = url_origin(declared)
    return normalized is not None and normalized == url_origin(expected_origin)
