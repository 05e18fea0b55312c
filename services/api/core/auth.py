# services/api/core/auth.py
"""
Google sign-in and session identity.

The OAuth web flow runs once at sign-in; the resulting SessionUser (email,
name, picture, role) is stored in the signed session cookie and read back
by `get_current_user` on every request. Role is resolved at sign-in only.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends, Request
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from google_auth_oauthlib.flow import Flow

from core.access_policy import Operation, require, resolve_role
from core.errors import AuthenticationRequired
from models import SessionUser
from settings import Settings

logger = logging.getLogger(__name__)

# Full URLs: Google echoes these back and oauthlib rejects a changed scope set
OAUTH_SCOPES = [
    "openid",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
]

SESSION_USER_KEY = "user"
SESSION_STATE_KEY = "oauth_state"
SESSION_VERIFIER_KEY = "oauth_code_verifier"


def build_oauth_flow(
    settings: Settings,
    state: Optional[str] = None,
    code_verifier: Optional[str] = None,
) -> Flow:
    if not (settings.google_client_id and settings.google_client_secret):
        raise RuntimeError("Missing OAuth settings: GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET")

    client_config = {
        "web": {
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": [settings.oauth_redirect_uri],
        }
    }
    kwargs: Dict[str, Any] = {"state": state, "redirect_uri": settings.oauth_redirect_uri}
    if code_verifier:
        kwargs["code_verifier"] = code_verifier
    return Flow.from_client_config(client_config, scopes=OAUTH_SCOPES, **kwargs)


def is_allowed_domain(email: str, domains: List[str]) -> bool:
    """True if the address ends with one of the configured suffixes (e.g. '@hines.com')."""
    email = (email or "").strip().lower()
    return bool(email) and any(email.endswith(d.lower()) for d in domains)


def verify_google_id_token(token: str, client_id: str) -> Dict[str, Any]:
    """Verify signature/audience/expiry and return the claims. Raises ValueError."""
    return id_token.verify_oauth2_token(token, google_requests.Request(), audience=client_id)


def build_session_user(claims: Dict[str, Any], settings: Settings) -> Optional[SessionUser]:
    """
    Turn verified ID-token claims into a SessionUser, or None when the
    account is outside the company domains or its email is unverified.
    """
    email = (claims.get("email") or "").strip()
    if not claims.get("email_verified", False):
        logger.warning(f"Sign-in rejected, unverified email: {email}")
        return None
    if not is_allowed_domain(email, settings.get_company_domains_list()):
        logger.warning(f"Sign-in rejected, domain not allowed: {email}")
        return None

    return SessionUser(
        email=email,
        name=claims.get("name") or "",
        picture=claims.get("picture"),
        role=resolve_role(email, settings.get_hr_emails_list()),
    )


def store_user(request: Request, user: SessionUser) -> None:
    request.session[SESSION_USER_KEY] = user.model_dump(mode="json")


def load_user(request: Request) -> Optional[SessionUser]:
    raw = request.session.get(SESSION_USER_KEY)
    if not raw:
        return None
    try:
        return SessionUser.model_validate(raw)
    except ValueError:
        logger.warning("Discarding malformed session user")
        request.session.pop(SESSION_USER_KEY, None)
        return None


def get_current_user(request: Request) -> SessionUser:
    """FastAPI dependency: the signed-in user or 401."""
    user = load_user(request)
    if user is None:
        raise AuthenticationRequired()
    return user


def require_operation(operation: Operation):
    """
    Dependency factory for routes with no target record (export, stats,
    email, diagnostics, delete): the signed-in user must be allowed to
    perform `operation`, otherwise 403.
    """

    def _dependency(user: SessionUser = Depends(get_current_user)) -> SessionUser:
        require(user, operation)
        return user

    return _dependency
