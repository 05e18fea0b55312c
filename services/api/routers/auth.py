# services/api/routers/auth.py
from __future__ import annotations

import logging
from typing import Annotated, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from core.auth import (
    SESSION_STATE_KEY,
    SESSION_VERIFIER_KEY,
    build_oauth_flow,
    build_session_user,
    load_user,
    store_user,
    verify_google_id_token,
)
from main import get_settings  # DI helper
from settings import Settings

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)

AppSettings = Annotated[Settings, Depends(get_settings)]


def _error_redirect(error: str) -> RedirectResponse:
    return RedirectResponse(f"/auth/error?{urlencode({'error': error})}", status_code=302)


@router.get("/signin")
def signin(request: Request, settings: AppSettings):
    """Redirect to the Google consent screen."""
    flow = build_oauth_flow(settings)
    auth_url, state = flow.authorization_url(
        access_type="online",
        include_granted_scopes="true",
        prompt="select_account",
    )
    request.session[SESSION_STATE_KEY] = state
    if getattr(flow, "code_verifier", None):
        request.session[SESSION_VERIFIER_KEY] = flow.code_verifier
    return RedirectResponse(auth_url, status_code=302)


@router.get("/callback")
def callback(
    request: Request,
    settings: AppSettings,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
):
    """
    Google redirects here after consent. On success the SessionUser is
    stored in the session cookie and the browser goes to the dashboard.
    """
    expected_state = request.session.pop(SESSION_STATE_KEY, None)
    code_verifier = request.session.pop(SESSION_VERIFIER_KEY, None)

    if error or not code:
        logger.warning(f"OAuth callback without code: {error}")
        return _error_redirect(error or "OAuthCallback")
    if not expected_state or state != expected_state:
        logger.warning("OAuth callback with mismatched state")
        return _error_redirect("OAuthState")

    try:
        flow = build_oauth_flow(settings, state=state, code_verifier=code_verifier)
        flow.fetch_token(code=code)
        claims = verify_google_id_token(flow.credentials.id_token, settings.google_client_id)
    except Exception as e:
        logger.error(f"OAuth token exchange failed: {e}")
        return _error_redirect("OAuthCallback")

    user = build_session_user(claims, settings)
    if user is None:
        return _error_redirect("AccessDenied")

    store_user(request, user)
    logger.info(f"Signed in {user.email} as {user.role.value}")
    return RedirectResponse("/", status_code=302)


@router.get("/session")
def session(request: Request):
    user = load_user(request)
    return {"user": user.model_dump(mode="json") if user else None}


@router.post("/signout")
def signout(request: Request):
    request.session.clear()
    return {"success": True}
