import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse

from ..api.dependencies import get_google_client
from ..auth.google import GoogleOAuthClient, GoogleOAuthError
from ..auth.sessions import get_auth_service, get_current_user
from ..models.models import User
from ..schemas.schemas import (
    AuthResponse,
    EmailLoginRequest,
    MessageResponse,
    UserRead,
    UsernameLoginRequest,
)
from ..services.auth import AuthService, InvalidCredentialsError

logger = logging.getLogger(__name__)

router = APIRouter()

OAUTH_STATE_KEY = "oauth_state"
LOGIN_PAGE = "/login"
DASHBOARD_PAGE = "/dashboard"


def _start_session(request: Request, auth: AuthService, user: User) -> AuthResponse:
    auth.login(request.session, user)
    return AuthResponse(user=UserRead.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    payload: EmailLoginRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    try:
        user = auth.verify_email_password(payload.email, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return _start_session(request, auth, user)


@router.post("/login/username", response_model=AuthResponse)
def login_with_username(
    payload: UsernameLoginRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    try:
        user = auth.verify_username_password(payload.username, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return _start_session(request, auth, user)


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, auth: AuthService = Depends(get_auth_service)) -> MessageResponse:
    auth.logout(request.session)
    return MessageResponse(message="Logged out successfully")


@router.get("/current-user", response_model=AuthResponse)
def current_user(user: User = Depends(get_current_user)) -> AuthResponse:
    return AuthResponse(user=UserRead.model_validate(user))


@router.get("/google")
def google_login(
    request: Request,
    google: GoogleOAuthClient = Depends(get_google_client),
) -> RedirectResponse:
    if not google.is_configured:
        raise HTTPException(status_code=503, detail="Google sign-in is not configured")
    state = google.new_state()
    request.session[OAUTH_STATE_KEY] = state
    return RedirectResponse(google.authorization_url(state), status_code=307)


@router.get("/google/callback")
def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    google: GoogleOAuthClient = Depends(get_google_client),
    auth: AuthService = Depends(get_auth_service),
) -> RedirectResponse:
    if not google.is_configured:
        raise HTTPException(status_code=503, detail="Google sign-in is not configured")

    expected_state = request.session.pop(OAUTH_STATE_KEY, None)
    if error or not code or not state or state != expected_state:
        logger.info("Google sign-in rejected (error=%s, state match=%s).", error, state == expected_state)
        return RedirectResponse(LOGIN_PAGE, status_code=303)

    try:
        profile = google.profile_from_code(code)
    except GoogleOAuthError:
        logger.exception("Google sign-in failed while talking to Google.")
        return RedirectResponse(LOGIN_PAGE, status_code=303)

    user = auth.verify_or_create_from_oauth_profile(profile)
    if user is None:
        return RedirectResponse(LOGIN_PAGE, status_code=303)

    auth.login(request.session, user)
    return RedirectResponse(DASHBOARD_PAGE, status_code=303)
