import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import DEFAULT_SESSION_SECRET, Settings

logger = logging.getLogger(__name__)

# Responses under these prefixes carry or change session state.
NO_STORE_PREFIXES = ("/api/auth", "/api/users")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach security headers derived from ``Settings`` to every response.

    HSTS goes out only over HTTPS and only when session cookies are
    HTTPS-only. Auth and account responses are marked ``no-store``.
    """

    def __init__(self, app, *, settings: Settings) -> None:
        super().__init__(app)
        self.csp = settings.content_security_policy
        self.hsts = (
            f"max-age={settings.hsts_max_age_seconds}; includeSubDomains"
            if settings.session_https_only
            else None
        )

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        response = await call_next(request)
        headers = response.headers

        headers.setdefault("X-Content-Type-Options", "nosniff")
        headers.setdefault("X-Frame-Options", "DENY")
        headers.setdefault("Referrer-Policy", "same-origin")
        if self.csp:
            headers.setdefault("Content-Security-Policy", self.csp)
        if self.hsts and request.url.scheme == "https":
            headers.setdefault("Strict-Transport-Security", self.hsts)
        if request.url.path.startswith(NO_STORE_PREFIXES):
            headers["Cache-Control"] = "no-store"

        return response


def log_security_warnings(settings: Settings) -> None:
    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("Session secret is using the insecure default; set SESSION_SECRET in the environment.")
    if not settings.google_oauth_configured:
        logger.warning(
            "Google sign-in is disabled; set GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and GOOGLE_CALLBACK_URL to enable it."
        )
    if not settings.session_https_only:
        logger.warning("Session cookies are not restricted to HTTPS; set SESSION_HTTPS_ONLY=true in production.")
