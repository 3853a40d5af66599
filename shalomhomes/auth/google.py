from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from ..config import Settings
from ..services.auth import OAuthProfile

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_SCOPES = "openid email profile"


class GoogleOAuthError(RuntimeError):
    pass


class GoogleOAuthClient:
    """Authorization-code flow against Google's OAuth 2.0 endpoints."""

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        callback_url: Optional[str],
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self._timeout = httpx.Timeout(15.0)
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> "GoogleOAuthClient":
        return cls(
            settings.google_client_id,
            settings.google_client_secret,
            settings.google_callback_url,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.callback_url)

    @staticmethod
    def new_state() -> str:
        return secrets.token_urlsafe(24)

    def _http_client(self) -> httpx.Client:
        if not self.is_configured:
            raise GoogleOAuthError("Google sign-in is not configured.")
        return httpx.Client(timeout=self._timeout, transport=self._transport)

    def authorization_url(self, state: str) -> str:
        if not self.is_configured:
            raise GoogleOAuthError("Google sign-in is not configured.")
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "response_type": "code",
            "scope": GOOGLE_SCOPES,
            "state": state,
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        with self._http_client() as client:
            try:
                response = client.request(method, url, **kwargs)
            except httpx.HTTPError as exc:
                raise GoogleOAuthError(f"Google request failed: {exc}") from exc
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Google OAuth error (%s %s): %s", method, url, exc.response.text)
            raise GoogleOAuthError(f"Google responded with {exc.response.status_code}") from exc
        try:
            return response.json()
        except ValueError:
            raise GoogleOAuthError("Unexpected response from Google (non-JSON).")

    def exchange_code(self, code: str) -> str:
        data = self._request(
            "POST",
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.callback_url,
                "grant_type": "authorization_code",
            },
            headers={"Accept": "application/json"},
        )
        access_token = data.get("access_token")
        if not access_token:
            raise GoogleOAuthError("Google did not return an access token.")
        return access_token

    def fetch_profile(self, access_token: str) -> OAuthProfile:
        data = self._request(
            "GET",
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        subject = data.get("sub")
        if not subject:
            raise GoogleOAuthError("Google profile is missing the account id.")
        email = data.get("email") if data.get("email_verified", True) else None
        return OAuthProfile(provider_id=str(subject), email=email, display_name=data.get("name"))

    def profile_from_code(self, code: str) -> OAuthProfile:
        return self.fetch_profile(self.exchange_code(code))
