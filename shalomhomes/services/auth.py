from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, MutableMapping, Optional

from ..auth.passwords import dummy_verify, verify_password
from ..constants import DEFAULT_USER_ROLE
from ..models.models import User
from ..storage import DuplicateUserError, Storage

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"
SESSION_ISSUED_AT_KEY = "issued_at"
DEFAULT_SESSION_MAX_AGE = 24 * 60 * 60
MAX_USERNAME_ATTEMPTS = 1000


class InvalidCredentialsError(Exception):
    """Login failed. The message never names the field that was wrong."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


@dataclass(frozen=True)
class OAuthProfile:
    provider_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


def base_username(profile: OAuthProfile) -> str:
    source = profile.display_name or (profile.email or "").split("@", 1)[0]
    return re.sub(r"\s+", "", source.lower()) or "user"


class AuthService:
    """Credential checks and session bookkeeping over an injected storage.

    Sessions are plain mappings (Starlette's ``request.session``) holding only
    the user id and the time the session was issued.
    """

    def __init__(
        self,
        storage: Storage,
        session_max_age_seconds: int = DEFAULT_SESSION_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage = storage
        self.session_max_age_seconds = session_max_age_seconds
        self._clock = clock

    # --- Credential verification ---
    def verify_email_password(self, email: str, password: str) -> User:
        return self._check_password(self.storage.get_user_by_email(email), password, email)

    def verify_username_password(self, username: str, password: str) -> User:
        return self._check_password(self.storage.get_user_by_username(username), password, username)

    def _check_password(self, user: Optional[User], password: str, identifier: str) -> User:
        if user is None:
            dummy_verify()
            logger.info("Login failed for %s: no such account.", identifier)
            raise InvalidCredentialsError()
        if not verify_password(password, user.hashed_password):
            logger.info("Login failed for %s: password mismatch.", identifier)
            raise InvalidCredentialsError()
        logger.info("User %s authenticated.", user.id)
        return user

    def verify_or_create_from_oauth_profile(self, profile: OAuthProfile) -> Optional[User]:
        """Resolve a Google identity to a local account.

        Known Google id wins; otherwise an account with the same email is
        linked by returning it; otherwise a password-less ``client`` account is
        created. Profiles without an email cannot be matched and yield None.
        """
        user = self.storage.get_user_by_google_id(profile.provider_id)
        if user:
            return user

        if not profile.email:
            logger.warning("Google profile %s has no email; cannot sign in.", profile.provider_id)
            return None

        existing = self.storage.get_user_by_email(profile.email)
        if existing:
            logger.info("Linking Google account %s to existing user %s.", profile.provider_id, existing.id)
            return existing

        user = self.storage.create_user(
            {
                "username": self._unique_username(base_username(profile)),
                "email": profile.email,
                "name": profile.display_name or profile.email,
                "password": None,
                "role": DEFAULT_USER_ROLE,
                "google_id": profile.provider_id,
            }
        )
        logger.info("Created user %s from Google sign-in.", user.id)
        return user

    def _unique_username(self, base: str) -> str:
        username = base
        for counter in range(1, MAX_USERNAME_ATTEMPTS + 1):
            if self.storage.get_user_by_username(username) is None:
                return username
            username = f"{base}{counter}"
        raise DuplicateUserError("username", base)

    # --- Sessions ---
    def login(self, session: MutableMapping, user: User) -> None:
        session.clear()
        session[SESSION_USER_KEY] = user.id
        session[SESSION_ISSUED_AT_KEY] = int(self._clock())

    def logout(self, session: MutableMapping) -> None:
        session.clear()

    def resolve_principal(self, session: MutableMapping) -> Optional[User]:
        """Return the signed-in user, or None once the session is missing or stale."""
        user_id = session.get(SESSION_USER_KEY)
        if user_id is None:
            return None

        issued_at = session.get(SESSION_ISSUED_AT_KEY)
        if issued_at is None or self._clock() - issued_at > self.session_max_age_seconds:
            session.clear()
            return None

        user = self.storage.get_user(int(user_id))
        if user is None:
            session.clear()
        return user
