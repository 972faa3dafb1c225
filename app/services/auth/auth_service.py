"""
Auth Service

Thin wrapper around Supabase Auth (the identity provider):
- Sign up / sign in / sign out / password reset
- Resolving the principal behind an access token
- Change notifications for whoever holds session state

Known provider error codes are translated to user-facing messages;
anything else keeps the provider's raw message.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from supabase import AuthError, Client  # type: ignore

from app.infra.supabase.client import create_auth_client
from app.infra.supabase.repositories import UserProfileRepository
from app.models.user import (
    AuthSession,
    Principal,
    UserPreferences,
    UserProfile,
    UserProfileCreate,
)
from app.services.errors import TodoValidationError, UpstreamServiceError

logger = logging.getLogger(__name__)


SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[str, Optional[Principal]], None]

# provider code -> (message, HTTP status)
AUTH_ERROR_MESSAGES: Dict[str, Tuple[str, int]] = {
    "email_exists": ("This email address is already used by another account.", 409),
    "user_already_exists": ("This email address is already used by another account.", 409),
    "weak_password": ("The password must contain at least 6 characters.", 400),
    "email_address_invalid": ("The email address is not valid.", 400),
    "invalid_credentials": ("Wrong email or password.", 401),
    "user_not_found": ("Wrong email or password.", 401),
    "over_request_rate_limit": ("Too many attempts. Please try again later.", 429),
    "over_email_send_rate_limit": ("Too many attempts. Please try again later.", 429),
}

RESET_ERROR_MESSAGES: Dict[str, Tuple[str, int]] = {
    **AUTH_ERROR_MESSAGES,
    "user_not_found": ("No account is associated with this email address.", 404),
}


def translate_auth_error(
    error: Exception,
    messages: Dict[str, Tuple[str, int]] = AUTH_ERROR_MESSAGES,
) -> UpstreamServiceError:
    """Map a provider error to an UpstreamServiceError with a friendly message"""
    code = getattr(error, "code", None)
    if code in messages:
        message, status_code = messages[code]
        return UpstreamServiceError(message, code=code, status_code=status_code)

    status_code = getattr(error, "status", None) or 400
    raw_message = getattr(error, "message", None) or str(error)
    return UpstreamServiceError(raw_message, code=code, status_code=status_code)


def _principal_from_user(user) -> Principal:
    metadata = getattr(user, "user_metadata", None) or {}
    return Principal(
        id=str(user.id),
        email=getattr(user, "email", None),
        display_name=metadata.get("display_name") or metadata.get("full_name"),
        photo_url=metadata.get("avatar_url"),
    )


class AuthService:
    """Service for identity provider operations"""

    def __init__(
        self,
        admin_client: Client,
        profile_repo: UserProfileRepository,
        auth_client_factory: Callable[[], Client] = create_auth_client,
    ):
        self.admin_client = admin_client
        self.profile_repo = profile_repo
        self._auth_client_factory = auth_client_factory
        self._listeners: List[AuthListener] = []

    # -- change notifications -------------------------------------------------

    def on_change(self, callback: AuthListener) -> Callable[[], None]:
        """
        Register a listener for sign-in/sign-out/user updates.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: str, principal: Optional[Principal]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, principal)
            except Exception as e:
                logger.error(f"Auth listener failed on {event}: {e}", exc_info=True)

    # -- operations -----------------------------------------------------------

    async def sign_up(self, email: str, password: str, display_name: str) -> UserProfile:
        """
        Register a new account and create its profile with default preferences.

        Raises:
            TodoValidationError: If email or password is empty
            UpstreamServiceError: If the identity provider rejects the request
        """
        if not email or not email.strip():
            raise TodoValidationError("email", "Email is required")
        if not password:
            raise TodoValidationError("password", "Password is required")

        client = self._auth_client_factory()
        try:
            response = client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"display_name": display_name}},
            })
        except AuthError as e:
            logger.error(f"Error registering user {email}: {e}")
            raise translate_auth_error(e)

        if response.user is None:
            raise UpstreamServiceError("Registration did not return a user")

        principal = _principal_from_user(response.user)
        now = datetime.now(timezone.utc)
        profile = await self.profile_repo.upsert(UserProfileCreate(
            id=principal.id,
            email=principal.email or email,
            display_name=display_name,
            photo_url=principal.photo_url or "",
            created_at=now,
            last_login=now,
            preferences=UserPreferences(),
        ))
        logger.info(f"Registered user {principal.id}")

        self._emit(SIGNED_IN, profile.to_principal())
        return profile

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Updates last_login, or creates the profile if the account predates it.
        """
        client = self._auth_client_factory()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.warning(f"Sign-in failed for {email}: {e}")
            raise translate_auth_error(e)

        if response.user is None or response.session is None:
            raise UpstreamServiceError("Sign-in did not return a session", status_code=401)

        principal = _principal_from_user(response.user)
        profile = await self.profile_repo.touch_last_login(principal.id)
        if profile is None:
            now = datetime.now(timezone.utc)
            profile = await self.profile_repo.upsert(UserProfileCreate(
                id=principal.id,
                email=principal.email or email,
                display_name=principal.display_name or "",
                photo_url=principal.photo_url or "",
                created_at=now,
                last_login=now,
                preferences=UserPreferences(),
            ))

        session = response.session
        self._emit(SIGNED_IN, profile.to_principal())
        return AuthSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            profile=profile,
        )

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token"""
        try:
            self.admin_client.auth.admin.sign_out(access_token)
        except AuthError as e:
            logger.error(f"Error signing out: {e}")
            raise translate_auth_error(e)

        self._emit(SIGNED_OUT, None)

    async def reset_password(self, email: str) -> None:
        """Send a password reset email"""
        client = self._auth_client_factory()
        try:
            client.auth.reset_password_for_email(email)
        except AuthError as e:
            logger.error(f"Error resetting password for {email}: {e}")
            raise translate_auth_error(e, RESET_ERROR_MESSAGES)

    async def current_principal(self, access_token: Optional[str]) -> Optional[Principal]:
        """Resolve the user behind an access token, None if there is none"""
        if not access_token:
            return None

        try:
            response = self.admin_client.auth.get_user(access_token)
        except AuthError as e:
            logger.warning(f"Could not resolve current user: {e}")
            return None

        if response is None or response.user is None:
            return None
        return _principal_from_user(response.user)

    async def create_confirmed_user(self, email: str, password: str, display_name: str) -> Principal:
        """Provision an already-confirmed account with the admin API"""
        try:
            response = self.admin_client.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"display_name": display_name},
            })
        except AuthError as e:
            raise translate_auth_error(e)

        return _principal_from_user(response.user)
