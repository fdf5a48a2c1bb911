# =============================================================================
# eco_core/auth/session.py
# Auth/session state holder backed by Supabase Auth
# =============================================================================
"""
AuthContext - single source of truth for "who is signed in".

Constructed once per app session, initialized against the backend client,
and closed (listener detached) at teardown. Every auth operation returns an
AuthResult instead of raising; network-shaped failures are reported with a
"check your connection" message.

State machine:

    LOADING --(session found / signed in)--> AUTHENTICATED
    LOADING --(no session / signed out)----> UNAUTHENTICATED

Transitions only happen from the backend's session-changed callback or an
explicit sign-in / sign-out.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from eco_core.errors import (
    AuthError,
    ValidationError,
    NetworkError,
    NETWORK_FAILURE_MESSAGE,
    is_network_error,
)
from eco_core.data.fallback import email_local_part, utc_now
from eco_core.data.profile_service import PROFILES_TABLE
from eco_core.data.supabase_client import SupabaseService
from eco_core.logging import get_logger
from eco_core.storage import SESSION_STORAGE_KEY

logger = get_logger(__name__)

PASSWORD_RESET_REDIRECT = "EcoNexus://reset-password"
MIN_PASSWORD_LENGTH = 6


class AuthState(Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass
class AuthResult:
    """Outcome of an auth operation; error is None on success."""
    error: Optional[Exception] = None

    def __bool__(self) -> bool:
        return self.error is None


AuthListener = Callable[[AuthState, Any], None]


def _to_auth_error(error: Exception, operation: str) -> Exception:
    if is_network_error(error):
        return NetworkError(NETWORK_FAILURE_MESSAGE, cause=str(error))
    message = getattr(error, "message", None) or str(error) or "Authentication failed"
    return AuthError(message, operation=operation)


def _require(value: Optional[str], field: str) -> Optional[ValidationError]:
    if not value or not value.strip():
        return ValidationError(f"{field.capitalize()} is required", field=field)
    return None


class AuthContext:
    """
    Holds the current user/session and wraps Supabase Auth calls.

    Usage:
        auth = AuthContext(create_backend_client(storage=store), storage=store)
        auth.initialize()
        result = auth.sign_in(email, password)
        if not result:
            st.error(str(result.error.message))
        ...
        auth.close()
    """

    def __init__(self, client, storage=None):
        """
        Args:
            client: Supabase client (auth + tables)
            storage: Session token store, inspected at startup for logging
        """
        self.client = client
        self.storage = storage
        self.user = None
        self.session = None
        self.state = AuthState.LOADING
        self._auth_subscription = None
        self._listeners: List[AuthListener] = []
        self._lock = threading.Lock()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self) -> AuthState:
        """Load the persisted session and start listening for changes."""
        if self.storage is not None:
            try:
                stored = self.storage.get_item(SESSION_STORAGE_KEY)
                logger.info(f"Stored session check: {'Found' if stored else 'Not found'}")
            except Exception as e:
                logger.error(f"Error checking stored session: {e}")

        try:
            session = self.client.auth.get_session()
            logger.info(f"Initial session check: {'Authenticated' if session else 'Not authenticated'}")
            self._apply_session(session)
        except Exception as e:
            logger.error(f"Error getting session: {e}")
            self._apply_session(None)

        try:
            self._auth_subscription = self.client.auth.on_auth_state_change(self._on_auth_state_change)
        except Exception as e:
            logger.error(f"Error registering auth listener: {e}")

        return self.state

    def close(self) -> None:
        """Detach the session-changed listener."""
        subscription, self._auth_subscription = self._auth_subscription, None
        if subscription is not None:
            try:
                subscription.unsubscribe()
            except Exception as e:
                logger.debug(f"Error detaching auth listener: {e}")
        self._listeners.clear()

    def __enter__(self) -> AuthContext:
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def loading(self) -> bool:
        return self.state is AuthState.LOADING

    @property
    def is_logged_in(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        if self.user is None:
            return None
        if isinstance(self.user, dict):
            return self.user.get("id")
        return getattr(self.user, "id", None)

    def add_listener(self, listener: AuthListener) -> Callable[[], None]:
        """Register a state listener; returns a function that removes it."""
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _apply_session(self, session) -> None:
        with self._lock:
            old_state = self.state
            self.session = session
            self.user = getattr(session, "user", None) if session is not None else None
            self.state = AuthState.AUTHENTICATED if self.user is not None else AuthState.UNAUTHENTICATED

        if old_state != self.state:
            logger.info(f"Auth state changed: {old_state.value} -> {self.state.value}")
        for listener in list(self._listeners):
            try:
                listener(self.state, self.user)
            except Exception as e:
                logger.error(f"Error in auth listener: {e}")

    def _on_auth_state_change(self, event, session) -> None:
        logger.info(f"Auth event {event}: {'Session exists' if session else 'No session'}")
        self._apply_session(session)

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password."""
        invalid = _require(email, "email") or _require(password, "password")
        if invalid:
            return AuthResult(invalid)

        try:
            response = self.client.auth.sign_in_with_password({
                "email": email.strip(),
                "password": password,
            })
        except Exception as e:
            logger.error(f"Exception during sign in: {e}")
            return AuthResult(_to_auth_error(e, "sign_in"))

        session = getattr(response, "session", None)
        logger.info(f"Sign in successful, user: {getattr(getattr(response, 'user', None), 'id', None)}")
        if session is not None:
            self._apply_session(session)
        return AuthResult()

    def sign_up(self, email: str, password: str, name: Optional[str] = None) -> AuthResult:
        """
        Create an account; full_name metadata defaults to the email local-part.

        When a name is given a profiles row is upserted as well; failing to
        create it is logged only.
        """
        invalid = _require(email, "email") or _require(password, "password")
        if invalid:
            return AuthResult(invalid)
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            ))

        email = email.strip()
        try:
            response = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"full_name": name or email_local_part(email)}},
            })
        except Exception as e:
            logger.error(f"Exception during sign up: {e}")
            return AuthResult(_to_auth_error(e, "sign_up"))

        user = getattr(response, "user", None)
        logger.info(f"Sign up successful, user: {getattr(user, 'id', None)}")

        if user is not None and name:
            profiles = SupabaseService(PROFILES_TABLE, client=self.client)
            created = profiles.upsert({
                "id": user.id,
                "full_name": name,
                "updated_at": utc_now().isoformat(),
            })
            if created.ok:
                logger.info("Profile created successfully")
            else:
                logger.error(f"Error creating profile: {created.error}")

        session = getattr(response, "session", None)
        if session is not None:
            self._apply_session(session)
        return AuthResult()

    def reset_password(self, email: str) -> AuthResult:
        """Send a password-reset email."""
        invalid = _require(email, "email")
        if invalid:
            return AuthResult(invalid)

        try:
            self.client.auth.reset_password_for_email(
                email.strip(),
                {"redirect_to": PASSWORD_RESET_REDIRECT},
            )
        except Exception as e:
            logger.error(f"Exception during password reset: {e}")
            return AuthResult(_to_auth_error(e, "reset_password"))

        logger.info("Password reset email sent successfully")
        return AuthResult()

    def sign_out(self) -> AuthResult:
        """Sign out; local state is cleared even if the remote call fails."""
        error = None
        try:
            self.client.auth.sign_out()
            logger.info("Sign out successful")
        except Exception as e:
            logger.error(f"Error during sign out: {e}")
            error = _to_auth_error(e, "sign_out")
        self._apply_session(None)
        return AuthResult(error)
