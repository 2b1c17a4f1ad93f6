"""
Auth gate: a persisted "logged in" flag plus display user.

This is a UI redirect condition, not a security boundary. Anyone able to
write the ``cyberwatch_auth`` blob is "authenticated".
"""

import structlog
from pydantic import ValidationError as PydanticValidationError

from cyberwatch.constants import AUTH_STORAGE_KEY, LOGIN_PATH, PROTECTED_PREFIX
from cyberwatch.errors import StorageError
from cyberwatch.schemas.auth import AuthState, AuthUser, RouteDecision, SessionStatus
from cyberwatch.services.storage import KeyValueStorage

logger = structlog.get_logger()


def display_name_for(email: str) -> str:
    return email.split("@")[0] or "User"


def requires_auth(path: str) -> bool:
    return path == PROTECTED_PREFIX or path.startswith(PROTECTED_PREFIX + "/")


class SessionService:
    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self.is_authenticated = False
        self.user: AuthUser | None = None
        self.loading = True

    def init(self) -> "SessionService":
        """Restore the session from storage. A corrupt blob is dropped, never raised."""
        self.loading = True
        self.is_authenticated = False
        self.user = None
        try:
            raw = self.storage.read(AUTH_STORAGE_KEY)
            if raw:
                state = AuthState.model_validate(raw)
                if state.is_authenticated and state.user:
                    self.is_authenticated = True
                    self.user = state.user
        except (StorageError, PydanticValidationError) as e:
            logger.error("Failed to parse stored auth data", error=str(e))
            self.storage.remove(AUTH_STORAGE_KEY)
        self.loading = False
        logger.debug("Session initialized", authenticated=self.is_authenticated)
        return self

    def teardown(self) -> None:
        self.is_authenticated = False
        self.user = None
        self.loading = True

    def status(self) -> SessionStatus:
        return SessionStatus(
            is_authenticated=self.is_authenticated,
            user=self.user,
            loading=self.loading,
        )

    def _persist(self) -> None:
        state = AuthState(is_authenticated=self.is_authenticated, user=self.user)
        try:
            self.storage.write(AUTH_STORAGE_KEY, state.model_dump(mode="json", by_alias=True))
        except (OSError, StorageError) as e:
            logger.error("Failed to save auth data", error=str(e))

    def login(self, email: str) -> AuthUser:
        """Mark the session authenticated. No credential is checked."""
        self.user = AuthUser(name=display_name_for(email), email=email)
        self.is_authenticated = True
        self._persist()
        logger.info("User logged in", email=email)
        return self.user

    def update_user(self, user: AuthUser) -> None:
        self.user = user
        if self.is_authenticated:
            self._persist()

    def logout(self) -> None:
        email = self.user.email if self.user else None
        self.is_authenticated = False
        self.user = None
        try:
            self.storage.remove(AUTH_STORAGE_KEY)
        except (OSError, StorageError) as e:
            logger.error("Failed to remove auth data", error=str(e))
        logger.info("User logged out", email=email)

    def resolve_route(self, path: str) -> RouteDecision:
        if not requires_auth(path):
            return RouteDecision(path=path, action="render")
        if self.loading:
            return RouteDecision(path=path, action="pending")
        if not self.is_authenticated:
            return RouteDecision(path=path, action="redirect", redirect_to=LOGIN_PATH)
        return RouteDecision(path=path, action="render")
