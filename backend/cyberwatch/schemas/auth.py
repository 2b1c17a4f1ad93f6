from typing import Literal

from cyberwatch.schemas.common import CamelModel


class AuthUser(CamelModel):
    name: str
    email: str
    avatar_url: str | None = None


class AuthState(CamelModel):
    """Persisted under ``cyberwatch_auth``."""

    is_authenticated: bool = False
    user: AuthUser | None = None


class SessionStatus(AuthState):
    loading: bool = False


class LoginRequest(CamelModel):
    email: str


class RouteDecision(CamelModel):
    path: str
    action: Literal["render", "redirect", "pending"]
    redirect_to: str | None = None
