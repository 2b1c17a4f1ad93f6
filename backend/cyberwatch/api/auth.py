from fastapi import APIRouter, Body, Depends, Query

from cyberwatch.api.deps import get_session
from cyberwatch.schemas.auth import LoginRequest, RouteDecision, SessionStatus
from cyberwatch.services.session_service import SessionService
from cyberwatch.services.validation import validate_form

router = APIRouter()


@router.get("/state", response_model=SessionStatus)
async def auth_state(session: SessionService = Depends(get_session)):
    return session.status()


@router.post("/login", response_model=SessionStatus)
async def login(payload: dict = Body(...), session: SessionService = Depends(get_session)):
    """Mock login: any email is accepted and no password is checked."""
    request = validate_form(LoginRequest, payload).unwrap()
    session.login(request.email)
    return session.status()


@router.post("/logout", response_model=SessionStatus)
async def logout(session: SessionService = Depends(get_session)):
    session.logout()
    return session.status()


@router.get("/route", response_model=RouteDecision)
async def resolve_route(path: str = Query(...), session: SessionService = Depends(get_session)):
    return session.resolve_route(path)
