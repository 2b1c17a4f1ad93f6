from fastapi import APIRouter, Body, Depends

from cyberwatch.api.deps import get_profile_service
from cyberwatch.config import settings
from cyberwatch.schemas.profile import UserProfile
from cyberwatch.services.profile_service import ProfileService

router = APIRouter()


@router.get("/profile", response_model=UserProfile)
async def get_profile(service: ProfileService = Depends(get_profile_service)):
    return service.load()


@router.put("/profile", response_model=UserProfile)
async def update_profile(payload: dict = Body(...), service: ProfileService = Depends(get_profile_service)):
    return service.update_profile(payload)


@router.put("/notifications", response_model=UserProfile)
async def update_notifications(payload: dict = Body(...), service: ProfileService = Depends(get_profile_service)):
    return service.update_notifications(payload)


@router.put("/avatar", response_model=UserProfile)
async def update_avatar(payload: dict = Body(...), service: ProfileService = Depends(get_profile_service)):
    return service.update_avatar(payload)


@router.get("/ai-config")
async def get_ai_config():
    """Active AI backend configuration, without the API key."""
    return {
        "provider": settings.ai_provider,
        "baseUrl": settings.ai_base_url,
        "model": settings.ai_model,
        "timeout": settings.ai_timeout,
        "enabled": bool(settings.ai_api_key or settings.ai_provider == "ollama"),
    }
