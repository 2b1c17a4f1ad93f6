import structlog
from pydantic import ValidationError as PydanticValidationError

from cyberwatch.constants import PROFILE_STORAGE_PREFIX
from cyberwatch.errors import StorageError, ValidationError
from cyberwatch.schemas.auth import AuthUser
from cyberwatch.schemas.profile import (
    AvatarUpdate, NotificationsUpdate, ProfileUpdate, UserProfile,
)
from cyberwatch.services.session_service import SessionService
from cyberwatch.services.storage import KeyValueStorage
from cyberwatch.services.validation import validate_form

logger = structlog.get_logger()


def profile_key(email: str) -> str:
    return f"{PROFILE_STORAGE_PREFIX}{email}"


class ProfileService:
    """Settings page: profile hydrated from and persisted to storage, keyed by email."""

    def __init__(self, storage: KeyValueStorage, session: SessionService, default_profile: UserProfile):
        self.storage = storage
        self.session = session
        self.default_profile = default_profile

    def _require_user(self) -> AuthUser:
        if not self.session.is_authenticated or self.session.user is None:
            raise ValidationError("Not logged in", fields={"session": ["Log in to manage settings."]})
        return self.session.user

    def load(self) -> UserProfile:
        user = self._require_user()
        try:
            raw = self.storage.read(profile_key(user.email))
            if raw:
                return UserProfile.model_validate(raw)
        except (StorageError, PydanticValidationError) as e:
            logger.error("Discarding stored profile", email=user.email, error=str(e))
            self.storage.remove(profile_key(user.email))

        profile = self.default_profile.model_copy(
            update={"name": user.name, "email": user.email, "avatar_url": user.avatar_url},
            deep=True,
        )
        self._save(profile)
        return profile

    def _save(self, profile: UserProfile) -> None:
        self.storage.write(profile_key(profile.email), profile.model_dump(mode="json", by_alias=True))

    def update_profile(self, data) -> UserProfile:
        values = validate_form(ProfileUpdate, data).unwrap()
        user = self._require_user()
        profile = self.load().model_copy(update={"name": values.name, "email": values.email})

        # An email change writes under the new key only. The record under the
        # old email is left in place and is no longer reachable.
        if values.email != user.email:
            logger.warning(
                "Profile email changed, previous profile record not migrated",
                old_email=user.email, new_email=values.email,
            )
        self._save(profile)

        if values.email != user.email or values.name != user.name:
            self.session.update_user(AuthUser(
                name=values.name,
                email=values.email,
                avatar_url=profile.display_avatar or user.avatar_url,
            ))
        logger.info("Profile updated", email=values.email)
        return profile

    def update_notifications(self, data) -> UserProfile:
        values = validate_form(NotificationsUpdate, data).unwrap()
        profile = self.load()
        preferences = profile.preferences.model_copy(update={
            "notifications": profile.preferences.notifications.model_copy(update={
                "email": values.email_notifications,
                "in_app": values.in_app_notifications,
            }),
        })
        profile = profile.model_copy(update={"preferences": preferences})
        self._save(profile)
        logger.info("Notification preferences updated", email=profile.email)
        return profile

    def update_avatar(self, data) -> UserProfile:
        values = validate_form(AvatarUpdate, data).unwrap()
        profile = self.load().model_copy(update={"avatar_data_url": values.avatar_data_url})
        self._save(profile)
        return profile
