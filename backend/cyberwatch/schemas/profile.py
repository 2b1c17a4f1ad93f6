import re
from pydantic import field_validator

from cyberwatch.schemas.common import CamelModel

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class NotificationPreferences(CamelModel):
    email: bool = True
    in_app: bool = True


class Preferences(CamelModel):
    notifications: NotificationPreferences = NotificationPreferences()


class UserProfile(CamelModel):
    name: str
    email: str
    avatar_url: str | None = None
    avatar_data_url: str | None = None
    preferences: Preferences = Preferences()

    @property
    def display_avatar(self) -> str | None:
        return self.avatar_data_url or self.avatar_url


class ProfileUpdate(CamelModel):
    name: str
    email: str

    @field_validator("name")
    @classmethod
    def _name_length(cls, v: str) -> str:
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return v

    @field_validator("email")
    @classmethod
    def _email_format(cls, v: str) -> str:
        if not EMAIL_RE.match(v):
            raise ValueError("Invalid email address.")
        return v


class NotificationsUpdate(CamelModel):
    email_notifications: bool = True
    in_app_notifications: bool = True


class AvatarUpdate(CamelModel):
    avatar_data_url: str | None = None

    @field_validator("avatar_data_url")
    @classmethod
    def _data_url(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith("data:image/"):
            raise ValueError("Avatar must be an image data URL.")
        return v
