from datetime import datetime
from pydantic import field_validator

from cyberwatch.constants import SeverityLevel, ThreatCategory
from cyberwatch.schemas.common import CamelModel
from cyberwatch.schemas.threat import split_csv


class AlertSetting(CamelModel):
    id: str
    name: str
    risk_levels: list[SeverityLevel]
    categories: list[ThreatCategory]
    keywords: list[str] = []
    is_enabled: bool = True
    last_triggered: datetime | None = None


class AlertSettingForm(CamelModel):
    """Create/edit form. ``keywords`` arrives as a comma-separated string."""

    id: str | None = None
    name: str
    risk_levels: list[SeverityLevel]
    categories: list[ThreatCategory]
    keywords: list[str] = []
    is_enabled: bool = True
    last_triggered: datetime | None = None

    @field_validator("name")
    @classmethod
    def _name_length(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Alert name must be at least 3 characters.")
        return v

    @field_validator("risk_levels")
    @classmethod
    def _at_least_one_level(cls, v: list) -> list:
        if not v:
            raise ValueError("Select at least one risk level.")
        return v

    @field_validator("categories")
    @classmethod
    def _at_least_one_category(cls, v: list) -> list:
        if not v:
            raise ValueError("Select at least one category.")
        return v

    @field_validator("keywords", mode="before")
    @classmethod
    def _split_keywords(cls, v):
        return split_csv(v)


class AlertToggle(CamelModel):
    is_enabled: bool | None = None


class PendingDelete(CamelModel):
    alert_id: str | None = None
