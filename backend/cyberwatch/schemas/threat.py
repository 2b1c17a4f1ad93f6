from datetime import datetime
from pydantic import Field, field_validator

from cyberwatch.constants import SeverityLevel, ThreatCategory, ThreatStatus
from cyberwatch.schemas.common import CamelModel, PaginatedResponse


def split_csv(value) -> list[str]:
    """Comma-separated form input -> trimmed tokens, empty tokens dropped."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(token).strip() for token in value if str(token).strip()]


class Threat(CamelModel):
    id: str
    title: str
    severity: SeverityLevel
    category: ThreatCategory
    date: datetime
    description: str
    source: str
    details_for_summary: str
    tags: list[str] | None = None
    status: ThreatStatus | None = None
    mitigation: str | None = None
    affected_systems: list[str] | None = None


class DateRange(CamelModel):
    from_: datetime | None = Field(default=None, alias="from")
    to: datetime | None = None


class FilterSpec(CamelModel):
    search_term: str | None = None
    severity: SeverityLevel | None = None
    categories: list[ThreatCategory] | None = None
    date_range: DateRange | None = None

    def is_empty(self) -> bool:
        return not (
            self.search_term
            or self.severity
            or self.categories
            or (self.date_range and (self.date_range.from_ or self.date_range.to))
        )


class ThreatReport(CamelModel):
    """New-threat form submission."""

    title: str
    description: str
    severity: SeverityLevel
    category: ThreatCategory
    source: str
    tags: list[str] = []

    @field_validator("title")
    @classmethod
    def _title_length(cls, v: str) -> str:
        if len(v) < 5:
            raise ValueError("Title must be at least 5 characters.")
        return v

    @field_validator("description")
    @classmethod
    def _description_length(cls, v: str) -> str:
        if len(v) < 20:
            raise ValueError("Description must be at least 20 characters.")
        if len(v) > 5000:
            raise ValueError("Description must not exceed 5000 characters.")
        return v

    @field_validator("source")
    @classmethod
    def _source_length(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Source must be at least 3 characters.")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, v):
        return split_csv(v)


class ThreatPage(PaginatedResponse[Threat]):
    filters: FilterSpec = FilterSpec()
