from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, TypeVar

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for wire models: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginatedResponse(CamelModel, Generic[T]):
    items: list[T]
    total: int
    page: int = 1
    page_size: int = 9
    total_pages: int = 0
    is_empty: bool = False


class ErrorResponse(CamelModel):
    detail: str
    error_code: str | None = None
    fields: dict[str, list[str]] | None = None
    back_to: str | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
