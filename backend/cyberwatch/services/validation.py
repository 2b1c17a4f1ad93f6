"""Form validation that returns a result value instead of raising."""

from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cyberwatch.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


@dataclass
class ValidationResult(Generic[M]):
    value: M | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> M:
        """Return the value, or raise ``ValidationError`` carrying the field errors."""
        if not self.ok:
            raise ValidationError("Invalid input", fields=self.errors)
        return self.value


_REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


def field_errors(details: Iterable[dict], from_request: bool = False) -> dict[str, list[str]]:
    """Group pydantic error details by dotted field path.

    FastAPI request errors are prefixed with where the value came from
    (``query``, ``body``, ...); pass ``from_request`` to drop that segment.
    """
    errors: dict[str, list[str]] = {}
    for err in details:
        loc = list(err.get("loc", ()))
        if from_request and loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        loc = ".".join(str(part) for part in loc) or "__root__"
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.setdefault(loc, []).append(msg)
    return errors


def validate_form(model: type[M], data: Any) -> ValidationResult[M]:
    if isinstance(data, model):
        return ValidationResult(value=data)
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    try:
        return ValidationResult(value=model.model_validate(data))
    except PydanticValidationError as e:
        return ValidationResult(errors=field_errors(e.errors()))
