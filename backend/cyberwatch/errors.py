"""
Error taxonomy shared by services and the HTTP layer.

Services raise these; ``main.py`` maps them onto HTTP responses.
``StorageError`` never leaves the session/profile services.
"""


class CyberWatchError(Exception):
    error_code = "cyberwatch_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CyberWatchError):
    """Input failed its schema at a form or adapter boundary."""

    error_code = "validation_error"
    status_code = 422

    def __init__(self, message: str, fields: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.fields = fields or {}


class GenerationFailure(CyberWatchError):
    """The generative-text backend returned no usable output."""

    error_code = "generation_failure"
    status_code = 502


class GenerationTimeout(GenerationFailure):
    error_code = "generation_timeout"
    status_code = 504


class NotFoundError(CyberWatchError):
    error_code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: str, back_to: str | None = None):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id
        self.back_to = back_to


class StorageError(CyberWatchError):
    error_code = "storage_error"
