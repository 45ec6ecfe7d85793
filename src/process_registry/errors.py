"""
process_registry.errors

Error hierarchy shared by the auth pipeline and the registries.

Responsibilities:
- One exception type per failure mode, each carrying a stable code and HTTP status.
- Let the API layer map every domain failure with a single handler.
"""

from __future__ import annotations

from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)


class RegistryError(Exception):
    """
    Base class for failures surfaced to API callers.
    """

    code: str = "internal_error"
    http_status: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict[str, dict[str, str]]:
        return {"error": {"code": self.code, "message": self.message}}


class MissingCredentials(RegistryError):
    code = "missing_credentials"
    http_status = HTTP_401_UNAUTHORIZED
    default_message = "Missing bearer token"


class InvalidCredentials(RegistryError):
    code = "invalid_credentials"
    http_status = HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Forbidden(RegistryError):
    code = "forbidden"
    http_status = HTTP_403_FORBIDDEN
    default_message = "Insufficient role"


class NotFound(RegistryError):
    code = "not_found"
    http_status = HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(RegistryError):
    code = "conflict"
    http_status = HTTP_409_CONFLICT
    default_message = "Conflict"


class DependencyExists(Conflict):
    # Deletion rejected because other rows still reference the target.
    code = "dependency_exists"
    default_message = "Record is still referenced by other records"


class InvalidReference(RegistryError):
    code = "invalid_reference"
    http_status = HTTP_422_UNPROCESSABLE_CONTENT
    default_message = "Referenced record does not exist"


class ConfigError(RegistryError):
    # Fatal misconfiguration; the operation is aborted, never retried.
    code = "config_error"
    default_message = "Service is misconfigured"


class Unavailable(RegistryError):
    code = "unavailable"
    http_status = HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service is not ready"


# --- Module Notes -----------------------------------------------------------
# Handlers live in `api.errors`; services and guards only raise.
