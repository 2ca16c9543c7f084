"""
Service-layer exceptions.

Services raise these types; the application registers one handler per type
and gets consistent HTTP status codes everywhere.

Usage:
    from tracker.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Program", resource_id=42)
    raise ValidationError("invalid budget", details={"budget": "abc"})
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist within the owner's scope.

    Security note: Used for BOTH genuinely missing records AND cross-owner
    access attempts. A 403 would confirm the resource exists; a 404 does not.

    Args:
        resource: Human-readable model/entity name (e.g. "Program").
        resource_id: The PK that was looked up.
        user_id: Optional - the owner scope that was enforced. For debug logging only.
    """

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
        user_id: int | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.user_id = user_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" {resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input fails validation in the service layer.

    Maps to HTTP 400 in the application error handlers.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when a write would violate a unique or integrity constraint.

    Maps to HTTP 409.
    """

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        msg = f"{resource} with {field}={value!r} already exists"
        super().__init__(msg)
