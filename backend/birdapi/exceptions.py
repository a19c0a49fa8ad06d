"""
Bird Sightings Backend - Custom Exception Hierarchy
====================================================

What:  Application-specific exceptions for each distinguishable outcome.
Why:   Callers branch on the exception type, never on message text.
       NotFound is its own class, not a generic failure with a 404 inside.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON error responses; the client wrapper turns HTTP status
       codes back into the same classes.

Exception Hierarchy:
    BirdApiError (base)
    ├── ValidationError            → 400 Bad Request (malformed number/date input)
    ├── NotFoundError              → 404 Not Found
    ├── BirdInUseError             → 409 Conflict (bird still has sightings)
    ├── ReferenceResolutionError   → 422 Unprocessable Entity (unknown bird id)
    ├── DatabaseError              → 500 Internal Server Error
    └── TransportFailureError      → client side: service unreachable/unexpected
"""

from typing import Any, Dict, Optional


class BirdApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where harmless)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BirdApiError):
    """
    Raised when input at a boundary cannot be parsed.

    When:    Non-numeric weight/height/bird id in the UI, malformed
             startDate/endDate query parameters, invalid request bodies.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BirdApiError):
    """
    Raised when a requested id has no matching record.

    Repositories return None for missing rows; services convert that into
    this exception so the route layer can answer 404 without inspecting data.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ReferenceResolutionError(BirdApiError):
    """
    Raised when a sighting references a bird id that does not exist.

    Nothing is persisted when this is raised.
    HTTP:    422 Unprocessable Entity
    """

    def __init__(
        self,
        bird_id: Optional[Any] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if bird_id is not None:
            ctx["bird_id"] = bird_id
        super().__init__(
            message=message or f"bird with ID '{bird_id}' does not exist",
            context=ctx,
        )
        self.bird_id = bird_id


class BirdInUseError(BirdApiError):
    """
    Raised when deleting a bird that sightings still reference.

    Deletes never cascade; the caller removes the sightings first.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        bird_id: Optional[Any] = None,
        sighting_count: int = 0,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["bird_id"] = bird_id
        ctx["sighting_count"] = sighting_count
        super().__init__(
            message=(
                f"bird with ID '{bird_id}' still has {sighting_count} sighting(s); "
                f"delete them first"
            ),
            context=ctx,
        )
        self.bird_id = bird_id
        self.sighting_count = sighting_count


class DatabaseError(BirdApiError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the underlying
    error type is logged server-side only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TransportFailureError(BirdApiError):
    """
    Raised by the client wrapper when the service is unreachable or answers
    with a status that maps to no other outcome.

    Attributes:
        status_code: HTTP status received, or None when no response arrived
    """

    def __init__(
        self,
        message: str = "The bird service could not be reached",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
