"""
Custom exceptions for the clinic core.

Every failure surfaced to callers is a ``VetCareError`` subclass carrying a
stable ``code`` tag, so controllers can render a discriminated error body
without inspecting messages.
"""

from typing import Any, Dict, Optional


class VetCareError(Exception):
    """Base class for all tagged domain errors."""

    code = "error"
    http_status = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(VetCareError):
    """Referenced id does not resolve."""

    code = "not_found"
    http_status = 404

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            f"{resource} '{resource_id}' not found",
            {"resource": resource, "id": str(resource_id)},
        )
        self.resource = resource
        self.resource_id = resource_id


class InvalidTransitionError(VetCareError):
    """Precondition on the current status no longer holds."""

    code = "invalid_transition"
    http_status = 409

    def __init__(self, appointment_id: Any, current: Optional[str], target: str):
        super().__init__(
            f"Cannot move appointment '{appointment_id}' from "
            f"'{current}' to '{target}'",
            {"id": str(appointment_id), "current": current, "target": target},
        )
        self.current = current
        self.target = target


class InvalidStateError(VetCareError):
    """Entity is in an unrecognized or disallowed state for the operation."""

    code = "invalid_state"
    http_status = 409


class ValidationError(VetCareError):
    """Malformed or missing input field."""

    code = "validation_error"
    http_status = 400

    def __init__(self, field: str, message: str):
        super().__init__(message, {"field": field})
        self.field = field


class StoreError(VetCareError):
    """Opaque failure surfaced from the record store."""

    code = "store_error"
    http_status = 503

    def __init__(self, message: str = "The record store could not complete the request"):
        super().__init__(message)


class FeatureUnavailableError(VetCareError):
    """Named operation that exists but is not implemented yet."""

    code = "not_available"
    http_status = 501

    def __init__(self, feature: str, message: str):
        super().__init__(message, {"feature": feature})
        self.feature = feature


class ForbiddenError(VetCareError):
    """Signed-in user lacks the role the operation requires."""

    code = "forbidden"
    http_status = 403

    def __init__(self, required_roles, role: Optional[str] = None):
        super().__init__(
            f"Requires one of the roles: {', '.join(required_roles)}",
            {"required_roles": list(required_roles), "role": role},
        )
        self.required_roles = tuple(required_roles)
        self.role = role
