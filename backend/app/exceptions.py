"""
Layerpost Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions with a message and a context dict.
Why:   Services tag these into a ServiceResult; controllers, global exception
       handlers and the error middleware all render them with the same JSON
       envelope (see `error_body`).
Who:   Raised by repositories, services and middleware.

Exception Hierarchy:
    LayerpostError (base)
    ├── ValidationError   → 400 from global handlers (controllers use their fixed status)
    ├── NotFoundError     → 404
    ├── PayloadError      → 400 / 413 (malformed or oversized request body)
    └── DatabaseError     → 500
"""

from typing import Any, Dict, Optional


class LayerpostError(Exception):
    """
    Base exception for all Layerpost application errors.

    Attributes:
        message:  User-facing error description
        context:  Additional structured detail, returned as `details`
        code:     Machine-readable error code used in the JSON envelope
    """

    code = "server_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(LayerpostError):
    """
    Raised when submitted data fails business validation.

    Wraps pydantic's validation errors so callers never depend on pydantic
    internals; the individual field errors travel in `context["errors"]`.
    """

    code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(LayerpostError):
    """
    Raised when a requested record does not exist.

    Repositories return None for missing rows; the service layer converts that
    into this exception so the controller can pick the 404 status.
    """

    code = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class PayloadError(LayerpostError):
    """Raised by the body decoder for bodies it cannot turn into plain data."""

    code = "invalid_payload"

    def __init__(
        self,
        message: str = "Request body could not be decoded",
        status_code: int = 400,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class DatabaseError(LayerpostError):
    """
    Raised when a storage operation fails.

    The message is always generic. The underlying SQLAlchemy error is chained
    (`raise ... from exc`) and logged server-side, never returned to clients.
    """

    code = "database_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def error_body(
    exc: BaseException,
    request_id: Optional[str] = None,
    expose_details: bool = True,
) -> Dict[str, Any]:
    """
    Render any exception as the standard JSON error envelope.

    Application errors keep their own code, message and context. Anything
    else is reported as `internal_error`; its message is only included when
    `expose_details` is set (outside production).
    """
    if isinstance(exc, LayerpostError):
        body: Dict[str, Any] = {
            "error": exc.code,
            "message": exc.message,
            "details": exc.context or None,
        }
    elif expose_details:
        body = {
            "error": "internal_error",
            "message": str(exc) or type(exc).__name__,
            "details": {"type": type(exc).__name__},
        }
    else:
        body = {
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again or contact support.",
            "details": None,
        }
    body["request_id"] = request_id
    return body
