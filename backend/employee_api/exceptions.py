"""
Employee Manager API — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the failure modes of the service.
Why:   The storage layer and handlers raise domain errors; global exception
       handlers registered in main.py turn them into HTTP responses, so no
       route has to build error responses by hand.
How:   Each exception carries a message (returned to the client as plain text)
       and an optional context dict (logged, never returned).

Exception Hierarchy:
    EmployeeManagerError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    └── DatabaseError     → 500 Internal Server Error (PersistenceFailure)

Low-level driver errors are chained onto DatabaseError with `raise ... from`
so the original cause stays available in logs and tracebacks.
"""

from typing import Any, Dict, Optional


class EmployeeManagerError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Client-facing error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(EmployeeManagerError):
    """
    Raised when client input fails validation.

    When:    Empty name or position, non-positive salary, malformed employee ID.
    HTTP:    400 Bad Request

    The messages are short lowercase phrases ("invalid name") because they
    are written to the response body verbatim.
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


class NotFoundError(EmployeeManagerError):
    """
    Raised when an operation targets a row that does not exist.

    When:    SELECT returned no row, or UPDATE/DELETE affected zero rows.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(EmployeeManagerError):
    """
    Raised when a database operation fails for any reason other than a
    missing row: lost connection, query error, constraint violation.

    HTTP:    500 Internal Server Error

    The message names the operation that failed; the driver's own error text
    (which can contain SQL and table names) is only logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
