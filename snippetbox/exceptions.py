"""
Snippetbox — Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) translate the ones
       that escape a handler into plain-text HTTP responses or redirects.
Who:   Raised by services, security dependencies and the session layer.

Exception Hierarchy:
    SnippetboxError (base)
    ├── NotFoundError              → 404 Not Found
    │   └── NoRecordError          → 404 (model lookup found nothing)
    ├── InvalidCredentialsError    → handled in handlers (form error)
    ├── DuplicateEmailError        → handled in handlers (form error)
    ├── AuthenticationRequired     → 303 redirect to the login page
    ├── CSRFError                  → 400 Bad Request
    └── DatabaseError              → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class SnippetboxError(Exception):
    """
    Base exception for all Snippetbox application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, never rendered to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(SnippetboxError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class NoRecordError(NotFoundError):
    """
    Raised by the data-access layer when no matching row exists.

    Expired snippets raise this too: to a caller a snippet past its expiry
    is indistinguishable from one that was never created.
    """


class InvalidCredentialsError(SnippetboxError):
    """Raised when an email/password pair does not match a stored user."""

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DuplicateEmailError(SnippetboxError):
    """Raised when signing up with an email address that is already registered."""

    def __init__(
        self,
        email: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if email:
            ctx["email"] = email
        super().__init__(message="Duplicate email", context=ctx)


class AuthenticationRequired(SnippetboxError):
    """
    Raised by the auth gate when an anonymous user requests a protected page.

    HTTP:    303 See Other → /user/login
    """

    def __init__(
        self,
        path: str = "/",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["path"] = path
        super().__init__(message="Authentication required", context=ctx)
        self.path = path


class CSRFError(SnippetboxError):
    """
    Raised when a state-changing request carries a missing or wrong CSRF token.

    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "CSRF token missing or incorrect",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(SnippetboxError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The response body is always generic; query details go to the log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
