"""Caller identity and permission exceptions."""

from .base import DomainException


class AuthenticationRequiredException(DomainException):
    """Raised when the caller's identity was not forwarded."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, code="UNAUTHENTICATED")


class AuthorizationException(DomainException):
    """Raised when the actor lacks the role or ownership an operation needs."""

    def __init__(self, message: str):
        super().__init__(message=message, code="FORBIDDEN")
